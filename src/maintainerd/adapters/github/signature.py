"""Verification of GitHub webhook signatures."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_HEADER = "X-Hub-Signature-256"
_SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: bytes, body: bytes) -> str:
    digest = hmac.new(secret, body, hashlib.sha256).hexdigest()
    return f"{_SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: bytes, body: bytes, signature: str | None) -> bool:
    """Return True when ``signature`` is the HMAC-SHA256 of ``body`` under ``secret``."""
    if not signature or not signature.startswith(_SIGNATURE_PREFIX):
        return False
    return hmac.compare_digest(compute_signature(secret, body), signature)
