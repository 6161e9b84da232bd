"""GitHub adapter: onboarding issues and webhook payloads."""

from __future__ import annotations

from .client import GitHubAPIError, GitHubIssuesClient
from .schema import IssuesEvent, Issue, Label
from .signature import SIGNATURE_HEADER, compute_signature, verify_signature

__all__ = [
    "SIGNATURE_HEADER",
    "GitHubAPIError",
    "GitHubIssuesClient",
    "Issue",
    "IssuesEvent",
    "Label",
    "compute_signature",
    "verify_signature",
]
