"""Canonical form of maintainer and team-member identities.

Every comparison between the maintainer registry and an external membership
provider goes through :func:`normalize`, so e-mail addresses coming from the
spreadsheet, the database and the FOSSA API agree on one spelling.
"""

from __future__ import annotations


class InvalidIdentityError(ValueError):
    """Raised when an identity is empty or blank and cannot be compared."""

    def __init__(self, identity: object) -> None:
        super().__init__(f"Invalid identity: {identity!r}")
        self.identity = identity


def normalize(identity: str | None) -> str:
    """Return ``identity`` trimmed and lower-cased.

    Lower-casing uses ``str.lower``; e-mail addresses are assumed to be
    ASCII-representable.
    """

    if identity is None:
        raise InvalidIdentityError(identity)
    normalized = identity.strip().lower()
    if not normalized:
        raise InvalidIdentityError(identity)
    return normalized


def is_valid(identity: str | None) -> bool:
    try:
        normalize(identity)
    except InvalidIdentityError:
        return False
    return True
