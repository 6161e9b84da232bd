"""Public interface for the FOSSA adapter."""

from __future__ import annotations

from .client import (
    FossaAPIError,
    FossaClient,
    InvitationAlreadyExistsError,
    TeamNotFoundError,
    UserAlreadyMemberError,
)
from .schema import FossaErrorPayload, Team, TeamMembers, User, UserInvitation

__all__ = [
    "FossaAPIError",
    "FossaClient",
    "FossaErrorPayload",
    "InvitationAlreadyExistsError",
    "Team",
    "TeamMembers",
    "TeamNotFoundError",
    "User",
    "UserInvitation",
]
