"""Membership reconciliation core.

Layered flow, leaves first:
1) normalize identities (``identity``)
2) build registered/external sets, counting invalid entries (``sets``)
3) compute directional, sorted differences (``diff``)
4) classify per project (``reconciler``)

Everything here is pure: callers fetch the identity listings and decide what
to do with the outcome.
"""

from __future__ import annotations

from .diff import MembershipDiff, diff
from .identity import InvalidIdentityError, is_valid, normalize
from .reconciler import (
    ProjectMembershipSnapshot,
    ReconciliationOutcome,
    reconcile,
    reconcile_all,
)
from .sets import IdentitySets, build_sets, normalize_all

__all__ = [
    "IdentitySets",
    "InvalidIdentityError",
    "MembershipDiff",
    "ProjectMembershipSnapshot",
    "ReconciliationOutcome",
    "build_sets",
    "diff",
    "is_valid",
    "normalize",
    "normalize_all",
    "reconcile",
    "reconcile_all",
]
