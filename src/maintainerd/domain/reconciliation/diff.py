"""Directional differences between two normalized membership sets.

Both directions are emitted in ascending lexicographic order of the
normalized identity, so logs and assertions are reproducible regardless of
set iteration order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Set


@dataclass(frozen=True, slots=True)
class MembershipDiff:
    """Identities present on only one side of a comparison."""

    missing_externally: tuple[str, ...]
    unregistered_external: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.missing_externally and not self.unregistered_external


def diff(registered: Set[str], external: Set[str]) -> MembershipDiff:
    """Compare ``registered`` against ``external`` without mutating either.

    ``missing_externally`` holds registered identities the provider does not
    know about (invitation candidates); ``unregistered_external`` holds
    provider members that are not registered maintainers.
    """

    return MembershipDiff(
        missing_externally=tuple(sorted(registered - external)),
        unregistered_external=tuple(sorted(external - registered)),
    )
