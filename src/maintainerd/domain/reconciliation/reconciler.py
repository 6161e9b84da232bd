"""Per-project reconciliation of registered maintainers against provider members."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .diff import diff
from .sets import build_sets

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Sequence


@dataclass(frozen=True, slots=True)
class ProjectMembershipSnapshot:
    """Raw identities of one project captured for a single reconciliation pass."""

    project_id: Hashable
    registered: tuple[str | None, ...]
    external: tuple[str | None, ...]

    @classmethod
    def capture(
        cls,
        project_id: Hashable,
        *,
        registered: Iterable[str | None],
        external: Iterable[str | None],
    ) -> ProjectMembershipSnapshot:
        return cls(project_id=project_id, registered=tuple(registered), external=tuple(external))


@dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    """Classified differences for one project.

    ``fully_covered`` means every registered maintainer is a member on the
    provider side; extra provider members do not affect it.
    """

    project_id: Hashable
    fully_covered: bool
    missing_externally: tuple[str, ...]
    unregistered_external: tuple[str, ...]
    invalid_registered: int = 0
    invalid_external: int = 0


def reconcile(snapshot: ProjectMembershipSnapshot) -> ReconciliationOutcome:
    sets = build_sets(snapshot.registered, snapshot.external)
    membership_diff = diff(sets.registered, sets.external)
    return ReconciliationOutcome(
        project_id=snapshot.project_id,
        fully_covered=not membership_diff.missing_externally,
        missing_externally=membership_diff.missing_externally,
        unregistered_external=membership_diff.unregistered_external,
        invalid_registered=sets.invalid_registered,
        invalid_external=sets.invalid_external,
    )


def reconcile_all(
    snapshots: Sequence[ProjectMembershipSnapshot],
) -> tuple[tuple[Hashable, ReconciliationOutcome], ...]:
    """Reconcile each snapshot independently, preserving input order."""

    return tuple((snapshot.project_id, reconcile(snapshot)) for snapshot in snapshots)
