"""Build comparable identity sets from raw registry and provider listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .identity import InvalidIdentityError, normalize

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IdentitySets:
    """Normalized registered/external identities plus the number of discarded entries."""

    registered: frozenset[str]
    external: frozenset[str]
    invalid_registered: int = 0
    invalid_external: int = 0

    @property
    def invalid_total(self) -> int:
        return self.invalid_registered + self.invalid_external


def normalize_all(identities: Iterable[str | None]) -> tuple[frozenset[str], int]:
    """Normalize ``identities`` into a set, returning it with the count of invalid entries."""

    normalized: set[str] = set()
    invalid = 0
    for identity in identities:
        try:
            normalized.add(normalize(identity))
        except InvalidIdentityError:
            invalid += 1
    return frozenset(normalized), invalid


def build_sets(
    registered: Iterable[str | None],
    external: Iterable[str | None],
) -> IdentitySets:
    registered_set, invalid_registered = normalize_all(registered)
    external_set, invalid_external = normalize_all(external)
    if invalid_registered or invalid_external:
        log.debug(
            "Discarded invalid identities: registered=%s, external=%s",
            invalid_registered,
            invalid_external,
        )
    return IdentitySets(
        registered=registered_set,
        external=external_set,
        invalid_registered=invalid_registered,
        invalid_external=invalid_external,
    )
