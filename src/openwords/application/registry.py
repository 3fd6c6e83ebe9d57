"""
Card registry: the in-memory cache of every word's scheduling state.

One authoritative map from name to WordCard backs four derived name indexes
(mastered, enabled, new, due). Each upsert recomputes a name's index
membership from the snapshot alone, so a bulk rescan and streamed change
notifications can interleave without leaving stale memberships behind.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from types import MappingProxyType
from typing import Any

from openwords.domain.constants import (
    POOL_ALL,
    POOL_DUE,
    POOL_ENABLED,
    POOL_MASTERED,
    POOL_NAMES,
    POOL_NEW,
)
from openwords.domain.errors import InvalidSnapshot
from openwords.domain.models import PoolCounts, WordCard

logger = logging.getLogger(__name__)


class CardRegistry:
    def __init__(self, enabled_tags: Iterable[str] = ()):
        self._enabled_tags: frozenset[str] = frozenset(enabled_tags)
        self._cards: dict[str, WordCard] = {}
        self._index: dict[str, set[str]] = {
            POOL_MASTERED: set(),
            POOL_ENABLED: set(),
            POOL_NEW: set(),
            POOL_DUE: set(),
        }

    @property
    def enabled_tags(self) -> frozenset[str]:
        return self._enabled_tags

    def set_enabled_tags(self, tags: Iterable[str]) -> None:
        """Change the study scope. Existing memberships stay until the next rescan."""
        self._enabled_tags = frozenset(tags)

    # ---------- Mutation ----------

    def upsert(self, name: str, snapshot: Mapping[str, Any] | None) -> WordCard | None:
        """
        Insert or replace a word from its latest snapshot.

        An invalid snapshot removes the word from every pool, including `all`,
        and returns None.
        """
        self._unindex(name)

        try:
            card = WordCard.from_snapshot(name, snapshot)
        except InvalidSnapshot as e:
            # TODO: default-initialize notes that have tags but no scheduling fields yet
            logger.debug(f"[registry] Dropped {name}: {e}")
            self._cards.pop(name, None)
            return None

        self._cards[name] = card

        if card.is_mastered:
            self._index[POOL_MASTERED].add(name)
        elif card.is_tagged(self._enabled_tags):
            self._index[POOL_ENABLED].add(name)
            if card.is_new:
                self._index[POOL_NEW].add(name)
            else:
                self._index[POOL_DUE].add(name)

        return card

    def remove(self, name: str) -> None:
        """Forget a word entirely, e.g. after its note was deleted."""
        self._unindex(name)
        self._cards.pop(name, None)

    def rescan(self, snapshots_by_name: Mapping[str, Mapping[str, Any] | None]) -> int:
        """Rebuild every pool from scratch. Returns the size of the `all` pool."""
        self.clear()
        for name, snapshot in snapshots_by_name.items():
            self.upsert(name, snapshot)
        logger.info(
            f"[registry] Rescanned {len(snapshots_by_name)} notes: "
            f"{len(self._cards)} tracked, {len(self._index[POOL_ENABLED])} enabled"
        )
        return len(self._cards)

    def clear(self) -> None:
        self._cards.clear()
        for names in self._index.values():
            names.clear()

    dispose = clear

    def _unindex(self, name: str) -> None:
        for names in self._index.values():
            names.discard(name)

    # ---------- Queries ----------

    def pool(self, pool_name: str) -> Mapping[str, WordCard]:
        """Read-only view of one pool, keyed by word name."""
        if pool_name == POOL_ALL:
            return MappingProxyType(self._cards)
        if pool_name not in self._index:
            raise ValueError(f"unknown pool {pool_name!r}; expected one of {POOL_NAMES}")
        return MappingProxyType({n: self._cards[n] for n in self._index[pool_name]})

    def cards(self, pool_name: str) -> list[WordCard]:
        return list(self.pool(pool_name).values())

    def in_pool(self, name: str, pool_name: str) -> bool:
        if pool_name == POOL_ALL:
            return name in self._cards
        return name in self._index[pool_name]

    def get(self, name: str) -> WordCard | None:
        return self._cards.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def weak_words(self, max_efactor: float) -> set[str]:
        """Enabled words whose easiness is at or below the threshold."""
        return {
            name
            for name in self._index[POOL_ENABLED]
            if self._cards[name].efactor <= max_efactor
        }

    def counts(self, today: date) -> PoolCounts:
        due_today = sum(
            1 for name in self._index[POOL_DUE] if self._cards[name].due_date <= today
        )
        return PoolCounts(
            new=len(self._index[POOL_NEW]),
            review=len(self._index[POOL_DUE]) - due_today,
            due_today=due_today,
            mastered=len(self._index[POOL_MASTERED]),
            disabled=len(self._cards) - len(self._index[POOL_ENABLED]),
            total=len(self._cards),
        )
