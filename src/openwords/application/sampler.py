"""
Session sampler for picking the next card to study.

Selection is two-phase:
1. Explore: with probability `explore_ratio`, pick uniformly from the pool.
2. Exploit: otherwise sort by weakness and pick uniformly from the head slice
   (the weakest `head_fraction` of the pool, at least one card).
"""

import math
import random
from collections.abc import Iterable, Sequence
from datetime import date

from openwords.domain.constants import (
    DEFAULT_EXPLORE_RATIO,
    DEFAULT_HEAD_FRACTION,
    DEFAULT_RECALL_FRACTION,
)
from openwords.domain.models import WordCard


NEW_MODE = "new"
REVIEW_MODES = ("due", "review")


def _new_key(card: WordCard) -> tuple[float, float]:
    # Longest drifting first, then least easy
    return (-card.interval, card.efactor)


def _review_key(card: WordCard) -> tuple[float, int]:
    # Weakest first, then least reinforced
    return (card.efactor, card.repetition)


def due_filter(pool: Iterable[WordCard], today: date) -> list[WordCard]:
    """Cards whose due date is not in the future."""
    return [card for card in pool if card.due_date <= today]


class SessionSampler:
    """
    Picks cards from a pool using the explore/exploit policy.

    Both tunables change how review load is distributed, so they are
    constructor arguments rather than constants.
    """

    def __init__(
        self,
        explore_ratio: float = DEFAULT_EXPLORE_RATIO,
        head_fraction: float = DEFAULT_HEAD_FRACTION,
        rng: random.Random | None = None,
    ):
        if not 0.0 <= explore_ratio <= 1.0:
            raise ValueError(f"explore_ratio must be within [0, 1], got {explore_ratio}")
        if not 0.0 < head_fraction <= 1.0:
            raise ValueError(f"head_fraction must be within (0, 1], got {head_fraction}")
        self.explore_ratio = explore_ratio
        self.head_fraction = head_fraction
        self._rng = rng or random.Random()

    def pick(self, pool: Sequence[WordCard], mode: str) -> WordCard | None:
        """
        Select the next card from the pool.

        Args:
            pool: Candidate cards. For review modes the caller has already
                dropped cards that are not yet due.
            mode: "new", or "due"/"review".

        Returns:
            A card, or None when the pool is empty (the session is complete).
        """
        if mode == NEW_MODE:
            key = _new_key
        elif mode in REVIEW_MODES:
            key = _review_key
        else:
            raise ValueError(f"unknown study mode {mode!r}")

        if not pool:
            return None

        if self._rng.random() < self.explore_ratio:
            return self._rng.choice(list(pool))

        ranked = sorted(pool, key=key)
        head_size = max(1, math.ceil(len(ranked) * self.head_fraction))
        return self._rng.choice(ranked[:head_size])

    def pick_recall(
        self,
        pool: Sequence[WordCard],
        fraction: float = DEFAULT_RECALL_FRACTION,
    ) -> WordCard | None:
        """Pick uniformly among the least easy `fraction` of the pool."""
        if not pool:
            return None
        ranked = sorted(pool, key=lambda card: card.efactor)
        head_size = max(1, math.ceil(len(ranked) * fraction))
        return self._rng.choice(ranked[:head_size])
