"""
Study service: application layer orchestrator.

Owns the card registry for one vault and wires it to the word store, the
session sampler and the memory model. There is no module-level state: whatever
composes the core creates a StudyService and drives its init / rescan /
dispose lifecycle explicitly.
"""

import logging
from collections.abc import Callable
from datetime import date

from openwords.application.annotator import annotate, identity_lemmatizer
from openwords.application.config import AppConfig
from openwords.application.memory_model import grade, initial_state, nudge_recall
from openwords.application.registry import CardRegistry
from openwords.application.sampler import NEW_MODE, REVIEW_MODES, SessionSampler, due_filter
from openwords.domain.constants import POOL_DUE, POOL_ENABLED, POOL_NEW
from openwords.domain.errors import CardNotFound, CardOutOfScope, OpenWordsError
from openwords.domain.models import (
    SNAPSHOT_EFACTOR,
    ChangeEvent,
    GradeResult,
    PoolCounts,
    WordCard,
    scale_efactor,
)
from openwords.domain.ports import Lemmatizer, WordStore

logger = logging.getLogger(__name__)


def pool_for_mode(mode: str) -> str:
    if mode == NEW_MODE:
        return POOL_NEW
    if mode in REVIEW_MODES:
        return POOL_DUE
    raise ValueError(f"unknown study mode {mode!r}")


class StudyService:
    """
    Application service for studying the words of one vault.

    Follows Dependency Inversion: depends on the WordStore abstraction,
    not on the markdown vault adapter.
    """

    def __init__(
        self,
        store: WordStore,
        config: AppConfig,
        sampler: SessionSampler | None = None,
        registry: CardRegistry | None = None,
        clock: Callable[[], date] = date.today,
    ):
        """
        Args:
            store: Snapshot source and persist sink for word notes.
            config: Resolved configuration (enabled tags, tunables).
            sampler: Optional custom sampler; built from config if not provided.
            registry: Optional pre-built registry, mainly for tests.
            clock: Returns "today"; injected so scheduling stays testable.
        """
        self.store = store
        self.config = config
        self.sampler = sampler or SessionSampler(
            explore_ratio=config.explore_ratio,
            head_fraction=config.head_fraction,
        )
        self.registry = registry or CardRegistry(config.enabled_tags)
        self._clock = clock

    # ---------- Lifecycle ----------

    def init(self) -> int:
        return self.rescan()

    def rescan(self) -> int:
        """Rebuild every pool from the store. Returns the number of tracked words."""
        self.registry.set_enabled_tags(self.config.enabled_tags)
        return self.registry.rescan(self.store.read_all())

    def dispose(self) -> None:
        self.registry.dispose()

    # ---------- Change feed ----------

    def on_created(self, name: str) -> WordCard | None:
        return self._refresh(name)

    def on_changed(self, name: str) -> WordCard | None:
        return self._refresh(name)

    def on_deleted(self, name: str) -> None:
        self.registry.remove(name)

    def handle(self, event: ChangeEvent) -> None:
        if event.kind == "deleted":
            self.on_deleted(event.name)
        elif event.kind in ("created", "changed"):
            self._refresh(event.name)
        else:
            raise ValueError(f"unknown change event {event.kind!r}")

    def _refresh(self, name: str) -> WordCard | None:
        try:
            snapshot = self.store.get_snapshot(name)
        except CardNotFound:
            logger.debug(f"[study] {name} vanished before refresh")
            self.registry.remove(name)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"[study] Failed to read {name}: {e}")
            snapshot = None
        return self.registry.upsert(name, snapshot)

    # ---------- Graded review ----------

    def today(self) -> date:
        return self._clock()

    def session_pool(self, mode: str) -> list[WordCard]:
        """Cards eligible for the mode right now; review modes skip cards not yet due."""
        cards = self.registry.cards(pool_for_mode(mode))
        if mode in REVIEW_MODES:
            return due_filter(cards, self.today())
        return cards

    def next_card(self, mode: str) -> WordCard | None:
        """Next card to present, or None when nothing is left to study."""
        return self.sampler.pick(self.session_pool(mode), mode)

    def grade_card(self, name: str, score: int, mode: str) -> GradeResult:
        """
        Grade a card, persist the new schedule and refresh the registry.

        Raises:
            CardOutOfScope: If the card left the mode's pool meanwhile.
            InvalidGrade: If score is not in 0..5.
            CardNotFound: If the backing note is gone.
        """
        card = self.registry.get(name)
        if card is None or not self.registry.in_pool(name, pool_for_mode(mode)):
            raise CardOutOfScope(name, mode)

        result = grade(card.state, score, self.today())
        self.store.write_fields(name, result.to_fields())
        logger.info(
            f"[study] {name}: efactor {result.efactor:.2f}, repetition {result.repetition}, "
            f"interval {result.interval}, due {result.due_date.isoformat()}"
        )
        self._refresh(name)
        return result

    # ---------- Recall typing ----------

    def next_recall_card(self) -> WordCard | None:
        return self.sampler.pick_recall(
            self.registry.cards(POOL_DUE), fraction=self.config.recall_fraction
        )

    def record_recall(self, name: str, *, peeked: bool, mistakes: int) -> float:
        """Apply the light easiness nudge after a correctly typed answer."""
        card = self.registry.get(name)
        if card is None or not self.registry.in_pool(name, POOL_DUE):
            raise CardOutOfScope(name, "recall")

        efactor = nudge_recall(card.efactor, peeked=peeked, mistakes=mistakes)
        self.store.write_fields(name, {SNAPSHOT_EFACTOR: scale_efactor(efactor)})
        logger.info(f"[study] {name}: recall efactor {card.efactor:.2f} -> {efactor:.2f}")
        self._refresh(name)
        return efactor

    # ---------- Maintenance ----------

    def reset_enabled(self) -> int:
        """Reset every enabled card to a fresh schedule due today. Returns the count."""
        cards = self.registry.cards(POOL_ENABLED)
        if not cards:
            logger.info("[study] No enabled words to reset")
            return 0

        fresh = initial_state()
        fields = GradeResult(
            interval=fresh.interval,
            efactor=fresh.efactor,
            repetition=fresh.repetition,
            due_date=self.today(),
        ).to_fields()

        count = 0
        for card in cards:
            try:
                self.store.write_fields(card.front, fields)
            except (OpenWordsError, OSError, ValueError) as e:
                logger.error(f"[error] reset {card.front}: {e}")
                continue
            count += 1
            self._refresh(card.front)

        logger.info(f"[study] Reset {count}/{len(cards)} words")
        return count

    # ---------- Annotation & stats ----------

    def weak_words(self) -> set[str]:
        return self.registry.weak_words(self.config.max_efactor_for_link)

    def annotate(
        self,
        text: str,
        lemmatize: Lemmatizer = identity_lemmatizer,
    ) -> str:
        return annotate(text, self.weak_words(), lemmatize)

    def counts(self) -> PoolCounts:
        return self.registry.counts(self.today())
