"""
Domain models for word cards and their memory state.

These are pure data structures with no I/O or external dependencies.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal

from .constants import EFACTOR_SCALE, MIN_EFACTOR
from .errors import InvalidSnapshot

# Canonical snapshot keys, independent of the frontmatter naming in the vault.
SNAPSHOT_TAGS = "tags"
SNAPSHOT_MASTERED = "is_mastered"
SNAPSHOT_DUE_DATE = "due_date"
SNAPSHOT_INTERVAL = "interval"
SNAPSHOT_EFACTOR = "efactor"  # scaled by EFACTOR_SCALE
SNAPSHOT_REPETITION = "repetition"
SNAPSHOT_PATH = "path"

REQUIRED_SNAPSHOT_KEYS = (
    SNAPSHOT_DUE_DATE,
    SNAPSHOT_INTERVAL,
    SNAPSHOT_EFACTOR,
    SNAPSHOT_REPETITION,
)


@dataclass(frozen=True)
class FieldNames:
    """Frontmatter keys used by word notes in the vault."""

    due_date: str = "due_date"
    interval: str = "interval"
    efactor: str = "efactor"
    repetition: str = "repetition"
    mastered: str = "mastered"
    tags: str = "tags"


@dataclass(frozen=True)
class MemoryState:
    """
    SuperMemo-2 parameters of a single card.

    Attributes:
        interval: Days until the next scheduled review.
        efactor: Easiness factor, never below MIN_EFACTOR.
        repetition: Consecutive successful reviews since the last lapse.
    """

    interval: int
    efactor: float
    repetition: int


@dataclass(frozen=True)
class GradeResult:
    """Outcome of a graded review: the next memory state and its due date."""

    interval: int
    efactor: float
    repetition: int
    due_date: date

    @property
    def state(self) -> MemoryState:
        return MemoryState(self.interval, self.efactor, self.repetition)

    def to_fields(self) -> dict[str, Any]:
        """Fields to persist, with efactor scaled back to an integer percentage."""
        return {
            SNAPSHOT_DUE_DATE: self.due_date.isoformat(),
            SNAPSHOT_INTERVAL: self.interval,
            SNAPSHOT_EFACTOR: scale_efactor(self.efactor),
            SNAPSHOT_REPETITION: self.repetition,
        }


@dataclass(frozen=True)
class WordCard:
    """
    A tracked vocabulary item.

    `front` is the unique word name; `path` is an opaque locator owned by the
    store and never interpreted here.
    """

    front: str
    path: str
    due_date: date
    interval: int
    efactor: float
    repetition: int
    is_mastered: bool = False
    tags: frozenset[str] = field(default_factory=frozenset)

    @property
    def state(self) -> MemoryState:
        return MemoryState(self.interval, self.efactor, self.repetition)

    @property
    def is_new(self) -> bool:
        return self.repetition == 0

    def is_tagged(self, enabled_tags: Iterable[str]) -> bool:
        return not self.tags.isdisjoint(enabled_tags)

    @classmethod
    def from_snapshot(cls, name: str, snapshot: Mapping[str, Any] | None) -> "WordCard":
        """Build a card from a raw snapshot, raising InvalidSnapshot on bad data."""
        if not name:
            raise InvalidSnapshot("card name is empty")
        if not snapshot:
            raise InvalidSnapshot(f"{name}: no frontmatter")

        missing = [k for k in REQUIRED_SNAPSHOT_KEYS if snapshot.get(k) is None]
        if missing:
            raise InvalidSnapshot(f"{name}: missing {', '.join(missing)}")

        interval = _as_count(name, SNAPSHOT_INTERVAL, snapshot[SNAPSHOT_INTERVAL])
        scaled_efactor = _as_number(name, SNAPSHOT_EFACTOR, snapshot[SNAPSHOT_EFACTOR])
        repetition = _as_count(name, SNAPSHOT_REPETITION, snapshot[SNAPSHOT_REPETITION])
        if interval < 0 or repetition < 0:
            raise InvalidSnapshot(f"{name}: interval and repetition must be non-negative")

        return cls(
            front=name,
            path=str(snapshot.get(SNAPSHOT_PATH) or name),
            due_date=_as_date(name, snapshot[SNAPSHOT_DUE_DATE]),
            interval=int(interval),
            efactor=max(MIN_EFACTOR, scaled_efactor / EFACTOR_SCALE),
            repetition=int(repetition),
            is_mastered=snapshot.get(SNAPSHOT_MASTERED) is True,
            tags=normalize_tags(snapshot.get(SNAPSHOT_TAGS)),
        )


@dataclass(frozen=True)
class PoolCounts:
    """Pool sizes as shown in a study overview."""

    new: int
    review: int  # in the due pool but not yet due
    due_today: int
    mastered: int
    disabled: int  # tracked but outside the enabled scope
    total: int


@dataclass(frozen=True)
class ChangeEvent:
    """A single notification from the external change feed."""

    kind: Literal["created", "changed", "deleted"]
    name: str


def scale_efactor(efactor: float) -> int:
    return round(efactor * EFACTOR_SCALE)


def normalize_tags(raw: Any) -> frozenset[str]:
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        return frozenset(t.lstrip("#") for t in raw.replace(",", " ").split() if t)
    if isinstance(raw, Iterable):
        return frozenset(str(t).lstrip("#") for t in raw if t is not None and str(t))
    return frozenset()


def _as_number(name: str, key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidSnapshot(f"{name}: {key} is not numeric ({value!r})")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidSnapshot(f"{name}: {key} is not numeric ({value!r})") from None
    if not math.isfinite(number):
        raise InvalidSnapshot(f"{name}: {key} is not finite ({value!r})")
    return number


def _as_count(name: str, key: str, value: Any) -> float:
    number = _as_number(name, key, value)
    if not number.is_integer():
        raise InvalidSnapshot(f"{name}: {key} must be a whole number ({value!r})")
    return number


def _as_date(name: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidSnapshot(f"{name}: due date {value!r} is not an ISO date") from None
