# Domain Package
from .errors import CardNotFound, CardOutOfScope, InvalidGrade, InvalidSnapshot, OpenWordsError
from .models import ChangeEvent, GradeResult, MemoryState, PoolCounts, WordCard
from .ports import Lemmatizer, PersistSink, SnapshotSource, WordStore

__all__ = [
    "CardNotFound",
    "CardOutOfScope",
    "ChangeEvent",
    "GradeResult",
    "InvalidGrade",
    "InvalidSnapshot",
    "Lemmatizer",
    "MemoryState",
    "OpenWordsError",
    "PersistSink",
    "PoolCounts",
    "SnapshotSource",
    "WordCard",
    "WordStore",
]
