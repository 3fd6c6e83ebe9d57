# Application Package
from .annotator import annotate, tokenize
from .memory_model import grade, nudge_recall
from .registry import CardRegistry
from .sampler import SessionSampler
from .study_service import StudyService

__all__ = [
    "CardRegistry",
    "SessionSampler",
    "StudyService",
    "annotate",
    "grade",
    "nudge_recall",
    "tokenize",
]
