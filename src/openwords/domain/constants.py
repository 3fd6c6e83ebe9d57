"""Centralized constants for OpenWords.

All magic numbers and tuning defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SuperMemo-2 ----------
MIN_EFACTOR = 1.3
DEFAULT_EFACTOR = 2.5
FIRST_INTERVAL = 1  # days after the first successful review
SECOND_INTERVAL = 6  # days after the second successful review
LAPSE_INTERVAL = 1  # restart interval after a failed review
PASSING_GRADE = 3
MAX_GRADE = 5

# Frontmatter stores efactor as an integer percentage (250 == 2.5)
EFACTOR_SCALE = 100

# ---------- Recall typing nudge ----------
RECALL_PEEK_PENALTY = -0.02
RECALL_FIRST_TRY_BONUS = 0.15
RECALL_RETRY_BONUS = 0.05

# ---------- Session sampling ----------
DEFAULT_EXPLORE_RATIO = 0.7
DEFAULT_HEAD_FRACTION = 0.01  # weakest 1% of the sorted pool
DEFAULT_RECALL_FRACTION = 0.5  # weakest half for recall typing

# ---------- Link annotation ----------
DEFAULT_MAX_EFACTOR_FOR_LINK = 2.6

# ---------- Pools ----------
POOL_ALL = "all"
POOL_MASTERED = "mastered"
POOL_ENABLED = "enabled"
POOL_NEW = "new"
POOL_DUE = "due"
POOL_NAMES = (POOL_ALL, POOL_MASTERED, POOL_ENABLED, POOL_NEW, POOL_DUE)
