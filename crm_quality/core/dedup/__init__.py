"""
Uniqueness tracking: the shared index structure and the job-scoped deduplication tracker.
"""

from .tracker import DEFAULT_DEDUP_KEYS, DUPLICATE_SUGGESTION, DeduplicationTracker
from .uniqueness_index import UniquenessIndex

__all__ = [
    "UniquenessIndex",
    "DeduplicationTracker",
    "DEFAULT_DEDUP_KEYS",
    "DUPLICATE_SUGGESTION",
]
