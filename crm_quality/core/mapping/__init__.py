"""
Field mapping: similarity helpers, matcher strategies and the resolver.
"""

from .matchers import (
    ExactMatcher,
    FieldMatcher,
    PatternMatcher,
    SimilarityMatcher,
    default_matchers,
)
from .resolver import MIN_CONFIDENCE, MappingResolver
from .review import SuggestionReview, apply_suggestions, review_suggestions, unmapped_destinations
from .similarity import conceptually_similar, normalize_concept, similarity, tokenize_field_name

__all__ = [
    "MappingResolver",
    "MIN_CONFIDENCE",
    "FieldMatcher",
    "ExactMatcher",
    "PatternMatcher",
    "SimilarityMatcher",
    "default_matchers",
    "similarity",
    "conceptually_similar",
    "normalize_concept",
    "tokenize_field_name",
    "SuggestionReview",
    "apply_suggestions",
    "review_suggestions",
    "unmapped_destinations",
]
