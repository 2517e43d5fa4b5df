"""
Helpers for reviewing mapping suggestions before they become field mappings.
"""

from typing import List, Sequence

from pydantic import BaseModel

from crm_quality.core.models import MappingSuggestion

from .similarity import conceptually_similar

APPLY_THRESHOLD = 0.5
REVIEW_THRESHOLD = 0.65


class SuggestionReview(BaseModel):
    """A suggestion annotated for the human reviewer."""

    suggestion: MappingSuggestion
    needs_review: bool
    note: str = ""


def apply_suggestions(
    suggestions: Sequence[MappingSuggestion],
    min_confidence: float = APPLY_THRESHOLD,
) -> List[MappingSuggestion]:
    """Keep only suggestions confident enough to become field mappings."""
    return [s for s in suggestions if s.confidence >= min_confidence]


def review_suggestions(
    suggestions: Sequence[MappingSuggestion],
    review_threshold: float = REVIEW_THRESHOLD,
) -> List[SuggestionReview]:
    """
    Flag suggestions a reviewer should look at.

    A suggestion needs review when its confidence is below the threshold and
    the two field names are not conceptually similar.
    """
    reviews = []
    for suggestion in suggestions:
        if suggestion.confidence >= review_threshold:
            reviews.append(SuggestionReview(suggestion=suggestion, needs_review=False))
        elif conceptually_similar(suggestion.source_field, suggestion.destination_field):
            reviews.append(SuggestionReview(
                suggestion=suggestion,
                needs_review=False,
                note="Low confidence but field names describe the same concept",
            ))
        else:
            reviews.append(SuggestionReview(
                suggestion=suggestion,
                needs_review=True,
                note=f"Low confidence ({suggestion.confidence:.2f}): {suggestion.reason}",
            ))
    return reviews


def unmapped_destinations(
    suggestions: Sequence[MappingSuggestion],
    destination_fields: Sequence[str],
) -> List[str]:
    """Destination fields that no suggestion targets, in input order."""
    targeted = {s.destination_field for s in suggestions}
    unmapped = []
    for field in destination_fields:
        if field not in targeted and field not in unmapped:
            unmapped.append(field)
    return unmapped
