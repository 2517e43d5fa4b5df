"""
Field mapping resolver.

Converts a list of source field names into mapping suggestions against a list
of destination field names by running an ordered cascade of matchers.
"""

from typing import Iterable, List, Sequence

from crm_quality.core.models import MappingSuggestion
from crm_quality.observability.logger import get_logger
from crm_quality.observability.metrics import mapping_suggestions_total

from .matchers import FieldMatcher, default_matchers

logger = get_logger(__name__)

MIN_CONFIDENCE = 0.4


def _unique_in_order(fields: Iterable[str]) -> List[str]:
    """Drop repeated names, the first occurrence is authoritative."""
    seen = set()
    unique = []
    for field in fields:
        if field not in seen:
            seen.add(field)
            unique.append(field)
    return unique


class MappingResolver:
    """
    Orchestrates matcher strategies over source fields.

    For every source field the matchers run in order and the first suggestion
    produced wins; later matchers are not consulted for that field.
    """

    def __init__(self, matchers: Sequence[FieldMatcher] | None = None):
        """
        Initialize the resolver.

        Args:
            matchers: Strategies in priority order (default: exact, pattern, similarity)
        """
        self.matchers: List[FieldMatcher] = list(matchers) if matchers is not None else default_matchers()

    def resolve(
        self,
        source_fields: Sequence[str],
        destination_fields: Sequence[str],
        object_type: str | None = None,
    ) -> List[MappingSuggestion]:
        """
        Propose at most one destination per source field.

        Args:
            source_fields: Source schema field names
            destination_fields: Destination schema field names
            object_type: Object type tag selecting the lexicon pattern set
                         (unknown types simply skip pattern matching)

        Returns:
            Suggestions sorted by confidence (highest first, ties in source order)
        """
        destinations = _unique_in_order(destination_fields)
        if not destinations:
            logger.debug("No destination fields supplied, nothing to resolve")
            return []

        suggestions = []
        for source_field in _unique_in_order(source_fields):
            if not source_field:
                continue
            suggestion = self.match_field(source_field, destinations, object_type)
            if suggestion is not None:
                suggestions.append(suggestion)

        suggestions.sort(key=lambda s: s.confidence, reverse=True)

        logger.info(
            f"Resolved {len(suggestions)} of {len(source_fields)} source fields",
            extra={"object_type": object_type, "destination_count": len(destinations)},
        )
        return suggestions

    def match_field(
        self,
        source_field: str,
        destination_fields: Sequence[str],
        object_type: str | None = None,
    ) -> MappingSuggestion | None:
        """Run the cascade for one source field."""
        for matcher in self.matchers:
            suggestion = matcher.try_match(source_field, destination_fields, object_type)
            if suggestion is None or suggestion.confidence < MIN_CONFIDENCE:
                continue
            mapping_suggestions_total.labels(tier=matcher.tier).inc()
            return suggestion
        return None
