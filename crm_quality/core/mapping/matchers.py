"""
Field matcher strategies used by the mapping resolver.

Each matcher implements try_match(); the resolver applies them in order and
the first non-None suggestion wins.
"""

from abc import ABC, abstractmethod
from typing import Sequence, Tuple

from crm_quality.core.lexicon import (
    FieldConcept,
    concepts_for_object_type,
    is_required_field,
    normalize_field_name,
)
from crm_quality.core.models import MappingSuggestion

from .similarity import similarity, token_similarity

PATTERN_SIMILARITY_THRESHOLD = 0.7

# (confidence, reason) for one candidate destination
Candidate = Tuple[float, str]


class FieldMatcher(ABC):
    """
    Abstract base class for matching strategies.

    Each strategy proposes at most one destination for a source field.
    """

    @property
    @abstractmethod
    def tier(self) -> str:
        """Return the matching tier identifier."""
        pass

    @abstractmethod
    def try_match(
        self,
        source_field: str,
        destination_fields: Sequence[str],
        object_type: str | None,
    ) -> MappingSuggestion | None:
        """
        Propose a destination for a source field.

        Args:
            source_field: Source field name
            destination_fields: Candidate destination names, duplicates removed
            object_type: Object type tag selecting the lexicon pattern set

        Returns:
            A suggestion, or None when this strategy has nothing to offer
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tier={self.tier})"


class ExactMatcher(FieldMatcher):
    """Case-insensitive equality between source and destination names."""

    tier = "exact"

    def try_match(self, source_field, destination_fields, object_type):
        lowered = source_field.lower()
        for destination in destination_fields:
            if destination.lower() == lowered:
                return MappingSuggestion(
                    source_field=source_field,
                    destination_field=destination,
                    confidence=1.0,
                    is_required=is_required_field(source_field),
                    reason="Exact field name match",
                )
        return None


class PatternMatcher(FieldMatcher):
    """
    Matches through the lexicon's known variants for the object type.

    Skipped (returns None) when the object type has no registered pattern set.
    Concepts are tried in lexicon order; the first concept that recognizes the
    source field and scores at least one destination produces the suggestion.
    """

    tier = "pattern"

    def try_match(self, source_field, destination_fields, object_type):
        concepts = concepts_for_object_type(object_type)
        if concepts is None:
            return None

        source_normalized = normalize_field_name(source_field)
        if not source_normalized:
            return None

        for concept in concepts:
            if source_normalized not in concept.normalized_variations:
                continue

            best_field, best = None, None
            for destination in destination_fields:
                candidate = self._score_destination(concept, destination)
                if candidate is not None and (best is None or candidate[0] > best[0]):
                    best_field, best = destination, candidate

            if best is not None:
                return MappingSuggestion(
                    source_field=source_field,
                    destination_field=best_field,
                    confidence=best[0],
                    is_required=concept.required,
                    reason=best[1],
                )
        return None

    @staticmethod
    def _score_destination(concept: FieldConcept, destination: str) -> Candidate | None:
        destination_normalized = normalize_field_name(destination)
        if not destination_normalized:
            return None

        if concept.has_variant(destination):
            return 0.95, f"Standard field pattern match for {concept.category} data"

        variants = concept.normalized_variations
        if destination_normalized in variants:
            return 0.9, f"Common field pattern match for {concept.category} data"

        if normalize_field_name(concept.name) in destination_normalized:
            return 0.85, f"Destination field contains the standard {concept.name} pattern"

        best_similarity = max(similarity(v, destination_normalized) for v in variants)
        if best_similarity >= PATTERN_SIMILARITY_THRESHOLD:
            return (
                0.7 + best_similarity * 0.15,
                f"Strong similarity to standard {concept.category} field pattern",
            )

        for variant in variants:
            if variant in destination_normalized or destination_normalized in variant:
                return 0.7, f"Partial match with {concept.category} field pattern"

        return None


class SimilarityMatcher(FieldMatcher):
    """
    Fuzzy fallback: character similarity combined with shared name tokens.
    """

    tier = "similarity"

    def try_match(self, source_field, destination_fields, object_type):
        best_field, best = None, None
        for destination in destination_fields:
            candidate = self._score_destination(source_field, destination)
            if candidate is not None and (best is None or candidate[0] > best[0]):
                best_field, best = destination, candidate

        if best is None:
            return None

        return MappingSuggestion(
            source_field=source_field,
            destination_field=best_field,
            confidence=best[0],
            is_required=False,
            reason=best[1],
        )

    @staticmethod
    def _score_destination(source_field: str, destination: str) -> Candidate | None:
        source_normalized = normalize_field_name(source_field)
        destination_normalized = normalize_field_name(destination)

        char_similarity = 0.0
        if source_normalized and destination_normalized:
            char_similarity = similarity(source_normalized, destination_normalized)

        shared_ratio, shared_count = token_similarity(source_field, destination)
        combined = max(char_similarity, shared_ratio)

        if combined > 0.85:
            return 0.75, "High field name similarity"
        if combined > 0.7:
            return 0.65, "Good field name similarity"
        if combined > 0.5:
            return 0.5, "Moderate field name similarity"
        if shared_count > 0:
            return 0.4, f"Shares {shared_count} word parts"
        return None


def default_matchers() -> list[FieldMatcher]:
    """The standard exact -> pattern -> similarity cascade."""
    return [ExactMatcher(), PatternMatcher(), SimilarityMatcher()]
