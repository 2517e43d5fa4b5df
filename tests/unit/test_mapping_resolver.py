"""
Unit tests for the field mapping resolver and its matcher strategies.

Includes property-based testing with hypothesis for the confidence floor.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from crm_quality.core.mapping import (
    MIN_CONFIDENCE,
    ExactMatcher,
    FieldMatcher,
    MappingResolver,
    PatternMatcher,
    SimilarityMatcher,
)
from crm_quality.core.models import MappingSuggestion


@pytest.fixture
def resolver() -> MappingResolver:
    return MappingResolver()


class TestExactStage:
    """Tests for case-insensitive exact matching"""

    def test_exact_match(self, resolver):
        """Test equal names map with full confidence"""
        [suggestion] = resolver.resolve(["Email"], ["email", "phone"], "contacts")

        assert suggestion.destination_field == "email"
        assert suggestion.confidence == 1.0
        assert "exact" in suggestion.reason.lower()

    def test_exact_match_required_flag_from_lexicon(self, resolver):
        """Test is_required comes from the lexicon concept of the source field"""
        [email] = resolver.resolve(["Email"], ["email"])
        [first] = resolver.resolve(["FirstName"], ["firstname"])
        [custom] = resolver.resolve(["Lead_Source__c"], ["lead_source__c"])

        assert email.is_required is True
        assert first.is_required is False
        assert custom.is_required is False

    def test_exact_match_wins_over_pattern(self, resolver):
        """Test later stages are not consulted once the exact stage matched"""
        [suggestion] = resolver.resolve(["phone"], ["telephone", "PHONE"], "contacts")

        assert suggestion.destination_field == "PHONE"
        assert suggestion.confidence == 1.0


class TestPatternStage:
    """Tests for lexicon pattern matching"""

    def test_example_phone_number(self, resolver):
        """Test the contact migration example: Email exact, Phone Number by pattern"""
        suggestions = resolver.resolve(["Email", "Phone Number"], ["email", "phone"], "contacts")
        by_source = {s.source_field: s for s in suggestions}

        assert by_source["Email"].destination_field == "email"
        assert by_source["Email"].confidence == 1.0
        assert by_source["Phone Number"].destination_field == "phone"
        assert by_source["Phone Number"].confidence >= 0.85

    def test_exact_variant_match(self, resolver):
        """Test a destination listed as a variant scores 0.95"""
        [suggestion] = resolver.resolve(["e-mail"], ["emailAddress", "phone"], "contacts")

        assert suggestion.destination_field == "emailAddress"
        assert suggestion.confidence == 0.95
        assert suggestion.is_required is True
        assert suggestion.reason == "Standard field pattern match for contact data"

    def test_normalized_variant_match(self, resolver):
        """Test a destination matching a variant after normalization scores 0.9"""
        [suggestion] = resolver.resolve(["mobile"], ["Phone-Number"], "contacts")

        assert suggestion.destination_field == "Phone-Number"
        assert suggestion.confidence == 0.9

    def test_destination_contains_concept_name(self, resolver):
        """Test a destination embedding the concept name scores 0.85"""
        [suggestion] = resolver.resolve(["zip"], ["Postal_Code__c"], "contacts")

        assert suggestion.confidence == 0.85
        assert "postal_code" in suggestion.reason

    def test_similar_to_variant(self, resolver):
        """Test a near-miss destination scores 0.7 + similarity * 0.15"""
        [suggestion] = resolver.resolve(["telephone"], ["phne"], "contacts")

        assert suggestion.destination_field == "phne"
        assert suggestion.confidence == pytest.approx(0.7 + 0.8 * 0.15)

    def test_similarity_cutoff_is_inclusive(self, resolver):
        """Test a similarity of exactly 0.7 to a variant still counts as a pattern match"""
        # "telephone" -> "telephares" is 3 edits over 10 characters
        [suggestion] = resolver.resolve(["telephone"], ["telephares"], "contacts")

        assert suggestion.destination_field == "telephares"
        assert suggestion.confidence == pytest.approx(0.7 + 0.7 * 0.15)
        assert suggestion.reason == "Strong similarity to standard contact field pattern"

    def test_below_similarity_cutoff_falls_through(self, resolver):
        """Test a similarity of 0.6 is no pattern match and the similarity stage answers"""
        [suggestion] = resolver.resolve(["telephone"], ["telepharxz"], "contacts")

        assert suggestion.confidence == 0.5
        assert suggestion.reason == "Moderate field name similarity"

    def test_partial_variant_containment(self, resolver):
        """Test a destination containing a variant scores 0.7"""
        [suggestion] = resolver.resolve(["mobile"], ["cellular_device"], "contacts")

        assert suggestion.destination_field == "cellular_device"
        assert suggestion.confidence == 0.7
        assert suggestion.reason == "Partial match with contact field pattern"

    def test_tie_goes_to_earliest_destination(self, resolver):
        """Test equal scores resolve to the first destination in input order"""
        [suggestion] = resolver.resolve(["mobile"], ["telephone", "cell"], "contacts")
        [reversed_suggestion] = resolver.resolve(["mobile"], ["cell", "telephone"], "contacts")

        assert suggestion.destination_field == "telephone"
        assert reversed_suggestion.destination_field == "cell"

    def test_object_type_alias(self, resolver):
        """Test singular object type tags select the same pattern set"""
        [suggestion] = resolver.resolve(["mobile"], ["telephone"], "contact")
        assert suggestion.confidence == 0.95

    def test_unknown_object_type_skips_pattern_stage(self, resolver):
        """Test an unregistered object type falls through to similarity, not an error"""
        [suggestion] = resolver.resolve(["Phone Number"], ["phone"], "invoices")

        assert suggestion.destination_field == "phone"
        assert suggestion.confidence == 0.4
        assert suggestion.reason == "Shares 1 word parts"

    def test_concept_outside_object_type(self):
        """Test concepts of other categories are not used for an object type"""
        matcher = PatternMatcher()
        assert matcher.try_match("deal_amount", ["amount"], "contacts") is None
        assert matcher.try_match("deal_amount", ["amount"], "opportunities").confidence == 0.95


class TestSimilarityStage:
    """Tests for the fuzzy fallback"""

    def test_high_similarity(self, resolver):
        """Test names equal after normalization score 0.75"""
        [suggestion] = resolver.resolve(["Lead Source"], ["leadsource", "owner_id"])

        assert suggestion.destination_field == "leadsource"
        assert suggestion.confidence == 0.75
        assert suggestion.is_required is False

    def test_good_similarity(self):
        """Test one edit in a long name scores 0.65"""
        suggestion = SimilarityMatcher().try_match("lead_status", ["leadstatuses"], None)
        assert suggestion.confidence == 0.65

    def test_no_common_ground(self, resolver):
        """Test unrelated names produce no suggestion"""
        assert resolver.resolve(["xyz"], ["email"]) == []


class TestResolver:
    """Tests for resolver orchestration"""

    def test_empty_destinations(self, resolver):
        """Test no destinations means no suggestions at all"""
        assert resolver.resolve(["Email", "Phone", "Company"], [], "contacts") == []

    def test_blank_source_fields_skipped(self, resolver):
        assert resolver.resolve(["", "Email"], ["email"]) == resolver.resolve(["Email"], ["email"])

    def test_duplicate_destinations_first_wins(self, resolver):
        """Test the first occurrence of a destination name is authoritative"""
        [suggestion] = resolver.resolve(["mobile"], ["cell", "telephone", "cell"], "contacts")
        assert suggestion.destination_field == "cell"

    def test_duplicate_source_fields_resolved_once(self, resolver):
        suggestions = resolver.resolve(["Email", "Email"], ["email"])
        assert len(suggestions) == 1

    def test_sorted_by_confidence(self, resolver):
        """Test output is ordered by confidence, highest first"""
        suggestions = resolver.resolve(["Lead Source", "Email", "mobile"], ["leadsource", "email", "phone"], "contacts")

        assert [s.source_field for s in suggestions] == ["Email", "mobile", "Lead Source"]

    def test_ties_keep_source_order(self, resolver):
        suggestions = resolver.resolve(["phone", "email"], ["email", "phone"])
        assert [s.source_field for s in suggestions] == ["phone", "email"]

    def test_custom_matcher_list(self):
        """Test the cascade only uses the configured strategies"""
        resolver = MappingResolver([ExactMatcher()])
        assert resolver.resolve(["Phone Number"], ["phone"], "contacts") == []

    def test_low_confidence_matcher_ignored(self):
        """Test a strategy result below the floor falls through to the next strategy"""

        class GuessMatcher(FieldMatcher):
            tier = "guess"

            def try_match(self, source_field, destination_fields, object_type):
                return MappingSuggestion(
                    source_field=source_field,
                    destination_field=destination_fields[0],
                    confidence=0.1,
                    reason="Guess",
                )

        resolver = MappingResolver([GuessMatcher(), ExactMatcher()])
        [suggestion] = resolver.resolve(["email"], ["phone", "email"])

        assert suggestion.destination_field == "email"
        assert suggestion.confidence == 1.0

    @settings(max_examples=150, deadline=None)
    @given(
        st.lists(st.text(max_size=15), max_size=6),
        st.lists(st.text(max_size=15), max_size=6),
        st.sampled_from(["contacts", "accounts", "opportunities", "invoices", None]),
    )
    def test_property_confidence_floor(self, source_fields, destination_fields, object_type):
        """Property test: every suggestion is above the floor and targets a real destination"""
        suggestions = MappingResolver().resolve(source_fields, destination_fields, object_type)

        assert all(MIN_CONFIDENCE <= s.confidence <= 1.0 for s in suggestions)
        assert all(s.destination_field in destination_fields for s in suggestions)
        assert len({s.source_field for s in suggestions}) == len(suggestions)

    @given(st.lists(st.text(min_size=1, max_size=15), max_size=6))
    def test_property_empty_destinations(self, source_fields):
        """Property test: no destinations never yields suggestions"""
        assert MappingResolver().resolve(source_fields, [], "contacts") == []

    @given(st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=15))
    def test_property_exact_match_always_full_confidence(self, name):
        """Property test: a case-insensitive equal destination is always an exact match"""
        [suggestion] = MappingResolver().resolve([name], ["Other-1", name.upper()])

        assert suggestion.confidence == 1.0
        assert suggestion.destination_field == name.upper()
