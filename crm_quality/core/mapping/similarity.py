"""
String similarity helpers for field name matching.

All functions are pure. They are called O(source_fields x destination_fields)
times per resolution, so edit distance is delegated to rapidfuzz.
"""

import re
from typing import List

from rapidfuzz.distance import Levenshtein

CONCEPTUAL_THRESHOLD = 0.8

AUXILIARY_PREFIXES = (
    "primary",
    "contact",
    "account",
    "billing",
    "shipping",
    "business",
    "custom",
    "default",
    "main",
    "work",
)

COMMON_SUFFIXES = (
    "number",
    "value",
    "count",
    "name",
    "date",
    "type",
    "code",
    "id",
)

_SEPARATORS = re.compile(r"[_\-. ]+")
_PREFIX_WITH_SEPARATOR = re.compile(
    r"^(?:" + "|".join(AUXILIARY_PREFIXES) + r")[_\-. ]+(?=\S)", re.IGNORECASE
)
_PREFIX_CAMEL_CASE = re.compile(r"^(?:" + "|".join(AUXILIARY_PREFIXES) + r")(?=[A-Z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def similarity(a: str, b: str) -> float:
    """
    Normalized edit-distance similarity in [0, 1].

    1.0 when the strings are equal, otherwise
    1 - levenshtein(lower(a), lower(b)) / max(len(a), len(b)).
    """
    if a == b:
        return 1.0
    a_lower, b_lower = a.lower(), b.lower()
    max_length = max(len(a_lower), len(b_lower))
    return 1.0 - Levenshtein.distance(a_lower, b_lower) / max_length


def normalize_concept(name: str) -> str:
    """
    Reduce a field name to its conceptual core.

    Strips one leading auxiliary prefix ("primary_", "billing", ...), removes
    separators, then strips one trailing common suffix ("id", "date", ...).
    Neither strip is applied when it would leave an empty string.
    """
    stripped = _PREFIX_WITH_SEPARATOR.sub("", name, count=1)
    if stripped == name:
        stripped = _PREFIX_CAMEL_CASE.sub("", name, count=1)

    compact = _SEPARATORS.sub("", stripped).lower()

    for suffix in COMMON_SUFFIXES:
        if compact.endswith(suffix) and len(compact) > len(suffix):
            return compact[: -len(suffix)]
    return compact


def conceptually_similar(a: str, b: str) -> bool:
    """True when two field names normalize to the same or a near-identical concept."""
    norm_a = normalize_concept(a)
    norm_b = normalize_concept(b)
    if norm_a == norm_b:
        return True
    return similarity(norm_a, norm_b) >= CONCEPTUAL_THRESHOLD


def tokenize_field_name(name: str) -> List[str]:
    """Split a field name into lower-case tokens on underscores, whitespace and camelCase."""
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", name).replace("_", " ")
    return spaced.lower().split()


def token_similarity(a: str, b: str) -> tuple[float, int]:
    """
    Fraction of shared tokens between two field names.

    Returns:
        (shared / max(len(tokens_a), len(tokens_b)), shared token count)
    """
    tokens_a = tokenize_field_name(a)
    tokens_b = tokenize_field_name(b)
    if not tokens_a or not tokens_b:
        return 0.0, 0
    shared = sum(1 for token in tokens_a if token in tokens_b)
    return shared / max(len(tokens_a), len(tokens_b)), shared
