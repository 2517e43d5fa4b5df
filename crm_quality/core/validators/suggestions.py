"""
Remediation suggestions attached to validation issues.
"""

import re
from typing import Any

from crm_quality.core.dedup import DUPLICATE_SUGGESTION
from crm_quality.core.lexicon import find_concept_normalized

REQUIRED_SUGGESTION = "[Required] Please provide a value"

NAME_CONCEPTS = ("name", "first_name", "last_name")

_WHITESPACE = re.compile(r"\s+")
_LETTERS = re.compile(r"[a-zA-Z]")
_NON_DIGITS = re.compile(r"\D")


def _concept_name(field_name: str) -> str | None:
    concept = find_concept_normalized(field_name)
    return concept.name if concept else None


def _email_suggestion(value: str) -> str | None:
    if "@" not in value:
        return f"Add the missing @ symbol: {_WHITESPACE.sub('', value)}@example.com"
    if "." not in value:
        local_part, domain = value.split("@", 1)
        return f"{local_part}@{domain}.com"
    if " " in value:
        return _WHITESPACE.sub("", value)
    return None


def _phone_suggestion(value: str) -> str | None:
    if _LETTERS.search(value):
        return _LETTERS.sub("", value)
    digits = _NON_DIGITS.sub("", value)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return None


def suggest_remediation(field_name: str, value: Any, rule_kind: str) -> str | None:
    """
    Suggest a fix for a failed rule on a known field.

    Args:
        field_name: Field the rule applies to (recognized through the lexicon)
        value: The offending value
        rule_kind: Kind of the failed rule

    Returns:
        A remediation hint, or None when there is no known fix
    """
    if rule_kind == "format" and isinstance(value, str):
        concept = _concept_name(field_name)
        if concept == "email":
            return _email_suggestion(value)
        if concept == "phone":
            return _phone_suggestion(value)
        return None

    if rule_kind == "required":
        if _concept_name(field_name) in NAME_CONCEPTS:
            return REQUIRED_SUGGESTION
        return None

    if rule_kind in ("unique", "duplicate"):
        return DUPLICATE_SUGGESTION

    return None
