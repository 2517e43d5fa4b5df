"""
Built-in default rule sets per object type.
"""

import re
from typing import List

from crm_quality.core.lexicon import canonical_object_type
from crm_quality.core.models import ValidationRule

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\+\-\(\) ]+$")
WEBSITE_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})[/\w .-]*/?$")
AMOUNT_PATTERN = re.compile(r"^-?\d*\.?\d+$")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _contact_rules() -> List[ValidationRule]:
    return [
        ValidationRule(field="email", rule_kind="format", params={"pattern": EMAIL_PATTERN},
                       message="Invalid email format"),
        ValidationRule(field="firstName", rule_kind="required", message="First name is required"),
        ValidationRule(field="lastName", rule_kind="required", message="Last name is required"),
        ValidationRule(field="phone", rule_kind="format", params={"pattern": PHONE_PATTERN},
                       message="Invalid phone format"),
        ValidationRule(field="email", rule_kind="unique", message="Email address must be unique"),
    ]


def _account_rules() -> List[ValidationRule]:
    return [
        ValidationRule(field="name", rule_kind="required", message="Account name is required"),
        ValidationRule(field="website", rule_kind="format", params={"pattern": WEBSITE_PATTERN},
                       message="Invalid website URL"),
        ValidationRule(field="name", rule_kind="unique", message="Account name must be unique"),
    ]


def _opportunity_rules() -> List[ValidationRule]:
    return [
        ValidationRule(field="name", rule_kind="required", message="Opportunity name is required"),
        ValidationRule(field="amount", rule_kind="format", params={"pattern": AMOUNT_PATTERN},
                       message="Amount must be a number"),
        ValidationRule(field="amount", rule_kind="range", params={"min": 0},
                       message="Amount must be positive"),
        ValidationRule(field="closeDate", rule_kind="format", params={"pattern": ISO_DATE_PATTERN},
                       message="Close date must be in YYYY-MM-DD format"),
    ]


_DEFAULTS = {
    "contacts": _contact_rules,
    "accounts": _account_rules,
    "opportunities": _opportunity_rules,
}


def default_rules_for(object_type: str | None) -> List[ValidationRule]:
    """
    Return a fresh copy of the default rules for an object type.

    Singular and common aliases ("contact", "deals", ...) are accepted;
    unknown object types have no defaults.
    """
    canonical = canonical_object_type(object_type)
    factory = _DEFAULTS.get(canonical) if canonical else None
    return factory() if factory else []
