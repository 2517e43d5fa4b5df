"""
Field lexicon: canonical CRM field concepts with their known name variants.

Each concept carries a "required" flag and a category. Object types select
which categories take part in pattern matching for that type.
"""

import re
from typing import Iterable, Tuple

from pydantic import BaseModel

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def normalize_field_name(name: str) -> str:
    """Lower-case a field name and strip every non-alphanumeric character."""
    return _NON_ALPHANUMERIC.sub("", name.lower())


class FieldConcept(BaseModel):
    """
    A canonical field concept.

    Attributes:
        name: Canonical concept name ("email", "first_name", ...)
        variations: Known field name variants, in preference order
        required: Whether destinations usually require this field
        category: contact, account, address, opportunity or general
    """

    name: str
    variations: Tuple[str, ...]
    required: bool = False
    category: str = "general"

    class Config:
        frozen = True

    @property
    def normalized_variations(self) -> Tuple[str, ...]:
        return tuple(normalize_field_name(v) for v in self.variations)

    def has_variant(self, field_name: str) -> bool:
        """Case-insensitive membership of a field name in the variant list."""
        lowered = field_name.lower()
        return any(v.lower() == lowered for v in self.variations)

    def has_normalized_variant(self, field_name: str) -> bool:
        return normalize_field_name(field_name) in self.normalized_variations


def _concept(name: str, variations: Iterable[str], required: bool, category: str) -> FieldConcept:
    return FieldConcept(name=name, variations=tuple(variations), required=required, category=category)


FIELD_LEXICON: Tuple[FieldConcept, ...] = (
    # Contact fields
    _concept("email", [
        "email", "email_address", "emailaddress", "contact_email", "primary_email", "work_email",
        "business_email", "personal_email", "e_mail", "mail",
    ], True, "contact"),
    _concept("name", [
        "name", "full_name", "fullname", "contact_name", "complete_name", "display_name",
    ], True, "contact"),
    _concept("first_name", [
        "first_name", "firstname", "given_name", "givenname", "forename", "first", "contact_firstname",
    ], False, "contact"),
    _concept("last_name", [
        "last_name", "lastname", "surname", "family_name", "familyname", "contact_lastname",
    ], False, "contact"),
    _concept("phone", [
        "phone", "phone_number", "phonenumber", "telephone", "mobile", "cell", "contact_phone",
        "work_phone", "business_phone", "mobile_phone", "primary_phone", "phone_work", "phone_mobile",
    ], False, "contact"),
    _concept("company", [
        "company", "company_name", "companyname", "organization", "organisation", "business",
        "employer", "firm", "company_id",
    ], False, "contact"),
    _concept("title", [
        "title", "job_title", "jobtitle", "position", "role", "job_role", "job_position",
        "designation", "job_function",
    ], False, "contact"),

    # Account fields
    _concept("account_name", [
        "account_name", "accountname", "company_name", "companyname", "business_name",
        "organization_name", "org_name", "account", "account_id", "client_name",
    ], True, "account"),
    _concept("industry", [
        "industry", "sector", "business_type", "company_industry", "account_industry",
        "business_sector", "industry_type", "market_segment",
    ], False, "account"),
    _concept("website", [
        "website", "web_site", "site", "url", "web", "company_website", "web_address", "homepage",
        "domain", "web_url",
    ], False, "account"),
    _concept("employees", [
        "employees", "employee_count", "num_employees", "number_of_employees", "company_size",
        "company_employees", "staff_count", "headcount", "size", "total_employees",
    ], False, "account"),
    _concept("revenue", [
        "revenue", "annual_revenue", "yearly_revenue", "company_revenue", "account_revenue",
        "total_revenue", "turnover", "sales_revenue", "income",
    ], False, "account"),

    # Address fields
    _concept("address", [
        "address", "street_address", "streetaddress", "mailing_address", "primary_address",
        "billing_address", "shipping_address", "street", "address_line_1", "address1",
    ], False, "address"),
    _concept("city", [
        "city", "town", "municipality", "locality", "city_name", "billing_city", "shipping_city",
        "address_city",
    ], False, "address"),
    _concept("state", [
        "state", "province", "region", "county", "territory", "billing_state", "shipping_state",
        "address_state", "state_province",
    ], False, "address"),
    _concept("postal_code", [
        "postal_code", "postalcode", "zip", "zip_code", "zipcode", "billing_zip", "shipping_zip",
        "address_zip", "pincode", "postcode",
    ], False, "address"),
    _concept("country", [
        "country", "nation", "billing_country", "shipping_country", "address_country",
        "country_code", "country_name",
    ], False, "address"),

    # Opportunity fields
    _concept("amount", [
        "amount", "deal_amount", "opportunity_amount", "value", "deal_value", "opportunity_value",
        "price", "contract_value", "total_amount",
    ], False, "opportunity"),
    _concept("stage", [
        "stage", "deal_stage", "opportunity_stage", "sales_stage", "pipeline_stage", "status",
        "deal_status", "phase", "step",
    ], False, "opportunity"),
    _concept("close_date", [
        "close_date", "closedate", "expected_close_date", "close", "closing_date",
        "completion_date", "end_date", "finish_date", "deal_close_date",
    ], False, "opportunity"),
    _concept("probability", [
        "probability", "win_probability", "likelihood", "confidence", "chance", "win_rate",
        "success_probability", "forecast", "win_likelihood",
    ], False, "opportunity"),

    # General fields
    _concept("description", [
        "description", "notes", "details", "comments", "info", "summary", "overview", "about",
        "remarks", "text",
    ], False, "general"),
    _concept("owner", [
        "owner", "owner_id", "owner_name", "assigned_to", "assignee", "responsible", "sales_rep",
        "rep", "agent", "account_manager",
    ], False, "general"),
    _concept("date_created", [
        "date_created", "created_date", "creation_date", "date_added", "created_on", "created_at",
        "create_date", "entry_date",
    ], False, "general"),
    _concept("date_modified", [
        "date_modified", "modified_date", "last_modified", "updated_date", "updated_on",
        "updated_at", "last_update", "edit_date",
    ], False, "general"),
)

# Categories taking part in pattern matching, per registered object type
OBJECT_TYPE_CATEGORIES: dict[str, Tuple[str, ...]] = {
    "contacts": ("contact", "address", "general"),
    "accounts": ("account", "address", "general"),
    "opportunities": ("opportunity", "general"),
}

OBJECT_TYPE_ALIASES: dict[str, str] = {
    "contact": "contacts",
    "leads": "contacts",
    "lead": "contacts",
    "people": "contacts",
    "account": "accounts",
    "companies": "accounts",
    "company": "accounts",
    "organizations": "accounts",
    "opportunity": "opportunities",
    "deals": "opportunities",
    "deal": "opportunities",
}


def canonical_object_type(object_type: str | None) -> str | None:
    """Resolve an object type tag (or alias) to a registered type, else None."""
    if not object_type:
        return None
    key = object_type.strip().lower()
    key = OBJECT_TYPE_ALIASES.get(key, key)
    return key if key in OBJECT_TYPE_CATEGORIES else None


def concepts_for_object_type(object_type: str | None) -> Tuple[FieldConcept, ...] | None:
    """
    Return the pattern set registered for an object type.

    Returns None when the object type has no registered pattern set.
    """
    canonical = canonical_object_type(object_type)
    if canonical is None:
        return None
    categories = OBJECT_TYPE_CATEGORIES[canonical]
    return tuple(c for c in FIELD_LEXICON if c.category in categories)


def find_concept(field_name: str) -> FieldConcept | None:
    """First lexicon concept listing the field name as a variant (case-insensitive)."""
    for concept in FIELD_LEXICON:
        if concept.has_variant(field_name):
            return concept
    return None


def find_concept_normalized(field_name: str) -> FieldConcept | None:
    """First lexicon concept whose normalized variants contain the normalized field name."""
    for concept in FIELD_LEXICON:
        if concept.has_normalized_variant(field_name):
            return concept
    return None


def is_required_field(field_name: str) -> bool:
    concept = find_concept(field_name)
    return concept.required if concept else False
