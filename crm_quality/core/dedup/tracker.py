"""
DeduplicationTracker - job-wide duplicate detection over configured key fields.
"""

from typing import Any, Dict, Sequence

from crm_quality.core.errors import ConfigurationError
from crm_quality.core.models import ValidationIssue
from crm_quality.core.values import is_empty_value, render_raw_value

from .uniqueness_index import UniquenessIndex

DEFAULT_DEDUP_KEYS = ("email",)

DUPLICATE_SUGGESTION = "This record appears to be a duplicate. Consider merging or removing duplicates."


class DeduplicationTracker:
    """
    Flags records whose key value was already seen earlier in the same job.

    Independent of the rule engine's batch-scoped "unique" rule: this index is
    never reset between batches. Only the first key field with a non-empty
    value on a record is checked.

    Records must be fed in order; the first occurrence of a value is never flagged.
    """

    def __init__(self, key_fields: Sequence[str] = DEFAULT_DEDUP_KEYS):
        """
        Initialize the tracker.

        Args:
            key_fields: Dedup key fields, in priority order

        Raises:
            ConfigurationError: If no key field is given
        """
        self.key_fields = tuple(k for k in key_fields if k)
        if not self.key_fields:
            raise ConfigurationError("DeduplicationTracker requires at least one key field")

        self.index = UniquenessIndex()
        self.duplicate_count = 0

    def check(self, record: Dict[str, Any], record_index: int) -> ValidationIssue | None:
        """
        Check one record against everything seen so far in the job.

        Args:
            record: Field name -> value mapping
            record_index: Index to report on the issue

        Returns:
            A "duplicate" issue for repeats, else None
        """
        for key_field in self.key_fields:
            value = record.get(key_field)
            if is_empty_value(value):
                continue

            if not self.index.check_and_add(key_field, value):
                return None

            self.duplicate_count += 1
            return ValidationIssue(
                record_index=record_index,
                field_name=key_field,
                error_kind="duplicate",
                message=f"Duplicate {key_field} found",
                raw_value=render_raw_value(value),
                suggestion=DUPLICATE_SUGGESTION,
            )
        return None

    def __repr__(self) -> str:
        return f"DeduplicationTracker(keys={self.key_fields}, duplicates={self.duplicate_count})"
