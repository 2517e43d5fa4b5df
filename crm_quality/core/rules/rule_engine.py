"""
Rule engine for orchestrating validation rules on CRM records.

The rule engine builds validators from rule definitions once, applies them to
every record in order and collects one issue per failing rule.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from crm_quality.core.dedup import UniquenessIndex
from crm_quality.core.errors import ConfigurationError, TransformationError
from crm_quality.core.models import ValidationIssue, ValidationResult, ValidationRule
from crm_quality.core.validators import (
    BaseValidator,
    CustomValidator,
    FormatValidator,
    LengthValidator,
    RangeValidator,
    RequiredFieldValidator,
    UniqueValidator,
    ValidationFailure,
    suggest_remediation,
)
from crm_quality.core.values import render_raw_value
from crm_quality.observability.logger import get_logger

from .defaults import default_rules_for

logger = get_logger(__name__)

Transform = Callable[[Any], Any]


class RuleEngine:
    """
    Orchestrates validation rules on records.

    Owns a batch-scoped uniqueness index for "unique" rules. The index is
    cleared at the start of every validate_records() call, so repeated calls
    on the same data give identical results. Records of one batch must be
    validated in order.
    """

    VALIDATOR_REGISTRY = {
        "required": RequiredFieldValidator,
        "format": FormatValidator,
        "length": LengthValidator,
        "range": RangeValidator,
        "unique": UniqueValidator,
        "custom": CustomValidator,
    }

    def __init__(
        self,
        rules: Sequence[ValidationRule | Dict[str, Any]],
        transforms: Dict[str, Transform] | None = None,
    ):
        """
        Initialize the rule engine.

        Args:
            rules: Rule definitions (ValidationRule instances or equivalent dicts)
            transforms: Optional field -> callable applied to the value before rules run

        Raises:
            ConfigurationError: If any rule or transform is malformed
        """
        self.rules: List[ValidationRule] = [self._coerce_rule(rule) for rule in rules]
        self.uniqueness_index = UniquenessIndex()
        self.validators: List[Tuple[ValidationRule, BaseValidator]] = []
        self._build_validators()

        self.transforms: Dict[str, Transform] = dict(transforms or {})
        for field_name, transform in self.transforms.items():
            if not callable(transform):
                raise ConfigurationError(f"Transform for field '{field_name}' must be callable")

    @classmethod
    def for_object_type(
        cls,
        object_type: str,
        extra_rules: Sequence[ValidationRule | Dict[str, Any]] = (),
        transforms: Dict[str, Transform] | None = None,
    ) -> "RuleEngine":
        """Build an engine from the default rules of an object type plus extra rules."""
        return cls([*default_rules_for(object_type), *extra_rules], transforms=transforms)

    @staticmethod
    def _coerce_rule(rule: ValidationRule | Dict[str, Any]) -> ValidationRule:
        if isinstance(rule, ValidationRule):
            return rule
        try:
            return ValidationRule(**rule)
        except (PydanticValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid rule definition {rule!r}: {e}") from e

    def _build_validators(self) -> None:
        """Build validator instances from rule definitions."""
        for rule in self.rules:
            if not rule.enabled:
                continue

            validator_class = self.VALIDATOR_REGISTRY.get(rule.rule_kind)
            if not validator_class:
                raise ConfigurationError(f"Unknown rule kind: {rule.rule_kind}")

            try:
                if validator_class is UniqueValidator:
                    validator = UniqueValidator(rule.field, rule.params, index=self.uniqueness_index)
                else:
                    validator = validator_class(rule.field, rule.params)
            except ConfigurationError as e:
                raise ConfigurationError(f"Failed to create validator for rule '{rule.rule_name}': {e}") from e

            self.validators.append((rule, validator))

    def reset_uniqueness(self) -> None:
        """Forget every value seen by "unique" rules."""
        self.uniqueness_index.clear()

    def apply_transforms(
        self,
        record: Mapping[str, Any],
        index: int,
    ) -> Tuple[Dict[str, Any], List[ValidationIssue]]:
        """
        Apply configured field transforms to a copy of the record.

        A transform that raises leaves the original value in place and yields
        a "transformation_error" issue.

        Returns:
            (transformed record copy, transformation issues)
        """
        transformed = dict(record)
        issues: List[ValidationIssue] = []

        for field_name, transform in self.transforms.items():
            if field_name not in transformed:
                continue
            value = transformed[field_name]
            try:
                transformed[field_name] = transform(value)
            except Exception as e:
                error = TransformationError(field_name, e)
                logger.debug(str(error), extra={"record_index": index})
                issues.append(ValidationIssue(
                    record_index=index,
                    field_name=field_name,
                    error_kind="transformation_error",
                    message=str(error),
                    raw_value=render_raw_value(value),
                ))

        return transformed, issues

    def validate_record(self, record: Mapping[str, Any], index: int) -> List[ValidationIssue]:
        """
        Validate one record against every enabled rule.

        Args:
            record: Field name -> value mapping (anything else is treated as an empty record)
            index: Record index reported on each issue

        Returns:
            One issue per failing rule, in rule order (transformation issues first)
        """
        _, issues = self.evaluate_record(record, index)
        return issues

    def evaluate_record(
        self,
        record: Mapping[str, Any],
        index: int,
    ) -> Tuple[Dict[str, Any], List[ValidationIssue]]:
        """
        Transform and validate one record.

        Returns:
            (transformed record copy, issues)
        """
        if not isinstance(record, Mapping):
            record = {}

        payload, issues = self.apply_transforms(record, index)

        for rule, validator in self.validators:
            value = payload.get(rule.field)
            try:
                validator.validate(value, payload)
            except ValidationFailure as failure:
                issues.append(ValidationIssue(
                    record_index=index,
                    field_name=rule.field,
                    error_kind=rule.rule_kind,
                    message=rule.message or failure.message,
                    raw_value=render_raw_value(value),
                    suggestion=suggest_remediation(rule.field, value, rule.rule_kind),
                ))

        return payload, issues

    def validate_records(self, records: Sequence[Mapping[str, Any]]) -> ValidationResult:
        """
        Validate a batch of records in order.

        Clears the uniqueness index first, so uniqueness is batch-scoped.

        Returns:
            ValidationResult with every issue; is_valid iff there are none
        """
        self.reset_uniqueness()

        issues: List[ValidationIssue] = []
        for index, record in enumerate(records):
            issues.extend(self.validate_record(record, index))

        logger.debug(
            f"Validated {len(records)} records with {len(issues)} issues",
            extra={"record_count": len(records), "issue_count": len(issues)},
        )
        return ValidationResult(is_valid=len(issues) == 0, errors=issues)

    def get_rule_summary(self) -> Dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts by kind and the transformed fields
        """
        return {
            "total_rules": len(self.validators),
            "rules_by_kind": self._count_by_kind(),
            "transformed_fields": sorted(self.transforms),
        }

    def _count_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for rule, _ in self.validators:
            counts[rule.rule_kind] = counts.get(rule.rule_kind, 0) + 1
        return counts
