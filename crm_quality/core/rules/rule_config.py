"""
Rule configuration management.

Loads validation rules from YAML or JSON files and provides a builder
for assembling rule sets in code.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import yaml
from pydantic import ValidationError as PydanticValidationError

from crm_quality.core.errors import ConfigurationError
from crm_quality.core.models import RULE_KINDS, ValidationRule

Predicate = Callable[[Any, Dict[str, Any]], bool]


class RuleConfigLoader:
    """
    Loads validation rules from YAML or JSON configuration files.

    Field-keyed format (YAML or JSON):
    ```yaml
    rules:
      email:
        - type: format
          params:
            pattern: "^[^\\s@]+@[^\\s@]+\\.[^\\s@]+$"
          message: Invalid email format
        - type: unique
          message: Email address must be unique

      lastName:
        - type: required
          message: Last name is required
    ```

    List format (YAML or JSON):
    ```json
    {"rules": [{"field": "amount", "rule_kind": "range", "params": {"min": 0}, "message": "..."}]}
    ```

    Custom rules name their predicate (`params: {predicate: has_contact_channel}`);
    the name is resolved against the predicates passed to the loader.
    """

    SUPPORTED_SUFFIXES = (".yaml", ".yml", ".json")

    def __init__(self, config_path: str | Path, predicates: Dict[str, Predicate] | None = None):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML or JSON configuration file
            predicates: Named predicates available to custom rules

        Raises:
            ConfigurationError: If the file is missing or has an unsupported suffix
        """
        self.config_path = Path(config_path)
        self.predicates = dict(predicates or {})

        if not self.config_path.exists():
            raise ConfigurationError(f"Rule configuration file not found: {config_path}")

        if self.config_path.suffix.lower() not in self.SUPPORTED_SUFFIXES:
            raise ConfigurationError(
                f"Unsupported rule file type '{self.config_path.suffix}', expected one of {self.SUPPORTED_SUFFIXES}"
            )

    def load_rules(self) -> List[ValidationRule]:
        """
        Load and parse validation rules.

        Returns:
            List of ValidationRule suitable for RuleEngine

        Raises:
            ConfigurationError: If the file cannot be parsed or a rule is invalid
        """
        with open(self.config_path) as f:
            try:
                if self.config_path.suffix.lower() == ".json":
                    config = json.load(f)
                else:
                    config = yaml.safe_load(f)
            except (json.JSONDecodeError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Cannot parse rule file {self.config_path}: {e}") from e

        if not isinstance(config, dict) or "rules" not in config:
            raise ConfigurationError("Configuration file must contain 'rules' section")

        field_rules = config["rules"]

        if isinstance(field_rules, list):
            return [self._parse_rule_object(rule_def) for rule_def in field_rules]

        if not isinstance(field_rules, dict):
            raise ConfigurationError("'rules' must be a mapping of field names or a list of rules")

        rules = []
        for field_name, field_rule_list in field_rules.items():
            if not isinstance(field_rule_list, list):
                raise ConfigurationError(f"Rules for field '{field_name}' must be a list")

            for rule_def in field_rule_list:
                rules.append(self._parse_field_rule(field_name, rule_def))

        return rules

    def _parse_field_rule(self, field_name: str, rule_def: Any) -> ValidationRule:
        if not isinstance(rule_def, dict) or "type" not in rule_def:
            raise ConfigurationError(f"Rule for field '{field_name}' is missing 'type'")

        return self._make_rule({
            "field": field_name,
            "rule_kind": rule_def["type"],
            "params": rule_def.get("params", rule_def.get("parameters")),
            "message": rule_def.get("message", ""),
            "name": rule_def.get("name"),
            "enabled": rule_def.get("enabled", True),
        })

    def _parse_rule_object(self, rule_def: Any) -> ValidationRule:
        if not isinstance(rule_def, dict):
            raise ConfigurationError(f"Rule definition must be a mapping, got {rule_def!r}")
        return self._make_rule(dict(rule_def))

    def _make_rule(self, definition: Dict[str, Any]) -> ValidationRule:
        if definition.get("rule_kind") not in RULE_KINDS:
            raise ConfigurationError(
                f"Unknown rule kind '{definition.get('rule_kind')}' for field '{definition.get('field')}'"
            )

        if definition["rule_kind"] == "custom":
            definition["params"] = self._resolve_predicate(definition)

        try:
            return ValidationRule(**definition)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid rule for field '{definition.get('field')}': {e}") from e

    def _resolve_predicate(self, definition: Dict[str, Any]) -> Dict[str, Any]:
        params = dict(definition.get("params") or {})
        predicate = params.get("predicate")

        if isinstance(predicate, str):
            if predicate not in self.predicates:
                raise ConfigurationError(
                    f"Unknown predicate '{predicate}' for custom rule on field '{definition.get('field')}'"
                )
            params["predicate"] = self.predicates[predicate]

        return params


class RuleConfigBuilder:
    """
    Programmatically build rule sets (for dynamic rules or tests).
    """

    def __init__(self):
        self.rules: List[ValidationRule] = []

    def _add(self, field_name: str, rule_kind: str, params: Dict[str, Any] | None, message: str) -> "RuleConfigBuilder":
        self.rules.append(ValidationRule(field=field_name, rule_kind=rule_kind, params=params, message=message))
        return self

    def add_required(self, field_name: str, message: str = "") -> "RuleConfigBuilder":
        return self._add(field_name, "required", None, message or f"{field_name} is required")

    def add_format(self, field_name: str, pattern: Any, message: str = "") -> "RuleConfigBuilder":
        return self._add(field_name, "format", {"pattern": pattern}, message or f"{field_name} format is invalid")

    def add_length(
        self,
        field_name: str,
        min_length: int | None = None,
        max_length: int | None = None,
        message: str = "",
    ) -> "RuleConfigBuilder":
        params = {}
        if min_length is not None:
            params["min"] = min_length
        if max_length is not None:
            params["max"] = max_length
        return self._add(field_name, "length", params, message or f"{field_name} length is out of bounds")

    def add_range(
        self,
        field_name: str,
        min_value: float | None = None,
        max_value: float | None = None,
        message: str = "",
    ) -> "RuleConfigBuilder":
        params = {}
        if min_value is not None:
            params["min"] = min_value
        if max_value is not None:
            params["max"] = max_value
        return self._add(field_name, "range", params, message or f"{field_name} is out of range")

    def add_unique(self, field_name: str, message: str = "") -> "RuleConfigBuilder":
        return self._add(field_name, "unique", None, message or f"{field_name} must be unique")

    def add_custom(self, field_name: str, predicate: Predicate, message: str = "") -> "RuleConfigBuilder":
        return self._add(field_name, "custom", {"predicate": predicate}, message or f"{field_name} failed custom check")

    def build(self) -> List[ValidationRule]:
        """Build and return the rule set."""
        return list(self.rules)
