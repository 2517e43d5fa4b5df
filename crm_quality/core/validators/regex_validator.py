"""
FormatValidator - validates field values against a regular expression pattern.
"""

import re
from re import Pattern
from typing import Any

from crm_quality.core.values import is_empty_value

from .base_validator import BaseValidator, ConfigurationError


class FormatValidator(BaseValidator):
    """
    Validates that a present field value matches a regular expression.

    Absent, null and empty values always pass: format is opt-in validation,
    presence is the job of the required rule. The pattern is searched, so
    anchor it with ^...$ to match the whole value.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - flags: Optional regex flags (re.IGNORECASE, or names such as "IGNORECASE" from config files)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ConfigurationError("format rule requires 'pattern' parameter")

        flags = self._parse_flags(self.parameters.get("flags", 0))

        if isinstance(pattern, Pattern):
            if flags:
                raise ConfigurationError("format rule cannot combine 'flags' with a compiled pattern")
            self.pattern: Pattern = pattern
        elif isinstance(pattern, str):
            try:
                self.pattern = re.compile(pattern, flags)
            except re.error as e:
                raise ConfigurationError(f"Invalid regex pattern {pattern!r}: {e}") from e
        else:
            raise ConfigurationError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")

    @staticmethod
    def _parse_flags(flags: Any) -> int:
        if isinstance(flags, bool):
            raise ConfigurationError(f"Regex flags must be flag names or integers, got {flags!r}")
        if isinstance(flags, int):
            return flags

        names = [flags] if isinstance(flags, str) else list(flags or [])
        parsed = 0
        for name in names:
            try:
                parsed |= re.RegexFlag[str(name).upper()]
            except KeyError:
                raise ConfigurationError(f"Unknown regex flag: {name}") from None
        return parsed

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if is_empty_value(value):
            return

        value_str = value if isinstance(value, str) else str(value)

        if not self.pattern.search(value_str):
            self.fail(f"Value '{value_str}' does not match pattern '{self.pattern.pattern}'")

    @property
    def rule_kind(self) -> str:
        return "format"
