"""
Helpers for inspecting raw record values.
"""

import json
from typing import Any


def is_empty_value(value: Any) -> bool:
    """Missing, None and the empty string count as empty. Whitespace does not."""
    return value is None or value == ""


def render_raw_value(value: Any) -> str | None:
    """Render a record value for an issue: strings as-is, None as None, anything else as JSON."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)
