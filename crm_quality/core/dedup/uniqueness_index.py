"""
UniquenessIndex - per-field sets of normalized values seen so far.
"""

from typing import Any, Dict, Set


class UniquenessIndex:
    """
    Maps field name to the set of lower-cased values already seen.

    Owned by exactly one engine or tracker. The rule engine clears its index
    at the start of every batch; the deduplication tracker keeps its index for
    the lifetime of a job.
    """

    def __init__(self):
        self._seen: Dict[str, Set[str]] = {}

    @staticmethod
    def normalize(value: Any) -> str:
        return str(value).lower()

    def contains(self, field_name: str, value: Any) -> bool:
        return self.normalize(value) in self._seen.get(field_name, set())

    def check_and_add(self, field_name: str, value: Any) -> bool:
        """
        Record a value for a field.

        Returns:
            True if the normalized value was already present (a repeat), False on first sight
        """
        values = self._seen.setdefault(field_name, set())
        normalized = self.normalize(value)
        if normalized in values:
            return True
        values.add(normalized)
        return False

    def clear(self) -> None:
        self._seen.clear()

    def fields(self) -> list[str]:
        return list(self._seen)

    def __len__(self) -> int:
        return sum(len(values) for values in self._seen.values())

    def __repr__(self) -> str:
        return f"UniquenessIndex(fields={self.fields()}, values={len(self)})"
