"""
Generic record reader for CSV and JSON files.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from .csv_reader import CSVReader


class FileReader:
    """
    Generic record reader supporting CSV and JSON.

    JSON input is either an array of objects or an object with a "records" array.
    """

    SUPPORTED_FORMATS = ("csv", "json")

    def __init__(self):
        self.csv_reader = CSVReader()

    def read(self, file_path: str | Path, file_format: str | None = None, **options) -> List[Dict[str, Any]]:
        """
        Read a file into records.

        Args:
            file_path: Path to file
            file_format: "csv" or "json" (inferred from the suffix when omitted)
            **options: CSV options (delimiter, encoding)

        Returns:
            Records in file order

        Raises:
            ValueError: If the format is unsupported or the JSON layout is not a record list
        """
        file_format = (file_format or self.infer_format(file_path)).lower()

        if file_format == "csv":
            reader = CSVReader(**options) if options else self.csv_reader
            return reader.read(file_path)
        elif file_format == "json":
            return self._read_json(file_path)
        else:
            raise ValueError(f"Unsupported file format: {file_format}")

    @staticmethod
    def infer_format(file_path: str | Path) -> str:
        return Path(file_path).suffix.lstrip(".").lower()

    @staticmethod
    def _read_json(file_path: str | Path) -> List[Dict[str, Any]]:
        with open(file_path, encoding="utf-8") as handle:
            data = json.load(handle)

        if isinstance(data, dict):
            data = data.get("records")

        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array of records in {file_path}")

        for position, record in enumerate(data):
            if not isinstance(record, dict):
                raise ValueError(f"Record {position} in {file_path} is not an object")

        return data
