"""
CSV reader producing one record per data row.
"""

import csv
from pathlib import Path
from typing import Any, Dict, List


class CSVReader:
    """
    Reads CSV files into records keyed by the header row.

    Cells are kept as strings; empty cells become "" so presence rules see them.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8"):
        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, file_path: str | Path) -> List[Dict[str, Any]]:
        """
        Read a CSV file.

        Args:
            file_path: Path to CSV file with a header row

        Returns:
            Records in file order
        """
        with open(file_path, newline="", encoding=self.encoding) as handle:
            reader = csv.DictReader(handle, delimiter=self.delimiter)
            return [
                {key: value if value is not None else "" for key, value in row.items() if key is not None}
                for row in reader
            ]

    def read_header(self, file_path: str | Path) -> List[str]:
        """Return the header row's field names."""
        with open(file_path, newline="", encoding=self.encoding) as handle:
            reader = csv.reader(handle, delimiter=self.delimiter)
            return next(reader, [])
