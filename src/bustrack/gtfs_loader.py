"""GTFS static table loader for the hub's schedule data."""

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Union

from .exceptions import InvalidTableName, SourceUnavailable

logger = logging.getLogger(__name__)

GTFS_TABLES = (
    "routes",
    "trips",
    "stop_times",
    "calendar",
    "calendar_dates",
    "stops",
)


class GTFSLoader:
    """Reads GTFS static tables from a directory of .txt files."""

    def __init__(self, static_dir: Union[str, Path]):
        """
        Initialize the loader.

        Args:
            static_dir: Directory holding routes.txt, trips.txt, etc.
        """
        self.static_dir = Path(static_dir)

    def path_for(self, table_name: str) -> Path:
        """Path of a table's source file."""
        if table_name not in GTFS_TABLES:
            raise InvalidTableName(f"Invalid table name {table_name!r}")
        return self.static_dir / f"{table_name}.txt"

    def read(self, table_name: str) -> List[Dict[str, str]]:
        """
        Read and parse one table.

        Raises:
            InvalidTableName: If table_name is not a supported GTFS table.
            SourceUnavailable: If the file is missing, not UTF-8 or not valid CSV.
        """
        path = self.path_for(table_name)
        try:
            with open(path, "r", encoding="utf-8-sig") as f:
                csv_content = f.read()
            return self._parse(csv_content)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise SourceUnavailable(f"Cannot read {path}: {e}") from e

    def load(self, table_name: str) -> List[Dict[str, str]]:
        """
        Load a table, degrading to an empty table if its source is unavailable.

        Values are left as text; typed records are built by the caller.
        """
        try:
            records = self.read(table_name)
        except SourceUnavailable as e:
            logger.error(f"Failed to load {table_name}: {e}")
            return []
        logger.debug(f"Loaded {len(records)} rows from {table_name}")
        return records

    @staticmethod
    def _parse(csv_content: str) -> List[Dict[str, str]]:
        """Parse header-delimited CSV content into trimmed string records."""
        reader = csv.DictReader(io.StringIO(csv_content), skipinitialspace=True)
        records = []
        for row in reader:
            records.append(
                {
                    key.strip(): (value or "").strip()
                    for key, value in row.items()
                    if key is not None
                }
            )
        return records
