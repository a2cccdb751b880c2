"""
EDA recording loader for two-column CSV files.

Column 1 holds time in seconds, column 2 skin conductance in microsiemens.
Any further columns are ignored. Leading rows that do not start with a number
are treated as a header. Empty or NaN-like value cells become missing samples.
"""

import csv
import logging

from pathlib import Path

import numpy as np

from adaptive_eda.constants import MISSING_VALUE_TOKENS, TIME_COLUMN, VALUE_COLUMN

logger = logging.getLogger(__name__)


class EDAFileError(Exception):
    """Error reading an EDA recording."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


def _parse_float(cell: str) -> float | None:
    try:
        return float(cell)
    except ValueError:
        return None


def load_eda_csv(path: str | Path) -> tuple[np.ndarray, np.ndarray]:
    """
    Load time and EDA columns from a CSV file.

    Args:
        path: Path to the CSV file

    Returns:
        Tuple of (time_seconds, eda_us) float arrays

    Raises:
        EDAFileError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise EDAFileError(f"EDA file not found: {path}", path)

    times: list[float] = []
    values: list[float] = []
    header_rows = 0

    with open(path, newline="", encoding="utf-8-sig") as f:
        for line_number, row in enumerate(csv.reader(f), start=1):
            if not row or all(not cell.strip() for cell in row):
                continue

            if len(row) <= VALUE_COLUMN:
                raise EDAFileError(
                    f"{path}:{line_number}: expected at least 2 columns, got {len(row)}",
                    path,
                )

            time_cell = row[TIME_COLUMN].strip()
            value_cell = row[VALUE_COLUMN].strip()
            time_value = _parse_float(time_cell)

            if time_value is None:
                if not times:
                    header_rows += 1
                    continue
                raise EDAFileError(
                    f"{path}:{line_number}: non-numeric time {time_cell!r}", path
                )

            if value_cell.lower() in MISSING_VALUE_TOKENS:
                eda_value = float("nan")
            else:
                parsed = _parse_float(value_cell)
                if parsed is None:
                    raise EDAFileError(
                        f"{path}:{line_number}: non-numeric EDA value {value_cell!r}",
                        path,
                    )
                eda_value = parsed

            times.append(time_value)
            values.append(eda_value)

    if not times:
        raise EDAFileError(f"No data rows in {path}", path)

    logger.info(
        f"Loaded {len(times)} samples from {path.name}"
        + (f" (skipped {header_rows} header rows)" if header_rows else "")
    )
    return np.array(times, dtype=float), np.array(values, dtype=float)
