"""
Detection result export.

Provides functionality to export SCR results in JSON and CSV formats.
"""

import csv
import json

from pathlib import Path
from typing import TextIO

from adaptive_eda.analysis.types import SCRResult
from adaptive_eda.constants import SCR_RESULT_COLUMNS


def result_rows(result: SCRResult) -> list[dict[str, float | None]]:
    """
    Flatten a result into one row per SCR.

    Args:
        result: Detection result

    Returns:
        Rows keyed by the result column names; undefined half-recovery
        entries are None
    """
    return [
        {
            "scr_onset_time": event.onset_time,
            "scr_onset_value": event.onset_value,
            "scr_peak_time": event.peak_time,
            "scr_peak_value": event.peak_value,
            "scr_amplitude": event.amplitude,
            "scr_half_recovery_time": event.half_recovery_time,
            "scr_half_recovery_value": event.half_recovery_value,
        }
        for event in result.events
    ]


def result_summary(result: SCRResult) -> dict[str, object]:
    """
    Build the JSON document for a result.

    Args:
        result: Detection result

    Returns:
        Dictionary with the run parameters, per-SCR columns, SCR count and
        SCL average (None if undefined)
    """
    rows = result_rows(result)
    return {
        "rap_threshold_percent": result.rap_threshold_percent,
        "sampling_rate": result.sampling_rate,
        "config": result.config.model_dump(),
        **{column: [row[column] for row in rows] for column in SCR_RESULT_COLUMNS},
        "scr_total_count": result.scr_total_count,
        "scl_average": result.scl_average,
        "rejections": {
            reason.value: count
            for reason, count in result.rejection_counts().items()
        },
    }


def export_result_json(result: SCRResult, output_path: Path) -> None:
    """
    Export detection result as JSON.

    Args:
        result: Detection result to export
        output_path: Path to output JSON file
    """
    with open(output_path, "w") as f:
        json.dump(result_summary(result), f, indent=2, allow_nan=False)


def export_result_csv(result: SCRResult, output_path: Path) -> None:
    """
    Export detected SCRs as CSV, one row per SCR.

    Undefined half-recovery values are written as empty cells.

    Args:
        result: Detection result to export
        output_path: Path to output CSV file
    """
    with open(output_path, "w", newline="") as f:
        write_result_csv(result, f)


def write_result_csv(result: SCRResult, stream: TextIO) -> None:
    """Write detected SCRs as CSV to an open text stream."""
    writer = csv.DictWriter(stream, fieldnames=SCR_RESULT_COLUMNS)
    writer.writeheader()

    for row in result_rows(result):
        writer.writerow(
            {column: "" if value is None else value for column, value in row.items()}
        )
