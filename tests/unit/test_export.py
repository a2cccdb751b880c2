"""
Tests for JSON and CSV result export.
"""

import csv
import io
import json

import pytest

from adaptive_eda import run
from adaptive_eda.constants import SCR_RESULT_COLUMNS
from adaptive_eda.reporting.export import (
    export_result_csv,
    export_result_json,
    result_rows,
    result_summary,
    write_result_csv,
)
from tests.helpers.synthetic_data import generate_single_scr


@pytest.fixture
def result(single_scr):
    timestamps, values, _ = single_scr
    return run(timestamps, values, 1.9)


@pytest.fixture
def unrecovered_result():
    timestamps, values, peak_index = generate_single_scr()
    values[peak_index + 1 :] = 1.45
    return run(timestamps, values, 1.9)


class TestResultSummary:
    def test_columns(self, result):
        summary = result_summary(result)

        for column in SCR_RESULT_COLUMNS:
            assert len(summary[column]) == 1
        assert summary["scr_total_count"] == 1
        assert summary["scl_average"] == pytest.approx(result.scl_average)
        assert summary["rap_threshold_percent"] == 1.9
        assert summary["config"]["minimum_prominence"] == 0.01

    def test_rejections_keyed_by_reason(self, result):
        rejections = result_summary(result)["rejections"]

        assert "below_rap_threshold" in rejections
        assert all(count == 0 for count in rejections.values())

    def test_rows_use_none_for_missing_half_recovery(self, unrecovered_result):
        (row,) = result_rows(unrecovered_result)

        assert row["scr_half_recovery_time"] is None
        assert row["scr_half_recovery_value"] is None
        assert row["scr_peak_value"] == pytest.approx(1.5)


class TestExportJson:
    def test_round_trip(self, result, tmp_path):
        path = tmp_path / "result.json"

        export_result_json(result, path)

        data = json.loads(path.read_text())
        assert data["scr_total_count"] == 1
        assert data["scr_onset_time"] == [pytest.approx(9.9)]

    def test_undefined_values_are_null(self, unrecovered_result, tmp_path):
        path = tmp_path / "result.json"

        export_result_json(unrecovered_result, path)

        data = json.loads(path.read_text())
        assert data["scr_half_recovery_time"] == [None]


class TestExportCsv:
    def test_header_and_rows(self, result, tmp_path):
        path = tmp_path / "result.csv"

        export_result_csv(result, path)

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 1
        assert list(rows[0]) == SCR_RESULT_COLUMNS
        assert float(rows[0]["scr_amplitude"]) == pytest.approx(0.5)

    def test_empty_cells_for_missing_half_recovery(self, unrecovered_result):
        stream = io.StringIO()

        write_result_csv(unrecovered_result, stream)

        rows = list(csv.DictReader(io.StringIO(stream.getvalue())))
        assert rows[0]["scr_half_recovery_time"] == ""

    def test_header_only_without_scrs(self, result):
        stream = io.StringIO()
        empty = result.model_copy(update={"events": [], "scr_total_count": 0})

        write_result_csv(empty, stream)

        assert stream.getvalue().strip() == ",".join(SCR_RESULT_COLUMNS)
