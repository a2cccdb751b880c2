"""
Tests for CLI commands.

These tests verify the command-line interface functionality including:
- analyze command with table, json and csv output
- sweep command across RAP thresholds
- config show/set/unset commands
- error exits for bad input files and settings
"""

import csv
import json

import numpy as np
import pytest

from click.testing import CliRunner

from adaptive_eda.cli import cli
from adaptive_eda.config import load_config
from adaptive_eda.constants import SCR_RESULT_COLUMNS


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def single_scr_csv(single_scr, write_eda_csv):
    timestamps, values, _ = single_scr
    return write_eda_csv(timestamps, values)


@pytest.fixture
def graded_csv(graded_scrs, write_eda_csv):
    timestamps, values, _ = graded_scrs
    return write_eda_csv(timestamps, values, name="graded.csv")


class TestAnalyzeCommand:
    def test_table_output(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(cli, ["analyze", str(single_scr_csv), "--rap", "1.9"])

        assert result.exit_code == 0, result.output
        assert "SCR SUMMARY" in result.output
        assert "SCR count:      1" in result.output
        assert "SCL average:" in result.output

    def test_rejections_listed(self, cli_runner, graded_csv):
        result = cli_runner.invoke(cli, ["analyze", str(graded_csv), "--rap", "10"])

        assert result.exit_code == 0, result.output
        assert "SCR count:      2" in result.output
        assert "Rejected candidate peaks:" in result.output
        assert "below_rap_threshold: 2" in result.output

    def test_json_to_file(self, cli_runner, single_scr_csv, tmp_path):
        output = tmp_path / "out.json"

        result = cli_runner.invoke(
            cli,
            [
                "analyze",
                str(single_scr_csv),
                "--rap",
                "1.9",
                "--format",
                "json",
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Results written to" in result.output
        data = json.loads(output.read_text())
        assert data["scr_total_count"] == 1
        assert data["scr_peak_time"] == [pytest.approx(12.0)]

    def test_json_to_stdout(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(
            cli, ["analyze", str(single_scr_csv), "--rap", "1.9", "--format", "json"]
        )

        assert result.exit_code == 0, result.output
        assert '"scr_total_count": 1' in result.output

    def test_csv_to_file(self, cli_runner, graded_csv, tmp_path):
        output = tmp_path / "out.csv"

        result = cli_runner.invoke(
            cli,
            [
                "analyze",
                str(graded_csv),
                "--rap",
                "1.9",
                "--format",
                "csv",
                "--output",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        with open(output, newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 3
        assert list(rows[0]) == SCR_RESULT_COLUMNS

    def test_csv_to_stdout(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(
            cli, ["analyze", str(single_scr_csv), "--rap", "1.9", "--format", "csv"]
        )

        assert result.exit_code == 0, result.output
        assert ",".join(SCR_RESULT_COLUMNS) in result.output

    def test_debug_plot(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(
            cli, ["analyze", str(single_scr_csv), "--rap", "1.9", "--debug-plot"]
        )

        assert result.exit_code == 0, result.output
        assert result.output.count("Fixed-Adaptive Thresholding EDA analysis") == 1
        assert "INFO: \nFixed-Adaptive" not in result.output
        assert "Legend:" in result.output

    def test_threshold_override(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(
            cli,
            ["analyze", str(single_scr_csv), "--rap", "1.9", "--min-rise-time", "2.5"],
        )

        assert result.exit_code == 0, result.output
        assert "SCR count:      0" in result.output
        assert "rise_time_out_of_range: 1" in result.output

    def test_config_file_thresholds_used(self, cli_runner, single_scr_csv):
        cli_runner.invoke(cli, ["config", "set", "min_rise_time_sec", "2.5"])

        result = cli_runner.invoke(cli, ["analyze", str(single_scr_csv), "--rap", "1.9"])

        assert result.exit_code == 0, result.output
        assert "SCR count:      0" in result.output

    def test_missing_values_in_file(self, cli_runner, single_scr, write_eda_csv):
        timestamps, values, _ = single_scr
        values = values.copy()
        values[60] = np.nan
        path = write_eda_csv(timestamps, values)

        result = cli_runner.invoke(cli, ["analyze", str(path), "--rap", "1.9"])

        assert result.exit_code == 0, result.output
        assert "gappy_window: 1" in result.output

    def test_rap_required(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(cli, ["analyze", str(single_scr_csv)])

        assert result.exit_code != 0
        assert "--rap" in result.output

    def test_invalid_rap(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(cli, ["analyze", str(single_scr_csv), "--rap", "0"])

        assert result.exit_code == 1
        assert "RAP threshold must be a positive" in result.output

    def test_invalid_thresholds(self, cli_runner, single_scr_csv):
        result = cli_runner.invoke(
            cli,
            ["analyze", str(single_scr_csv), "--rap", "1.9", "--min-prominence", "-1"],
        )

        assert result.exit_code == 1
        assert "Invalid detection settings" in result.output

    def test_malformed_file(self, cli_runner, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("time,eda\n0,1.0\n1,high\n")

        result = cli_runner.invoke(cli, ["analyze", str(path), "--rap", "1.9"])

        assert result.exit_code == 1
        assert "non-numeric EDA value" in result.output

    def test_non_uniform_time(self, cli_runner, tmp_path):
        path = tmp_path / "jitter.csv"
        path.write_text("0,1.0\n1,1.0\n2,1.0\n4,1.0\n")

        result = cli_runner.invoke(cli, ["analyze", str(path), "--rap", "1.9"])

        assert result.exit_code == 1
        assert "uniformly spaced" in result.output

    def test_missing_file(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            cli, ["analyze", str(tmp_path / "nope.csv"), "--rap", "1.9"]
        )

        assert result.exit_code == 2


class TestSweepCommand:
    def test_counts_per_threshold(self, cli_runner, graded_csv):
        result = cli_runner.invoke(
            cli,
            ["sweep", str(graded_csv), "--rap", "20", "--rap", "1", "--rap", "10"],
        )

        assert result.exit_code == 0, result.output
        rows = [
            line.split()
            for line in result.output.splitlines()
            if line.strip() and line.split()[0].replace(".", "").isdigit()
        ]
        assert [(float(r[0]), int(r[1])) for r in rows] == [(1.0, 4), (10.0, 2), (20.0, 1)]

    def test_requires_threshold(self, cli_runner, graded_csv):
        result = cli_runner.invoke(cli, ["sweep", str(graded_csv)])

        assert result.exit_code != 0


class TestConfigCommands:
    def test_show_without_file(self, cli_runner):
        result = cli_runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert "No config file" in result.output
        assert "minimum_prominence = 0.01" in result.output

    def test_set_and_show(self, cli_runner):
        set_result = cli_runner.invoke(
            cli, ["config", "set", "minimum_prominence", "0.02"]
        )
        show_result = cli_runner.invoke(cli, ["config", "show"])

        assert set_result.exit_code == 0, set_result.output
        assert "minimum_prominence = 0.02" in set_result.output
        assert load_config() == {"detection": {"minimum_prominence": 0.02}}
        assert "[detection]" in show_result.output
        assert "minimum_prominence = 0.02" in show_result.output

    def test_set_unknown_key(self, cli_runner):
        result = cli_runner.invoke(cli, ["config", "set", "rap", "5"])

        assert result.exit_code == 1
        assert "Unknown detection setting" in result.output

    def test_set_invalid_value(self, cli_runner):
        result = cli_runner.invoke(cli, ["config", "set", "lookback_window_sec", "0"])

        assert result.exit_code == 1
        assert "Invalid value for lookback_window_sec" in result.output
        assert load_config() == {}

    def test_unset(self, cli_runner, config_path):
        cli_runner.invoke(cli, ["config", "set", "minimum_prominence", "0.02"])

        result = cli_runner.invoke(cli, ["config", "unset", "minimum_prominence"])

        assert result.exit_code == 0, result.output
        assert "Removed minimum_prominence" in result.output
        assert not config_path.exists()

    def test_unset_not_configured(self, cli_runner):
        result = cli_runner.invoke(cli, ["config", "unset", "minimum_prominence"])

        assert result.exit_code == 0
        assert "was not configured" in result.output


class TestGlobalOptions:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "adaptive-eda, version" in result.output

    def test_log_file_written(self, cli_runner, single_scr_csv, isolated_app_dir):
        result = cli_runner.invoke(
            cli, ["-v", "analyze", str(single_scr_csv), "--rap", "1.9"]
        )

        assert result.exit_code == 0, result.output
        log_path = isolated_app_dir / "logs" / "adaptive_eda.log"
        assert log_path.exists()
