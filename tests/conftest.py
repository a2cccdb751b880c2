"""Pytest configuration and fixtures for adaptive-eda tests."""

import logging

from pathlib import Path

import numpy as np
import pytest


def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that do not require external dependencies"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests combining multiple components"
    )


@pytest.fixture(autouse=True)
def isolated_app_dir(tmp_path, monkeypatch):
    """Point config and log files at a temporary directory."""
    from adaptive_eda import config, logging_config

    app_dir = tmp_path / "app"
    monkeypatch.setattr(config, "DEFAULT_APP_DIR", app_dir)
    monkeypatch.setattr(logging_config, "DEFAULT_LOG_DIR", app_dir / "logs")
    monkeypatch.setattr(logging_config, "_logging_configured", False)
    return app_dir


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by setup_logging inside CLI tests."""
    root = logging.getLogger()
    chart = logging.getLogger("adaptive_eda.debug")
    saved = [
        (logger, list(logger.handlers), logger.level, logger.propagate)
        for logger in (root, chart)
    ]
    yield
    for logger, handlers, level, propagate in saved:
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate


@pytest.fixture
def config_path(isolated_app_dir) -> Path:
    """Return the config file path inside the isolated app directory."""
    return isolated_app_dir / "config.toml"


@pytest.fixture
def single_scr():
    """Return (timestamps, values, peak_index) for one clean 0.5 uS SCR."""
    from tests.helpers.synthetic_data import generate_single_scr

    return generate_single_scr()


@pytest.fixture
def graded_scrs():
    """Return (timestamps, values, peak_indices) for four SCRs of rising RAP."""
    from tests.helpers.synthetic_data import generate_graded_scrs

    return generate_graded_scrs()


@pytest.fixture
def write_eda_csv(tmp_path):
    """Return a function writing (timestamps, values) to a CSV file."""

    def _write(
        timestamps: np.ndarray,
        values: np.ndarray,
        name: str = "recording.csv",
        header: bool = True,
    ) -> Path:
        path = tmp_path / name
        lines = ["time_s,eda_us"] if header else []
        for t, v in zip(timestamps, values):
            lines.append(f"{float(t)!r},{'' if np.isnan(v) else repr(float(v))}")
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write
