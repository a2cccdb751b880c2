"""
Command-line interface for adaptive-eda.

Provides commands for running FA thresholding on EDA recordings and
managing detection settings.
"""

import json
import logging
import sys

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import click
import numpy as np

from pydantic import ValidationError

from adaptive_eda.analysis.detector import AdaptiveSCRDetector, run
from adaptive_eda.analysis.signal import InvalidSignalError
from adaptive_eda.analysis.types import DetectionConfig, SCRResult
from adaptive_eda.config import (
    DETECTION_SECTION,
    get_config_path,
    get_detection_config,
    load_config,
    set_detection_setting,
    unset_detection_setting,
)
from adaptive_eda.data.csv_loader import EDAFileError, load_eda_csv
from adaptive_eda.logging_config import setup_logging
from adaptive_eda.reporting.export import (
    export_result_csv,
    export_result_json,
    result_summary,
    write_result_csv,
)

logger = logging.getLogger(__name__)

try:
    __version__ = get_version("adaptive-eda")
except PackageNotFoundError:
    __version__ = "dev"


def version_callback(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Show version."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"adaptive-eda, version {__version__}")
    ctx.exit()


def resolve_detection_config(
    min_prominence: float | None,
    min_rise_time: float | None,
    max_rise_time: float | None,
    lookback_window: float | None,
) -> DetectionConfig:
    """
    Resolve thresholds using precedence: CLI > config file > defaults.

    Raises:
        click.ClickException: If the merged thresholds are invalid
    """
    try:
        return get_detection_config(
            minimum_prominence=min_prominence,
            min_rise_time_sec=min_rise_time,
            max_rise_time_sec=max_rise_time,
            lookback_window_sec=lookback_window,
        )
    except ValidationError as e:
        raise click.ClickException(f"Invalid detection settings: {e}") from e


def _load_recording(path: str) -> tuple[np.ndarray, np.ndarray]:
    try:
        return load_eda_csv(path)
    except EDAFileError as e:
        raise click.ClickException(str(e)) from e


def _detection_options(func):
    """Shared threshold override options."""
    options = [
        click.option(
            "--min-prominence",
            type=float,
            help="Minimum SCR prominence in uS (default 0.01)",
        ),
        click.option(
            "--min-rise-time",
            type=float,
            help="Minimum onset-to-peak time in seconds (default 1)",
        ),
        click.option(
            "--max-rise-time",
            type=float,
            help="Maximum onset-to-peak time in seconds (default 3)",
        ),
        click.option(
            "--lookback-window",
            type=float,
            help="Seconds searched before each peak for its trough (default 8)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """adaptive-eda: Fixed + adaptive SCR detection for EDA recordings"""
    setup_logging(verbose=verbose)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--rap",
    "rap_threshold",
    type=float,
    required=True,
    help="Response amplitude percent threshold (e.g. 5 = 5%)",
)
@_detection_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Write json/csv output to this file instead of stdout",
)
@click.option(
    "--debug-plot",
    is_flag=True,
    help="Print an ASCII chart with SCR onsets, peaks and half-recovery points",
)
def analyze(
    path: str,
    rap_threshold: float,
    min_prominence: float | None,
    min_rise_time: float | None,
    max_rise_time: float | None,
    lookback_window: float | None,
    output_format: str,
    output: str | None,
    debug_plot: bool,
) -> None:
    """Detect SCRs in a two-column (time s, EDA uS) CSV recording."""
    config = resolve_detection_config(
        min_prominence, min_rise_time, max_rise_time, lookback_window
    )
    logger.debug(f"Detection settings: {config.model_dump()}")
    times, values = _load_recording(path)

    try:
        # the chart goes to stderr through the adaptive_eda.debug logger
        result = run(
            times, values, rap_threshold, debug_render=debug_plot, config=config
        )
    except InvalidSignalError as e:
        raise click.ClickException(str(e)) from e

    if output_format == "table" and output:
        click.echo("Warning: --output is ignored for table output", err=True)

    if output_format == "json":
        if output:
            export_result_json(result, Path(output))
            click.echo(f"✓ Results written to {output}")
        else:
            click.echo(json.dumps(result_summary(result), indent=2, allow_nan=False))
    elif output_format == "csv":
        if output:
            export_result_csv(result, Path(output))
            click.echo(f"✓ Results written to {output}")
        else:
            write_result_csv(result, sys.stdout)
    else:
        _display_result(result)


def _format_optional(value: float | None, fmt: str) -> str:
    return "-" if value is None else format(value, fmt)


def _display_result(result: SCRResult) -> None:
    """Display detection results as a table."""
    click.echo("=" * 72)
    click.echo("SCR SUMMARY")
    click.echo("=" * 72)
    click.echo(f"RAP threshold:  {result.rap_threshold_percent:g}%")
    click.echo(f"Sampling rate:  {result.sampling_rate:g} Hz")
    click.echo(f"SCR count:      {result.scr_total_count}")
    click.echo(f"SCL average:    {_format_optional(result.scl_average, '.4f')} uS")

    if result.events:
        click.echo("")
        click.echo(
            f"{'#':>3}  {'onset s':>9}  {'onset uS':>9}  {'peak s':>9}  "
            f"{'peak uS':>9}  {'amp uS':>8}  {'HR s':>9}  {'HR uS':>9}"
        )
        for i, event in enumerate(result.events, start=1):
            click.echo(
                f"{i:>3}  {event.onset_time:>9.2f}  {event.onset_value:>9.4f}  "
                f"{event.peak_time:>9.2f}  {event.peak_value:>9.4f}  "
                f"{event.amplitude:>8.4f}  "
                f"{_format_optional(event.half_recovery_time, '.2f'):>9}  "
                f"{_format_optional(event.half_recovery_value, '.4f'):>9}"
            )

    rejected = {r: n for r, n in result.rejection_counts().items() if n}
    if rejected:
        click.echo("")
        click.echo("Rejected candidate peaks:")
        for reason, count in rejected.items():
            click.echo(f"  {reason.value}: {count}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--rap",
    "rap_thresholds",
    type=float,
    multiple=True,
    required=True,
    help="RAP threshold to evaluate. Repeat for several: --rap 1 --rap 5",
)
@_detection_options
def sweep(
    path: str,
    rap_thresholds: tuple[float, ...],
    min_prominence: float | None,
    min_rise_time: float | None,
    max_rise_time: float | None,
    lookback_window: float | None,
) -> None:
    """Compare SCR counts and SCL across RAP thresholds for one recording."""
    config = resolve_detection_config(
        min_prominence, min_rise_time, max_rise_time, lookback_window
    )
    times, values = _load_recording(path)
    detector = AdaptiveSCRDetector(config)

    click.echo(f"{'RAP %':>8}  {'SCRs':>6}  {'SCL uS':>9}")
    for rap_threshold in sorted(rap_thresholds):
        try:
            result = detector.detect(times, values, rap_threshold)
        except InvalidSignalError as e:
            raise click.ClickException(str(e)) from e
        click.echo(
            f"{rap_threshold:>8g}  {result.scr_total_count:>6}  "
            f"{_format_optional(result.scl_average, '.4f'):>9}"
        )


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
def show_config_cmd() -> None:
    """Show detection settings (config file values and effective values)."""
    config_path = get_config_path()
    if config_path.exists():
        click.echo(f"Config file: {config_path}\n")
    else:
        click.echo(f"No config file: {config_path}\n")

    config_data = load_config()
    if config_data:
        click.echo("Settings:")
        for section, values in config_data.items():
            if not isinstance(values, dict):
                continue
            click.echo(f"  [{section}]")
            for key, value in values.items():
                click.echo(f"    {key} = {value!r}")
        click.echo("")

    try:
        effective = get_detection_config()
    except ValidationError as e:
        raise click.ClickException(f"Invalid detection settings: {e}") from e

    click.echo("Effective detection settings:")
    for key, value in effective.model_dump().items():
        click.echo(f"  {key} = {value}")


@config.command("set")
@click.argument("key")
@click.argument("value", type=float)
def set_config_cmd(key: str, value: float) -> None:
    """Persist a detection setting (e.g. minimum_prominence 0.02)."""
    try:
        set_detection_setting(key, value)
    except KeyError as e:
        raise click.ClickException(str(e.args[0])) from e
    except ValidationError as e:
        raise click.ClickException(f"Invalid value for {key}: {e}") from e

    click.echo(f"✓ [{DETECTION_SECTION}] {key} = {value}")
    click.echo(f"  Config: {get_config_path()}")


@config.command("unset")
@click.argument("key")
def unset_config_cmd(key: str) -> None:
    """Remove a detection setting, restoring its default."""
    if unset_detection_setting(key):
        click.echo(f"✓ Removed {key}")
    else:
        click.echo(f"{key} was not configured.")
