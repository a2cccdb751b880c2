"""
Input validation for EDA signals.

Malformed input is a whole-run failure: it is rejected here, before any
detection work begins. Missing samples (NaN values) are legal and are handled
per peak by the detection stages.
"""

import logging

from collections.abc import Sequence

import numpy as np

from adaptive_eda.constants import ScrDetectionConstants as SDC

logger = logging.getLogger(__name__)


class InvalidSignalError(ValueError):
    """Signal or run parameters cannot be analyzed."""

    pass


def validate_signal(
    time_seconds: Sequence[float] | np.ndarray,
    values: Sequence[float] | np.ndarray,
) -> tuple[np.ndarray, np.ndarray, float]:
    """
    Validate a time/value pair and convert it to float arrays.

    Args:
        time_seconds: Strictly increasing, uniformly spaced sample times
        values: Signal values, same length, NaN for missing samples

    Returns:
        Tuple of (times, values, sampling_period). Both arrays are fresh
        copies, so callers' data is never aliased.

    Raises:
        InvalidSignalError: If the input cannot be analyzed
    """
    try:
        times = np.array(time_seconds, dtype=float)
        signal_values = np.array(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidSignalError(f"Signal must be numeric: {e}") from e

    if times.ndim != 1 or signal_values.ndim != 1:
        raise InvalidSignalError(
            f"Signal must be one-dimensional (got time shape {times.shape}, "
            f"value shape {signal_values.shape})"
        )

    if len(times) != len(signal_values):
        raise InvalidSignalError(
            f"Time and value lengths differ: {len(times)} != {len(signal_values)}"
        )

    if len(times) < 2:
        raise InvalidSignalError(
            f"Signal needs at least 2 samples to derive a sampling rate, got {len(times)}"
        )

    if not np.all(np.isfinite(times)):
        raise InvalidSignalError("Time vector contains NaN or infinite values")

    steps = np.diff(times)
    if np.any(steps <= 0):
        first_bad = int(np.argmax(steps <= 0))
        raise InvalidSignalError(
            f"Time vector must be strictly increasing "
            f"(t[{first_bad}]={times[first_bad]}, t[{first_bad + 1}]={times[first_bad + 1]})"
        )

    sampling_period = float(times[1] - times[0])
    if not np.allclose(steps, sampling_period, rtol=SDC.UNIFORM_SPACING_RTOL, atol=0):
        worst = int(np.argmax(np.abs(steps - sampling_period)))
        raise InvalidSignalError(
            f"Time vector must be uniformly spaced: step {worst} is {steps[worst]}, "
            f"expected {sampling_period}"
        )

    missing = int(np.count_nonzero(np.isnan(signal_values)))
    if missing:
        logger.debug(f"Signal contains {missing} missing samples")

    return times, signal_values, sampling_period


def validate_rap_threshold(rap_threshold_percent: float) -> float:
    """
    Validate the response amplitude percent threshold.

    Args:
        rap_threshold_percent: RAP threshold in percent (e.g. 5 = 5%)

    Returns:
        The threshold as float

    Raises:
        InvalidSignalError: If the threshold is not a positive finite number
    """
    try:
        threshold = float(rap_threshold_percent)
    except (TypeError, ValueError) as e:
        raise InvalidSignalError(
            f"RAP threshold must be a number, got {rap_threshold_percent!r}"
        ) from e

    if not np.isfinite(threshold) or threshold <= 0:
        raise InvalidSignalError(
            f"RAP threshold must be a positive finite percentage, got {threshold}"
        )
    return threshold
