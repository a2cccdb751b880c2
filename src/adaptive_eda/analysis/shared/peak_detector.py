"""
Local-maximum detection with a minimum topographic prominence.

Thin wrapper around scipy.signal.find_peaks that reports integer sample
indices alongside times and values, so later stages never have to recover a
peak's position from its floating-point time.
"""

import logging

import numpy as np

from scipy import signal

from adaptive_eda.analysis.types import CandidatePeak

logger = logging.getLogger(__name__)


def detect_peaks(
    values: np.ndarray,
    times: np.ndarray,
    min_prominence: float,
) -> list[CandidatePeak]:
    """
    Find local maxima whose prominence is at least min_prominence.

    Flat-topped peaks are reported at their first (left-edge) sample, the
    first point at which the signal stops rising. Signal endpoints are never
    peaks and missing samples (NaN) never compare as maxima.

    Args:
        values: Signal values (uS)
        times: Sample times (seconds), same length as values
        min_prominence: Minimum topographic prominence (uS)

    Returns:
        Candidate peaks in ascending index order
    """
    if len(values) < 3:
        return []

    _, properties = signal.find_peaks(
        values, prominence=min_prominence, plateau_size=1
    )
    peak_indices = properties["left_edges"]

    peaks = [
        CandidatePeak(
            index=int(idx),
            time=float(times[idx]),
            value=float(values[idx]),
        )
        for idx in peak_indices
    ]

    logger.debug(
        f"Detected {len(peaks)} candidate peaks with prominence >= {min_prominence}"
    )
    return peaks
