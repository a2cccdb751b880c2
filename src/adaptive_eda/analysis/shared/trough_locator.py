"""
Preceding-trough localization for candidate SCR peaks.

For each candidate peak the locator scans a fixed look-back window backward
from the peak and takes the first point where the slope changes sign as the
SCR onset. This is the nearest preceding extremum, not the deepest sample in
the window.
"""

import logging

import numpy as np

from adaptive_eda.analysis.types import (
    CandidatePeak,
    DetectionConfig,
    PeakAssessment,
    RejectionReason,
    TroughCandidate,
)
from adaptive_eda.constants import ScrDetectionConstants as SDC

logger = logging.getLogger(__name__)


class TroughLocator:
    """
    Locates the trough preceding each candidate peak and checks its rise time.

    Example:
        >>> locator = TroughLocator(DetectionConfig(), sampling_rate=10.0)
        >>> assessments = locator.assess(values, peaks)
        >>> valid = [a for a in assessments if a.accepted]
    """

    def __init__(self, config: DetectionConfig, sampling_rate: float):
        """
        Initialize the locator.

        Args:
            config: Fixed detection thresholds
            sampling_rate: Signal sampling rate (Hz)
        """
        self.config = config
        self.sampling_rate = sampling_rate
        self.lookback_samples = int(round(config.lookback_window_sec * sampling_rate))
        self.min_rise_samples = config.min_rise_time_sec * sampling_rate
        self.max_rise_samples = config.max_rise_time_sec * sampling_rate

    def assess(
        self, values: np.ndarray, peaks: list[CandidatePeak]
    ) -> list[PeakAssessment]:
        """
        Locate troughs for all candidate peaks.

        Args:
            values: Signal values (uS), NaN for missing samples
            peaks: Candidate peaks in ascending index order

        Returns:
            One PeakAssessment per peak, in input order. Peaks without a
            usable trough or with an out-of-range rise time carry a
            rejection reason.
        """
        assessments = []
        for peak in peaks:
            trough, rejection = self.locate(values, peak)
            if rejection is not None:
                logger.debug(
                    f"Peak at t={peak.time:.3f}s (index {peak.index}) rejected: "
                    f"{rejection.value}"
                )
            assessments.append(
                PeakAssessment(peak=peak, trough=trough, rejection=rejection)
            )
        return assessments

    def locate(
        self, values: np.ndarray, peak: CandidatePeak
    ) -> tuple[TroughCandidate | None, RejectionReason | None]:
        """
        Locate the nearest preceding trough of a single peak.

        Args:
            values: Signal values (uS)
            peak: Candidate peak

        Returns:
            Tuple of (trough, rejection). The trough is None when the window
            is unusable or holds no trough; it is kept (with
            is_valid_rise_time False) when only the rise time is out of range.
        """
        if peak.index < self.lookback_samples:
            return None, RejectionReason.INSUFFICIENT_LOOKBACK

        window = values[peak.index - self.lookback_samples : peak.index + 1]
        if np.any(np.isnan(window)):
            return None, RejectionReason.GAPPY_WINDOW

        offset = find_nearest_trough_offset(window[::-1])
        if offset is None:
            return None, RejectionReason.NO_TROUGH_FOUND

        trough_index = peak.index - offset
        # positions are counted from the peak as 1, so the trough sits at offset + 1
        rise_time_samples = offset + 1
        is_valid = self._is_valid_rise_time(rise_time_samples)

        trough = TroughCandidate(
            peak_index=peak.index,
            trough_index=trough_index,
            trough_value=float(values[trough_index]),
            rise_time_samples=rise_time_samples,
            rise_time_sec=rise_time_samples / self.sampling_rate,
            is_valid_rise_time=is_valid,
        )

        if not is_valid:
            return trough, RejectionReason.RISE_TIME_OUT_OF_RANGE
        return trough, None

    def _is_valid_rise_time(self, rise_time_samples: int) -> bool:
        tolerance = SDC.RISE_TIME_TOLERANCE_SAMPLES
        return (
            self.min_rise_samples - tolerance
            <= rise_time_samples
            <= self.max_rise_samples + tolerance
        )


def find_nearest_trough_offset(reversed_window: np.ndarray) -> int | None:
    """
    Find the first slope sign change in a window that starts at the peak.

    Args:
        reversed_window: Signal samples with the peak first and earlier
            samples following in increasing distance

    Returns:
        Distance in samples from the peak to the first extremum, or None if
        the slope never changes sign inside the window
    """
    if len(reversed_window) < 3:
        return None

    slope_sign = np.sign(np.diff(reversed_window))
    changes = np.flatnonzero(np.diff(slope_sign))
    if len(changes) == 0:
        return None

    # diff(slope_sign)[k] compares slopes on either side of sample k + 1
    return int(changes[0]) + 1
