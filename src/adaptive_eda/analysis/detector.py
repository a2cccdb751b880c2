"""
Fixed + adaptive (FA) SCR detection pipeline.

Sequences peak detection, trough localization, the two-stage adaptive filter,
half-recovery search and SCL estimation, and assembles an SCRResult.
"""

import logging

from collections.abc import Sequence

import numpy as np

from adaptive_eda.analysis.shared.adaptive_filter import AdaptiveThresholdFilter
from adaptive_eda.analysis.shared.half_recovery import HalfRecoveryFinder
from adaptive_eda.analysis.shared.peak_detector import detect_peaks
from adaptive_eda.analysis.shared.scl import SCLEstimator
from adaptive_eda.analysis.shared.trough_locator import TroughLocator
from adaptive_eda.analysis.signal import validate_rap_threshold, validate_signal
from adaptive_eda.analysis.types import (
    DetectionConfig,
    PeakAssessment,
    SCREvent,
    SCRResult,
)

logger = logging.getLogger(__name__)
debug_logger = logging.getLogger("adaptive_eda.debug")


class AdaptiveSCRDetector:
    """
    Detects skin conductance responses with FA thresholding.

    Example:
        >>> detector = AdaptiveSCRDetector()
        >>> result = detector.detect(time_sec, eda_us, rap_threshold_percent=1.9)
        >>> print(f"{result.scr_total_count} SCRs, SCL {result.scl_average:.2f} uS")
    """

    def __init__(self, config: DetectionConfig | None = None):
        """
        Initialize the detector.

        Args:
            config: Fixed thresholds (defaults to DetectionConfig())
        """
        self.config = config or DetectionConfig()
        self.adaptive_filter = AdaptiveThresholdFilter(self.config.minimum_prominence)
        self.half_recovery_finder = HalfRecoveryFinder()
        self.scl_estimator = SCLEstimator()

    def detect(
        self,
        time_seconds: Sequence[float] | np.ndarray,
        values: Sequence[float] | np.ndarray,
        rap_threshold_percent: float,
    ) -> SCRResult:
        """
        Run the full pipeline on one signal.

        Args:
            time_seconds: Strictly increasing, uniformly spaced times (seconds)
            values: EDA values (uS), NaN for missing samples
            rap_threshold_percent: RAP threshold in percent (e.g. 5 = 5%)

        Returns:
            SCRResult with SCRs ordered by peak time

        Raises:
            InvalidSignalError: If the input is malformed
        """
        times, signal_values, sampling_period = validate_signal(time_seconds, values)
        rap_threshold = validate_rap_threshold(rap_threshold_percent)
        sampling_rate = 1.0 / sampling_period

        logger.info(
            f"Detecting SCRs: {len(times)} samples at {sampling_rate:g} Hz, "
            f"RAP threshold {rap_threshold}%"
        )

        peaks = detect_peaks(signal_values, times, self.config.minimum_prominence)

        locator = TroughLocator(self.config, sampling_rate)
        assessments = locator.assess(signal_values, peaks)
        assessments = self.adaptive_filter.apply(assessments, rap_threshold)

        events = self._build_events(times, signal_values, assessments)

        intervals = [(e.onset_index, e.scl_mask_end_index) for e in events]
        scl_average = self.scl_estimator.estimate(signal_values, intervals)

        result = SCRResult(
            rap_threshold_percent=rap_threshold,
            sampling_rate=sampling_rate,
            config=self.config,
            events=events,
            scr_total_count=len(events),
            scl_average=scl_average,
            assessments=assessments,
        )

        logger.info(
            f"Found {result.scr_total_count} SCRs from {len(peaks)} candidate peaks"
        )
        return result

    def _build_events(
        self,
        times: np.ndarray,
        values: np.ndarray,
        assessments: list[PeakAssessment],
    ) -> list[SCREvent]:
        survivors = [a for a in assessments if a.accepted]

        recoveries = self.half_recovery_finder.find(
            times,
            values,
            [a.peak.index for a in survivors],
            [a.prominence for a in survivors],
        )

        events = []
        for assessment, recovery in zip(survivors, recoveries):
            peak = assessment.peak
            trough = assessment.trough
            events.append(
                SCREvent(
                    onset_index=trough.trough_index,
                    onset_time=peak.time - trough.rise_time_sec,
                    onset_value=trough.trough_value,
                    peak_index=peak.index,
                    peak_time=peak.time,
                    peak_value=peak.value,
                    amplitude=assessment.prominence,
                    rise_time_sec=trough.rise_time_sec,
                    response_amplitude_percent=assessment.response_amplitude_percent,
                    half_recovery_index=recovery.index if recovery else None,
                    half_recovery_time=recovery.time if recovery else None,
                    half_recovery_value=recovery.value if recovery else None,
                )
            )
        return events


def run(
    time_seconds: Sequence[float] | np.ndarray,
    values: Sequence[float] | np.ndarray,
    rap_threshold_percent: float,
    debug_render: bool = False,
    config: DetectionConfig | None = None,
) -> SCRResult:
    """
    Detect SCRs and estimate SCL in a single call.

    Args:
        time_seconds: Strictly increasing, uniformly spaced times (seconds)
        values: EDA values (uS), NaN for missing samples
        rap_threshold_percent: RAP threshold in percent (e.g. 5 = 5%)
        debug_render: Also log an ASCII chart of the signal with onset, peak
            and half-recovery markers on the "adaptive_eda.debug" logger
        config: Fixed thresholds (defaults to DetectionConfig())

    Returns:
        SCRResult
    """
    result = AdaptiveSCRDetector(config).detect(
        time_seconds, values, rap_threshold_percent
    )

    if debug_render:
        from adaptive_eda.waveform.renderer import AsciiSCRRenderer

        chart = AsciiSCRRenderer().render(
            np.asarray(time_seconds, dtype=float),
            np.asarray(values, dtype=float),
            result,
        )
        debug_logger.info(f"\n{chart}")

    return result
