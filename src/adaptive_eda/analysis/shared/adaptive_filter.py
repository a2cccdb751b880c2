"""
Two-stage fixed + adaptive peak filter.

Stage 1 rejects peaks whose prominence over the preceding trough does not
exceed a fixed minimum. Stage 2 rejects peaks whose response amplitude
percent (prominence relative to the trough value) does not exceed the RAP
threshold, so the effective cutoff scales with the tonic level.
"""

import logging

import numpy as np

from adaptive_eda.analysis.types import PeakAssessment, RejectionReason

logger = logging.getLogger(__name__)


class AdaptiveThresholdFilter:
    """
    Applies the absolute prominence and relative RAP thresholds.

    Example:
        >>> fa_filter = AdaptiveThresholdFilter(minimum_prominence=0.01)
        >>> assessments = fa_filter.apply(assessments, rap_threshold_percent=5.0)
    """

    def __init__(self, minimum_prominence: float):
        """
        Initialize the filter.

        Args:
            minimum_prominence: Fixed prominence threshold (uS)
        """
        self.minimum_prominence = minimum_prominence

    def apply(
        self,
        assessments: list[PeakAssessment],
        rap_threshold_percent: float,
    ) -> list[PeakAssessment]:
        """
        Run both filter stages over peaks that still qualify.

        Assessments that already carry a rejection pass through unchanged;
        the RAP stage only sees peaks that survived the prominence stage.

        Args:
            assessments: Output of TroughLocator.assess
            rap_threshold_percent: RAP threshold in percent

        Returns:
            Updated assessments in the same order
        """
        after_prominence = [self._prominence_stage(a) for a in assessments]
        after_rap = [self._rap_stage(a, rap_threshold_percent) for a in after_prominence]

        n_in = sum(1 for a in assessments if a.accepted)
        n_prominent = sum(1 for a in after_prominence if a.accepted)
        n_out = sum(1 for a in after_rap if a.accepted)
        logger.debug(
            f"Adaptive filter: {n_in} peaks in, {n_prominent} after prominence "
            f"stage, {n_out} after RAP stage ({rap_threshold_percent}%)"
        )
        return after_rap

    def _prominence_stage(self, assessment: PeakAssessment) -> PeakAssessment:
        if not assessment.accepted or assessment.trough is None:
            return assessment

        prominence = assessment.peak.value - assessment.trough.trough_value
        rejection = None
        if prominence <= self.minimum_prominence:
            rejection = RejectionReason.BELOW_PROMINENCE

        return assessment.model_copy(
            update={"prominence": prominence, "rejection": rejection}
        )

    def _rap_stage(
        self, assessment: PeakAssessment, rap_threshold_percent: float
    ) -> PeakAssessment:
        if not assessment.accepted or assessment.prominence is None:
            return assessment

        percent = response_amplitude_percent(
            assessment.prominence, assessment.trough.trough_value
        )
        rejection = None
        if percent <= rap_threshold_percent:
            rejection = RejectionReason.BELOW_RAP_THRESHOLD

        return assessment.model_copy(
            update={"response_amplitude_percent": percent, "rejection": rejection}
        )


def response_amplitude_percent(prominence: float, trough_value: float) -> float:
    """
    Express a prominence as percent of the trough (tonic) value.

    Uses IEEE division: a zero trough yields +inf, a negative trough a
    negative percentage.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(100.0 * np.float64(prominence) / np.float64(trough_value))
