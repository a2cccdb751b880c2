"""
Tonic skin conductance level (SCL) estimation.

The SCL is the mean of the signal outside all SCRs. Each SCR occupies the
closed interval from its onset to its half-recovery point, or to its peak
when it never half-recovers.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


class SCLEstimator:
    """Averages the signal with SCR intervals masked out."""

    def mask(self, values: np.ndarray, intervals: list[tuple[int, int]]) -> np.ndarray:
        """
        Build a copy of the signal with every SCR interval set to NaN.

        Args:
            values: Signal values (uS); not modified
            intervals: Closed (start_index, end_index) intervals

        Returns:
            Masked copy of values
        """
        masked = np.array(values, dtype=float, copy=True)
        for start, end in intervals:
            masked[start : end + 1] = np.nan
        return masked

    def estimate(
        self, values: np.ndarray, intervals: list[tuple[int, int]]
    ) -> float | None:
        """
        Estimate the SCL.

        Args:
            values: Signal values (uS), NaN for missing samples
            intervals: Closed SCR intervals to exclude

        Returns:
            Mean of the remaining samples, or None if nothing remains
        """
        masked = self.mask(values, intervals)
        remaining = masked[~np.isnan(masked)]

        if len(remaining) == 0:
            logger.warning(
                "SCL undefined: every sample is missing or inside an SCR interval"
            )
            return None

        logger.debug(
            f"SCL estimated from {len(remaining)}/{len(values)} samples "
            f"({len(intervals)} SCR intervals excluded)"
        )
        return float(np.mean(remaining))
