"""Half-recovery point search for detected SCRs."""

import logging

from dataclasses import dataclass

import numpy as np

from adaptive_eda.constants import ScrDetectionConstants as SDC

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HalfRecovery:
    """First post-peak sample at or below half the SCR amplitude."""

    index: int
    time: float
    value: float


class HalfRecoveryFinder:
    """
    Finds the half-recovery point of each SCR.

    The search for an SCR runs from its peak up to, but not including, the
    next SCR's peak; the last SCR searches to the end of the signal.
    """

    def __init__(self, recovery_fraction: float = SDC.HALF_RECOVERY_FRACTION):
        self.recovery_fraction = recovery_fraction

    def find(
        self,
        times: np.ndarray,
        values: np.ndarray,
        peak_indices: list[int],
        amplitudes: list[float],
    ) -> list[HalfRecovery | None]:
        """
        Locate half-recovery points.

        Args:
            times: Sample times (seconds)
            values: Signal values (uS), NaN for missing samples
            peak_indices: Peak sample indices of the SCRs, ascending
            amplitudes: SCR amplitudes (uS), same order

        Returns:
            One entry per SCR; None where the signal does not recover within
            the search window
        """
        recoveries: list[HalfRecovery | None] = []

        for i, (peak_index, amplitude) in enumerate(zip(peak_indices, amplitudes)):
            if i + 1 < len(peak_indices):
                window_end = peak_indices[i + 1]
            else:
                window_end = len(values)

            threshold = values[peak_index] - amplitude * self.recovery_fraction
            window = values[peak_index:window_end]

            with np.errstate(invalid="ignore"):
                below = np.flatnonzero(window <= threshold)

            if len(below) == 0:
                logger.debug(
                    f"No half recovery for SCR peaking at t={times[peak_index]:.3f}s"
                )
                recoveries.append(None)
                continue

            index = peak_index + int(below[0])
            recoveries.append(
                HalfRecovery(
                    index=index,
                    time=float(times[index]),
                    value=float(values[index]),
                )
            )

        return recoveries
