"""SCR detection type definitions."""

from enum import Enum

import numpy as np

from pydantic import BaseModel, ConfigDict, Field, model_validator

from adaptive_eda.constants import ScrDetectionConstants as SDC

# ============================================================================
# Configuration
# ============================================================================


class DetectionConfig(BaseModel):
    """
    Fixed thresholds of the FA method.

    The RAP threshold is not part of this model: it is the adaptive
    sensitivity parameter passed to each detection run.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    minimum_prominence: float = Field(
        default=SDC.MINIMUM_PROMINENCE_US,
        gt=0,
        description="Minimum peak prominence (signal units, uS)",
    )
    min_rise_time_sec: float = Field(
        default=SDC.MIN_RISE_TIME_SEC,
        gt=0,
        description="Shortest accepted trough-to-peak time (seconds)",
    )
    max_rise_time_sec: float = Field(
        default=SDC.MAX_RISE_TIME_SEC,
        gt=0,
        description="Longest accepted trough-to-peak time (seconds)",
    )
    lookback_window_sec: float = Field(
        default=SDC.LOOKBACK_WINDOW_SEC,
        gt=0,
        description="History searched for the preceding trough (seconds)",
    )

    @model_validator(mode="after")
    def _check_rise_time_bounds(self) -> "DetectionConfig":
        if self.min_rise_time_sec > self.max_rise_time_sec:
            raise ValueError(
                f"min_rise_time_sec ({self.min_rise_time_sec}) must not exceed "
                f"max_rise_time_sec ({self.max_rise_time_sec})"
            )
        return self


# ============================================================================
# Per-peak Types
# ============================================================================


class RejectionReason(str, Enum):
    """Why a candidate peak did not become an SCR."""

    INSUFFICIENT_LOOKBACK = "insufficient_lookback"
    GAPPY_WINDOW = "gappy_window"
    NO_TROUGH_FOUND = "no_trough_found"
    RISE_TIME_OUT_OF_RANGE = "rise_time_out_of_range"
    BELOW_PROMINENCE = "below_prominence"
    BELOW_RAP_THRESHOLD = "below_rap_threshold"


class CandidatePeak(BaseModel):
    """Local maximum reported by the peak detector."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Sample index of the peak")
    time: float = Field(description="Peak time (seconds)")
    value: float = Field(description="Peak value (uS)")


class TroughCandidate(BaseModel):
    """
    Nearest preceding trough of a candidate peak.

    Attributes:
        peak_index: Sample index of the peak this trough belongs to
        trough_index: Sample index of the trough
        trough_value: Signal value at the trough (uS)
        rise_time_samples: Position of the trough counting back from the peak
            (peak = 1), i.e. sample distance + 1
        rise_time_sec: rise_time_samples divided by the sampling rate
        is_valid_rise_time: Whether the rise time is inside the configured range
    """

    model_config = ConfigDict(frozen=True)

    peak_index: int = Field(ge=0)
    trough_index: int = Field(ge=0)
    trough_value: float
    rise_time_samples: int = Field(ge=1)
    rise_time_sec: float = Field(gt=0)
    is_valid_rise_time: bool


class PeakAssessment(BaseModel):
    """Diagnostic record kept for every candidate peak."""

    model_config = ConfigDict(frozen=True)

    peak: CandidatePeak
    trough: TroughCandidate | None = Field(
        default=None, description="Preceding trough, if one was located"
    )
    prominence: float | None = Field(
        default=None, description="Peak value minus trough value (uS)"
    )
    response_amplitude_percent: float | None = Field(
        default=None, description="Prominence as percent of trough value"
    )
    rejection: RejectionReason | None = Field(
        default=None, description="None if the peak became an SCR"
    )

    @property
    def accepted(self) -> bool:
        return self.rejection is None


# ============================================================================
# Results
# ============================================================================


class SCREvent(BaseModel):
    """
    A detected skin conductance response.

    Half-recovery fields are None when the signal never returns below half
    the amplitude before the next SCR (or the end of the recording).
    """

    model_config = ConfigDict(frozen=True)

    onset_index: int = Field(ge=0, description="Sample index of the onset (trough)")
    onset_time: float = Field(description="Onset time (seconds)")
    onset_value: float = Field(description="Onset value (uS)")
    peak_index: int = Field(ge=0, description="Sample index of the peak")
    peak_time: float = Field(description="Peak time (seconds)")
    peak_value: float = Field(description="Peak value (uS)")
    amplitude: float = Field(gt=0, description="Peak minus onset value (uS)")
    rise_time_sec: float = Field(gt=0, description="Onset-to-peak time (seconds)")
    response_amplitude_percent: float = Field(
        description="Amplitude as percent of onset value"
    )
    half_recovery_index: int | None = Field(
        default=None, description="Sample index of the half-recovery point"
    )
    half_recovery_time: float | None = Field(
        default=None, description="Half-recovery time (seconds)"
    )
    half_recovery_value: float | None = Field(
        default=None, description="Half-recovery value (uS)"
    )

    @property
    def scl_mask_end_index(self) -> int:
        """Last sample occupied by this SCR for SCL estimation."""
        if self.half_recovery_index is None:
            return self.peak_index
        return self.half_recovery_index


def _as_float_array(values: list[float | None]) -> np.ndarray:
    return np.array([np.nan if v is None else v for v in values], dtype=float)


class SCRResult(BaseModel):
    """Results from a single FA detection run."""

    model_config = ConfigDict(frozen=True)

    rap_threshold_percent: float = Field(gt=0, description="RAP threshold used")
    sampling_rate: float = Field(gt=0, description="Sampling rate (Hz)")
    config: DetectionConfig = Field(description="Fixed thresholds used")
    events: list[SCREvent] = Field(description="SCRs ordered by peak time")
    scr_total_count: int = Field(ge=0, description="Number of SCRs")
    scl_average: float | None = Field(
        default=None, description="Mean SCL outside SCRs (uS), None if undefined"
    )
    assessments: list[PeakAssessment] = Field(
        default_factory=list, description="Per-candidate diagnostics"
    )

    @property
    def scr_onset_time(self) -> np.ndarray:
        return _as_float_array([e.onset_time for e in self.events])

    @property
    def scr_onset_value(self) -> np.ndarray:
        return _as_float_array([e.onset_value for e in self.events])

    @property
    def scr_peak_time(self) -> np.ndarray:
        return _as_float_array([e.peak_time for e in self.events])

    @property
    def scr_peak_value(self) -> np.ndarray:
        return _as_float_array([e.peak_value for e in self.events])

    @property
    def scr_amplitude(self) -> np.ndarray:
        return _as_float_array([e.amplitude for e in self.events])

    @property
    def scr_half_recovery_time(self) -> np.ndarray:
        return _as_float_array([e.half_recovery_time for e in self.events])

    @property
    def scr_half_recovery_value(self) -> np.ndarray:
        return _as_float_array([e.half_recovery_value for e in self.events])

    def rejection_counts(self) -> dict[RejectionReason, int]:
        """Count rejected candidate peaks by reason."""
        counts = {reason: 0 for reason in RejectionReason}
        for assessment in self.assessments:
            if assessment.rejection is not None:
                counts[assessment.rejection] += 1
        return counts
