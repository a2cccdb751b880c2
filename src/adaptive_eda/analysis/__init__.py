"""FA thresholding analysis for electrodermal activity."""

from .detector import AdaptiveSCRDetector, run
from .signal import InvalidSignalError
from .types import (
    CandidatePeak,
    DetectionConfig,
    PeakAssessment,
    RejectionReason,
    SCREvent,
    SCRResult,
    TroughCandidate,
)

__all__ = [
    "AdaptiveSCRDetector",
    "CandidatePeak",
    "DetectionConfig",
    "InvalidSignalError",
    "PeakAssessment",
    "RejectionReason",
    "SCREvent",
    "SCRResult",
    "TroughCandidate",
    "run",
]
