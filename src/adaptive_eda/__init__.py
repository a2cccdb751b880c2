"""
adaptive-eda: Fixed + adaptive thresholding of electrodermal activity

Detects skin conductance responses (SCRs) and estimates the tonic skin
conductance level (SCL) from a uniformly sampled EDA recording.
"""

from typing import Any

__all__ = ["run", "AdaptiveSCRDetector", "DetectionConfig", "SCRResult"]


def __getattr__(name: str) -> Any:
    """Lazy load the analysis API on first access."""
    if name in __all__:
        from adaptive_eda import analysis

        return getattr(analysis, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
