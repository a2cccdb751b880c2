"""
Constants for fixed-and-adaptive (FA) SCR detection.

Default thresholds follow the recommended parameters of the FA method
(Kleckner et al.): 0.01 uS minimum prominence, 1-3 s rise time and an
8 s look-back window for locating the preceding trough.
"""

from pathlib import Path

# ============================================================================
# Analysis Algorithm Constants
# ============================================================================


class ScrDetectionConstants:
    """
    Constants for SCR detection (analysis/shared/*.py).

    This is the SINGLE SOURCE OF TRUTH for the fixed thresholds. The
    DetectionConfig model uses these values as its defaults.
    """

    MINIMUM_PROMINENCE_US = 0.01
    MIN_RISE_TIME_SEC = 1.0
    MAX_RISE_TIME_SEC = 3.0
    LOOKBACK_WINDOW_SEC = 8.0

    # Half recovery = first return below 50% of the SCR amplitude
    HALF_RECOVERY_FRACTION = 0.5

    # Absolute slack when comparing rise times in samples
    RISE_TIME_TOLERANCE_SAMPLES = 1e-9

    # Relative slack on the sampling period before a time axis is non-uniform
    UNIFORM_SPACING_RTOL = 1e-3


# ============================================================================
# CSV Input
# ============================================================================

TIME_COLUMN = 0
VALUE_COLUMN = 1
MISSING_VALUE_TOKENS = frozenset({"", "nan", "na", "n/a", "null", "none"})

# ============================================================================
# Result Columns
# ============================================================================

SCR_RESULT_COLUMNS = [
    "scr_onset_time",
    "scr_onset_value",
    "scr_peak_time",
    "scr_peak_value",
    "scr_amplitude",
    "scr_half_recovery_time",
    "scr_half_recovery_value",
]

# ============================================================================
# Default Settings
# ============================================================================

DEFAULT_APP_DIR = Path.home() / ".adaptive_eda"
DEFAULT_CONFIG_FILE = "config.toml"

# Logging configuration
DEFAULT_LOG_DIR = DEFAULT_APP_DIR / "logs"
DEFAULT_LOG_FILE = "adaptive_eda.log"
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_LOG_BACKUP_COUNT = 5

# CLI display defaults
DEFAULT_RENDER_WIDTH = 100
DEFAULT_RENDER_HEIGHT = 20
