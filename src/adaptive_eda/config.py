"""Configuration management for adaptive-eda."""

import logging
import os
import tomllib

from pathlib import Path
from typing import Any

import tomli_w

from adaptive_eda.analysis.types import DetectionConfig
from adaptive_eda.constants import DEFAULT_APP_DIR, DEFAULT_CONFIG_FILE

logger = logging.getLogger(__name__)

DETECTION_SECTION = "detection"


def get_config_path() -> Path:
    """
    Get the path to the configuration file.

    Returns:
        Path to ~/.adaptive_eda/config.toml
    """
    return DEFAULT_APP_DIR / DEFAULT_CONFIG_FILE


def load_config() -> dict[str, Any]:
    """
    Load configuration from TOML file.

    Returns:
        Configuration dictionary. Returns empty dict if file doesn't exist
        or is corrupted.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Treating config as empty. Fix or delete the file to resolve.")
        return {}


def save_config(config: dict[str, Any]) -> None:
    """
    Save configuration to TOML file using atomic write.

    Creates the parent directory if it doesn't exist.
    Uses temp file + rename for atomic operation.

    Args:
        config: Configuration dictionary to save

    Raises:
        PermissionError: If directory cannot be created or file cannot be written
    """
    config_path = get_config_path()

    config_dir = config_path.parent
    try:
        os.makedirs(config_dir, exist_ok=True)
    except PermissionError as e:
        raise PermissionError(
            f"Cannot create config directory {config_dir}: {e}"
        ) from e

    temp_path = config_path.with_suffix(".toml.tmp")

    try:
        with open(temp_path, "wb") as f:
            tomli_w.dump(config, f)

        os.replace(temp_path, config_path)

    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def get_detection_settings() -> dict[str, Any]:
    """
    Get the [detection] table from the config file.

    Returns:
        Detection settings, or empty dict if not configured
    """
    section = load_config().get(DETECTION_SECTION, {})
    if not isinstance(section, dict):
        logger.warning(f"Ignoring non-table [{DETECTION_SECTION}] config entry")
        return {}
    return section


def get_detection_config(**overrides: float | None) -> DetectionConfig:
    """
    Build detection thresholds from defaults, config file and overrides.

    Precedence: explicit overrides > config file > DetectionConfig defaults.
    Overrides set to None are ignored.

    Args:
        **overrides: DetectionConfig field values

    Returns:
        Validated DetectionConfig

    Raises:
        pydantic.ValidationError: If the merged values are invalid
    """
    settings = dict(get_detection_settings())
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return DetectionConfig(**settings)


def set_detection_setting(key: str, value: float) -> None:
    """
    Persist one detection threshold in the config file.

    Args:
        key: DetectionConfig field name
        value: New value

    Raises:
        KeyError: If key is not a detection setting
        pydantic.ValidationError: If the resulting configuration is invalid
    """
    if key not in DetectionConfig.model_fields:
        raise KeyError(
            f"Unknown detection setting: {key}. "
            f"Available: {list(DetectionConfig.model_fields)}"
        )

    config = load_config()
    section = dict(config.get(DETECTION_SECTION, {}))
    section[key] = value

    DetectionConfig(**section)

    config[DETECTION_SECTION] = section
    save_config(config)


def unset_detection_setting(key: str) -> bool:
    """
    Remove one detection threshold from the config file.

    If this was the only setting in the detection section, removes the section.
    If config becomes empty, deletes the config file.

    Args:
        key: DetectionConfig field name

    Returns:
        True if the setting was present
    """
    config = load_config()

    if DETECTION_SECTION not in config or key not in config[DETECTION_SECTION]:
        return False

    del config[DETECTION_SECTION][key]

    if not config[DETECTION_SECTION]:
        del config[DETECTION_SECTION]

    if not config:
        config_path = get_config_path()
        if config_path.exists():
            config_path.unlink()
    else:
        save_config(config)
    return True
