"""
Centralized configuration for c7-mirror.

Loads environment variables from .env and provides paths and settings.
CLI flags and YAML files override these values (see src.export.exporter.ExportConfig).
"""

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

from utils.exceptions import ConfigError

# Load environment variables
load_dotenv()

DEFAULT_BASE_URL = "https://context7.com"
DEFAULT_DELAY_SECONDS = 20.0


def get_float_var(var_name: str, default: float) -> float:
    """Retrieve a float from environment variables."""
    value = os.getenv(var_name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"Environment variable '{var_name}' must be a number, got {value!r}") from e


def env_settings() -> Dict[str, Any]:
    """Read export settings from the current environment."""
    return {
        "base_url": os.getenv("C7_BASE_URL", DEFAULT_BASE_URL),
        "delay_seconds": get_float_var("C7_DELAY_SECONDS", DEFAULT_DELAY_SECONDS),
        "token_cap": os.getenv("C7_TOKEN_CAP", "unbounded"),
        "report_path": Path(os.getenv("C7_REPORT_PATH", "readme.md")),
        "data_dir": Path(os.getenv("C7_DATA_DIR", "data")),
        "banner_image": os.getenv("C7_BANNER_IMAGE") or None,
    }


# -- Paths --------------------------------------------------------------------

STATE_DIR = Path(os.getenv("C7_STATE_DIR", str(Path.home() / ".c7_mirror")))
LOG_DIR = STATE_DIR / "logs"

# -- Settings -----------------------------------------------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = os.getenv("DEBUG", "false").lower() in ("true", "1", "yes")
