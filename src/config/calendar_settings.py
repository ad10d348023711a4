"""
Calendar settings loader.

Reads scalar settings (market, year range, traversal bound, log level)
from configs/calendar.yaml. Holiday rules themselves are never read from
files; they live in src/calendars/markets.py.

Precedence: explicit overrides > config file > module defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from src.calendars.business_calendar import DEFAULT_MAX_SEARCH_DAYS
from src.calendars.markets import available_markets

logger = logging.getLogger(__name__)


CONFIG_PATH = Path("configs/calendar.yaml")

DEFAULT_MARKET = "target"
DEFAULT_START_YEAR = 2000
DEFAULT_END_YEAR = 2050
DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_calendar_settings(
    config_path: Optional[str] = str(CONFIG_PATH),
    **overrides: Any,
) -> Dict[str, Any]:
    """
    Load calendar settings.

    Args:
        config_path: Path to YAML config (None skips the file)
        **overrides: market, start_year, end_year, max_search_days,
            log_level; None values are ignored

    Returns:
        Dict with keys: market, start_year, end_year, max_search_days, log_level

    Raises:
        ValueError: If the config is malformed or a value is invalid
    """
    config = _load_config(config_path) if config_path else {}
    cal_config = config.get("calendar") or {}
    log_config = config.get("logging") or {}

    if not isinstance(cal_config, dict) or not isinstance(log_config, dict):
        raise ValueError(
            f"'calendar' and 'logging' sections must be mappings in {config_path}"
        )

    settings = {
        "market": cal_config.get("market", DEFAULT_MARKET),
        "start_year": cal_config.get("start_year", DEFAULT_START_YEAR),
        "end_year": cal_config.get("end_year", DEFAULT_END_YEAR),
        "max_search_days": cal_config.get("max_search_days", DEFAULT_MAX_SEARCH_DAYS),
        "log_level": log_config.get("level", DEFAULT_LOG_LEVEL),
    }

    for key, value in overrides.items():
        if key not in settings:
            raise ValueError(f"Unknown calendar setting: {key}")
        if value is not None:
            settings[key] = value

    settings["market"] = str(settings["market"]).lower()
    settings["log_level"] = str(settings["log_level"]).upper()

    _validate_settings(settings)
    return settings


def _load_config(config_path: str) -> Dict[str, Any]:
    """Load YAML config; a missing file falls back to defaults."""
    path = Path(config_path)
    if not path.exists():
        logger.warning("Config file not found at %s; using defaults.", path)
        return {}

    with open(path, "r", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config root must be a mapping in {path}, got {type(config).__name__}")
    return config


def _validate_settings(settings: Dict[str, Any]) -> None:
    """Validate loaded settings."""
    for key in ("start_year", "end_year", "max_search_days"):
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{key} must be an integer, got {value!r}")

    if settings["start_year"] > settings["end_year"]:
        raise ValueError(
            f"start_year ({settings['start_year']}) must be <= "
            f"end_year ({settings['end_year']})"
        )

    if settings["max_search_days"] <= 0:
        raise ValueError(
            f"max_search_days must be > 0, got {settings['max_search_days']}"
        )

    if settings["market"] not in available_markets():
        raise ValueError(
            f"Unknown market calendar: {settings['market']}. "
            f"Available: {available_markets()}"
        )

    if settings["log_level"] not in LOG_LEVELS:
        raise ValueError(
            f"log level must be one of {LOG_LEVELS}, got {settings['log_level']}"
        )
