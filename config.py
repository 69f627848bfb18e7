"""Application configuration module.

Reads settings from environment variables with sane defaults. A ``.env``
file in the working directory is loaded first when present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from core.constants import ImportDefaults, RaffleDefaults, ThemeDefaults
from core.exceptions import ConfigurationError

load_dotenv()

DEFAULT_SECRET_KEY = "dev_secret_key_must_be_changed_in_production_environment"


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


def _get_optional_str(*names: str) -> Optional[str]:
    """Return the first non-empty variable among ``names``."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


@dataclass(frozen=True)
class Config:
    environment: str
    debug: bool
    web_host: str
    web_port: int
    secret_key: str
    max_file_size: int
    log_folder: str
    log_level: str
    gemini_api_key: Optional[str]
    gemini_model: str
    gemini_base_url: str
    ai_timeout: int
    default_prize_name: str
    spin_tick_ms: int
    spin_ticks: int
    spin_display_batch: int

    @property
    def spin_tick_interval(self) -> float:
        """Tick interval in seconds."""
        return max(self.spin_tick_ms, 0) / 1000.0

    @property
    def ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)


def load_config() -> Config:
    """Load application configuration from environment variables.

    Returns:
        Config: Application configuration with validated values

    Raises:
        ConfigurationError: If WEB_PORT is not a valid TCP port
    """
    config = Config(
        environment=_get_str("ENVIRONMENT", "development"),
        debug=_get_bool("DEBUG", False),
        web_host=_get_str("WEB_HOST", "0.0.0.0"),
        web_port=_get_int("WEB_PORT", 5000),
        secret_key=_get_str("SECRET_KEY", DEFAULT_SECRET_KEY),
        max_file_size=_get_int("MAX_FILE_SIZE", ImportDefaults.MAX_FILE_SIZE),
        log_folder=_get_str("LOG_FOLDER", "logs"),
        log_level=_get_str("LOG_LEVEL", "INFO"),
        gemini_api_key=_get_optional_str("GEMINI_API_KEY", "API_KEY"),
        gemini_model=_get_str("GEMINI_MODEL", ThemeDefaults.MODEL),
        gemini_base_url=_get_str("GEMINI_BASE_URL", ThemeDefaults.BASE_URL),
        ai_timeout=_get_int("AI_TIMEOUT", ThemeDefaults.TIMEOUT),
        default_prize_name=_get_str("DEFAULT_PRIZE_NAME", RaffleDefaults.PRIZE_NAME),
        spin_tick_ms=_get_int("SPIN_TICK_MS", RaffleDefaults.TICK_INTERVAL_MS),
        spin_ticks=max(_get_int("SPIN_TICKS", RaffleDefaults.TICK_COUNT), 1),
        spin_display_batch=max(_get_int("SPIN_DISPLAY_BATCH", RaffleDefaults.DISPLAY_BATCH), 1),
    )

    if not 0 < config.web_port < 65536:
        raise ConfigurationError(f"WEB_PORT must be between 1 and 65535, got {config.web_port}")

    return config
