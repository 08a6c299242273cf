"""Runtime configuration read from environment variables.

The look-back window, the episode ratio and the pattern tier counts have no
derivation behind them, so they are settings rather than constants baked into
the analyzers.
"""

import os
from dataclasses import dataclass
from typing import Optional

from core.exceptions import ConfigurationError

# In production, set WRITE_DATABASE_URL and READ_DATABASE_URL to different DB instances.
WRITE_DATABASE_URL = os.getenv("WRITE_DATABASE_URL", "sqlite:///bio_events.db")
READ_DATABASE_URL = os.getenv("READ_DATABASE_URL", WRITE_DATABASE_URL)

DEFAULT_SLEEP_HOURS = 7.5
DEFAULT_AMBIENT_TEMP_C = 20.0


@dataclass(frozen=True)
class InferenceSettings:
    """Tunable thresholds for the correlation analyzer, pattern engine and carb limiter."""

    correlation_window_hours: float = 24.0
    correlation_episode_ratio: float = 0.5
    pattern_clue_count: int = 2
    pattern_evidence_count: int = 3
    carb_safety_cap_grams: float = 50.0


def load_settings(environ: Optional[dict] = None) -> InferenceSettings:
    """Build `InferenceSettings` from the environment.

    Args:
        environ: Optional mapping used instead of `os.environ` (handy in tests).

    Raises:
        ConfigurationError: If a value is not a number or is out of range.
    """
    if environ is not None:
        get = environ.get
    else:
        get = os.environ.get

    def number(key, default, cast):
        raw = get(key)
        if raw is None or str(raw).strip() == "":
            return default
        try:
            return cast(raw)
        except ValueError:
            raise ConfigurationError(f"{key} must be a number, got {raw!r}", config_key=key)

    settings = InferenceSettings(
        correlation_window_hours=number("BIO_CORRELATION_WINDOW_HOURS", 24.0, float),
        correlation_episode_ratio=number("BIO_CORRELATION_EPISODE_RATIO", 0.5, float),
        pattern_clue_count=number("BIO_PATTERN_CLUE_COUNT", 2, int),
        pattern_evidence_count=number("BIO_PATTERN_EVIDENCE_COUNT", 3, int),
        carb_safety_cap_grams=number("BIO_CARB_SAFETY_CAP_GRAMS", 50.0, float),
    )

    if settings.correlation_window_hours <= 0:
        raise ConfigurationError("Correlation window must be positive", config_key="BIO_CORRELATION_WINDOW_HOURS")
    if not 0 < settings.correlation_episode_ratio <= 1:
        raise ConfigurationError("Episode ratio must be in (0, 1]", config_key="BIO_CORRELATION_EPISODE_RATIO")
    if settings.pattern_clue_count < 1:
        raise ConfigurationError("Clue count must be at least 1", config_key="BIO_PATTERN_CLUE_COUNT")
    if settings.pattern_evidence_count <= settings.pattern_clue_count:
        raise ConfigurationError(
            "Evidence count must be greater than the clue count",
            config_key="BIO_PATTERN_EVIDENCE_COUNT",
        )
    if settings.carb_safety_cap_grams <= 0:
        raise ConfigurationError("Carb safety cap must be positive", config_key="BIO_CARB_SAFETY_CAP_GRAMS")
    return settings


def event_store_disabled() -> bool:
    """Return True when persistence is switched off with BIO_EVENT_STORE_DISABLED."""
    return os.getenv("BIO_EVENT_STORE_DISABLED", "").strip().lower() in ("1", "true", "yes")


DEFAULT_SETTINGS = InferenceSettings()
