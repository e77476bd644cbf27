"""
Environment validation utilities.

Ensures the service fails fast on misconfiguration while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import os
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from streakmap.core.config import settings
from streakmap.models.streak import CurrentStreakPolicy, WeekStart


class EnvValidationError(RuntimeError):
    """Raised when environment validation fails."""


def _is_valid_timezone(name: str) -> bool:
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def _require_choice(var: str, value: Optional[str], choices) -> None:
    allowed = [choice.value for choice in choices]
    if (value or "").lower() not in allowed:
        raise EnvValidationError(f"{var} must be one of {', '.join(allowed)} (got {value!r})")


def _require_positive(var: str, value) -> None:
    if not isinstance(value, int) or value < 1:
        raise EnvValidationError(f"{var} must be a positive integer (got {value!r})")


def validate_env(env: Optional[str] = None, settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        env: Override environment name (defaults to settings.ENV)
        settings_obj: Override settings object (defaults to streakmap.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        EnvValidationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    mode = (env or getattr(cfg, "ENV", "development") or "development").lower()

    if mode not in ("development", "test", "production"):
        raise EnvValidationError(f"ENV must be development, test or production (got {mode!r})")

    tz_name = getattr(cfg, "STREAK_TIMEZONE", None)
    if not _is_valid_timezone(tz_name):
        raise EnvValidationError(f"STREAK_TIMEZONE is not a known IANA timezone (got {tz_name!r})")

    _require_choice("STREAK_WEEK_START", getattr(cfg, "STREAK_WEEK_START", None), WeekStart)
    _require_choice("STREAK_CURRENT_POLICY", getattr(cfg, "STREAK_CURRENT_POLICY", None), CurrentStreakPolicy)
    _require_positive("STREAK_MIN_COUNT", getattr(cfg, "STREAK_MIN_COUNT", None))
    _require_positive("HEATMAP_LEVELS", getattr(cfg, "HEATMAP_LEVELS", None))
    _require_positive("MAX_INPUT_DATES", getattr(cfg, "MAX_INPUT_DATES", None))
    _require_positive("MAX_SPAN_DAYS", getattr(cfg, "MAX_SPAN_DAYS", None))

    if mode == "production" and getattr(cfg, "CORS_ALLOW_ORIGINS", "*").strip() == "*":
        raise EnvValidationError("CORS_ALLOW_ORIGINS must list explicit origins in production")

    return True
