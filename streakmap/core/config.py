import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False
    LOG_LEVEL: str = "INFO"

    # Streak defaults
    STREAK_TIMEZONE: str = "UTC"  # IANA name, reference zone for day normalization
    STREAK_WEEK_START: str = "monday"  # monday | sunday
    STREAK_MIN_COUNT: int = 1
    STREAK_CURRENT_POLICY: str = "latest"  # latest | recent

    # Heatmap defaults
    HEATMAP_LEVELS: int = 4

    # Request safety caps
    MAX_INPUT_DATES: int = 10000
    MAX_SPAN_DAYS: int = 3660  # first..last day, bounds the week grid

    # HTTP
    CORS_ALLOW_ORIGINS: str = "*"  # comma-separated

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ALLOW_ORIGINS.split(",") if origin.strip()]

settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate tunable defaults.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("streakmap")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    if getattr(cfg, "MAX_INPUT_DATES", 0) < 1000:
        problems.append("MAX_INPUT_DATES below 1000 rejects multi-year histories")
    if getattr(cfg, "MAX_SPAN_DAYS", 0) < 366:
        problems.append("MAX_SPAN_DAYS below 366 rejects a full year heatmap")
    if getattr(cfg, "HEATMAP_LEVELS", 0) > 10:
        problems.append("HEATMAP_LEVELS above 10 produces indistinguishable shades")

    if problems:
        message = f"Questionable configuration: {'; '.join(problems)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
