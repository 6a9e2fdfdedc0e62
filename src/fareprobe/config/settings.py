"""Runtime configuration for fareprobe using pydantic-settings.

Supports environment variables (``FAREPROBE_`` prefix), .env files,
and type validation.
"""

import os
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..model.enums import SelectionPolicy


class FareprobeSettings(BaseSettings):
    """Main configuration settings for fareprobe."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FAREPROBE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Polling
    automation_tick_interval: float = Field(
        1.2, gt=0.0, description="Seconds between automation ticks of one session"
    )
    monitor_tick_interval: float = Field(
        0.5, gt=0.0, description="Seconds between passive monitoring scans"
    )
    initial_delay: float = Field(
        2.0, ge=0.0, description="Seconds to let the target app load before the first tick"
    )
    session_timeout: float = Field(
        60.0, gt=0.0, description="Wall-clock budget in seconds for a whole session"
    )
    run_in_background: bool = Field(
        True, description="Drive sessions from polling threads (False: caller ticks manually)"
    )

    # Budgets
    locate_retry_bound: int = Field(
        10, ge=0, description="Failed destination-field lookups tolerated before failing"
    )
    entry_retry_bound: int = Field(
        3, ge=0, description="Failed text injections tolerated before moving on anyway"
    )
    selection_retry_bound: int = Field(
        10, ge=0, description="Failed suggestion selections tolerated before moving on anyway"
    )
    suggestion_settle_ticks: int = Field(
        3, ge=0, description="Ticks to wait for the target app to populate suggestions"
    )
    price_wait_ticks: int = Field(
        10, ge=0, description="No-result ticks tolerated while waiting for a price"
    )
    prompt_interval: float = Field(
        3.0, ge=0.0, description="Minimum seconds between two manual-completion prompts"
    )

    # Extraction
    selection_policy: SelectionPolicy = Field(
        SelectionPolicy.LOWEST, description="Default fare selection policy"
    )
    identifier_markers: list[str] = Field(
        default_factory=lambda: [":id/", "_id/", "://"],
        description="Substrings marking a string as an internal identifier, never a fare",
    )
    target_apps_path: Path | None = Field(
        None, description="YAML catalog overriding the bundled target apps"
    )

    # Logging
    debug_mode: bool = Field(False, description="Enable debug logging and readable output")
    log_level: str = Field("INFO", description="Log level")
    log_path: Path | None = Field(None, description="Directory for log files")
    structured_logs: bool = Field(True, description="Render logs as JSON")

    @model_validator(mode="after")
    def _check_session_budget(self) -> "FareprobeSettings":
        """Validate that the session budget leaves room for at least one tick."""
        if self.session_timeout <= self.initial_delay:
            raise ValueError(
                f"session_timeout ({self.session_timeout}s) must exceed "
                f"initial_delay ({self.initial_delay}s)"
            )
        return self


class DevelopmentSettings(FareprobeSettings):
    """Development-specific settings."""

    debug_mode: bool = True
    log_level: str = "DEBUG"
    structured_logs: bool = False


class TestSettings(FareprobeSettings):
    """Test-specific settings: no background threads, tiny budgets."""

    __test__ = False

    automation_tick_interval: float = 0.01
    monitor_tick_interval: float = 0.01
    initial_delay: float = 0.0
    session_timeout: float = 5.0
    run_in_background: bool = False
    prompt_interval: float = 0.0


# Singleton instance
_settings: FareprobeSettings | None = None


def get_settings(env: str | None = None) -> FareprobeSettings:
    """Get the singleton settings instance.

    Args:
        env: Environment name ('development', 'production', 'test')

    Returns:
        FareprobeSettings instance
    """
    global _settings

    if _settings is None:
        env_name = env or os.getenv("FAREPROBE_ENV", "production")
        if env_name == "development":
            _settings = DevelopmentSettings()
        elif env_name == "test":
            _settings = TestSettings()
        else:
            _settings = FareprobeSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
