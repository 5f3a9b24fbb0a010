"""Application settings for home-court."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from home_court.runtime_config import current_runtime_config


class Settings(BaseSettings):
    """Runtime settings for the game-log HTTP source and logging."""

    model_config = SettingsConfigDict(
        env_prefix="HOME_COURT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    stats_base_url: str = "https://stats.nba.com/stats"
    stats_timeout_s: float = 30.0
    stats_max_attempts: int = Field(default=4, ge=1)
    stats_requests_per_minute: int = Field(default=20, ge=1)
    stats_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )
    season_type: str = "Regular Season"
    log_level: str = "INFO"

    @classmethod
    def from_runtime(cls) -> "Settings":
        """Construct settings from runtime config, letting env values win where set."""
        runtime = current_runtime_config()
        env_settings = cls()
        overrides = {
            "stats_requests_per_minute": runtime.requests_per_minute,
            "season_type": runtime.season_type,
        }
        for key in overrides:
            if key in env_settings.model_fields_set:
                overrides[key] = getattr(env_settings, key)
        return env_settings.model_copy(update=overrides)
