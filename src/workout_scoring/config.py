"""Configuration settings for the workout scoring engine."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.team import SeasonPhase, TeamLevel


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Only the remote scorer and logging read these. The rule-based engine
    keeps its thresholds as module constants.
    """

    # OpenAI
    openai_api_key: str = ""

    # Model selection
    llm_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 800
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 30.0

    # Team context sent with remote scoring requests
    season_phase: SeasonPhase = SeasonPhase.OFF_SEASON
    team_level: TeamLevel = TeamLevel.SEMI_PRO

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings (for testing)."""
    get_settings.cache_clear()
