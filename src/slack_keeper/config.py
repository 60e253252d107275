"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from slack_keeper.models.keeper import DEFAULT_DESCRIPTION_STRATEGIES, DescriptionStrategy


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Slack
    slack_bot_token: str = ""
    slack_signing_secret: str = ""

    # Keeper
    keeper_api_base: str = "https://api.keeper.app"
    keeper_oauth_url: str = ""
    keeper_client_id: str = ""
    keeper_client_secret: str = ""
    keeper_token_safety_margin: float = 60.0
    keeper_page_size: int = 100
    keeper_description_strategies: list[DescriptionStrategy] = list(
        DEFAULT_DESCRIPTION_STRATEGIES
    )

    # Client directory refresh
    client_refresh_minutes: float = 30.0

    # Scheduler
    scheduler_secret: str = ""

    # App
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def token_url(self) -> str:
        """OAuth token endpoint, defaulting to <api base>/oauth/token."""
        return self.keeper_oauth_url or f"{self.keeper_api_base.rstrip('/')}/oauth/token"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
