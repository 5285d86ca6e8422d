"""Application configuration."""

import os
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from calories_bot.services.referrals import DEFAULT_REFERRAL_BASE_URL

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    analysis_mode: Literal["stub", "forward"] = "stub"
    analysis_base_url: str | None = None
    require_registration: bool = True
    rich_welcome: bool = False
    welcome_image_url: str | None = None
    welcome_link_text: str = "Visit Calories.fun"
    welcome_link_url: str = "https://calories.fun"
    referral_base_url: str = DEFAULT_REFERRAL_BASE_URL
    serialize_per_user: bool = False
    poll_timeout: int = 30
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_mode_settings(self) -> "Settings":
        if self.analysis_mode == "forward" and not self.analysis_base_url:
            raise ValueError("analysis_base_url is required when analysis_mode=forward")
        if self.rich_welcome and not self.welcome_image_url:
            raise ValueError("welcome_image_url is required when rich_welcome=true")
        return self
