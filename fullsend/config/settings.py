from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from fullsend.models.schema import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Credentials: either the account auth token or an API key pair
    TWILIO_ACCOUNT_SID: str = Field(default="")
    TWILIO_AUTH_TOKEN: str = Field(default="")
    TWILIO_API_KEY_SID: str = Field(default="")
    TWILIO_API_KEY_SECRET: str = Field(default="")

    # Senders and templates
    TWILIO_FROM_NUMBER: str = Field(default="")
    TWILIO_MESSAGING_SERVICE_SID: str = Field(default="")
    TWILIO_CONTENT_SID: str = Field(default="")

    # Transport
    TWILIO_API_BASE_URL: str = Field(default=DEFAULT_BASE_URL)
    HTTP_TIMEOUT_S: float = Field(default=DEFAULT_TIMEOUT_S)

    LOG_LEVEL: str = Field(default="WARNING")


settings = Settings()
