from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
import os
import logging


class Settings(BaseSettings):
    app_name: str = Field(alias="APP_NAME", default="reminder-app")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    timezone: str = Field(alias="TIMEZONE", default="UTC")

    database_url: str = Field(alias="DATABASE_URL", default="sqlite+pysqlite:///./reminders.db")

    openai_api_key: str = Field(alias="OPENAI_API_KEY", default="")
    openai_base_url: str = Field(alias="OPENAI_BASE_URL", default="https://api.openai.com/v1")
    openai_model: str = Field(alias="OPENAI_MODEL", default="gpt-4o")
    openai_timeout_seconds: float = Field(alias="OPENAI_TIMEOUT_SECONDS", default=60)
    max_upload_bytes: int = Field(alias="MAX_UPLOAD_BYTES", default=20 * 1024 * 1024)

    twilio_account_sid: str = Field(
        default="", validation_alias=AliasChoices("TWILIO_ACCOUNT_SID", "ACCOUNT_SID")
    )
    twilio_auth_token: str = Field(
        default="", validation_alias=AliasChoices("TWILIO_AUTH_TOKEN", "AUTH_TOKEN")
    )
    twilio_base_url: str = Field(alias="TWILIO_BASE_URL", default="https://api.twilio.com/2010-04-01")
    twilio_timeout_seconds: float = Field(alias="TWILIO_TIMEOUT_SECONDS", default=15)
    whatsapp_from: str = Field(alias="WHATSAPP_FROM", default="whatsapp:+14155238886")
    whatsapp_to: str = Field(alias="WHATSAPP_TO", default="")

    scheduler_enabled: bool = Field(alias="SCHEDULER_ENABLED", default=True)
    notify_interval_seconds: float = Field(alias="NOTIFY_INTERVAL_SECONDS", default=1.0, gt=0)

    cors_origins: str = Field(alias="CORS_ORIGINS", default="*")
    host: str = Field(alias="HOST", default="0.0.0.0")
    port: int = Field(alias="PORT", default=9000)

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()  # type: ignore

# Credentials are deliberately left out of this line
_logger = logging.getLogger("core.config")
_logger.info(
    "Settings loaded | env_file=%s | db=%s | scheduler_enabled=%s | notify_interval=%ss | openai_model=%s",
    os.getenv("ENV_FILE", ".env"),
    settings.database_url,
    settings.scheduler_enabled,
    settings.notify_interval_seconds,
    settings.openai_model,
)
