"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 4000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = "sqlite+aiosqlite:///./classroom_bank.db"
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    timeout_seconds: float = Field(default=10.0, gt=0)


class CorsSettings(BaseModel):
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])


class SchedulerSettings(BaseModel):
    """Recurring obligation scheduling.

    ``recurrence_mode`` selects between the fixed calendar tables resolved when
    an obligation is created and a rolling recurrence anchored at creation.
    ``deduplicate_jobs`` keys jobs by obligation id; turning it off brings back
    one extra live job per registration.
    """

    recurrence_mode: Literal["fixed_at_creation", "rolling"] = "fixed_at_creation"
    deduplicate_jobs: bool = True
    restore_on_startup: bool = True
    timezone: str = "UTC"


class TimeTravelSettings(BaseModel):
    max_days: int = Field(default=3650, gt=0)


class MessagingSettings(BaseModel):
    class_target_prefix: str = "class-message-"


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Classroom Bank Server"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    cors: CorsSettings = CorsSettings()
    scheduler: SchedulerSettings = SchedulerSettings()
    time_travel: TimeTravelSettings = TimeTravelSettings()
    messaging: MessagingSettings = MessagingSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port


@lru_cache()
def get_settings() -> Settings:
    return Settings()
