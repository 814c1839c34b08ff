from functools import lru_cache
from typing import Any, Literal
from urllib.parse import quote_plus
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application Configuration
    API_NAME: str = "Taskboard"
    API_SUMMARY: str = "Task management API with live task updates"
    TASKBOARD_VERSION: str = "1.0.0"

    TASKBOARD_API_KEY: str | None = None

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    CORS_ENABLED: bool = True
    CORS_ORIGINS: list[str] = ["*"]

    # Database Configuration
    STORE_BACKEND: Literal["postgres", "redis"] = "postgres"

    DB_USER: str = Field(..., min_length=1)
    DB_PASS: str = Field(..., min_length=1)
    DB_HOST: str = "localhost"
    DB_PORT: int | None = None
    DB_NAME: str = "task_management"

    # Full connection URL, composed from the DB_* settings when not provided
    DATABASE_URL: str | None = None

    TASK_STORE_NAMESPACE: str = "tasks"
    USER_STORE_NAMESPACE: str = "users"

    # Realtime Settings
    DELIVERY_TIMEOUT_SECONDS: float = 5.0

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "taskboard"

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    @model_validator(mode="after")
    def compose_database_url(self):
        if self.DATABASE_URL:
            return self

        credentials = f"{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASS)}"

        if self.STORE_BACKEND == "postgres":
            port = self.DB_PORT or 5432
            self.DATABASE_URL = f"postgresql://{credentials}@{self.DB_HOST}:{port}/{self.DB_NAME}"
        else:
            port = self.DB_PORT or 6379
            self.DATABASE_URL = f"redis://{credentials}@{self.DB_HOST}:{port}/0"

        return self

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()  # type: ignore[call-arg]
