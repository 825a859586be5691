"""
Formatter and logging configuration.

Settings are read from environment variables (and a local ``.env`` file):

    STACKDRIVER_SERVICE=api
    STACKDRIVER_VERSION=1.2.0
    STACKDRIVER_PROJECT_ID=my-project
    STACKDRIVER_STACK_SKIP=myapp.logutil,myapp.middleware
    STACKDRIVER_LOG_LEVEL=DEBUG
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FormatterSettings(BaseSettings):
    """Error Reporting metadata and origin resolution settings."""

    model_config = SettingsConfigDict(
        env_prefix="STACKDRIVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    service: str = Field(default="", description="Service name for Error Reporting")
    version: str = Field(default="", description="Service version for Error Reporting")
    project_id: str = Field(default="", description="GCP project used to qualify log names")
    stack_skip: str = Field(
        default="",
        description="Comma-separated packages skipped when locating the error origin",
    )
    timestamps: bool = Field(default=True, description="Stamp entries with the current time")

    @property
    def stack_skip_packages(self) -> tuple[str, ...]:
        return tuple(p.strip() for p in self.stack_skip.split(",") if p.strip())


class LoggingSettings(BaseSettings):
    """Logging pipeline configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STACKDRIVER_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
