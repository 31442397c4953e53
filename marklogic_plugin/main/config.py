"""
Application Settings - Main Layer

Pydantic Settings for the process hosting the plugin: environment
variables, an optional ``.env`` file and defaults. Stage connection
properties are not settings; they arrive with each stage.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from marklogic_plugin.shared import EnumEnvironment, EnumLogLevel
from marklogic_plugin.shared.env import load_secret_file_variables


class MarkLogicSettings(BaseSettings):
    """Defaults applied to every MarkLogic connection."""

    request_timeout: float = Field(
        default=30.0, gt=0, description="HTTP request timeout in seconds"
    )
    page_length: int = Field(
        default=100, gt=0, description="Search results fetched per request"
    )

    model_config = SettingsConfigDict(
        env_prefix="MARKLOGIC_", case_sensitive=False, extra="ignore"
    )


class ApiSettings(BaseSettings):
    """Validation API settings."""

    title: str = Field(default="MarkLogic Plugin", description="API title")
    description: str = Field(
        default="Validation service for the MarkLogic pipeline plugin",
        description="API description",
    )
    version: str = Field(default="1.0.0", description="API version")
    host: str = Field(default="0.0.0.0", description="Interface to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    model_config = SettingsConfigDict(
        env_prefix="API_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    marklogic: MarkLogicSettings = Field(default_factory=MarkLogicSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """Settings factory; patched in tests."""
    load_secret_file_variables()
    return AppSettings()
