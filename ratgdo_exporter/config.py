"""Application configuration via environment variables and .env file.

Uses pydantic-settings to load configuration from environment variables
with optional fallback to a .env file.  Command-line flags parsed in
``ratgdo_exporter.main`` take precedence over both.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the ratgdo exporter.

    Attributes:
        JSON_ADDRESS: URL of the ratgdo JSON status endpoint.
        HOST: Interface the metrics server binds to.
        PORT: Port the metrics server listens on.
        LOCATION: Value of the ``location`` label applied to every gauge.
        LOG_LEVEL: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    JSON_ADDRESS: str = "http://ratgdo/status.json"
    HOST: str = "0.0.0.0"
    PORT: str = "8080"
    LOCATION: str = "home"
    LOG_LEVEL: str = "INFO"


settings = Settings()
