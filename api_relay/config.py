"""
Application settings for API Relay.

Values are read from environment variables prefixed with ``API_RELAY_``
(or a local ``.env`` file) when the module is first imported.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="API_RELAY_",
        env_file=".env",
        extra="ignore"
    )

    app_name: str = "API Relay"

    # History
    history_capacity: int = 100

    # CORS
    cors_allow_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"


settings = Settings()
