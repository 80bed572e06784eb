# core/config.py

"""
Application Configuration
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Identity Console API"
    app_version: str = "1.0.0"
    debug: bool = False

    # API Settings
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 8000

    # Identity provider
    identity_api_base_url: str = "https://api.clerk.com/v1"
    request_timeout_seconds: float = 5.0

    # Credential store
    accounts_file: str = "accounts.json"

    # Import job defaults
    default_send_invites: bool = True
    default_delay_seconds: int = 1
    tick_interval_seconds: float = 1.0
    stop_cancels_countdown: bool = False
    generated_password_length: int = 12

    class Config:
        env_prefix = "IDENTITY_CONSOLE_"
        case_sensitive = False


settings = Settings()
