"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Event Graph API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    GRAPHQL_PATH: str = "/graphql"

    # Data file
    DATA_FILE: str = "./data.json"
    DATA_FILE_CREATE: bool = True  # write an empty document on startup if missing

    # Event bus
    SUBSCRIPTION_QUEUE_SIZE: int = 0  # 0 = unbounded, otherwise drop-oldest

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
