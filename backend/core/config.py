from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Backend
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8000
    APP_DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Feed validation
    FEED_COERCE: bool = False  # Opt-in: parse numeric strings, upper-case currency codes
    FEED_DATETIME_ALLOW_OFFSET: bool = False  # Accept +HH:MM offsets besides 'Z'
    FEED_BATCH_CONCURRENCY: int = 8
    FEED_MAX_BATCH_SIZE: int = 1000

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
