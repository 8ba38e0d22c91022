"""Library configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from FIELDRULES_* environment variables."""

    # Logging
    LOG_LEVEL: str = "info"
    LOG_JSON: bool = False
    LOG_FILE: str = ""

    # Per-rule execution outcomes at debug level
    LOG_EXECUTIONS: bool = True

    model_config = {"env_prefix": "FIELDRULES_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
