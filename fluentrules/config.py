from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FLUENTRULES_", env_file=".env", extra="ignore")

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console output

    # Validator defaults; values match CascadeMode / Severity
    DEFAULT_RULE_LEVEL_CASCADE_MODE: Literal["continue", "stop"] = "continue"
    DEFAULT_CLASS_LEVEL_CASCADE_MODE: Literal["continue", "stop"] = "continue"
    DEFAULT_SEVERITY: Literal["error", "warning", "info"] = "error"
    DISPLAY_NAME_SPLIT_WORDS: bool = True  # "first_name" -> "First Name"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
