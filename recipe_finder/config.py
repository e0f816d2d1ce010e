from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"
    test = "test"


class Config(BaseSettings):
    # OPENAI_API_KEY is read by the openai client when openai_api_key is unset.
    model_config = SettingsConfigDict(
        env_prefix="RECIPE_FINDER_", env_file=".env", extra="ignore"
    )

    env: Env = Env.local
    log_level: str = "INFO"
    openai_api_key: str | None = None
    core_model: str = "gpt-4o"
    chat_model: str = "gpt-4o-mini"
    max_tokens: int = 4096
    chat_max_tokens: int = 1024
    timeout: float = 60 * 2
    max_retries: int = 3
    retry_base_delay: float = 1.0
    scraper_delay: float = 1.5
    servings: int = Field(default=2, ge=1, le=8)
    protein_priority: bool = False
    fiber_priority: bool = False
