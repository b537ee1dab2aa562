from functools import lru_cache
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_base_url: HttpUrl = Field(
        default="https://api.github.com", alias="GITHUB_BASE_URL"
    )
    github_proxy: Optional[str] = Field(default=None, alias="GITHUB_PROXY")
    # search API refuses per_page above 100
    github_per_page: int = Field(default=100, ge=1, le=100, alias="GITHUB_PER_PAGE")
    github_timeout_seconds: float = Field(default=20, gt=0, alias="GITHUB_TIMEOUT_SECONDS")

    cache_ttl_seconds: int = Field(default=3600, gt=0, alias="CACHE_TTL_SECONDS")
    cache_max_size: int = Field(default=1000, ge=1, alias="CACHE_MAX_SIZE")

    weight_stars: float = Field(default=0.5, ge=0, alias="WEIGHT_STARS")
    weight_forks: float = Field(default=0.3, ge=0, alias="WEIGHT_FORKS")
    weight_recency: float = Field(default=0.2, ge=0, alias="WEIGHT_RECENCY")
    recency_half_life_days: float = Field(default=30, gt=0, alias="RECENCY_HALF_LIFE_DAYS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",  # ignore unrelated env vars to avoid validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
