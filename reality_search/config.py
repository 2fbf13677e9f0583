from functools import lru_cache
from typing import Dict, List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ProviderId


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    environment: str = Field(default="development", alias="APP_ENV")

    # Server-owned upstream credentials. Any of them may be absent.
    serpapi_api_key: str | None = Field(default=None, alias="SERPAPI_API_KEY")
    searchapi_api_key: str | None = Field(default=None, alias="SEARCHAPI_API_KEY")
    brave_api_key: str | None = Field(default=None, alias="BRAVE_API_KEY")

    serpapi_base_url: str = Field(default="https://serpapi.com/search.json", alias="SERPAPI_BASE_URL")
    searchapi_base_url: str = Field(default="https://www.searchapi.io/api/v1/search", alias="SEARCHAPI_BASE_URL")
    brave_base_url: str = Field(default="https://api.search.brave.com/res/v1/web/search", alias="BRAVE_BASE_URL")

    # Accept per-request user keys ("bring your own key") from request headers
    enable_byo_key: bool = Field(default=True, alias="ENABLE_BYO_KEY")

    # Cost control
    daily_miss_budget: int = Field(default=1500, alias="DAILY_MISS_BUDGET")
    rate_limit_max_requests: int = Field(default=30, alias="RATE_LIMIT_MAX_REQUESTS")
    rate_limit_window_seconds: int = Field(default=3600, alias="RATE_LIMIT_WINDOW_SECONDS")

    # Upstream calls
    upstream_timeout_seconds: float = Field(default=10.0, alias="UPSTREAM_TIMEOUT_SECONDS")
    results_per_request: int = Field(default=20, alias="RESULTS_PER_REQUEST")

    # CDN cache tier for server-key responses
    cache_ttl_seconds: int = Field(default=604800, alias="CACHE_TTL_SECONDS")  # 7 days
    swr_seconds: int = Field(default=0, alias="SWR_SECONDS")
    stale_if_error_seconds: int = Field(default=604800, alias="STALE_IF_ERROR_SECONDS")

    build_sha: str = Field(default="dev", validation_alias=AliasChoices("BUILD_SHA", "GITHUB_SHA"))
    allowed_origins: List[str] = Field(default_factory=lambda: [], alias="ALLOWED_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,  # Treat empty strings as not set
        populate_by_name=True,
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        """Parse ALLOWED_ORIGINS from comma-separated string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v or []

    @field_validator(
        "daily_miss_budget",
        "rate_limit_max_requests",
        "rate_limit_window_seconds",
        "results_per_request",
        "cache_ttl_seconds",
        "swr_seconds",
        "stale_if_error_seconds",
    )
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("upstream_timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("UPSTREAM_TIMEOUT_SECONDS must be > 0")
        return v

    def server_credentials(self) -> Dict[ProviderId, str]:
        """Server-owned keys by provider, blank values dropped."""
        keys = {
            ProviderId.SERPAPI: self.serpapi_api_key,
            ProviderId.SEARCHAPI: self.searchapi_api_key,
            ProviderId.BRAVE: self.brave_api_key,
        }
        return {provider: key.strip() for provider, key in keys.items() if key and key.strip()}

    def base_url_for(self, provider: ProviderId) -> str:
        return {
            ProviderId.SERPAPI: self.serpapi_base_url,
            ProviderId.SEARCHAPI: self.searchapi_base_url,
            ProviderId.BRAVE: self.brave_base_url,
        }[provider]


@lru_cache
def get_settings() -> Settings:
    return Settings()
