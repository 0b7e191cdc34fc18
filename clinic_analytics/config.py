from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    database_url: str = "sqlite:///./clinic_analytics.db"

    jwt_secret_key: str = "change-this-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60

    # CORS configuration - comma-separated list of allowed origins
    # Example: "https://dashboard.example.com,https://admin.example.com"
    cors_allowed_origins: Optional[str] = None

    # Dashboard result cache: entries live for one hour, at most 100 kept
    dashboard_cache_ttl_seconds: int = 3600
    dashboard_cache_max_entries: int = 100

    # Per-principal request budget on the analytics routes
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 60

    # Thread pool size for independent aggregations within one request
    aggregation_max_workers: int = 3

    # IANA zone used to decide what "today", "this week" and "this month" mean
    reporting_timezone: str = "UTC"

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def get_cors_origins(self) -> list[str]:
        """Get list of CORS allowed origins, combining defaults with env var.

        - Strips whitespace
        - Removes trailing slashes
        - Deduplicates
        """
        default_origins = [
            "http://localhost:5173",
            "http://localhost:3000",
        ]

        all_origins = list(default_origins)

        if self.cors_allowed_origins:
            for origin in self.cors_allowed_origins.split(","):
                cleaned = origin.strip().rstrip("/")
                if cleaned and cleaned not in all_origins:
                    all_origins.append(cleaned)

        return all_origins


@lru_cache()
def get_settings() -> Settings:
    return Settings()
