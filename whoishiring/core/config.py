from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "whoishiring"
    environment: str = "dev"
    database_url: str | None = None
    database_pool_min_size: int = 1
    database_pool_max_size: int = 10
    hn_api_base_url: str = "https://hacker-news.firebaseio.com/v0"
    hiring_account: str = "whoishiring"
    story_title_prefix: str = "Ask HN: Who is hiring?"
    # The current hiring story is always among the account's three newest submissions.
    story_candidate_count: int = 3
    http_timeout_seconds: float = 10.0
    sync_on_startup: bool = True
    host: str = "127.0.0.1"
    port: int = 8080
    otel_enabled: bool = True
    otel_service_name: str = "whoishiring"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: str | None = None
    otel_trace_sample_ratio: float = 1.0
    otel_log_correlation: bool = True

    model_config = SettingsConfigDict(env_prefix="WIH_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
