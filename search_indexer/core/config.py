from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SEARCH_SERVICE_", env_file=".env", extra="ignore")

    app_name: str = "search-indexer"
    log_level: str = "INFO"

    db_user: str | None = None
    db_host: str | None = None
    db_port: str | None = None
    db_database: str | None = None
    db_pass: str | None = None
    db_pass_secret: str | None = None
    db_connect_timeout_seconds: int = 10

    secrets_region: str = "eu-west-1"

    opensearch_url: str = "http://localhost:9200"
    opensearch_timeout_seconds: float = 30.0
    opensearch_max_attempts: int = 3
    opensearch_retry_base_seconds: float = 1.0
    opensearch_retry_max_seconds: float = 30.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
