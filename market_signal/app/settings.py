from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Keys must be provided via env / .env / Secrets Manager (never hardcode secrets in code)
    news_api_key: str | None = None
    openai_api_key: str | None = None
    langsmith_api_key: str | None = None
    langsmith_project: str | None = None
    langchain_tracing_v2: bool = False

    model_name: str = "gpt-4o-mini"
    model_temperature: float = 0.2
    openai_base_url: str | None = None

    quotes_base_url: str = "https://stooq.com/q/d/l/"
    news_base_url: str = "https://newsapi.org/v2/everything"

    request_timeout: float = 30.0
    history_limit: int = 100  # trading days returned by /api/history
    news_limit: int = 5  # headlines fed to the model

    # Bounded retry for the two fetch stages (never the model call)
    fetch_max_retries: int = 2
    retry_initial_delay: float = 0.5
    retry_max_delay: float = 4.0
    retry_backoff_factor: float = 2.0

    disconnect_poll_interval: float = 0.5

    cors_allow_origins: List[str] = ["*"]
    static_dir: str = "public"
    host: str = "0.0.0.0"
    port: int = 3000

    # AWS Secrets Manager fallback for missing keys
    secrets_manager_secret_name: str | None = None
    aws_region: str = "us-east-1"


settings = Settings()  # load once at import
