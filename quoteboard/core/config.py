from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    finnhub_api_key: str = ""
    alpha_vantage_api_key: str = ""
    firi_api_key: str = ""
    # OpenRouter speaks the OpenAI chat-completions protocol; used for company summaries
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "openai/gpt-4o-mini"
    nordnet_session_id: str = ""
    request_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    log_json: bool = False
    static_dir: str = "./client/static"
    host: str = "0.0.0.0"
    port: int = 3000


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
