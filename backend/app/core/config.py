from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    app_name: str = "PlanPro"
    debug: bool = False
    log_level: str = "INFO"
    route_prefix: str = "/make-server-825f6f99"

    # Supabase (key-value table)
    supabase_url: str
    supabase_service_key: str
    kv_table: str = "kv_store_825f6f99"

    # Bearer token expected on every call; empty accepts any bearer token
    api_access_token: str = ""

    # OpenAI
    openai_api_key: str = ""
    llm_model: str = "gpt-4o-mini"

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    llm_provider: str = "openai"

    # Generation parameters
    llm_temperature: float = 0.7
    llm_max_tokens: int = 4096
    llm_timeout_seconds: float = 60.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
