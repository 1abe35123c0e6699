from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "ELI5 Cast API"
    neynar_base_url: str = "https://api.neynar.com/v2"
    neynar_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_api_key: str | None = None
    http_timeout: float = 15.0
    log_level: str = "INFO"
    session_limit: int = 1000
    session_idle_ttl: float = 3600.0

    class Config:
        env_file = ".env"
        env_prefix = "ELI5_"


@lru_cache(1)
def get_settings() -> Settings:
    return Settings()
