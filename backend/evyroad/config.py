from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "EvyRoad API"
    version: str = "1.0.0"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"
    seed_demo_data: bool = True
    default_page_limit: int = 50
    max_page_limit: int = 200
    user_id_header: str = "X-User-Id"
    cors_origins: list[str] = ["https://evyroad.com"]
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_file": ".env", "env_prefix": "EVYROAD_", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
