from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # .env is loaded by hand in get_settings() so a missing or unreadable file never
    # stops the proxy from starting.
    model_config = SettingsConfigDict(extra="ignore")

    app_env: str = "dev"
    allowed_origins: str = "http://localhost:3000"
    log_level: str = "INFO"

    presign_ttl_seconds: int = 3600
    list_max_keys: int = 1000
    list_delimiter: str = "/"
    default_aws_region: str = "us-east-1"
    r2_endpoint_template: str = "https://{account_id}.r2.cloudflarestorage.com"
    upload_max_bytes: int = 50 * 1024 * 1024

    # client side
    state_dir: str = "~/.bucketview"
    proxy_url: str = "http://127.0.0.1:8000"
    client_timeout_s: float = 30.0

    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def state_path(self) -> Path:
        return Path(self.state_dir).expanduser()


@lru_cache
def get_settings() -> Settings:
    try:
        from dotenv import load_dotenv

        load_dotenv(".env", override=False)
    except OSError:
        pass
    return Settings()
