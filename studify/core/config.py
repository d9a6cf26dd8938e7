from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from the repo root so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    database_url: str = "postgresql://localhost/studify"
    sql_echo: bool = False

    # AI Generation Service (webhook that returns the daily plan)
    generation_service_url: str | None = None
    generation_api_key: str | None = None
    generation_timeout_seconds: float = 180.0  # 3 minutes, generation can be slow
    probe_timeout_seconds: float = 30.0

    # Roadmap defaults
    default_duration_days: int = 30
    max_custom_days: int = 365

    # Rate limiting (per-user when X-User-Id is present, else per IP)
    create_roadmap_rate_limit: str = "5/minute"

    # CORS (comma-separated origins; * allows all)
    cors_origins: str = "*"

    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parsed CORS origins for middleware."""
        raw = self.cors_origins.strip()
        return ["*"] if not raw else [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
