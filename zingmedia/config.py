from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_project_root = Path(__file__).resolve().parents[1]
load_dotenv(_project_root / ".env", override=False)

DEFAULT_JWT_SECRET = "zingmedia-dev-secret-change-in-production"


class Settings(BaseSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite+pysqlite:///./zingmedia.db"

    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_HOURS: int = 24

    GENERATION_DELAY_SECONDS: float = 3.0
    VIDEO_RENDER_DELAY_SECONDS: float = 5.0
    DEFERRED_TASKS_USE_TIMERS: bool = True

    # When false, any caller with manage_workflow may move a workflow to any state.
    WORKFLOW_ENFORCE_TRANSITIONS: bool = True

    SEED_DEMO_DATA: bool = True
    DEMO_PASSWORD: str = "password"

    MEDIA_BASE_URL: str = "https://cdn.zingmedia.local"

    # Comma-separated list of allowed origins.
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    @field_validator("MEDIA_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("TOKEN_TTL_HOURS")
    @classmethod
    def validate_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("TOKEN_TTL_HOURS must be positive")
        return value

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def uses_default_jwt_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
