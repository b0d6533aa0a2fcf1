"""
Server configuration loaded from environment variables (and ``.env``).
NEVER logs secret values.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env")

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:3005",
    "http://127.0.0.1:3005",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8013",
    "http://127.0.0.1:8013",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Project Management API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_PATH: Path = _REPO_ROOT / "data" / "projectboard.db"

    # Auth
    TOKEN_TTL_HOURS: int = 24
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # API server
    APP_HOST: str = "0.0.0.0"
    PORT: int = Field(default=8012, validation_alias=AliasChoices("PORT", "APP_PORT"))
    SERVER_RELOAD: bool = False

    # CORS: comma-separated origins; FRONTEND_URL is always appended
    CORS_ORIGINS: str = ",".join(DEFAULT_CORS_ORIGINS)
    FRONTEND_URL: str = "http://localhost:8013"

    @property
    def allowed_origins(self) -> list[str]:
        origins: list[str] = []
        for origin in [*self.CORS_ORIGINS.split(","), self.FRONTEND_URL]:
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
