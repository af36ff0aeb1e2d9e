"""
Application configuration from environment variables.
Settings class using pydantic-settings with optional validation.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend root so it loads when running from backend/ or project root
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

_DEFAULT_ORIGIN = "http://localhost:3000"


class Settings(BaseSettings):
    """
    Application settings loaded from environment and .env.
    All fields optional with defaults for local dev; validate for production.
    """

    # Application
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    # Store as string so an env value never triggers json.loads; parsed in cors_origins_list.
    cors_origins: str = Field(
        default=_DEFAULT_ORIGIN,
        description="Comma-separated origins or JSON array",
        validation_alias="CORS_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Contact store
    contacts_data_file: str = Field(
        default="",
        description="JSON snapshot file for contacts; empty keeps contacts in memory only",
        validation_alias="CONTACTS_DATA_FILE",
    )
    seed_contacts: bool = Field(
        default=True,
        description="Load the demo contacts when the store starts empty",
        validation_alias="SEED_CONTACTS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def normalize_cors_origins(cls, v: object) -> str:
        """Ensure we always have a string (avoid empty env causing json.loads in pydantic-settings)."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return _DEFAULT_ORIGIN
        if isinstance(v, list):
            return ",".join(str(x).strip() for x in v if str(x).strip())
        return str(v).strip()

    @field_validator("contacts_data_file", "LOG_LEVEL", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated or JSON array string."""
        raw = (self.cors_origins or "").strip()
        if not raw:
            return [_DEFAULT_ORIGIN]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return [x.strip() for x in parsed if isinstance(x, str) and x.strip()]
        return [x.strip() for x in raw.split(",") if x.strip()] or [_DEFAULT_ORIGIN]

    @property
    def contacts_data_path(self) -> Path | None:
        if not self.contacts_data_file:
            return None
        return Path(self.contacts_data_file).expanduser()

    def validate_for_production(self) -> None:
        """
        Call to validate settings before serving production traffic.
        Raises ValueError listing every problem found.
        """
        problems: List[str] = []
        if "*" in self.cors_origins_list:
            problems.append("CORS_ORIGINS must not contain '*'")
        if not self.contacts_data_file:
            problems.append("CONTACTS_DATA_FILE (contacts would be lost on restart)")
        if problems:
            raise ValueError(f"Invalid production configuration: {', '.join(problems)}")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
