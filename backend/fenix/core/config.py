from __future__ import annotations

import json
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings import NoDecode


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Fenix Ledger"
    environment: str = Field(default="development")  # development | production

    database_url: str = Field(default="sqlite+pysqlite:///./fenix.db")

    @field_validator("database_url", mode="before")
    @classmethod
    def _normalize_postgres_url(cls, v: str | None) -> str | None:
        # Hosted providers hand out postgresql://... which makes SQLAlchemy pick psycopg2.
        # We install psycopg (v3), so force that driver when none is given.
        if v and v.startswith("postgresql://") and "+" not in v.split("?")[0]:
            return "postgresql+psycopg://" + v[len("postgresql://") :]
        return v

    # Accepts a single URL, a comma-separated string or a JSON list.
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        validation_alias="CORS_ORIGINS",
    )

    # A cron job can hit /tasks/daily with this token to refresh invoice statuses.
    tasks_daily_secret: str = Field(default="dev-tasks-secret-change-me")

    # Sync client
    api_base_url: str = Field(default="http://localhost:8000")
    sync_interval_seconds: float = Field(default=45.0, gt=0)
    backend_timeout_seconds: float = Field(default=15.0, gt=0)
    backend_retry_attempts: int = Field(default=3, ge=1)
    local_store_path: str = Field(default=".fenix/local_store.json")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):  # noqa: ANN001
        """
        Accept: string, comma-separated, or JSON list.
        """
        if v is None:
            return []
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except ValueError:
                    parsed = None
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
            return [p.strip() for p in s.split(",") if p.strip()]
        if isinstance(v, (list, tuple, set)):
            return [str(x).strip() for x in v if str(x).strip()]
        return v

    @field_validator("cors_origins", mode="after")
    @classmethod
    def _ensure_cors_origins(cls, v: list[str]) -> list[str]:
        result = [x for x in v if x]
        if not result:
            result = ["http://localhost:5173"]
        return result


settings = Settings()
