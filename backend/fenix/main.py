from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import fenix.models  # noqa: F401
from fenix.api.router import api_router
from fenix.core.config import settings
from fenix.db.session import Base, engine

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    logger.info("CORS allow_origins=%s", settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.on_event("startup")
    def _startup() -> None:
        """
        Local-dev helper: when DATABASE_URL points at SQLite, create the tables directly.
        """
        db_url = settings.database_url or ""
        if settings.environment == "development" and db_url.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)

    app.include_router(api_router)
    return app


app = create_app()
