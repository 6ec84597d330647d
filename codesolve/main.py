from __future__ import annotations

import logging

from fastapi import FastAPI

from codesolve.api.routes import router
from codesolve.core.config import settings
from codesolve.core.logging import configure_logging
from codesolve.db.init_db import init_db


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="CodeSolve", version="0.1.0")
    app.include_router(router)

    @app.get("/")
    async def root():
        return {
            "message": "Upload or type a coding problem to get Python and Java solutions",
            "docs": "/docs",
            "health": "/health",
        }

    @app.on_event("startup")
    async def _startup() -> None:
        logging.getLogger(__name__).info(
            "startup",
            extra={"app_env": settings.app_env, "remote_ocr_configured": bool(settings.ocr_space_api_key)},
        )
        await init_db()

    return app


app = create_app()
