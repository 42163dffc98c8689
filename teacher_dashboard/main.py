"""
FastAPI application entrypoint for the teacher dashboard.
"""

from __future__ import annotations

from fastapi import FastAPI

from teacher_dashboard.api.routes import router as api_router
from teacher_dashboard.core.config import get_settings
from teacher_dashboard.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Teacher Dashboard",
        version="0.1.0",
        description="Session and authentication API backing the teacher dashboard.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
