# stockops/main.py

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response

from stockops.core.config import Settings, get_settings
from stockops.core.exception_handlers import register_exception_handlers
from stockops.core.logging_config import configure_logging
from stockops.routes import functions, health
from stockops.services.salary_access import SalaryAccessGate

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Stock Operations",
        description="Stock repair, opening stock snapshot and salary gate functions",
        version="1.0.0",
    )
    app.state.settings = settings
    # One gate per app; a missing secret is logged here, once
    app.state.salary_gate = SalaryAccessGate(
        settings.SALARY_ACCESS_PASSWORD, settings.SALARY_PASSWORD_MAX_LENGTH
    )
    cors_headers = settings.cors_headers

    # Pre-flight is answered here for every path, whatever else the request carries
    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=cors_headers)
        response = await call_next(request)
        response.headers.update(cors_headers)
        return response

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(functions.router)

    logger.info(f"Stock Operations started ({settings.ENVIRONMENT})")
    return app
