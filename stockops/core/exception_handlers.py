# stockops/core/exception_handlers.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stockops.core.exceptions import BaseServiceError


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BaseServiceError)
    async def service_error_handler(request: Request, exc: BaseServiceError) -> JSONResponse:
        # Raised from dependencies (auth) before a route can build its own response
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
