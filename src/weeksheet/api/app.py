"""FastAPI application factory."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from weeksheet.domain.exceptions import ConfigurationError, ExtractionError, UploadRejectedError
from weeksheet.logging import logger


def create_app() -> FastAPI:
    app = FastAPI(
        title="Weeksheet API",
        version="0.1.0",
    )

    from weeksheet.api.routers.timesheet import router as timesheet_router

    app.include_router(timesheet_router)

    @app.exception_handler(UploadRejectedError)
    def _rejected(request: Request, exc: UploadRejectedError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(ConfigurationError)
    def _misconfigured(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("Configuration error: %s", exc.message)
        return JSONResponse(status_code=500, content={"detail": exc.message})

    @app.exception_handler(ExtractionError)
    def _extraction_failed(request: Request, exc: ExtractionError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": exc.message})

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app
