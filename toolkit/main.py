# toolkit/main.py
import time
from typing import Optional

from fastapi import FastAPI, Request

from toolkit.core.errors import ToolkitError
from toolkit.core.logging_config import logger, setup_logging
from toolkit.core.settings import ToolkitSettings
from toolkit.routers import demo
from toolkit.tools import Tools


def create_app(settings: Optional[ToolkitSettings] = None) -> FastAPI:
    app = FastAPI(title="toolkit", version="0.1.0")
    app.state.tools = Tools(settings)

    # ----------------------------------------------------
    # Health
    # ----------------------------------------------------
    @app.get("/health", include_in_schema=True)
    def health() -> dict:
        return {"status": "ok"}

    # ----------------------------------------------------
    # Logging middleware
    # ----------------------------------------------------
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start = time.time()
        bound_logger = logger.bind(
            request_id=request.headers.get("X-Request-ID", "unknown"),
            ip=request.client.host if request.client else "unknown",
            endpoint=str(request.url.path),
            method=request.method,
        )

        bound_logger.info("request_started")
        response = await call_next(request)
        latency_ms = round((time.time() - start) * 1000, 2)

        bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
            "request_finished"
        )
        return response

    # ----------------------------------------------------
    # Errors -> JSON envelope
    # ----------------------------------------------------
    @app.exception_handler(ToolkitError)
    async def toolkit_error_handler(request: Request, exc: ToolkitError):
        logger.warning("toolkit_error", kind=exc.kind.value, message=exc.message, path=str(request.url.path))
        return app.state.tools.error_json(exc, exc.http_status)

    app.include_router(demo.router)
    return app


setup_logging()
app = create_app()
