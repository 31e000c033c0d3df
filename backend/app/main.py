from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.api_v1 import api_router
from app.core.config import Settings, settings as default_settings
from app.core.errors import ContactAPIError
from app.core.logging_config import setup_logging
from app.db.base import Base
from app.db.session import build_session_factory, engine as default_engine

import app.models

logger = logging.getLogger(__name__)


def _allowed_origin(origin: Optional[str], allowed: list[str]) -> Optional[str]:
    if "*" in allowed:
        return origin or "*"
    if origin and origin in allowed:
        return origin
    return None


def _apply_cors(request: Request, response: Response, allowed: list[str]) -> Response:
    origin = _allowed_origin(request.headers.get("origin"), allowed)
    if origin:
        response.headers["Access-Control-Allow-Origin"] = origin

    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    request_headers = request.headers.get("Access-Control-Request-Headers")
    if request_headers:
        response.headers["Access-Control-Allow-Headers"] = request_headers
    else:
        response.headers["Access-Control-Allow-Headers"] = "*"

    response.headers["Access-Control-Allow-Credentials"] = "false"
    return response


def create_app(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[Engine] = None,
    http_client: Optional[httpx.Client] = None,
) -> FastAPI:
    settings = settings or default_settings
    engine = engine or default_engine
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.http_client = http_client or httpx.Client()

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        return _apply_cors(request, response, settings.CORS_ORIGINS)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(ContactAPIError)
    async def contact_error_handler(request: Request, exc: ContactAPIError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body') or 'body'}: {err.get('msg')}"
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "Invalid data", "details": details})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Wrong method on a known path is reported like any unmatched route.
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={"error": "Route not found", "path": request.url.path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        # Runs outside cors_middleware, so the headers are added here.
        response = JSONResponse(status_code=500, content={"error": "Internal server error"})
        return _apply_cors(request, response, settings.CORS_ORIGINS)

    @app.get("/")
    def root() -> dict:
        return {
            "message": f"{settings.PROJECT_NAME} is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.on_event("startup")
    def on_startup() -> None:
        Base.metadata.create_all(bind=app.state.engine)
        logger.info("Submit contacts: POST %s/contacto", settings.API_V1_STR)
        logger.info("List contacts: GET %s/contactos", settings.API_V1_STR)

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        app.state.http_client.close()

    app.include_router(api_router, prefix=settings.API_V1_STR)

    return app


app = create_app()
