import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from api.main import api_router
from api.routes import info
from core.db import create_db_engine, init_db
from core.memory_store import InMemoryTomatoStore
from core.settings import Settings, settings
from core.sql_store import SqlTomatoStore
from core.store import TomatoStore
from models.success_response import ErrorResponse
from services.tomatoes import TomatoService

logger = logging.getLogger('uvicorn.error')

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def build_store(app_settings: Settings) -> TomatoStore:
    if app_settings.STORE_BACKEND == "memory":
        return InMemoryTomatoStore()
    return SqlTomatoStore(create_db_engine(app_settings))


def create_app(app_settings: Settings = settings, store: TomatoStore | None = None) -> FastAPI:
    """
    Build the application around an explicit store. Without one, the store is
    chosen from ``STORE_BACKEND``.
    """
    logger.setLevel(app_settings.LOG_LEVEL.upper())

    if store is None:
        store = build_store(app_settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if isinstance(store, SqlTomatoStore):
            init_db(store.engine)
        logger.info("Serving tomatoes from %s", type(store).__name__)
        yield
        store.close()

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.tomato_service = TomatoService(store)
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if app_settings.RESTRICT_HOSTS:
        app.add_middleware(
            TrustedHostMiddleware, allowed_hosts=app_settings.TRUSTED_HOSTS,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.detail).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "error": "Invalid request body",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )

    app.include_router(info.router)
    app.include_router(api_router, prefix=app_settings.API_PREFIX)

    # must stay the last route
    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def endpoint_not_found(request: Request):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "success": False,
                "error": "Endpoint not found",
                "path": request.url.path,
            },
        )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
