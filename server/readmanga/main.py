"""Read-Manga FastAPI Application Entry Point."""

from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger
from .routers import health_router, manga_router
from .services.auth import TokenValidator
from .services.catalog import CatalogService
from .services.errors import CatalogError

logger = get_logger(__name__)


def _install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        body = exc.to_response().model_dump()
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid parameters", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        settings: Settings = request.app.state.settings
        return JSONResponse(
            status_code=500,
            content={
                "message": "Internal server error",
                "error": str(exc) if settings.is_development else "An error occurred",
            },
        )


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[CatalogService] = None,
    token_validator: Optional[TokenValidator] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    catalog = catalog or CatalogService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info(
            "Read-Manga API starting",
            environment=settings.environment,
            upstream=settings.mangadex_base_url,
            cache_ttl=settings.cache_ttl,
        )
        yield
        await catalog.aclose()

    app = FastAPI(
        title="Read-Manga API",
        description="Cached proxy over the MangaDex catalog",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.catalog = catalog
    app.state.token_validator = token_validator

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_exception_handlers(app)

    # Include routers with /api prefix
    app.include_router(health_router, prefix="/api")
    app.include_router(manga_router, prefix="/api")

    return app


def run():
    """Run the server."""
    settings = get_settings()
    uvicorn.run(
        "readmanga.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
