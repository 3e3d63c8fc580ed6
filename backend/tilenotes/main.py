from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .api.middleware.security import SecurityMiddleware
from .api.v1.router import api_router
from .config import settings
from .core.errors import NoteNotFoundError, PersistenceError, TaskNotFoundError
from .dependencies import get_enrichment_scheduler
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Pending settle timers die with the process
    await get_enrichment_scheduler().shutdown()


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Remote store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


async def not_found_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="TileNotes API",
        debug=settings.debug,
        version="0.1.0",
        root_path=settings.root_path or "",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Accept", "Accept-Language", "Content-Language", "Content-Type", "Authorization"],
        expose_headers=["Content-Disposition", "Retry-After"],
        max_age=600,
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityMiddleware)

    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(NoteNotFoundError, not_found_handler)
    app.add_exception_handler(TaskNotFoundError, not_found_handler)
    app.add_exception_handler(ValueError, value_error_handler)

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
