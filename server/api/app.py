from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from server.api.deps import get_settings
from server.api.middleware.errors import build_exception_handler
from server.api.middleware.request_id import build_request_id_middleware
from server.api.routers.health import router as health_router
from server.api.routers.movies import router as movies_router
from server.api.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    s = settings or get_settings()
    app = FastAPI(title="Movie Discovery API", version="1.0.0")

    app.add_middleware(GZipMiddleware, minimum_size=max(0, s.gzip_min_size))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.cors_allow_origins(),
        allow_credentials=s.cors_allow_credentials,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.middleware("http")(build_request_id_middleware(s))
    app.add_exception_handler(Exception, build_exception_handler(s))

    app.include_router(health_router)
    app.include_router(movies_router)

    return app


app = create_app()
