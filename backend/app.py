"""FastAPI application entry point for AirPaste."""

import logging
import sys
from datetime import timedelta

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers
from services.gateway import Gateway
from services.keygen import assert_random_source_available
from services.store import ConcurrentDatastore, Datastore

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def build_gateway() -> Gateway:
    store = ConcurrentDatastore(Datastore(default_ttl=timedelta(seconds=settings.default_ttl_seconds)))
    return Gateway(store)


def create_app(gateway: Gateway | None = None) -> FastAPI:
    app = FastAPI(title="AirPaste", version="1.0.0")
    app.state.gateway = gateway if gateway is not None else build_gateway()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.paste import router as paste_router

    app.include_router(health_router)
    app.include_router(paste_router)

    @app.on_event("startup")
    async def _self_check() -> None:
        # Refuse to serve without a working entropy source
        assert_random_source_available()
        for problem in settings.validate():
            logger.warning("Config problem: %s", problem)

    return app


app = create_app()


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
