"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal_api.api.v1 import router as v1_router
from portal_api.core.config import get_settings
from portal_api.core.exception_handlers import register_exception_handlers
from portal_api.core.lifespan import create_lifespan
from portal_api.core.limiter import limiter

logging.basicConfig(
    level=logging.DEBUG if get_settings().DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


def create_app() -> FastAPI:
    """Build the application: handlers, CORS, rate limiter and the /api router."""
    settings = get_settings()
    app = FastAPI(
        title="Portal API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=create_lifespan,
    )
    app.state.limiter = limiter
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Portal API", "docs": "/docs", "health": f"{settings.API_PREFIX}/health"}

    return app


app = create_app()
