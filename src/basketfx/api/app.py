"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from basketfx.api.errors import register_exception_handlers
from basketfx.config import get_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="basketfx API",
        description="Unsigned transaction preparation for currency baskets",
        version="0.1.0",
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routes
    from basketfx.api.routes import health
    from basketfx.web.controllers import prices_router, transactions_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(transactions_router)
    app.include_router(prices_router)

    return app
