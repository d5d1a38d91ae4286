"""FastAPI application setup."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .routes import control, messaging, profiles


# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application()
    return _app


def create_fastapi_app(
    application: Application | None = None,
    telegram_webhook_secret: str | None = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    if application is None:
        application = get_app()
    if telegram_webhook_secret is None:
        telegram_webhook_secret = os.getenv("TELEGRAM_WEBHOOK_SECRET") or None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        sim_instance = control.get_sim_instance()
        if sim_instance:
            await sim_instance.stop()
        await application.stop()

    fastapi_app = FastAPI(
        title="Afisha Notifier API",
        description="Subscriptions and daily event digests",
        version="0.1.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:5174"],  # Vite default
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.include_router(
        messaging.create_messaging_router(
            application, webhook_secret=telegram_webhook_secret
        )
    )
    fastapi_app.include_router(profiles.create_profiles_router(application))
    fastapi_app.include_router(control.create_control_router(application))

    return fastapi_app
