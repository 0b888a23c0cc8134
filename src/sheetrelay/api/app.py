"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, settings as default_settings
from ..relay import RelayError, RelayHandler, RetryPolicy
from .routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    app_settings: Settings = app.state.settings
    policy = RetryPolicy.from_settings(app_settings)
    client = httpx.AsyncClient(
        transport=app.state.transport,
        timeout=policy.timeout_seconds,
        follow_redirects=False,
    )
    app.state.relay = RelayHandler(app_settings, client, policy=policy)
    logger.info(f"Apps Script configured: {app_settings.destination_configured}")
    yield
    # Shutdown
    await client.aclose()


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render relay errors as ``{"ok": false, ...}`` bodies."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


def create_app(
    app_settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings to run with (defaults to the environment)
        transport: Optional httpx transport for the downstream client
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="SheetRelay",
        description="Relays spreadsheet rows to a Google Apps Script webhook",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.transport = transport

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RelayError, relay_error_handler)
    app.include_router(router)

    return app
