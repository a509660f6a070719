"""pollenTracker FastAPI application entry point.

Wires together the record store, the exposure provider, and the two
services via dependency injection.  Loads configuration from ``.env`` and
``config/config.yaml``, configures structured logging, and initialises the
store once per process in the application lifespan.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    RequestLoggingMiddleware,
    configure_cors,
    register_error_handlers,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.feedback_store import IFeedbackStore
from src.providers.exposure.google_pollen_provider import GooglePollenProvider
from src.providers.feedback.memory_feedback_store import MemoryFeedbackStore
from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
from src.services.analysis_service import AnalysisService
from src.services.correlation_engine import CorrelationEngine
from src.services.feedback_service import FeedbackService
from src.utils.errors import ConfigurationError
from src.utils.logging import configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_feedback_store(store_config: dict[str, Any]) -> IFeedbackStore:
    """Select the record store backend named by the ``store`` config section."""
    backend = str(store_config.get("backend", "sqlite")).lower()
    if backend == "sqlite":
        return SQLiteFeedbackStore(db_path=store_config.get("db_path", "data/feedback.db"))
    if backend == "memory":
        return MemoryFeedbackStore()
    raise ConfigurationError(f"Unknown store backend: {store_config.get('backend')!r}")


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Store and exposure options come from the merged YAML + environment
    config; secrets are read from ``app_settings`` directly.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    config = config if config is not None else load_config(settings=app_settings)
    exposure_config = config.get("exposure", {})

    http_client = httpx.AsyncClient(
        timeout=exposure_config.get("timeout", app_settings.http_timeout),
    )

    feedback_store = _build_feedback_store(config.get("store", {}))
    exposure_provider = GooglePollenProvider(
        api_key=app_settings.google_pollen_api_key,
        http_client=http_client,
        api_url=exposure_config.get("api_url", app_settings.pollen_api_url),
        days=exposure_config.get("forecast_days", app_settings.pollen_forecast_days),
        info_fields=exposure_config.get("info_fields", ["pollenTypeInfo", "plantInfo"]),
    )

    feedback_service = FeedbackService(
        store=feedback_store,
        exposure_provider=exposure_provider,
    )
    analysis_service = AnalysisService(
        store=feedback_store,
        engine=CorrelationEngine(),
    )

    return {
        "http_client": http_client,
        "feedback_store": feedback_store,
        "exposure_provider": exposure_provider,
        "feedback_service": feedback_service,
        "analysis_service": analysis_service,
        "auth_secret": app_settings.auth_secret,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Wire components onto app.state and initialise the store."""
    components = getattr(application.state, "components", None)
    owns_components = components is None
    if owns_components:
        components = _build_all(application.state.settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    store: IFeedbackStore | None = components.get("feedback_store")
    if store is not None:
        await store.initialize()

    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=application.state.settings.app_env,
        store=store.get_provider_name() if store is not None else None,
    )

    try:
        yield
    finally:
        http_client: httpx.AsyncClient | None = components.get("http_client")
        if owns_components and http_client is not None:
            await http_client.aclose()
            _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to build components from.  Defaults to the module-level
        ``settings``.
    components:
        Optional pre-built components (``feedback_service``,
        ``analysis_service``, ``feedback_store``, ...).  When given, the
        lifespan uses them as-is instead of calling ``_build_all()``.
    """
    application = FastAPI(
        title="pollenTracker API",
        version=_VERSION,
        description=(
            "Record allergy symptom feedback alongside local pollen exposure "
            "and correlate each pollen type with a user's reported symptoms."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = app_settings or settings
    if components is not None:
        application.state.components = components

    # -- Middleware (order matters: last added = first executed) --
    configure_cors(application, allowed_origins=application.state.settings.cors_origins())
    application.add_middleware(RequestLoggingMiddleware)
    register_error_handlers(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
