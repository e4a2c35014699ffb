from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from keygate.api import create_router
from keygate.core.config import Settings, get_settings
from keygate.core.logging import setup_logging
from keygate.core.middleware import setup_error_handlers
from keygate.core.openrouter import OpenRouterKeysClient
from keygate.core.registration import ConfigProvider, FileConfigProvider


def create_app(
    settings: Optional[Settings] = None,
    config_provider: Optional[ConfigProvider] = None,
    keys_client: Optional[OpenRouterKeysClient] = None
) -> FastAPI:
    """
    Build the gateway app

    Args:
        settings: Explicit settings; read from the environment when omitted
        config_provider: Registration flag source; the flag file by default
        keys_client: OpenRouter client; built from settings by default
    """
    settings = settings or get_settings()

    logger = setup_logging(
        level=settings.LOG_LEVEL,
        log_file=settings.LOG_FILE if settings.LOG_TO_FILE else None
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        debug=settings.DEBUG
    )
    app.state.settings = settings
    app.state.config_provider = config_provider or FileConfigProvider(settings.REGISTRATION_CONFIG_PATH)
    app.state.keys_client = keys_client or OpenRouterKeysClient(settings)

    if not settings.admin_token_configured:
        logger.warning("ADMIN_SECRET_TOKEN is not set, admin endpoints will reject every request")

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_error_handlers(app)

    @app.get("/")
    def root():
        return {"message": "Goose Hacknight API is running"}

    @app.get("/api/health")
    def health():
        return {
            "status": "ok",
            "version": settings.VERSION
        }

    app.include_router(create_router())

    # Unmatched paths fall back to the front-end, mounted last
    if settings.STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.STATIC_DIR), html=True), name="static")
        logger.info(f"Serving static files from {settings.STATIC_DIR}")

    return app
