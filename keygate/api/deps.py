"""
API Dependencies
"""
import secrets
from typing import Optional

from fastapi import Depends, Header, Request

from keygate.core.config import Settings
from keygate.core.errors import AuthError
from keygate.core.openrouter import OpenRouterKeysClient
from keygate.core.registration import ConfigProvider
from keygate.services.admin import KeyAdminService
from keygate.services.registration import RegistrationService


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with"""
    return request.app.state.settings


def get_config_provider(request: Request) -> ConfigProvider:
    """Registration flag source"""
    return request.app.state.config_provider


def get_keys_client(request: Request) -> OpenRouterKeysClient:
    """OpenRouter keys client"""
    return request.app.state.keys_client


def get_registration_service(
    config_provider: ConfigProvider = Depends(get_config_provider),
    keys_client: OpenRouterKeysClient = Depends(get_keys_client)
) -> RegistrationService:
    return RegistrationService(config_provider, keys_client)


def get_admin_service(
    keys_client: OpenRouterKeysClient = Depends(get_keys_client),
    settings: Settings = Depends(get_app_settings)
) -> KeyAdminService:
    return KeyAdminService(keys_client, concurrency=settings.ADMIN_BULK_CONCURRENCY)


async def require_admin_token(
    x_admin_token: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_app_settings)
) -> None:
    """
    Check the x-admin-token header against ADMIN_SECRET_TOKEN

    Raises:
        AuthError if the header is missing or wrong, or no admin token is configured
    """
    if not settings.admin_token_configured or not x_admin_token:
        raise AuthError()

    expected = settings.ADMIN_SECRET_TOKEN.get_secret_value()
    if not secrets.compare_digest(x_admin_token.encode("utf-8"), expected.encode("utf-8")):
        raise AuthError()
