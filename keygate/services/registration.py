"""
Registration service
Gives out one OpenRouter key per email while registration is open
"""
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from keygate.core.errors import (
    DuplicateRegistrationError,
    RegistrationClosedError,
    ValidationError,
)
from keygate.core.openrouter import OpenRouterKeysClient
from keygate.core.registration import ConfigProvider
from keygate.models import InviteResponse, RegistrationConfig, RegistrationStatus

logger = logging.getLogger(__name__)


class RegistrationService:
    """
    Invite flow: flag check, email check, duplicate check, key creation.

    The duplicate check and the creation are separate upstream calls, so two
    concurrent invites for the same email can both get a key.
    """

    def __init__(self, config_provider: ConfigProvider, keys_client: OpenRouterKeysClient):
        self.config_provider = config_provider
        self.keys_client = keys_client

    async def _load_config(self) -> RegistrationConfig:
        # File read, kept off the event loop
        return await run_in_threadpool(self.config_provider.load)

    async def status(self) -> RegistrationStatus:
        config = await self._load_config()
        return RegistrationStatus(registrationEnabled=config.registration_enabled)

    async def invite(self, email: Optional[str]) -> InviteResponse:
        config = await self._load_config()
        if not config.registration_enabled:
            raise RegistrationClosedError()

        if not email or not email.strip():
            raise ValidationError("Email is required")

        logger.info(f"Processing registration for {email}")

        if await self.keys_client.find_key_by_email(email):
            logger.info(f"Rejected duplicate registration for {email}")
            raise DuplicateRegistrationError(email)

        key = await self.keys_client.create_key(email)
        return InviteResponse(
            apiKey=key.key,
            keyHash=key.hash,
            limit=key.limit,
            name=key.name or self.keys_client.key_name(email)
        )
