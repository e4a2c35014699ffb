"""
OpenRouter Keys Client
Handles key provisioning calls against the OpenRouter keys API
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from keygate.core.config import Settings
from keygate.core.errors import UpstreamError
from keygate.core.logging import mask_key
from keygate.models import ProvisionedKey

logger = logging.getLogger(__name__)


def _upstream_message(response: httpx.Response, fallback: str) -> str:
    """Pull OpenRouter's error message out of a failed response"""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if payload.get("message"):
            return str(payload["message"])

    return f"{fallback}: {response.reason_phrase or response.status_code}"


def _parse_key(record: Any) -> ProvisionedKey:
    """Validate one upstream key record; a malformed record is an upstream fault"""
    try:
        return ProvisionedKey.model_validate(record)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "record" for err in e.errors())
        logger.error(f"Malformed key record from OpenRouter: {fields}")
        raise UpstreamError(f"Unexpected key record from OpenRouter (invalid: {fields})") from e


def _to_key(payload: Any) -> ProvisionedKey:
    """
    Build a key from a single-record response. The record may be wrapped
    in {"data": {...}}, and the secret sits at the top level on creation.
    """
    if not isinstance(payload, dict):
        raise UpstreamError("Unexpected response from OpenRouter")

    data = payload.get("data")
    record = dict(data) if isinstance(data, dict) else dict(payload)
    if payload.get("key") and not record.get("key"):
        record["key"] = payload["key"]
    return _parse_key(record)


class OpenRouterKeysClient:
    """Client for the OpenRouter key management endpoints"""

    PAGE_SIZE = 100

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def key_name(self, email: str) -> str:
        return f"{self.settings.KEY_NAME_PREFIX}{email}"

    @staticmethod
    def key_label(email: str) -> str:
        return email.replace("@", "-at-", 1)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.OPENROUTER_API_URL,
            headers={
                "Authorization": f"Bearer {self.settings.OPENROUTER_API_KEY.get_secret_value()}",
                "Content-Type": "application/json"
            },
            timeout=self.settings.OPENROUTER_TIMEOUT,
            transport=self._transport
        )

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        failure: str,
        **kwargs
    ) -> Any:
        """
        Send one request and decode its JSON body

        Raises:
            UpstreamError on transport failure, non-success status or a non-JSON body
        """
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{failure}: {type(e).__name__}: {e}")
            raise UpstreamError(f"{failure}: {e}") from e

        if not response.is_success:
            message = _upstream_message(response, failure)
            logger.error(f"OpenRouter API Error ({response.status_code}) on {method} {path}: {message}")
            raise UpstreamError(message, upstream_status=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"{failure}: response was not valid JSON") from e

    async def list_all_keys(self, include_disabled: bool = False) -> List[ProvisionedKey]:
        """
        Fetch every key, one page of PAGE_SIZE at a time

        Stops at the first page shorter than PAGE_SIZE. Keys are returned in
        the order OpenRouter lists them.
        """
        keys: List[ProvisionedKey] = []
        offset = 0

        async with self._client() as client:
            while True:
                params: Dict[str, Any] = {"offset": offset}
                if include_disabled:
                    params["include_disabled"] = "true"

                payload = await self._request(client, "GET", "/keys", "Failed to fetch keys", params=params)
                page = payload.get("data") if isinstance(payload, dict) else None
                if page is None:
                    page = []
                if not isinstance(page, list):
                    raise UpstreamError("Failed to fetch keys: listing was not a list")

                keys.extend(_parse_key(item) for item in page)
                logger.debug(f"Fetched {len(page)} keys at offset {offset}")

                if len(page) < self.PAGE_SIZE:
                    break
                offset += self.PAGE_SIZE

        return keys

    async def find_key_by_email(self, email: str) -> bool:
        """True if a key named after this email exists, disabled keys included"""
        expected_name = self.key_name(email)
        keys = await self.list_all_keys(include_disabled=True)
        return any(key.name == expected_name for key in keys)

    async def create_key(self, email: str) -> ProvisionedKey:
        body = {
            "name": self.key_name(email),
            "label": self.key_label(email),
            "limit": self.settings.OPENROUTER_PRESET_CREDITS
        }
        async with self._client() as client:
            payload = await self._request(
                client, "POST", "/keys", "Failed to create OpenRouter API key", json=body
            )

        key = _to_key(payload)
        if not key.key:
            raise UpstreamError("OpenRouter did not return the new API key")
        logger.info(f"Created key {key.hash} ({mask_key(key.key)}) for {body['label']}")
        return key

    async def disable_key(self, key_hash: str) -> ProvisionedKey:
        async with self._client() as client:
            payload = await self._request(
                client, "PATCH", f"/keys/{key_hash}", "Failed to disable key",
                json={"disabled": True}
            )
        return _to_key(payload)

    async def delete_key(self, key_hash: str) -> bool:
        async with self._client() as client:
            await self._request(client, "DELETE", f"/keys/{key_hash}", "Failed to delete key")
        return True
