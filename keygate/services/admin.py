"""
Bulk key administration
"""
import asyncio
import logging
from typing import Awaitable, Callable, List

from keygate.core.errors import UpstreamError
from keygate.core.openrouter import OpenRouterKeysClient
from keygate.models import BulkResult, ProvisionedKey

logger = logging.getLogger(__name__)


class KeyAdminService:
    """
    List, disable and delete every provisioned key.

    Both bulk operations attempt every key, with at most ``concurrency``
    upstream calls in flight. A failing key is logged and counted; it never
    stops the rest of the batch.
    """

    def __init__(self, keys_client: OpenRouterKeysClient, concurrency: int = 5):
        self.keys_client = keys_client
        self.concurrency = concurrency

    async def list_keys(self) -> List[ProvisionedKey]:
        return await self.keys_client.list_all_keys(include_disabled=True)

    async def _run_bulk(
        self,
        keys: List[ProvisionedKey],
        action: str,
        operation: Callable[[str], Awaitable[object]]
    ) -> BulkResult:
        result = BulkResult(attempted=len(keys))
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(key: ProvisionedKey):
            async with semaphore:
                try:
                    await operation(key.hash)
                except UpstreamError as e:
                    logger.error(f"Failed to {action} key {key.hash}: {e.error}")
                    result.record_failure(key.hash, e.error or e.message)
                else:
                    result.record_success()

        await asyncio.gather(*(run_one(key) for key in keys))
        logger.info(
            f"Bulk {action}: {result.succeeded} succeeded, {result.failed} failed "
            f"of {result.attempted}"
        )
        return result

    async def delete_all(self) -> BulkResult:
        keys = await self.keys_client.list_all_keys(include_disabled=True)
        return await self._run_bulk(keys, "delete", self.keys_client.delete_key)

    async def disable_all(self) -> BulkResult:
        keys = await self.keys_client.list_all_keys(include_disabled=False)
        targets = [key for key in keys if not key.disabled]
        return await self._run_bulk(targets, "disable", self.keys_client.disable_key)
