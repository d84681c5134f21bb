"""
Best‑effort invalidation of the edge cache in front of the proxy.

After the group index changes, cached ``/directory`` responses at the
edge are stale.  ``CacheInvalidator.schedule`` starts a detached task
that calls the invalidation webhook; the request that triggered it
neither waits for the task nor sees its failures.
"""

import asyncio
import logging
from typing import Optional, Set

import httpx

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Calls ``<url>?prefix=<prefix>`` with an ``x-api-key`` header."""

    def __init__(
        self,
        url: str,
        api_key: str,
        prefix: str,
        timeout_seconds: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.prefix = prefix
        self.timeout_seconds = timeout_seconds
        self._http = http_client
        # Strong references keep running tasks from being garbage collected.
        self._tasks: Set["asyncio.Task[None]"] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def schedule(self) -> Optional["asyncio.Task[None]"]:
        """Start invalidation in the background; return the task, if any."""
        if not self.enabled:
            logger.debug("Cache invalidation skipped: no invalidator URL configured")
            return None
        task = asyncio.get_running_loop().create_task(self.invalidate())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def invalidate(self) -> None:
        """Call the webhook once.  Never raises."""
        headers = {"x-api-key": self.api_key} if self.api_key else {}
        try:
            if self._http is not None:
                response = await self._send(self._http, headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await self._send(client, headers)
        except httpx.HTTPError as e:
            logger.warning("Cache invalidation request error: %s", e)
            return
        if response.is_error:
            logger.warning("Cache invalidation failed [%s]: %s", response.status_code, response.text[:500])
        else:
            logger.info("Cache invalidation successful: %s", response.text[:500])

    async def _send(self, client: httpx.AsyncClient, headers: dict) -> httpx.Response:
        return await client.get(self.url, params={"prefix": self.prefix}, headers=headers)

    async def drain(self) -> None:
        """Wait for in‑flight invalidations (used on shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
