"""
Resolution of Shopify ``MediaImage`` references into CDN URLs.

Listing images are frequently stored as opaque global IDs such as
``gid://shopify/MediaImage/123``.  ``MediaResolver`` turns those into
durable image URLs, remembering each answer forever in the persistent
``MediaCache``.  Resolution never raises: when Shopify cannot answer,
the original reference is returned and callers must read a
reference‑shaped image value as "unresolved".
"""

import logging
import re

from directory_proxy.app.core.storage import MediaCache
from directory_proxy.app.services.shopify_client import MEDIA_QUERY, ShopifyClient, UpstreamError

logger = logging.getLogger(__name__)

MEDIA_REFERENCE_PREFIX = "gid://shopify/MediaImage"
_ABSOLUTE_URL = re.compile(r"^https?://")


def is_absolute_url(value: str) -> bool:
    return bool(_ABSOLUTE_URL.match(value or ""))


class MediaResolver:
    """Resolve media references through a write‑once cache."""

    def __init__(self, client: ShopifyClient, cache: MediaCache) -> None:
        self.client = client
        self.cache = cache

    async def resolve(self, reference: str) -> str:
        """Return a URL for ``reference`` or ``reference`` itself.

        Absolute URLs and strings that are not media references pass
        through untouched.  A cache miss costs exactly one upstream
        lookup; a non‑empty answer is cached and persisted before it is
        returned.
        """
        if not reference:
            return ""
        if is_absolute_url(reference) or not reference.startswith(MEDIA_REFERENCE_PREFIX):
            return reference

        cached = self.cache.get(reference)
        if cached:
            return cached

        try:
            data = await self.client.execute(MEDIA_QUERY, {"id": reference})
        except UpstreamError as e:
            logger.warning("Media resolve failed for %s: %s", reference, e)
            return reference

        node = data.get("node") or {}
        image = node.get("image") or {}
        url = image.get("url") or ""
        if not url:
            logger.warning("Media reference %s has no image URL upstream", reference)
            return reference

        try:
            self.cache.put(reference, url)
        except OSError as e:
            # The entry is already held in memory; only durability is lost.
            logger.warning("Media cache could not be persisted: %s", e)
        return url
