"""
Category group index.

Categories are metaobjects that carry an optional ``group`` (or legacy
``category_group``) label.  The group index maps each label to the
categories filed under it and drives the ``g`` filter of the directory
endpoint as well as top‑level navigation in the storefront.  It is
rebuilt wholesale at startup and on explicit refresh.
"""

import logging
from typing import Dict, Optional

from directory_proxy.app.core.slug import slugify
from directory_proxy.app.core.storage import GroupIndex, GroupIndexStore
from directory_proxy.app.services.shopify_client import CATEGORIES_QUERY, ShopifyClient, parse_connection

logger = logging.getLogger(__name__)

CATEGORY_PAGE_SIZE = 250
DEFAULT_GROUP = "Others"
GROUP_KEY_MODES = ("label", "slug")


def _first_text(fields: Dict[str, Optional[str]], *keys: str) -> str:
    for key in keys:
        value = (fields.get(key) or "").strip()
        if value:
            return value
    return ""


class CategoryGroupService:
    """Builds the group index from Shopify and serves snapshots of it."""

    def __init__(
        self,
        client: ShopifyClient,
        store: GroupIndexStore,
        category_type: str = "category",
        key_mode: str = "label",
    ) -> None:
        if key_mode not in GROUP_KEY_MODES:
            raise ValueError(f"Unknown group key mode {key_mode!r}; expected one of {GROUP_KEY_MODES}")
        self.client = client
        self.store = store
        self.category_type = category_type
        self.key_mode = key_mode

    def snapshot(self) -> GroupIndex:
        """Return the group index as currently held in memory."""
        return self.store.snapshot()

    async def rebuild(self) -> GroupIndex:
        """Fetch categories and replace the group index.

        Only the first page of up to 250 categories is read.  Members
        keep the order in which Shopify returned them.  Upstream errors
        propagate and leave the previous index in place.
        """
        data = await self.client.execute(
            CATEGORIES_QUERY, {"type": self.category_type, "first": CATEGORY_PAGE_SIZE}
        )
        connection = parse_connection(data)

        groups: GroupIndex = {}
        for node in connection.nodes:
            fields = {f.key: f.value for f in node.fields}
            label = _first_text(fields, "group", "category_group") or DEFAULT_GROUP
            key = (slugify(label) or slugify(DEFAULT_GROUP)) if self.key_mode == "slug" else label
            name = fields.get("name") or node.handle
            groups.setdefault(key, []).append({"name": name, "handle": node.handle})

        self.store.replace(groups)
        logger.info("Category groups rebuilt: %d groups from %d categories", len(groups), len(connection.nodes))
        return groups
