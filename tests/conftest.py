"""Pytest configuration and fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from directory_proxy.app.core.config import Settings
from directory_proxy.app.core.storage import GroupIndexStore, JsonDocumentStore, MediaCache
from directory_proxy.app.services.shopify_client import UpstreamError


def field(key: str, value: Optional[str] = None, reference: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"key": key, "value": value, "reference": reference}


def node(handle: str, node_id: str = "", updated_at: str = "", **values: Any) -> Dict[str, Any]:
    """Build a metaobject node; dict values are passed as raw field dicts."""
    fields = []
    for key, value in values.items():
        fields.append(value if isinstance(value, dict) else field(key, value))
    return {
        "id": node_id or f"gid://shopify/Metaobject/{handle}",
        "handle": handle,
        "updatedAt": updated_at or None,
        "fields": fields,
    }


class FakeShopify:
    """In‑process stand‑in for ``ShopifyClient``.

    Answers the three GraphQL documents the proxy sends, recording
    every call.  ``listing_pages`` is served in order; when
    ``always_more`` is set, every page claims there is another one.
    """

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.listing_pages: List[List[Dict[str, Any]]] = []
        self.categories: List[Dict[str, Any]] = []
        self.media: Dict[str, str] = {}
        self.always_more = False
        self.fail_listings = False
        self.fail_categories = False
        self.fail_media = False
        self.malformed = False
        self.closed = False

    def calls_for(self, operation: str) -> List[tuple]:
        return [c for c in self.calls if operation in c[0]]

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        variables = variables or {}
        self.calls.append((query, variables))
        if "GetMedia" in query:
            if self.fail_media:
                raise UpstreamError("media lookup failed")
            url = self.media.get(variables["id"], "")
            return {"node": {"id": variables["id"], "image": {"url": url} if url else None}}
        if "GetCategories" in query:
            if self.fail_categories:
                raise UpstreamError("categories unavailable")
            if self.malformed:
                return {"metaobjects": {"nodes": None}}
            return {"metaobjects": {"nodes": self.categories}}
        if "GetListings" in query:
            if self.fail_listings:
                raise UpstreamError("listings unavailable")
            if self.malformed:
                return {"metaobjects": {"nodes": None, "pageInfo": {"hasNextPage": False}}}
            after = variables.get("after")
            index = int(after.rsplit("-", 1)[1]) if after else 0
            nodes = self.listing_pages[index] if index < len(self.listing_pages) else []
            has_next = self.always_more or index + 1 < len(self.listing_pages)
            return {
                "metaobjects": {
                    "nodes": nodes,
                    "pageInfo": {"hasNextPage": has_next, "endCursor": f"cursor-{index + 1}" if has_next else None},
                }
            }
        raise AssertionError(f"unexpected query: {query[:40]}")

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def shopify():
    return FakeShopify()


@pytest.fixture
def settings(tmp_path):
    return Settings(cache_dir=str(tmp_path / "cache"), invalidator_url="", log_level="WARNING")


@pytest.fixture
def media_cache(tmp_path):
    return MediaCache(JsonDocumentStore(tmp_path / "media.json"))


@pytest.fixture
def group_store(tmp_path):
    return GroupIndexStore(JsonDocumentStore(tmp_path / "groups.json"))
