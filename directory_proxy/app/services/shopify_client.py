"""
Thin async client for the Shopify Admin GraphQL API.

All upstream traffic goes through ``ShopifyClient.execute``.  Transport
errors, HTTP error statuses, unparseable bodies and GraphQL ``errors``
arrays are all raised as ``UpstreamError`` so callers only need to
handle one exception type.  The client owns a single
``httpx.AsyncClient`` with an explicit timeout; a hung upstream call
fails the owning request instead of hanging it forever.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from directory_proxy.app.core.config import Settings
from directory_proxy.app.schemas.upstream import MetaobjectConnection

logger = logging.getLogger(__name__)


LISTINGS_QUERY = """
query GetListings($type: String!, $first: Int!, $after: String) {
  metaobjects(type: $type, first: $first, after: $after) {
    nodes {
      id
      handle
      updatedAt
      fields {
        key
        value
        reference {
          ... on MediaImage { id image { url } }
          ... on Metaobject {
            handle
            type
            fields {
              key
              value
              reference {
                ... on MediaImage { id image { url } }
                ... on Metaobject { handle type fields { key value } }
              }
            }
          }
        }
      }
    }
    pageInfo { hasNextPage endCursor }
  }
}
"""

CATEGORIES_QUERY = """
query GetCategories($type: String!, $first: Int!) {
  metaobjects(type: $type, first: $first) {
    nodes {
      handle
      fields { key value }
    }
  }
}
"""

MEDIA_QUERY = """
query GetMedia($id: ID!) {
  node(id: $id) {
    ... on MediaImage {
      id
      image { url }
    }
  }
}
"""


class UpstreamError(Exception):
    """Raised when a Shopify GraphQL call fails for any reason."""


def parse_connection(data: Dict[str, Any]) -> MetaobjectConnection:
    """Validate the ``metaobjects`` page of a query result.

    A payload that does not match the expected shape is an upstream
    failure like any other.
    """
    try:
        return MetaobjectConnection.model_validate(data.get("metaobjects") or {})
    except ValidationError as e:
        raise UpstreamError(f"Shopify returned a malformed metaobjects page: {e.error_count()} errors") from e


class ShopifyClient:
    """Executes GraphQL documents against the configured shop."""

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.url = settings.graphql_url
        self._token = settings.shopify_admin_token
        self._http = http_client or httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run ``query`` and return its ``data`` object.

        Raises
        ------
        UpstreamError
            On any transport, HTTP or GraphQL level failure.
        """
        headers = {
            "X-Shopify-Access-Token": self._token,
            "Content-Type": "application/json",
        }
        try:
            response = await self._http.post(
                self.url, headers=headers, json={"query": query, "variables": variables or {}}
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Shopify request failed: {e}") from e

        if response.is_error:
            raise UpstreamError(f"Shopify returned HTTP {response.status_code}: {response.text[:500]}")
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError("Shopify returned a non-JSON body") from e

        if not isinstance(payload, dict):
            raise UpstreamError("Shopify returned an unexpected payload")
        if payload.get("errors"):
            raise UpstreamError(json.dumps(payload["errors"], ensure_ascii=False))
        return payload.get("data") or {}

    async def aclose(self) -> None:
        await self._http.aclose()
