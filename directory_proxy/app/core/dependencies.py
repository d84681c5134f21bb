"""
Construction of the service graph and FastAPI dependency providers.

``build_services`` wires one set of services per application instance
and is the single place where stores, the Shopify client and the
services meet.  Endpoints receive services through ``Depends`` on the
providers below, which read them from ``app.state``.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from .config import Settings
from .storage import GroupIndexStore, JsonDocumentStore, MediaCache
from directory_proxy.app.services.directory_service import DirectoryService
from directory_proxy.app.services.group_service import CategoryGroupService
from directory_proxy.app.services.invalidation_service import CacheInvalidator
from directory_proxy.app.services.listing_service import ListingAggregator
from directory_proxy.app.services.media_service import MediaResolver
from directory_proxy.app.services.shopify_client import ShopifyClient


@dataclass
class Services:
    client: ShopifyClient
    media_cache: MediaCache
    group_store: GroupIndexStore
    media: MediaResolver
    groups: CategoryGroupService
    directory: DirectoryService
    invalidator: CacheInvalidator


def build_services(settings: Settings, client: Optional[ShopifyClient] = None) -> Services:
    """Create stores and services for one application instance.

    Both durable documents are loaded here; missing or corrupt files
    yield empty state.
    """
    client = client or ShopifyClient(settings)
    media_cache = MediaCache(JsonDocumentStore(settings.media_cache_path))
    group_store = GroupIndexStore(JsonDocumentStore(settings.category_groups_path))
    media = MediaResolver(client, media_cache)
    groups = CategoryGroupService(
        client,
        group_store,
        category_type=settings.category_metaobject_type,
        key_mode=settings.group_key_mode,
    )
    aggregator = ListingAggregator(client, media, listing_type=settings.listing_metaobject_type)
    invalidator = CacheInvalidator(
        settings.invalidator_url,
        settings.invalidate_key,
        prefix=f"{settings.api_prefix}/directory",
    )
    return Services(
        client=client,
        media_cache=media_cache,
        group_store=group_store,
        media=media,
        groups=groups,
        directory=DirectoryService(aggregator, groups),
        invalidator=invalidator,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_directory_service(request: Request) -> DirectoryService:
    return get_services(request).directory


def get_group_service(request: Request) -> CategoryGroupService:
    return get_services(request).groups


def get_invalidator(request: Request) -> CacheInvalidator:
    return get_services(request).invalidator
