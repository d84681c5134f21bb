"""
Listing aggregation.

``ListingAggregator`` walks every page of ``directory_listing``
metaobjects and turns each one into a flat ``Listing``.  Shopify
represents a field in one of three shapes: an inline scalar ``value``,
a reference to a ``MediaImage`` or a reference to another metaobject
whose own fields may again be references.  ``extract_field_value``
folds those shapes into a ``FieldValue``, which is either a string or a
mapping of nested field values.

Listings are built per request and never persisted.
"""

import logging
from typing import Dict, List, Mapping, Optional, Union

from directory_proxy.app.core.slug import slugify
from directory_proxy.app.schemas.listing import Listing
from directory_proxy.app.schemas.upstream import MetaobjectField, MetaobjectNode
from directory_proxy.app.services.media_service import MediaResolver, is_absolute_url
from directory_proxy.app.services.shopify_client import LISTINGS_QUERY, ShopifyClient, parse_connection

logger = logging.getLogger(__name__)

LISTING_PAGE_SIZE = 250
# Hard bound on page fetches per aggregation.  Reaching it truncates the
# result instead of failing the request.
MAX_PAGE_FETCHES = 21
# Nested metaobject references deeper than this resolve to their handle.
MAX_REFERENCE_DEPTH = 3

FEATURED_FLAGS = frozenset({"true", "1", "yes", "y", "featured"})

FieldValue = Union[str, Mapping[str, "FieldValue"]]
FieldBag = Dict[str, FieldValue]

# Listing fields copied verbatim from the field bag.
_PLAIN_FIELDS = (
    "address",
    "description_rich",
    "phone",
    "email",
    "website",
    "insta",
    "facebook",
    "tiktok",
    "google_map",
    "hours_mon",
    "hours_tue",
    "hours_wed",
    "hours_thu",
    "hours_fri",
    "hours_sat",
    "hours_sun",
)


def extract_field_value(field: Optional[MetaobjectField], depth: int = 0) -> FieldValue:
    """Resolve a single metaobject field.

    Precedence: inline value, media image URL, nested metaobject fields
    (as a mapping), reference handle, empty string.
    """
    if field is None:
        return ""
    if field.value:
        return field.value
    reference = field.reference
    if reference is None:
        return ""
    if reference.image is not None and reference.image.url:
        return reference.image.url
    if reference.fields and depth < MAX_REFERENCE_DEPTH:
        return {inner.key: extract_field_value(inner, depth + 1) for inner in reference.fields}
    if reference.handle:
        return reference.handle
    return ""


def flatten_fields(node: MetaobjectNode) -> FieldBag:
    return {field.key: extract_field_value(field) for field in node.fields}


def _text(bag: FieldBag, *keys: str) -> str:
    """Return the first non‑empty string value among ``keys``."""
    for key in keys:
        value = bag.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _category_handle(node: MetaobjectNode, bag: FieldBag) -> str:
    """Raw category identifier, ``category_handle`` taking precedence.

    A category stored as a metaobject reference flattens into a mapping;
    in that case the reference's own handle identifies the category.
    """
    raw_fields = {field.key: field for field in node.fields}
    for key in ("category_handle", "category"):
        value = bag.get(key)
        if isinstance(value, str) and value:
            return value
        field = raw_fields.get(key)
        if field is not None and field.reference is not None and field.reference.handle:
            return field.reference.handle
    return ""


def _description(bag: FieldBag) -> str:
    value = bag.get("description")
    if isinstance(value, Mapping):
        text = value.get("text")
        return text if isinstance(text, str) else ""
    return value or ""


def is_featured(value: Optional[FieldValue]) -> bool:
    if not isinstance(value, str):
        return False
    return value.lower() in FEATURED_FLAGS


class ListingAggregator:
    """Fetch and normalize every directory listing."""

    def __init__(
        self,
        client: ShopifyClient,
        media: MediaResolver,
        listing_type: str = "directory_listing",
    ) -> None:
        self.client = client
        self.media = media
        self.listing_type = listing_type

    async def fetch_nodes(self) -> List[MetaobjectNode]:
        """Page through all listing metaobjects.

        Stops when Shopify reports no further page or after
        ``MAX_PAGE_FETCHES`` requests.  Upstream errors propagate.
        """
        nodes: List[MetaobjectNode] = []
        cursor: Optional[str] = None
        for _ in range(MAX_PAGE_FETCHES):
            data = await self.client.execute(
                LISTINGS_QUERY,
                {"type": self.listing_type, "first": LISTING_PAGE_SIZE, "after": cursor},
            )
            connection = parse_connection(data)
            nodes.extend(connection.nodes)
            page_info = connection.page_info
            if not page_info.has_next_page or not page_info.end_cursor:
                break
            cursor = page_info.end_cursor
        else:
            logger.warning(
                "Listing pagination stopped after %d pages; %d listings collected",
                MAX_PAGE_FETCHES,
                len(nodes),
            )
        return nodes

    async def build_listing(self, node: MetaobjectNode) -> Listing:
        bag = flatten_fields(node)

        image = _text(bag, "image")
        if image and not is_absolute_url(image):
            image = await self.media.resolve(image)

        return Listing(
            id=node.id,
            handle=node.handle,
            name=_text(bag, "name") or node.handle,
            category=slugify(_category_handle(node, bag)),
            featured=is_featured(bag.get("featured")),
            image=image,
            description=_description(bag),
            youtube=_text(bag, "youtube", "youtube_url", "youtube_handle"),
            updated_at=node.updated_at or "",
            **{key: _text(bag, key) for key in _PLAIN_FIELDS},
        )

    async def fetch_listings(self) -> List[Listing]:
        nodes = await self.fetch_nodes()
        listings = [await self.build_listing(node) for node in nodes]
        logger.debug("Aggregated %d listings", len(listings))
        return listings
