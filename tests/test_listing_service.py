import pytest

from conftest import field, node
from directory_proxy.app.schemas.upstream import MetaobjectField, MetaobjectNode
from directory_proxy.app.services.listing_service import (
    MAX_PAGE_FETCHES,
    ListingAggregator,
    extract_field_value,
    flatten_fields,
    is_featured,
)
from directory_proxy.app.services.media_service import MediaResolver
from directory_proxy.app.services.shopify_client import UpstreamError

GID = "gid://shopify/MediaImage/77"
CDN = "https://cdn.shopify.com/s/files/77.jpg"


def parse_field(raw):
    return MetaobjectField.model_validate(raw)


@pytest.fixture
def aggregator(shopify, media_cache):
    return ListingAggregator(shopify, MediaResolver(shopify, media_cache))


def test_scalar_value_wins_over_reference():
    f = parse_field(field("image", "plain", {"image": {"url": CDN}}))
    assert extract_field_value(f) == "plain"


def test_media_reference_yields_image_url():
    f = parse_field(field("image", None, {"id": GID, "image": {"url": CDN}}))
    assert extract_field_value(f) == CDN


def test_metaobject_reference_flattens_recursively():
    f = parse_field(
        field(
            "description",
            None,
            {
                "handle": "desc-1",
                "type": "rich_text_block",
                "fields": [
                    field("text", "Hello"),
                    field("author", None, {"handle": "kim", "fields": [field("name", "Kim")]}),
                ],
            },
        )
    )
    assert extract_field_value(f) == {"text": "Hello", "author": {"name": "Kim"}}


def test_reference_without_fields_yields_handle():
    f = parse_field(field("category", None, {"handle": "bakery", "type": "category"}))
    assert extract_field_value(f) == "bakery"


def test_empty_shapes_yield_empty_string():
    assert extract_field_value(parse_field(field("x"))) == ""
    assert extract_field_value(parse_field(field("x", None, {}))) == ""
    assert extract_field_value(parse_field(field("x", "", {"image": None}))) == ""
    assert extract_field_value(None) == ""


def test_deep_references_stop_at_handles():
    inner = {"handle": "level-4", "fields": [field("k", "v")]}
    for level in (3, 2, 1):
        inner = {"handle": f"level-{level}", "fields": [field("child", None, inner)]}
    value = extract_field_value(parse_field(field("root", None, inner)))

    assert value == {"child": {"child": {"child": "level-4"}}}


def test_flatten_fields_builds_bag():
    n = MetaobjectNode.model_validate(node("shop", name="Shop", phone="123"))
    assert flatten_fields(n) == {"name": "Shop", "phone": "123"}


@pytest.mark.parametrize("flag", ["true", "TRUE", "1", "yes", "Y", "featured", "Featured"])
def test_featured_flags(flag):
    assert is_featured(flag)


@pytest.mark.parametrize("flag", [None, "", "false", "0", "no", "maybe", " yes ", "true\n", {"text": "true"}])
def test_not_featured_flags(flag):
    assert not is_featured(flag)


@pytest.mark.asyncio
async def test_build_listing_normalizes_record(aggregator):
    raw = node(
        "kims-bakery",
        node_id="gid://shopify/Metaobject/1",
        updated_at="2025-01-02T03:04:05Z",
        name="Kim's Bakery",
        category_handle="Bakery & Cafe",
        category="ignored",
        featured="Yes",
        image=CDN,
        description=field("description", None, {"fields": [field("text", "Fresh bread")]}),
        youtube_url="https://youtube.com/@kims",
        hours_mon="9-5",
    )
    listing = await aggregator.build_listing(MetaobjectNode.model_validate(raw))

    assert listing.id == "gid://shopify/Metaobject/1"
    assert listing.handle == "kims-bakery"
    assert listing.name == "Kim's Bakery"
    assert listing.category == "bakery-cafe"
    assert listing.featured is True
    assert listing.image == CDN
    assert listing.description == "Fresh bread"
    assert listing.youtube == "https://youtube.com/@kims"
    assert listing.hours_mon == "9-5"
    assert listing.hours_sun == ""
    assert listing.address == ""
    assert listing.updated_at == "2025-01-02T03:04:05Z"


@pytest.mark.asyncio
async def test_build_listing_defaults(aggregator):
    listing = await aggregator.build_listing(MetaobjectNode.model_validate(node("bare")))

    assert listing.name == "bare"
    assert listing.category == ""
    assert listing.featured is False
    data = listing.model_dump()
    assert all(value is not None for value in data.values())


@pytest.mark.asyncio
async def test_category_falls_back_to_category_field_and_reference_handle(aggregator):
    by_field = node("a", category="Korean Food")
    by_reference = node(
        "b",
        category=field("category", None, {"handle": "grocery", "type": "category", "fields": [field("name", "Grocery")]}),
    )

    a = await aggregator.build_listing(MetaobjectNode.model_validate(by_field))
    b = await aggregator.build_listing(MetaobjectNode.model_validate(by_reference))

    assert a.category == "korean-food"
    assert b.category == "grocery"


@pytest.mark.asyncio
async def test_nested_description_without_text_becomes_empty(aggregator):
    raw = node("x", description=field("description", None, {"fields": [field("body", "hi")]}))
    listing = await aggregator.build_listing(MetaobjectNode.model_validate(raw))

    assert listing.description == ""


@pytest.mark.asyncio
async def test_media_reference_image_is_resolved(shopify, aggregator):
    shopify.media[GID] = CDN
    listing = await aggregator.build_listing(MetaobjectNode.model_validate(node("x", image=GID)))

    assert listing.image == CDN


@pytest.mark.asyncio
async def test_unresolvable_image_keeps_reference(shopify, aggregator):
    listing = await aggregator.build_listing(MetaobjectNode.model_validate(node("x", image=GID)))

    assert listing.image == GID
    assert len(shopify.calls_for("GetMedia")) == 1


@pytest.mark.asyncio
async def test_fetch_nodes_follows_cursor_until_last_page(shopify, aggregator):
    shopify.listing_pages = [[node("a")], [node("b"), node("c")], [node("d")]]

    nodes = await aggregator.fetch_nodes()

    assert [n.handle for n in nodes] == ["a", "b", "c", "d"]
    afters = [variables["after"] for _, variables in shopify.calls_for("GetListings")]
    assert afters == [None, "cursor-1", "cursor-2"]
    assert all(v["first"] == 250 for _, v in shopify.calls_for("GetListings"))
    assert all(v["type"] == "directory_listing" for _, v in shopify.calls_for("GetListings"))


@pytest.mark.asyncio
async def test_fetch_nodes_stops_after_page_bound(shopify, aggregator, caplog):
    shopify.always_more = True
    shopify.listing_pages = [[node(f"n{i}")] for i in range(30)]

    nodes = await aggregator.fetch_nodes()

    assert MAX_PAGE_FETCHES == 21
    assert len(shopify.calls_for("GetListings")) == 21
    assert len(nodes) == 21
    assert "pagination stopped" in caplog.text


@pytest.mark.asyncio
async def test_fetch_listings_builds_every_node(shopify, aggregator):
    shopify.listing_pages = [[node("a", name="A"), node("b", name="B")]]

    listings = await aggregator.fetch_listings()

    assert [x.name for x in listings] == ["A", "B"]


@pytest.mark.asyncio
async def test_malformed_listing_page_is_an_upstream_error(shopify, aggregator):
    shopify.malformed = True

    with pytest.raises(UpstreamError, match="malformed"):
        await aggregator.fetch_nodes()
