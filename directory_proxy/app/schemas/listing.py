"""
Pydantic models for directory listings.

``Listing`` is the normalized, flat record served to clients.  Every
text field is a string (empty when Shopify has no value) so clients
never have to deal with ``null``.  ``ListingPage`` is the page
envelope returned by ``GET /directory``; its wire names are camelCase.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", example="gid://shopify/Metaobject/1001")
    handle: str = Field("", example="kims-bakery")
    name: str = Field("", example="Kim's Bakery")
    # Always stored in slugified form.
    category: str = Field("", example="bakery")
    featured: bool = False
    image: str = ""
    address: str = ""
    description: str = ""
    description_rich: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    insta: str = ""
    facebook: str = ""
    tiktok: str = ""
    youtube: str = ""
    google_map: str = ""
    hours_mon: str = ""
    hours_tue: str = ""
    hours_wed: str = ""
    hours_thu: str = ""
    hours_fri: str = ""
    hours_sat: str = ""
    hours_sun: str = ""
    updated_at: str = Field("", alias="updatedAt")


class ListingPage(BaseModel):
    """One page of filtered and sorted listings."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    total_pages: int = Field(..., alias="totalPages")
    page: int
    per_page: int = Field(..., alias="perPage")
    items: List[Listing]
