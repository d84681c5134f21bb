"""
Pydantic models for Shopify metaobject payloads.

Only the fields the proxy reads are declared; everything else in the
response is ignored.  A field ``reference`` is a GraphQL union
(``MediaImage`` or ``Metaobject`` or something else), so every member
is optional and an unknown union member parses as an empty reference.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageRef(BaseModel):
    url: Optional[str] = None


class FieldReference(BaseModel):
    """The referenced object of a metaobject field."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    handle: Optional[str] = None
    type: Optional[str] = None
    image: Optional[ImageRef] = None
    fields: List["MetaobjectField"] = Field(default_factory=list)


class MetaobjectField(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: str
    value: Optional[str] = None
    reference: Optional[FieldReference] = None


class MetaobjectNode(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = ""
    handle: str = ""
    updated_at: Optional[str] = Field(None, alias="updatedAt")
    fields: List[MetaobjectField] = Field(default_factory=list)


class PageInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_next_page: bool = Field(False, alias="hasNextPage")
    end_cursor: Optional[str] = Field(None, alias="endCursor")


class MetaobjectConnection(BaseModel):
    """One page of ``metaobjects(type: ...)`` results."""

    model_config = ConfigDict(populate_by_name=True)

    nodes: List[MetaobjectNode] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


FieldReference.model_rebuild()
