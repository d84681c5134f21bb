"""
Directory listing endpoint.

``GET /directory`` aggregates every listing from Shopify on each call
and answers with one page of filtered, sorted results.  Responses are
meant to be cached at the edge; ``/refresh-groups`` invalidates that
cache.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from directory_proxy.app.core.dependencies import get_directory_service
from directory_proxy.app.schemas.listing import ListingPage
from directory_proxy.app.services.directory_service import DirectoryService
from directory_proxy.app.services.query_service import DEFAULT_PAGE, DEFAULT_PER_PAGE, ListingQuery
from directory_proxy.app.services.shopify_client import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/directory", response_model=ListingPage)
async def list_directory(
    page: int = Query(DEFAULT_PAGE, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, alias="perPage"),
    g: Optional[str] = Query(None, description="Group label or slug; matched loosely"),
    category: Optional[str] = Query(None, description="Category handle"),
    q: Optional[str] = Query(None, description="Free‑text search"),
    service: DirectoryService = Depends(get_directory_service),
) -> ListingPage:
    """Return a page of directory listings.

    - **page**, **perPage** — pagination; pages past the end are empty.
    - **g** — group filter; an unknown group is ignored.
    - **category** — exact category filter on normalized handles.
    - **q** — case‑insensitive search over name, address and links.
    """
    query = ListingQuery(
        page=page,
        per_page=per_page,
        group=(g or "").strip(),
        category=(category or "").strip(),
        q=(q or "").strip(),
    )
    try:
        return await service.query(query)
    except UpstreamError as e:
        logger.error("/directory failed: %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
