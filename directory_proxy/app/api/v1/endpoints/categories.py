"""
Category group endpoints.

``GET /category-groups`` serves the in‑memory group index;
``/refresh-groups`` rebuilds it from Shopify and then asks the edge
cache to drop stale directory pages.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from directory_proxy.app.core.dependencies import get_group_service, get_invalidator
from directory_proxy.app.schemas.category import CategoryGroups, GroupRefreshResult
from directory_proxy.app.services.group_service import CategoryGroupService
from directory_proxy.app.services.invalidation_service import CacheInvalidator
from directory_proxy.app.services.shopify_client import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/category-groups", response_model=CategoryGroups)
async def get_category_groups(
    groups: CategoryGroupService = Depends(get_group_service),
) -> CategoryGroups:
    """Return the full group → categories mapping."""
    return groups.snapshot()


@router.api_route("/refresh-groups", methods=["GET", "POST"], response_model=GroupRefreshResult)
async def refresh_category_groups(
    groups: CategoryGroupService = Depends(get_group_service),
    invalidator: CacheInvalidator = Depends(get_invalidator),
) -> GroupRefreshResult:
    """Rebuild the group index.

    On success a background edge cache invalidation is scheduled; its
    outcome is only logged.  If Shopify fails, the previous index stays
    in place and 502 is returned.
    """
    try:
        rebuilt = await groups.rebuild()
    except UpstreamError as e:
        logger.error("/refresh-groups failed: %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    invalidator.schedule()
    return GroupRefreshResult(ok=True, groups=len(rebuilt))
