"""
Directory query facade.

Ties the per‑request listing aggregation to the query pipeline and the
shared group index.  Endpoints talk to this service only.
"""

import logging

from directory_proxy.app.schemas.listing import ListingPage
from directory_proxy.app.services.group_service import CategoryGroupService
from directory_proxy.app.services.listing_service import ListingAggregator
from directory_proxy.app.services.query_service import ListingQuery, run_query

logger = logging.getLogger(__name__)


class DirectoryService:
    def __init__(self, aggregator: ListingAggregator, groups: CategoryGroupService) -> None:
        self.aggregator = aggregator
        self.groups = groups

    async def query(self, query: ListingQuery) -> ListingPage:
        """Fetch all listings and return the requested page.

        The group index snapshot is taken once, so a concurrent rebuild
        cannot change it halfway through filtering.
        """
        listings = await self.aggregator.fetch_listings()
        page = run_query(listings, self.groups.snapshot(), query)
        logger.info(
            "Directory query g=%r category=%r q=%r page=%d: %d of %d listings matched",
            query.group,
            query.category,
            query.q,
            query.page,
            page.total,
            len(listings),
        )
        return page
