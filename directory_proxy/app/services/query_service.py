"""
Listing query pipeline.

Answering ``GET /directory`` is four pure stages over the aggregated
listings: group resolution, filtering, sorting and pagination.  Each
stage only depends on the output of the previous one, which keeps
every stage testable on plain lists.
"""

import math
import unicodedata
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from directory_proxy.app.core.slug import slugify
from directory_proxy.app.core.storage import GroupIndex
from directory_proxy.app.schemas.listing import Listing, ListingPage

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 12

# Group key matching rules, highest priority first.  Arguments are the
# normalized group key and the normalized parameter.
GROUP_MATCH_RULES: Tuple[Tuple[str, Callable[[str, str], bool]], ...] = (
    ("exact", lambda key, param: key == param),
    ("key-prefix", lambda key, param: param.startswith(key)),
    ("param-prefix", lambda key, param: key.startswith(param)),
)


@dataclass(frozen=True)
class ListingQuery:
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    group: str = ""
    category: str = ""
    q: str = ""


def match_group(group_param: str, groups: GroupIndex) -> Optional[str]:
    """Return the group key that best matches ``group_param``.

    Rules are tried in ``GROUP_MATCH_RULES`` order; within a rule the
    first key in index order wins.  Keys that normalize to an empty
    string never match.
    """
    target = slugify(group_param)
    if not target:
        return None
    candidates = [(key, slugify(key)) for key in groups]
    for _name, rule in GROUP_MATCH_RULES:
        for key, normalized in candidates:
            if normalized and rule(normalized, target):
                return key
    return None


def resolve_group(group_param: str, groups: GroupIndex) -> Optional[Set[str]]:
    """Normalized category handles of the matching group, if any."""
    key = match_group(group_param, groups)
    if key is None:
        return None
    handles = {slugify(member.get("handle")) for member in groups.get(key, [])}
    handles.discard("")
    return handles


def _search_text(listing: Listing) -> str:
    parts = (
        listing.name,
        listing.address,
        listing.website,
        listing.insta,
        listing.facebook,
        listing.youtube,
        listing.tiktok,
    )
    return " ".join(parts).lower()


def filter_listings(
    listings: Iterable[Listing],
    group_handles: Optional[Set[str]] = None,
    category: str = "",
    q: str = "",
) -> List[Listing]:
    """Apply group, category and free‑text filters in that order.

    Filters compose by intersection; any of them may be omitted.  An
    empty ``group_handles`` set is treated as "no group filter".
    """
    result = list(listings)
    if group_handles:
        result = [x for x in result if x.category and x.category in group_handles]
    category = (category or "").strip()
    if category:
        wanted = slugify(category)
        result = [x for x in result if slugify(x.category) == wanted]
    needle = (q or "").strip().lower()
    if needle:
        result = [x for x in result if needle in _search_text(x)]
    return result


def collation_key(name: str) -> Tuple[str, str]:
    """Locale‑style sort key: accents and case only break ties."""
    decomposed = unicodedata.normalize("NFKD", name or "")
    primary = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return primary, name or ""


def sort_listings(listings: Iterable[Listing]) -> List[Listing]:
    """Featured listings first, then by name.  Stable."""
    return sorted(listings, key=lambda x: (not x.featured, collation_key(x.name)))


def paginate(listings: Sequence[Listing], page: int = DEFAULT_PAGE, per_page: int = DEFAULT_PER_PAGE) -> ListingPage:
    if page < 1 or per_page < 1:
        raise ValueError("page and per_page must be positive integers")
    total = len(listings)
    total_pages = max(1, math.ceil(total / per_page))
    start = (page - 1) * per_page
    return ListingPage(
        total=total,
        total_pages=total_pages,
        page=page,
        per_page=per_page,
        items=list(listings[start:start + per_page]),
    )


def run_query(listings: Iterable[Listing], groups: GroupIndex, query: ListingQuery) -> ListingPage:
    group_handles = resolve_group(query.group, groups) if query.group else None
    filtered = filter_listings(listings, group_handles, query.category, query.q)
    return paginate(sort_listings(filtered), query.page, query.per_page)
