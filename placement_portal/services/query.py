"""
Posting search and list pagination.

Filters are AND-ed together and a posting must always be Open to match.
Pages are 1-indexed slices of the filtered sequence; a page past the end is
an empty page, never an error.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from placement_portal.schemas.schemas import Pagination, Posting, PostingStatus, PostingType

T = TypeVar("T")


@dataclass
class PostingFilters:
    search: str = ""
    location: str = ""
    skill_id: Optional[int] = None
    type: Optional[PostingType] = None
    remote_only: bool = False


def matches(posting: Posting, filters: PostingFilters) -> bool:
    if posting.status != PostingStatus.open:
        return False

    term = (filters.search or "").lower()
    if term and term not in posting.title.lower() and term not in posting.company.lower():
        return False

    if (filters.location or "").lower() not in posting.location.lower():
        return False

    if filters.skill_id is not None and filters.skill_id not in posting.required_skills:
        return False

    if filters.type is not None and posting.type != filters.type:
        return False

    if filters.remote_only and posting.location.lower() != "remote":
        return False

    return True


def filter_postings(postings: Iterable[Posting], filters: PostingFilters) -> List[Posting]:
    return [p for p in postings if matches(p, filters)]


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def paginate(items: Sequence[T], page: int, limit: int) -> Tuple[List[T], Pagination]:
    """
    Slice one page out of `items`.

    Returns (page_items, pagination). page and limit must be >= 1; the API
    layer validates that before calling.
    """
    start = (page - 1) * limit
    page_items = list(items[start:start + limit])
    return page_items, Pagination(
        page=page,
        limit=limit,
        total=len(items),
        total_pages=total_pages(len(items), limit),
    )


def resolve_limit(limit: Optional[int], default: int, maximum: int) -> int:
    """Page size from a query parameter: default when absent, capped at maximum."""
    if limit is None:
        return default
    return min(limit, maximum)
