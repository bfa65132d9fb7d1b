import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from pymongo import DESCENDING

from catalog.models import thin_projection

DEFAULT_SORT = [("addedToDb", DESCENDING)]
DEFAULT_SKIP = 0
DEFAULT_LIMIT = 20
SEARCH_LIMIT = 5


def coerce_id(value):
    """Identifiers arrive as strings from URLs; the store keeps them as ints."""
    if isinstance(value, str):
        return int(value, 10)
    return value


def starts_with_regex(term):
    # matches at the start of the value or at the start of any later word
    escaped = re.escape(term)
    return {"$regex": f"^{escaped}|\\s{escaped}", "$options": "i"}


def normalize_sort(sort):
    if not sort:
        return list(DEFAULT_SORT)
    if isinstance(sort, dict):
        return list(sort.items())
    return [tuple(pair) for pair in sort]


@dataclass
class MovieQuery:
    filter: Dict[str, Any] = field(default_factory=dict)
    projection: Dict[str, int] = field(default_factory=thin_projection)
    sort: List[Tuple[str, int]] = field(default_factory=lambda: list(DEFAULT_SORT))
    skip: int = DEFAULT_SKIP
    limit: int = DEFAULT_LIMIT

    def cursor(self, collection):
        return (
            collection.find(self.filter, self.projection)
            .sort(self.sort)
            .skip(self.skip)
            .limit(self.limit)
        )


def build_query(criteria=None, sort=None, skip=None, limit=None):
    return MovieQuery(
        filter=dict(criteria or {}),
        sort=normalize_sort(sort),
        skip=skip or DEFAULT_SKIP,
        limit=limit or DEFAULT_LIMIT,
    )


def title_search_query(term, limit=None):
    return build_query({"title": starts_with_regex(term)}, limit=limit or SEARCH_LIMIT)


def tag_query(tag):
    return MovieQuery(
        filter={tag.field: {"$ne": None}},
        sort=[(tag.field, DESCENDING)],
        limit=0,
    )
