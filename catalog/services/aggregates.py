"""
Aggregation pipelines run against the movies collection.

Every function returns a new list of stages, so callers may append to the
result without affecting other calls.
"""
from enum import Enum

from catalog.services.query_builder import starts_with_regex

ACTORS_LIMIT = 200
ACTOR_SEARCH_LIMIT = 5


class WatchedCount(Enum):
    # The watched sub-count was once written as a host-language comparison
    # (`"$genres.watched" === true ? 1 : 0`), which is evaluated when the
    # pipeline is built and always yields 0. LITERAL keeps that output,
    # PER_DOCUMENT lets the store evaluate the flag on every row.
    LITERAL = "literal"
    PER_DOCUMENT = "per_document"


def _watched_accumulator(mode):
    if mode is WatchedCount.LITERAL:
        flag = "$genres.watched"
        return {"$sum": 1 if flag is True else 0}
    return {"$sum": {"$cond": [{"$eq": ["$watched", True]}, 1, 0]}}


def genres(watched_count=None):
    group = {
        "_id": "$genres.name",
        "count": {"$sum": 1},
    }
    if watched_count is not None:
        group["watched"] = _watched_accumulator(WatchedCount(watched_count))

    return [
        {"$project": {"genres": 1, "title": 1, "watched": 1}},
        {"$unwind": "$genres"},
        {"$group": group},
        {"$sort": {"count": -1}},
    ]


def _actor_group():
    return [
        {"$project": {
            "casts.cast.name": 1,
            "casts.cast.id": 1,
            "casts.cast.profile_path": 1,
            "title": 1,
        }},
        {"$unwind": "$casts.cast"},
        {"$group": {
            "_id": {
                "id": "$casts.cast.id",
                "name": "$casts.cast.name",
                "profile_path": "$casts.cast.profile_path",
            },
            "count": {"$sum": 1},
        }},
    ]


def actors(count=None):
    return _actor_group() + [
        {"$sort": {"count": -1}},
        {"$limit": count or ACTORS_LIMIT},
    ]


def search_actors(term, limit=None):
    # names only exist once the cast array is unwound, so the match runs
    # on the grouped rows
    return _actor_group() + [
        {"$match": {"_id.name": starts_with_regex(term)}},
        {"$sort": {"count": -1}},
        {"$limit": limit or ACTOR_SEARCH_LIMIT},
    ]


def years():
    return [
        {"$project": {"year": {"$substr": ["$release_date", 0, 4]}}},
        {"$group": {"_id": "$year", "count": {"$sum": 1}}},
        {"$sort": {"_id": -1}},
    ]


def genre_stats():
    return [
        {"$project": {"genres": 1, "title": 1, "watched": 1}},
        {"$unwind": "$genres"},
        {"$group": {
            "_id": {"id": "$genres.name", "watched": "$watched"},
            "count": {"$sum": 1},
        }},
        {"$sort": {"count": -1}},
    ]
