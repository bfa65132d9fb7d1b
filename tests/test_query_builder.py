import re

import pytest

from catalog.models import Tag, THIN_FIELDS
from catalog.services.query_builder import (
    DEFAULT_LIMIT,
    build_query,
    coerce_id,
    starts_with_regex,
    tag_query,
    title_search_query,
)


def test_defaults():
    query = build_query()
    assert query.filter == {}
    assert query.sort == [("addedToDb", -1)]
    assert query.skip == 0
    assert query.limit == DEFAULT_LIMIT == 20


def test_projection_is_thin_field_set():
    projection = build_query().projection
    assert projection.pop("_id") == 0
    assert set(projection) == set(THIN_FIELDS)


def test_sort_mapping_is_normalized():
    query = build_query({"watched": True}, sort={"release_date": -1}, skip=40, limit=10)
    assert query.filter == {"watched": True}
    assert query.sort == [("release_date", -1)]
    assert (query.skip, query.limit) == (40, 10)


def test_criteria_are_copied():
    criteria = {"watched": True}
    query = build_query(criteria)
    query.filter["title"] = "x"
    assert criteria == {"watched": True}


@pytest.mark.parametrize("value, expected", [("42", 42), (42, 42), ("007", 7)])
def test_coerce_id(value, expected):
    assert coerce_id(value) == expected


def test_coerce_id_rejects_garbage():
    with pytest.raises(ValueError):
        coerce_id("abc")


def _matches(term, text):
    pattern = starts_with_regex(term)
    assert pattern["$options"] == "i"
    return re.search(pattern["$regex"], text, re.IGNORECASE) is not None


def test_prefix_regex_boundaries():
    assert _matches("bat", "Batman")
    assert _matches("bat", "Com bat Zone")
    assert not _matches("bat", "Combat Zone")


def test_prefix_regex_escapes_metacharacters():
    assert _matches("(500)", "(500) Days of Summer")
    assert not _matches("a.c", "abc")


def test_title_search_query():
    query = title_search_query("bat")
    assert query.filter == {"title": starts_with_regex("bat")}
    assert query.limit == 5


def test_tag_query():
    query = tag_query(Tag.QUEUED)
    assert query.filter == {"tags.queued": {"$ne": None}}
    assert query.sort == [("tags.queued", -1)]
