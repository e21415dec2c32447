"""Unit tests for search, sort and pagination helpers"""

import pytest

from parish_hub.domain.exceptions import InvalidRequestError
from parish_hub.domain.listing import paginate, search, sort_items


@pytest.fixture
def rows():
    return [
        {"name": "John Doe", "event": "Sunday Service", "timestamp": 3},
        {"name": "Jane Doe", "event": "Youth Fellowship", "timestamp": None},
        {"name": "Samuel Lee", "event": "Sunday Service", "timestamp": 1},
        {"name": "Grace Kim", "event": "Bible Study", "timestamp": 2},
    ]


def test_search_is_case_insensitive(rows):
    result = search(rows, "DOE", ["name"])
    assert [r["name"] for r in result] == ["John Doe", "Jane Doe"]


def test_search_checks_every_field(rows):
    result = search(rows, "bible", ["name", "event"])
    assert [r["name"] for r in result] == ["Grace Kim"]


def test_blank_search_returns_everything(rows):
    assert search(rows, "  ", ["name"]) == rows
    assert search(rows, None, ["name"]) == rows


def test_sort_ascending_nulls_last(rows):
    result = sort_items(rows, "timestamp")
    assert [r["timestamp"] for r in result] == [1, 2, 3, None]


def test_sort_descending_nulls_still_last(rows):
    result = sort_items(rows, "timestamp", descending=True)
    assert [r["timestamp"] for r in result] == [3, 2, 1, None]


def test_paginate_default_page_size():
    page = paginate(list(range(23)))

    assert page.items == list(range(10))
    assert page.total == 23
    assert page.page_size == 10
    assert page.total_pages == 3


def test_paginate_last_partial_page():
    page = paginate(list(range(23)), page=3)
    assert page.items == [20, 21, 22]


def test_paginate_past_end_is_empty():
    page = paginate(list(range(5)), page=4, page_size=2)

    assert page.items == []
    assert page.total == 5
    assert page.total_pages == 3


def test_paginate_empty_list():
    page = paginate([])

    assert page.items == []
    assert page.total_pages == 0


@pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (-1, 5)])
def test_paginate_rejects_bad_bounds(page, page_size):
    with pytest.raises(InvalidRequestError):
        paginate([1, 2, 3], page=page, page_size=page_size)
