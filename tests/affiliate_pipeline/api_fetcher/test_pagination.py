import math
from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from affiliate_pipeline.api_fetcher.errors import MissingDataError
from affiliate_pipeline.api_fetcher.pagination import (
    collect_pages,
    collect_report_days,
    extract_report_items,
    iter_days,
    normalize_window,
    sum_report_totals,
)


def catalog_fetcher(total):
    """fetch_page stub over a catalog of `total` items, page index starting at 1."""
    catalog = [{"@id": str(i)} for i in range(total)]
    calls = []

    def fetch_page(page, items):
        calls.append((page, items))
        start = (page - 1) * items
        return catalog[start:start + items]

    return fetch_page, calls


# -----------------------------------------------------------------------------
# collect_pages
# -----------------------------------------------------------------------------
@pytest.mark.unit
def test_collect_pages_single_full_page():
    fetch_page, calls = catalog_fetcher(100)
    items = collect_pages(fetch_page, page=1, per_page=10)

    assert [i["@id"] for i in items] == [str(i) for i in range(10)]
    assert calls == [(1, 10)]


@pytest.mark.unit
def test_collect_pages_advances_page_index():
    fetch_page, calls = catalog_fetcher(120)
    items = collect_pages(fetch_page, page=1, per_page=100, max_page_size=50)

    assert len(items) == 100
    assert calls == [(1, 50), (2, 50)]
    assert len({i["@id"] for i in items}) == 100


@pytest.mark.unit
def test_collect_pages_stops_on_empty_page():
    fetch_page, calls = catalog_fetcher(30)
    items = collect_pages(fetch_page, page=1, per_page=100, max_page_size=20)

    assert len(items) == 30
    # pages 1 and 2 are 20 + 10 items, page 3 is empty
    assert [c[0] for c in calls] == [1, 2, 3]


@pytest.mark.unit
def test_collect_pages_first_page_empty():
    fetch_page = MagicMock(return_value=[])
    assert collect_pages(fetch_page, page=1, per_page=10) == []
    fetch_page.assert_called_once_with(1, 10)


@pytest.mark.unit
@pytest.mark.parametrize("per_page", [0, -5])
def test_collect_pages_non_positive_target_makes_no_calls(per_page):
    fetch_page = MagicMock(return_value=[{"@id": "x"}])
    assert collect_pages(fetch_page, page=1, per_page=per_page) == []
    fetch_page.assert_not_called()


@pytest.mark.unit
def test_collect_pages_never_returns_more_than_requested():
    fetch_page = MagicMock(return_value=[{"@id": str(i)} for i in range(25)])
    items = collect_pages(fetch_page, page=1, per_page=10)
    assert len(items) == 10
    fetch_page.assert_called_once()


@pytest.mark.unit
def test_collect_pages_requests_only_remaining_items():
    pages = iter([[{"@id": "a"}] * 7, [{"@id": "b"}] * 3])
    fetch_page = MagicMock(side_effect=lambda page, items: next(pages))

    items = collect_pages(fetch_page, page=4, per_page=10)

    assert len(items) == 10
    assert [c.args for c in fetch_page.call_args_list] == [(4, 10), (5, 3)]


@pytest.mark.unit
@pytest.mark.parametrize("per_page,size,total", [(1, 50, 500), (50, 50, 500), (101, 50, 500), (7, 3, 4)])
def test_collect_pages_termination_bound(per_page, size, total):
    fetch_page, calls = catalog_fetcher(total)
    items = collect_pages(fetch_page, page=1, per_page=per_page, max_page_size=size)

    assert len(items) <= per_page
    assert len(calls) <= math.ceil(per_page / size) + 1


@pytest.mark.unit
def test_collect_pages_propagates_errors():
    fetch_page = MagicMock(side_effect=[[{"@id": "1"}], RuntimeError("boom")])
    with pytest.raises(RuntimeError):
        collect_pages(fetch_page, page=1, per_page=5)


# -----------------------------------------------------------------------------
# Date window
# -----------------------------------------------------------------------------
@pytest.mark.unit
def test_normalize_window_defaults_to_today():
    assert normalize_window() == (date.today(), date.today())


@pytest.mark.unit
def test_normalize_window_truncates_datetimes():
    start, end = normalize_window(datetime(2026, 10, 1, 17, 45), date(2026, 10, 3))
    assert start == date(2026, 10, 1)
    assert end == date(2026, 10, 3)


@pytest.mark.unit
def test_iter_days_is_inclusive_and_ascending():
    days = list(iter_days(date(2026, 2, 27), date(2026, 3, 2)))
    assert days == [date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 2)]


@pytest.mark.unit
def test_iter_days_empty_when_reversed():
    assert list(iter_days(date(2026, 3, 2), date(2026, 3, 1))) == []


@pytest.mark.unit
def test_extract_report_items_shapes():
    assert extract_report_items({"saleItems": {"saleItem": [{"@id": "1"}]}}, "sale") == [{"@id": "1"}]
    assert extract_report_items({"saleItems": {"saleItem": {"@id": "1"}}}, "sale") == [{"@id": "1"}]
    assert extract_report_items({"leadItems": [{"@id": "2"}]}, "lead") == [{"@id": "2"}]
    with pytest.raises(MissingDataError):
        extract_report_items({"items": 1}, "lead")


def day_payload(report_type, ids):
    return {
        "items": len(ids),
        "total": len(ids),
        f"{report_type}Items": {f"{report_type}Item": [{"@id": i} for i in ids]},
    }


@pytest.mark.unit
def test_collect_report_days_walks_every_day():
    responses = {
        date(2026, 10, 1): day_payload("sale", ["a"]),
        date(2026, 10, 2): day_payload("sale", ["b", "c"]),
        date(2026, 10, 3): day_payload("sale", ["d"]),
    }
    fetch_day = MagicMock(side_effect=lambda d: responses[d])

    items = collect_report_days(fetch_day, "sale", date(2026, 10, 1), date(2026, 10, 3))

    assert [i["@id"] for i in items] == ["a", "b", "c", "d"]
    assert [c.args[0] for c in fetch_day.call_args_list] == sorted(responses)


@pytest.mark.unit
def test_collect_report_days_stops_at_first_empty_day():
    responses = {
        date(2026, 10, 1): day_payload("lead", ["a"]),
        date(2026, 10, 2): day_payload("lead", ["b"]),
        date(2026, 10, 3): {"items": 0, "total": 0},
        date(2026, 10, 4): day_payload("lead", ["never"]),
        date(2026, 10, 5): day_payload("lead", ["never"]),
    }
    fetch_day = MagicMock(side_effect=lambda d: responses[d])

    items = collect_report_days(fetch_day, "lead", date(2026, 10, 1), date(2026, 10, 5))

    assert [i["@id"] for i in items] == ["a", "b"]
    assert fetch_day.call_count == 3


@pytest.mark.unit
def test_collect_report_days_missing_items_counts_as_empty():
    fetch_day = MagicMock(return_value={})
    assert collect_report_days(fetch_day, "sale", date(2026, 10, 1), date(2026, 10, 9)) == []
    assert fetch_day.call_count == 1


@pytest.mark.unit
def test_collect_report_days_defaults_to_today():
    fetch_day = MagicMock(return_value=day_payload("sale", ["x"]))
    items = collect_report_days(fetch_day, "sale")
    assert len(items) == 1
    fetch_day.assert_called_once_with(date.today())


@pytest.mark.unit
def test_sum_report_totals_uses_total_and_early_exit():
    responses = [
        {"items": 1, "total": 12},
        {"items": 1, "total": 3},
        {"items": 0, "total": 0},
        {"items": 1, "total": 99},
    ]
    fetch_day = MagicMock(side_effect=responses)

    assert sum_report_totals(fetch_day, date(2026, 10, 1), date(2026, 10, 4)) == 15
    assert fetch_day.call_count == 3


@pytest.mark.unit
def test_sum_report_totals_falls_back_to_items():
    fetch_day = MagicMock(return_value={"items": 4})
    assert sum_report_totals(fetch_day, date(2026, 10, 1), date(2026, 10, 2)) == 8
