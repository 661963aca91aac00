"""
Multi-page and multi-day aggregation.

Both drivers take a single-request callable and know nothing about HTTP,
signing or entity mapping:

    collect_pages(fetch_page, page, per_page)        -> product search
    collect_report_days(fetch_day, "lead", d0, d1)   -> daily reports

Errors raised by the callables propagate unchanged; partial results are
discarded.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .errors import MissingDataError


logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, None]
FetchPage = Callable[[int, int], List[Dict[str, Any]]]
FetchDay = Callable[[date], Dict[str, Any]]


# -----------------------------------------------------------------------------
# Product search pagination
# -----------------------------------------------------------------------------
def collect_pages(
    fetch_page: FetchPage,
    page: int,
    per_page: int,
    max_page_size: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Call fetch_page(page, items) until `per_page` items are gathered or a
    page comes back empty. The page index advances by one per fetch.
    """
    accumulated: List[Dict[str, Any]] = []
    while len(accumulated) < per_page:
        items = min(per_page, per_page - len(accumulated))
        if max_page_size:
            items = min(items, max_page_size)

        batch = fetch_page(page, items)
        logger.debug("Page %s (items=%s) returned %s records", page, items, len(batch))
        if not batch:
            break

        accumulated.extend(batch)
        page += 1

    return accumulated[:max(per_page, 0)]


# -----------------------------------------------------------------------------
# Report date window
# -----------------------------------------------------------------------------
def _start_of_day(value: DateLike) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def normalize_window(from_date: DateLike = None, to_date: DateLike = None) -> Tuple[date, date]:
    """Reduce both ends to calendar days; a missing end means today."""
    return _start_of_day(from_date), _start_of_day(to_date)


def iter_days(from_date: date, to_date: date) -> Iterator[date]:
    day = from_date
    while day <= to_date:
        yield day
        day += timedelta(days=1)


def _reported_count(payload: Dict[str, Any], key: str) -> int:
    try:
        return int(payload.get(key) or 0)
    except (TypeError, ValueError) as e:
        raise MissingDataError(f"Field '{key}' is not an integer", payload) from e


def extract_report_items(payload: Dict[str, Any], report_type: str) -> List[Dict[str, Any]]:
    """Items under '<type>Items', either a plain list or {'<type>Item': [...]}."""
    container = payload.get(f"{report_type}Items")
    if isinstance(container, dict):
        container = container.get(f"{report_type}Item")
    if container is None:
        raise MissingDataError(f"Report payload has no '{report_type}Items'", payload)
    if isinstance(container, dict):
        return [container]
    return list(container)


def collect_report_days(
    fetch_day: FetchDay,
    report_type: str,
    from_date: DateLike = None,
    to_date: DateLike = None,
) -> List[Dict[str, Any]]:
    """
    Gather raw report items one day at a time, ascending.

    The first day that reports zero items ends the whole window: later days
    are never requested, on the assumption that report availability is
    monotonic.
    """
    start, end = normalize_window(from_date, to_date)
    items: List[Dict[str, Any]] = []
    for day in iter_days(start, end):
        payload = fetch_day(day)
        if _reported_count(payload, "items") == 0:
            logger.info("No %s items for %s; stopping report window early", report_type, day.isoformat())
            break
        items.extend(extract_report_items(payload, report_type))
    return items


def sum_report_totals(
    fetch_day: FetchDay,
    from_date: DateLike = None,
    to_date: DateLike = None,
) -> int:
    """Sum each day's reported total (falling back to 'items'), with the same early exit."""
    start, end = normalize_window(from_date, to_date)
    total = 0
    for day in iter_days(start, end):
        payload = fetch_day(day)
        if _reported_count(payload, "items") == 0:
            break
        total += _reported_count(payload, "total") or _reported_count(payload, "items")
    return total
