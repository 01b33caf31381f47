"""Google Custom Search JSON API client for claim verification searches."""

from __future__ import annotations

import logging
import re
from typing import Optional

import requests

from pagefacts.config import (
    GOOGLE_SEARCH_TIMEOUT,
    GOOGLE_SEARCH_URL,
    MAX_SEARCH_RESULTS,
    SEARCH_WINDOW_YEARS,
)
from pagefacts.models import SearchSnippet

logger = logging.getLogger(__name__)

_YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d)")


def event_year(event_date: Optional[str]) -> Optional[int]:
    """Pull the year out of a loosely formatted date ("2019-03-01", "March 2019", "01.03.2019")."""
    if not event_date:
        return None
    match = _YEAR_PATTERN.search(str(event_date))
    return int(match.group(1)) if match else None


def date_window(year: Optional[int]) -> tuple[Optional[int], Optional[int], str]:
    """Return (start_year, end_year, dateRestrict) for a window around ``year``.

    The search API only understands a width relative to today, so the width
    of the window is what gets sent; the bounds are kept for logging.
    """
    width = 2 * SEARCH_WINDOW_YEARS
    if year is None:
        return None, None, f"y{width}"
    start, end = year - SEARCH_WINDOW_YEARS, year + SEARCH_WINDOW_YEARS
    return start, end, f"y{end - start}"


def build_query(claim: str, year: Optional[int]) -> str:
    return f"{claim} {year}" if year is not None else claim


def search(
    query: str,
    api_key: str,
    engine_id: str,
    date_restrict: Optional[str] = None,
    max_results: int = MAX_SEARCH_RESULTS,
) -> list[SearchSnippet]:
    """Run one Custom Search query.

    Args:
        query: Search terms.
        api_key: Google API key.
        engine_id: Programmable search engine id (``cx``).
        date_restrict: Value for ``dateRestrict``, e.g. "y2".
        max_results: Result cap (the API allows at most 10).

    Returns:
        List of SearchSnippet objects; empty on any failure.
    """
    params = {
        "key": api_key,
        "cx": engine_id,
        "q": query,
        "num": min(max_results, MAX_SEARCH_RESULTS),
    }
    if date_restrict:
        params["dateRestrict"] = date_restrict

    try:
        resp = requests.get(GOOGLE_SEARCH_URL, params=params, timeout=GOOGLE_SEARCH_TIMEOUT)
        resp.raise_for_status()
        data = resp.json()
    except requests.exceptions.HTTPError as e:
        logger.error("Google search failed (HTTP %s): %s", e.response.status_code, e)
        return []
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Google search failed: %s", e)
        return []

    items = data.get("items") if isinstance(data, dict) else None
    if not items:
        logger.info("Google search '%s' returned no results", query)
        return []

    snippets = []
    for item in items[:MAX_SEARCH_RESULTS]:
        if not isinstance(item, dict):
            continue
        snippets.append(SearchSnippet(
            title=item.get("title") or "",
            excerpt=item.get("snippet") or "",
            source_link=item.get("link") or "",
        ))

    logger.info("Google search '%s' returned %d results", query, len(snippets))
    return snippets


def search_for_verification(
    claim: str,
    event_date: Optional[str],
    api_key: str,
    engine_id: str,
) -> list[SearchSnippet]:
    """Search for evidence about a claim around the year of its event."""
    year = event_year(event_date)
    start, end, date_restrict = date_window(year)
    logger.debug(
        "Verification search window %s-%s (dateRestrict=%s)", start, end, date_restrict,
    )
    return search(build_query(claim, year), api_key, engine_id, date_restrict=date_restrict)
