"""Firecrawl scrape API client for fetching a page as text."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from pagefacts.config import FIRECRAWL_SCRAPE_URL, FIRECRAWL_TIMEOUT

logger = logging.getLogger(__name__)


def _headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def _extract_text(data: dict) -> Optional[str]:
    """Pull the page text out of a scrape response.

    The v1 API nests the document under ``data``; older responses put
    ``markdown`` / ``content`` at the top level.
    """
    document = data.get("data") if isinstance(data.get("data"), dict) else data
    text = document.get("markdown") or document.get("content")
    if not isinstance(text, str) or not text.strip():
        return None
    return text


def scrape(url: str, api_key: str) -> Optional[str]:
    """Fetch a page rendered as markdown.

    Args:
        url: Page to scrape.
        api_key: Firecrawl API key.

    Returns:
        The page text, or None if the service failed or returned nothing.
    """
    payload = {"url": url, "formats": ["markdown"]}

    try:
        resp = requests.post(
            FIRECRAWL_SCRAPE_URL,
            json=payload,
            headers=_headers(api_key),
            timeout=FIRECRAWL_TIMEOUT,
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.exceptions.HTTPError as e:
        logger.error("Firecrawl scrape failed (HTTP %s): %s", e.response.status_code, e)
        return None
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Firecrawl scrape failed: %s", e)
        return None

    if not isinstance(data, dict):
        logger.error("Firecrawl returned an unexpected payload for %s", url)
        return None

    text = _extract_text(data)
    if text is None:
        logger.warning("Firecrawl returned no content for %s", url)
        return None

    logger.info("Scraped %s (%d chars)", url, len(text))
    return text
