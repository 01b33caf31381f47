"""Clients for the page scraping and web search services."""

from pagefacts.retrieval.firecrawl_client import scrape
from pagefacts.retrieval.google_search import search, search_for_verification

__all__ = [
    "scrape",
    "search",
    "search_for_verification",
]
