"""Functions (single-pass nodes) for the page claim checking pipeline.

Functions execute a fixed sequence of steps with no reasoning loop.

Modules:
    content_fetcher: URL → page text (Firecrawl scrape)
    claim_extractor: page text + query → relevant items (single LLM call)
    claim_verifier: items → one verification outcome per item
    aggregator: items + outcomes → top-level response
"""

from pagefacts.functions import aggregator, claim_extractor, claim_verifier, content_fetcher

__all__ = ["content_fetcher", "claim_extractor", "claim_verifier", "aggregator"]
