"""Content Fetcher — Function (no model call).

Retrieves the text of the requested page through the Firecrawl scrape API.
A fetch failure is terminal for the request: the graph skips extraction
and verification and the aggregator reports an error.

Input (from state):
- url: page to analyze
- credentials: Firecrawl API key

Output (to state):
- content: page text, or None
- error: user-facing message when nothing could be fetched
"""

from __future__ import annotations

import logging
import time

from pagefacts.models import AnalysisState, StageTrace
from pagefacts.retrieval.firecrawl_client import scrape

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Content could not be fetched. Please check the URL."


async def run_content_fetcher(state: AnalysisState) -> AnalysisState:
    """Run the content fetcher.

    Args:
        state: Pipeline state with 'url' and 'credentials' populated.

    Returns:
        Updated state with content populated, or error set.
    """
    start_time = time.time()
    url = state["url"]
    credentials = state["credentials"]

    content = scrape(url, credentials.firecrawl_api_key)
    if content is None:
        logger.error("No content fetched for %s", url)

    duration = time.time() - start_time

    trace = StageTrace(
        stage="content_fetcher",
        duration_seconds=round(duration, 2),
        cost_usd=0.0,
        input_summary=f"URL: {url[:80]}",
        output_summary=f"{len(content)} chars" if content else "no content",
        success=content is not None,
        tools_called=["firecrawl_scrape"],
    )

    return {
        **state,
        "content": content,
        "error": None if content is not None else FETCH_FAILED_MESSAGE,
        "stage_trace": state.get("stage_trace", []) + [trace],
        "total_duration_seconds": state.get("total_duration_seconds", 0.0) + duration,
    }
