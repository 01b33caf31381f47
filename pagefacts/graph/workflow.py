"""Main LangGraph workflow for page claim checking."""

from __future__ import annotations

import logging

from langgraph.graph import END, StateGraph

from pagefacts.config import Credentials
from pagefacts.functions import aggregator, claim_extractor, claim_verifier, content_fetcher
from pagefacts.models import AnalysisResponse, AnalysisState

logger = logging.getLogger(__name__)

CONFIG_ERROR_MESSAGE = "API keys are not configured"
GENERIC_ERROR_MESSAGE = "An error occurred during analysis"


def _route_after_fetch(state: AnalysisState) -> str:
    return "aggregator" if state.get("error") else "claim_extractor"


def _route_after_extraction(state: AnalysisState) -> str:
    return "claim_verifier" if state.get("items") else "aggregator"


def create_workflow():
    """Create the analysis workflow graph.

    content_fetcher → claim_extractor → claim_verifier → aggregator, with
    a fetch failure or an empty extraction jumping straight to the
    aggregator.
    """
    workflow = StateGraph(AnalysisState)

    # Add nodes
    workflow.add_node("content_fetcher", content_fetcher.run_content_fetcher)
    workflow.add_node("claim_extractor", claim_extractor.run_claim_extractor)
    workflow.add_node("claim_verifier", claim_verifier.run_claim_verifier)
    workflow.add_node("aggregator", aggregator.run_aggregator)

    # Define edges
    workflow.set_entry_point("content_fetcher")
    workflow.add_conditional_edges(
        "content_fetcher",
        _route_after_fetch,
        {"claim_extractor": "claim_extractor", "aggregator": "aggregator"},
    )
    workflow.add_conditional_edges(
        "claim_extractor",
        _route_after_extraction,
        {"claim_verifier": "claim_verifier", "aggregator": "aggregator"},
    )
    workflow.add_edge("claim_verifier", "aggregator")
    workflow.add_edge("aggregator", END)

    return workflow.compile()


def initial_state(url: str, query: str, credentials: Credentials) -> AnalysisState:
    return {
        "url": url,
        "query": query,
        "credentials": credentials,
        "content": None,
        "items": [],
        "outcomes": [],
        "error": None,
        "response": None,
        "stage_trace": [],
        "total_cost_usd": 0.0,
        "total_duration_seconds": 0.0,
    }


async def run_pipeline(url: str, query: str, credentials: Credentials) -> AnalysisState:
    """Run all stages and return the final state (including traces)."""
    workflow = create_workflow()
    return await workflow.ainvoke(initial_state(url, query, credentials))


async def analyze(url: str, query: str, credentials: Credentials) -> AnalysisResponse:
    """Analyze the claims on a page that relate to a query.

    Args:
        url: Page to analyze.
        query: What the user is looking for on the page.
        credentials: Keys for the scraping, model and search services.

    Returns:
        AnalysisResponse with status success, empty or error. Failures are
        logged; the response only carries a user-facing message.

    Raises:
        ValueError: if url or query is empty.
    """
    if not url or not query:
        raise ValueError("url and query are required")

    missing = credentials.missing()
    if missing:
        logger.error("Missing credentials: %s", ", ".join(missing))
        return AnalysisResponse(status="error", message=CONFIG_ERROR_MESSAGE)

    try:
        state = await run_pipeline(url, query, credentials)
    except Exception:
        logger.exception("Analysis failed for %s", url)
        return AnalysisResponse(status="error", message=GENERIC_ERROR_MESSAGE)

    for trace in state.get("stage_trace", []):
        logger.info(
            "%s: %s → %s (%.2fs, $%.6f)",
            trace.stage, trace.input_summary, trace.output_summary,
            trace.duration_seconds, trace.cost_usd,
        )
    logger.info(
        "Analysis of %s finished: $%.6f, %.2fs",
        url, state.get("total_cost_usd", 0.0), state.get("total_duration_seconds", 0.0),
    )

    response = state.get("response")
    if response is None:
        logger.error("Pipeline finished without a response for %s", url)
        return AnalysisResponse(status="error", message=GENERIC_ERROR_MESSAGE)
    return response
