"""Claim Extractor — Function (single model call).

Given the fetched page text and the user's query, asks the model for the
excerpts that are directly relevant to the query and parses them from a
JSON array in the response.

Type: Function (fixed steps, single model call)
Model: Claude Sonnet

Parsing is all-or-nothing: if no array can be found, the array is
malformed, or any element is not a JSON object, the result is empty. An
empty result is not an error; the request is reported as having no
relevant entries.
"""

from __future__ import annotations

import logging
import time

import anthropic

from pagefacts.config import EXTRACTION_GENERATION, Credentials
from pagefacts.llm import generate
from pagefacts.models import AnalysisState, ExtractedItem, StageTrace
from pagefacts.parsing import extract_json_array

logger = logging.getLogger(__name__)

_EXTRACTION_PROMPT = """\
Below is the text of a web page, made up of individual entries written by \
different authors:

{content}

The user is looking for: "{query}"

Find ONLY the entries in this text that answer the user's question or are \
directly related to its subject. For each relevant entry, return a JSON list \
in this format:

[
  {{
    "content": "the full text of the entry",
    "identifier": 12345,
    "date": "DD.MM.YYYY"
  }}
]

Use the entry's number as shown on the page for "identifier" and its \
posting date for "date". If no entry is relevant, return [].

Respond with ONLY the JSON list. Do not add any explanation."""


def build_prompt(content: str, query: str) -> str:
    return _EXTRACTION_PROMPT.format(content=content, query=query)


def parse_items(response_text: str) -> list[ExtractedItem]:
    """Parse extracted items from a model response; any failure yields []."""
    result = extract_json_array(response_text)
    if not result.ok:
        logger.warning("Could not parse extraction response: %s", result.error)
        return []

    if not all(isinstance(entry, dict) for entry in result.value):
        logger.warning("Extraction array contains non-object entries, discarding")
        return []

    return [
        ExtractedItem(
            content=entry.get("content"),
            identifier=entry.get("identifier"),
            date=entry.get("date"),
        )
        for entry in result.value
    ]


def extract_relevant_items(
    content: str,
    query: str,
    credentials: Credentials,
) -> tuple[list[ExtractedItem], float]:
    """Ask the model for the entries relevant to ``query``.

    Returns:
        (items, cost_usd). Items is empty when the model call fails or its
        response cannot be parsed.
    """
    try:
        completion = generate(
            build_prompt(content, query),
            api_key=credentials.anthropic_api_key,
            **EXTRACTION_GENERATION,
        )
    except anthropic.APIError as e:
        logger.error("Extraction model call failed: %s", e)
        return [], 0.0

    return parse_items(completion.text), completion.cost_usd


async def run_claim_extractor(state: AnalysisState) -> AnalysisState:
    """Run the claim extractor.

    Args:
        state: Pipeline state with 'content', 'query' and 'credentials'.

    Returns:
        Updated state with items populated (possibly empty).
    """
    start_time = time.time()
    query = state["query"]

    items, cost = extract_relevant_items(state["content"], query, state["credentials"])
    logger.info("Extracted %d relevant items for query '%s'", len(items), query)

    duration = time.time() - start_time

    trace = StageTrace(
        stage="claim_extractor",
        duration_seconds=round(duration, 2),
        cost_usd=round(cost, 6),
        input_summary=f"Query: {query[:80]}",
        output_summary=f"{len(items)} items",
        success=True,
        tools_called=["extract_relevant_items"],
    )

    return {
        **state,
        "items": items,
        "stage_trace": state.get("stage_trace", []) + [trace],
        "total_cost_usd": state.get("total_cost_usd", 0.0) + cost,
        "total_duration_seconds": state.get("total_duration_seconds", 0.0) + duration,
    }
