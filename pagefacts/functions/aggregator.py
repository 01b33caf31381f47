"""Aggregator — Function (no model call).

Pairs each extracted item with its verification outcome and shapes the
top-level response:

- error: a stage set an error (e.g. the page could not be fetched)
- empty: extraction produced no items; reported as success with no results
- success: one entry per extracted item, in extraction order
"""

from __future__ import annotations

import logging
import time

from pagefacts.models import (
    AnalysisResponse,
    AnalysisState,
    ExtractedItem,
    ResultEntry,
    StageTrace,
    VerificationOutcome,
)

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No relevant entries were found."


def build_result_entries(
    items: list[ExtractedItem],
    outcomes: list[VerificationOutcome],
) -> list[ResultEntry]:
    """Zip items with their outcomes, preserving order.

    Raises:
        ValueError: if the two lists differ in length.
    """
    if len(items) != len(outcomes):
        raise ValueError(
            f"Got {len(outcomes)} verification outcomes for {len(items)} items"
        )

    return [
        ResultEntry(
            identifier=item.identifier,
            date=item.date,
            content=item.content,
            verification=outcome,
        )
        for item, outcome in zip(items, outcomes)
    ]


def build_response(state: AnalysisState) -> AnalysisResponse:
    error = state.get("error")
    if error:
        return AnalysisResponse(status="error", message=error)

    items = state.get("items", [])
    if not items:
        return AnalysisResponse(status="empty", message=EMPTY_MESSAGE)

    entries = build_result_entries(items, state.get("outcomes", []))
    return AnalysisResponse(status="success", results=entries)


async def run_aggregator(state: AnalysisState) -> AnalysisState:
    """Run the aggregator.

    Args:
        state: Pipeline state after fetching, extraction and verification
               (any of which may have been skipped).

    Returns:
        Updated state with response populated.
    """
    start_time = time.time()

    response = build_response(state)

    duration = time.time() - start_time

    trace = StageTrace(
        stage="aggregator",
        duration_seconds=round(duration, 2),
        cost_usd=0.0,
        input_summary=f"{len(state.get('items', []))} items",
        output_summary=f"status={response.status}, {len(response.results)} entries",
        success=True,
    )

    return {
        **state,
        "response": response,
        "stage_trace": state.get("stage_trace", []) + [trace],
        "total_duration_seconds": state.get("total_duration_seconds", 0.0) + duration,
    }
