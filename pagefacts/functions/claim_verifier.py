"""Claim Verifier — Function (two model calls and one search per item).

Verifies each extracted item in order, one at a time:

1. Claim extraction: ask the model for the item's core assertion and the
   date of the real-world event it describes (not the posting date).
2. Search: query the web for the claim within a window around the event
   year.
3. Scoring: ask the model for a 0-100 confidence score, a short summary
   and notes on contradictions, based on the search snippets.

Every step can fail independently. A failure degrades to a zero-score
placeholder for that item only; other items are unaffected, and the
output always has one outcome per input item in the same order.

Type: Function (fixed steps, no reasoning loop)
Model: Claude Sonnet
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import anthropic

from pagefacts.config import CLAIM_GENERATION, SCORING_GENERATION, Credentials
from pagefacts.llm import generate
from pagefacts.models import (
    AnalysisState,
    ClaimStatement,
    ExtractedItem,
    SearchSnippet,
    StageTrace,
    VerificationOutcome,
)
from pagefacts.parsing import extract_json_object
from pagefacts.retrieval.google_search import search_for_verification

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Placeholder outcomes
# ---------------------------------------------------------------------------

CLAIM_NOT_EXTRACTED = VerificationOutcome(
    confidence_score=0,
    summary="Claim could not be extracted",
    notes="No core assertion could be identified in the entry content.",
)

VERIFICATION_INCOMPLETE = VerificationOutcome(
    confidence_score=0,
    summary="Verification could not be completed",
    notes="Not enough sources were found.",
)

VERIFICATION_ERROR = VerificationOutcome(
    confidence_score=0,
    summary="An error occurred during verification",
    notes="Verification could not be completed due to a technical problem.",
)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

_CLAIM_PROMPT = """\
Analyze this entry:

"{content}"

What is the main claim in this entry, and on what date did the EVENT it \
refers to take place? Respond in this JSON format:

{{
  "claim": "the main claim",
  "eventDate": "YYYY-MM-DD"
}}

Note: the event date is the date of the event the entry talks about, not \
the date the entry was written. If there is no exact date, give the closest \
year or period.

Respond with ONLY the JSON."""

_SCORING_PROMPT = """\
You are a fact checker. The original claim is:

"{content}"

Restated, the claim is "{claim}" (event date: {event_date}).

I found these sources from that period to support or refute it:

{sources}

Based on these sources, how accurate is the original claim? Give a \
confidence score from 0 to 100, write a short verification summary of your \
findings, and add any notes (contradictions, points you are unsure about).

Respond in this JSON format:

{{
  "confidenceScore": 85,
  "summary": "short summary",
  "notes": "additional notes"
}}

Respond with ONLY the JSON."""


def format_sources(snippets: list[SearchSnippet]) -> str:
    """Number the snippets as title / excerpt / source blocks."""
    return "\n\n".join(
        f"{i}. {s.title}\n   {s.excerpt}\n   Source: {s.source_link}"
        for i, s in enumerate(snippets, start=1)
    )


# ---------------------------------------------------------------------------
# Step 1: claim extraction
# ---------------------------------------------------------------------------


def parse_claim(response_text: str) -> Optional[ClaimStatement]:
    result = extract_json_object(response_text)
    if not result.ok:
        logger.warning("Could not parse claim response: %s", result.error)
        return None

    data = result.value
    claim = data.get("claim")
    if not isinstance(claim, str) or not claim.strip() or "eventDate" not in data:
        logger.warning("Claim response is missing 'claim' or 'eventDate'")
        return None

    event_date = data.get("eventDate")
    return ClaimStatement(
        claim=claim.strip(),
        event_date=str(event_date) if event_date is not None else "",
    )


def extract_claim(
    content: str,
    credentials: Credentials,
) -> tuple[Optional[ClaimStatement], float]:
    """Ask the model for the item's core claim and event date.

    Returns:
        (claim, cost_usd); claim is None when it could not be extracted.
    """
    if not content:
        return None, 0.0

    try:
        completion = generate(
            _CLAIM_PROMPT.format(content=content),
            api_key=credentials.anthropic_api_key,
            **CLAIM_GENERATION,
        )
    except anthropic.APIError as e:
        logger.error("Claim extraction model call failed: %s", e)
        return None, 0.0

    return parse_claim(completion.text), completion.cost_usd


# ---------------------------------------------------------------------------
# Step 3: scoring
# ---------------------------------------------------------------------------


def _to_score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        score = round(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return max(0, min(100, score))


def parse_outcome(response_text: str) -> Optional[VerificationOutcome]:
    result = extract_json_object(response_text)
    if not result.ok:
        logger.warning("Could not parse scoring response: %s", result.error)
        return None

    data = result.value
    score = _to_score(data.get("confidenceScore"))
    if score is None:
        logger.warning("Scoring response has no usable confidenceScore")
        return None

    return VerificationOutcome(
        confidence_score=score,
        summary=str(data.get("summary") or ""),
        notes=str(data.get("notes") or ""),
    )


def score_claim(
    content: str,
    claim: ClaimStatement,
    snippets: list[SearchSnippet],
    credentials: Credentials,
) -> tuple[Optional[VerificationOutcome], float]:
    """Score the claim's credibility against the search snippets.

    Returns:
        (outcome, cost_usd); outcome is None when there is no evidence or
        the response is unusable.
    """
    if not snippets:
        return None, 0.0

    prompt = _SCORING_PROMPT.format(
        content=content,
        claim=claim.claim,
        event_date=claim.event_date or "unknown",
        sources=format_sources(snippets),
    )

    try:
        completion = generate(
            prompt,
            api_key=credentials.anthropic_api_key,
            **SCORING_GENERATION,
        )
    except anthropic.APIError as e:
        logger.error("Scoring model call failed: %s", e)
        return None, 0.0

    return parse_outcome(completion.text), completion.cost_usd


# ---------------------------------------------------------------------------
# Per-item and batch verification
# ---------------------------------------------------------------------------


def verify_item(
    item: ExtractedItem,
    credentials: Credentials,
) -> tuple[VerificationOutcome, float]:
    """Run claim extraction, search and scoring for one item."""
    claim, cost = extract_claim(item.text, credentials)
    if claim is None:
        logger.info("No claim extracted for item %s", item.identifier)
        return CLAIM_NOT_EXTRACTED.model_copy(), cost

    snippets = search_for_verification(
        claim.claim,
        claim.event_date,
        credentials.google_search_api_key,
        credentials.google_search_engine_id,
    )

    outcome, score_cost = score_claim(item.text, claim, snippets, credentials)
    cost += score_cost
    if outcome is None:
        logger.info(
            "Verification incomplete for item %s (%d snippets)",
            item.identifier, len(snippets),
        )
        return VERIFICATION_INCOMPLETE.model_copy(), cost

    return outcome, cost


def verify_items(
    items: list[ExtractedItem],
    credentials: Credentials,
) -> tuple[list[VerificationOutcome], float]:
    """Verify items one after another, isolating each item's failures.

    Returns:
        (outcomes, cost_usd) with exactly one outcome per item, in order.
    """
    outcomes: list[VerificationOutcome] = []
    total_cost = 0.0

    for item in items:
        try:
            outcome, cost = verify_item(item, credentials)
            total_cost += cost
        except Exception:
            logger.exception("Verification failed for item %s", item.identifier)
            outcome = VERIFICATION_ERROR.model_copy()
        outcomes.append(outcome)

    return outcomes, total_cost


async def run_claim_verifier(state: AnalysisState) -> AnalysisState:
    """Run the claim verifier.

    Args:
        state: Pipeline state with 'items' and 'credentials' populated.

    Returns:
        Updated state with one outcome per item.
    """
    start_time = time.time()
    items = state.get("items", [])

    outcomes, cost = verify_items(items, state["credentials"])

    duration = time.time() - start_time
    scored = sum(1 for o in outcomes if o.confidence_score > 0)

    trace = StageTrace(
        stage="claim_verifier",
        duration_seconds=round(duration, 2),
        cost_usd=round(cost, 6),
        input_summary=f"{len(items)} items",
        output_summary=f"{len(outcomes)} outcomes, {scored} with a non-zero score",
        success=True,
        tools_called=["extract_claim", "google_search", "score_claim"],
    )

    return {
        **state,
        "outcomes": outcomes,
        "stage_trace": state.get("stage_trace", []) + [trace],
        "total_cost_usd": state.get("total_cost_usd", 0.0) + cost,
        "total_duration_seconds": state.get("total_duration_seconds", 0.0) + duration,
    }
