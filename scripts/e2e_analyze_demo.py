"""End-to-end demo: fetch → extract → verify → aggregate on a real page.

Runs the four pipeline nodes one by one against the live services and
prints what each node produced. Requires FIRECRAWL_API_KEY,
ANTHROPIC_API_KEY, GOOGLE_SEARCH_API_KEY and GOOGLE_SEARCH_ENGINE_ID.

Usage:
    python scripts/e2e_analyze_demo.py URL "your query"
"""

from __future__ import annotations

import asyncio
import logging
import sys
import textwrap

from pagefacts.config import ConfigurationError, Credentials
from pagefacts.functions.aggregator import run_aggregator
from pagefacts.functions.claim_extractor import run_claim_extractor
from pagefacts.functions.claim_verifier import run_claim_verifier
from pagefacts.functions.content_fetcher import run_content_fetcher
from pagefacts.graph.workflow import initial_state
from pagefacts.models import AnalysisState


def _hr(title: str = "") -> None:
    if title:
        print(f"\n{'=' * 70}")
        print(f"  {title}")
        print(f"{'=' * 70}\n")
    else:
        print(f"\n{'-' * 70}\n")


def _wrap(text: str, indent: int = 4) -> str:
    return textwrap.fill(text, width=80, initial_indent=" " * indent,
                         subsequent_indent=" " * indent)


def _last_trace(state: AnalysisState) -> None:
    trace = state["stage_trace"][-1]
    print(f"\n  Duration: {trace.duration_seconds}s | Cost: ${trace.cost_usd:.6f}")


def print_fetch(state: AnalysisState) -> None:
    _hr("STEP 1: Content Fetcher")
    content = state.get("content")
    if content:
        print(f"  Fetched {len(content)} chars. Beginning:")
        print(_wrap(content[:400]))
    else:
        print(f"  {state.get('error')}")
    _last_trace(state)


def print_extraction(state: AnalysisState) -> None:
    _hr("STEP 2: Claim Extractor")
    items = state.get("items", [])
    print(f"  Relevant items ({len(items)}):")
    for item in items:
        print(f"    #{item.identifier} ({item.date})")
        print(_wrap(item.text[:300], indent=6))
    _last_trace(state)


def print_verification(state: AnalysisState) -> None:
    _hr("STEP 3: Claim Verifier")
    for item, outcome in zip(state.get("items", []), state.get("outcomes", [])):
        print(f"  #{item.identifier}: {outcome.confidence_score}/100 ({outcome.band})")
        print(_wrap(outcome.summary, indent=6))
        if outcome.notes:
            print(_wrap(f"Notes: {outcome.notes}", indent=6))
    _last_trace(state)


async def main(url: str, query: str) -> None:
    try:
        credentials = Credentials.from_env().require()
    except ConfigurationError as e:
        print(e)
        sys.exit(1)

    state = initial_state(url, query, credentials)

    state = await run_content_fetcher(state)
    print_fetch(state)

    if not state.get("error"):
        state = await run_claim_extractor(state)
        print_extraction(state)

        if state.get("items"):
            state = await run_claim_verifier(state)
            print_verification(state)

    state = await run_aggregator(state)
    _hr("RESULT")
    response = state["response"]
    print(f"  Status: {response.status}")
    if response.message:
        print(f"  Message: {response.message}")
    print(f"  Entries: {len(response.results)}")
    print(f"  Total cost: ${state['total_cost_usd']:.6f} | "
          f"Total duration: {state['total_duration_seconds']:.2f}s")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main(sys.argv[1], sys.argv[2]))
