"""End-to-end tests for the analysis workflow with all services mocked."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import patch

import pytest

from pagefacts.config import Credentials
from pagefacts.functions.claim_verifier import CLAIM_NOT_EXTRACTED
from pagefacts.functions.content_fetcher import FETCH_FAILED_MESSAGE
from pagefacts.graph.workflow import (
    CONFIG_ERROR_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    analyze,
    run_pipeline,
)
from pagefacts.llm import Completion
from pagefacts.models import SearchSnippet

_FETCH = "pagefacts.functions.content_fetcher.scrape"
_EXTRACT_LLM = "pagefacts.functions.claim_extractor.generate"
_VERIFY_LLM = "pagefacts.functions.claim_verifier.generate"
_SEARCH = "pagefacts.functions.claim_verifier.search_for_verification"

URL = "https://example.com/topic/bridge"
QUERY = "When did the bridge open?"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _credentials(**overrides) -> Credentials:
    values = {
        "firecrawl_api_key": "fc",
        "anthropic_api_key": "sk-ant",
        "google_search_api_key": "g",
        "google_search_engine_id": "cx",
    }
    values.update(overrides)
    return Credentials(**values)


def _items_completion(*entries: dict) -> Completion:
    return Completion(text=json.dumps(list(entries)), cost_usd=0.01)


def _entry(identifier: int, content: str) -> dict:
    return {"content": content, "identifier": identifier, "date": "10.06.2019"}


def _claim(claim: str) -> Completion:
    return Completion(text=json.dumps({"claim": claim, "eventDate": "2019-06-01"}), cost_usd=0.001)


def _score(score: int) -> Completion:
    return Completion(
        text=json.dumps({"confidenceScore": score, "summary": "Supported", "notes": ""}),
        cost_usd=0.002,
    )


_SUPPORTING = [
    SearchSnippet(
        title="City opens new bridge",
        excerpt="The new bridge opened to traffic on 1 June 2019.",
        source_link="https://news.example/bridge",
    ),
]


def _run(url: str = URL, query: str = QUERY, credentials: Credentials | None = None):
    return asyncio.run(analyze(url, query, credentials or _credentials()))


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestAnalyze:
    def test_single_supported_entry_scores_85(self):
        with patch(_FETCH, return_value="...The bridge opened in June 2019..."), \
                patch(_EXTRACT_LLM, return_value=_items_completion(
                    _entry(7, "The bridge opened in June 2019."))), \
                patch(_VERIFY_LLM, side_effect=[_claim("The bridge opened"), _score(85)]), \
                patch(_SEARCH, return_value=_SUPPORTING):
            response = _run()

        assert response.status == "success"
        assert len(response.results) == 1
        entry = response.results[0]
        assert entry.identifier == 7
        assert entry.verification.confidence_score == 85

    def test_one_claim_extraction_failure_among_two(self):
        with patch(_FETCH, return_value="page"), \
                patch(_EXTRACT_LLM, return_value=_items_completion(
                    _entry(1, "Something vague."),
                    _entry(2, "The bridge opened in June 2019."))), \
                patch(_VERIFY_LLM, side_effect=[
                    Completion(text="I cannot find a claim here."),
                    _claim("The bridge opened"),
                    _score(85),
                ]), \
                patch(_SEARCH, return_value=_SUPPORTING) as search:
            response = _run()

        assert response.status == "success"
        assert [e.identifier for e in response.results] == [1, 2]
        first, second = response.results
        assert first.verification.confidence_score == 0
        assert first.verification.summary == CLAIM_NOT_EXTRACTED.summary
        assert second.verification.confidence_score == 85
        search.assert_called_once()

    def test_empty_search_zeroes_only_that_item(self):
        with patch(_FETCH, return_value="page"), \
                patch(_EXTRACT_LLM, return_value=_items_completion(
                    _entry(1, "a"), _entry(2, "b"), _entry(3, "c"))), \
                patch(_VERIFY_LLM, side_effect=[
                    _claim("a"), _score(60),
                    _claim("b"),
                    _claim("c"), _score(95),
                ]), \
                patch(_SEARCH, side_effect=[_SUPPORTING, [], _SUPPORTING]):
            response = _run()

        assert response.status == "success"
        assert [e.identifier for e in response.results] == [1, 2, 3]
        assert [e.verification.confidence_score for e in response.results] == [60, 0, 95]

    def test_entry_count_matches_extracted_items(self):
        entries = [_entry(i, f"claim {i}") for i in range(5)]
        with patch(_FETCH, return_value="page"), \
                patch(_EXTRACT_LLM, return_value=_items_completion(*entries)), \
                patch(_VERIFY_LLM, return_value=Completion(text="nothing")), \
                patch(_SEARCH, return_value=[]):
            response = _run()

        assert response.status == "success"
        assert len(response.results) == len(entries)

    def test_unparseable_extraction_is_empty_not_error(self):
        with patch(_FETCH, return_value="page"), \
                patch(_EXTRACT_LLM, return_value=Completion(text="No relevant entries.")), \
                patch(_VERIFY_LLM) as verify_llm, \
                patch(_SEARCH) as search:
            response = _run()

        assert response.status == "empty"
        assert response.results == []
        verify_llm.assert_not_called()
        search.assert_not_called()

    def test_fetch_failure_stops_pipeline(self):
        with patch(_FETCH, return_value=None), \
                patch(_EXTRACT_LLM) as extract_llm, \
                patch(_VERIFY_LLM) as verify_llm, \
                patch(_SEARCH) as search:
            response = _run()

        assert response.status == "error"
        assert response.message == FETCH_FAILED_MESSAGE
        extract_llm.assert_not_called()
        verify_llm.assert_not_called()
        search.assert_not_called()

    def test_missing_credentials_fails_before_any_call(self):
        with patch(_FETCH) as fetch, patch(_EXTRACT_LLM) as extract_llm:
            response = _run(credentials=_credentials(google_search_engine_id=None))

        assert response.status == "error"
        assert response.message == CONFIG_ERROR_MESSAGE
        fetch.assert_not_called()
        extract_llm.assert_not_called()

    def test_unexpected_exception_is_generic_error(self):
        with patch(_FETCH, return_value="page"), \
                patch(_EXTRACT_LLM, side_effect=RuntimeError("internal detail")):
            response = _run()

        assert response.status == "error"
        assert response.message == GENERIC_ERROR_MESSAGE
        assert "internal detail" not in response.model_dump_json()

    @pytest.mark.parametrize("url, query", [("", QUERY), (URL, "")])
    def test_missing_input_rejected(self, url, query):
        with patch(_FETCH) as fetch:
            with pytest.raises(ValueError):
                _run(url=url, query=query)
        fetch.assert_not_called()


def test_run_pipeline_records_stage_traces():
    with patch(_FETCH, return_value="page"), \
            patch(_EXTRACT_LLM, return_value=_items_completion(_entry(1, "x"))), \
            patch(_VERIFY_LLM, side_effect=[_claim("x"), _score(50)]), \
            patch(_SEARCH, return_value=_SUPPORTING):
        state = asyncio.run(run_pipeline(URL, QUERY, _credentials()))

    assert [t.stage for t in state["stage_trace"]] == [
        "content_fetcher", "claim_extractor", "claim_verifier", "aggregator",
    ]
    assert state["total_cost_usd"] == pytest.approx(0.013)
