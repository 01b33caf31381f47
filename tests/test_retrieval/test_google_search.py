"""Tests for the Google Custom Search client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from pagefacts.config import GOOGLE_SEARCH_URL
from pagefacts.models import SearchSnippet
from pagefacts.retrieval.google_search import (
    build_query,
    date_window,
    event_year,
    search,
    search_for_verification,
)


def _mock_response(payload=None, status_code: int = 200):
    resp = MagicMock()
    resp.status_code = status_code
    if status_code >= 400:
        err = requests.exceptions.HTTPError(f"{status_code} Error")
        err.response = resp
        resp.raise_for_status.side_effect = err
    resp.json.return_value = payload
    return resp


def _items(n: int) -> list[dict]:
    return [
        {"title": f"Title {i}", "snippet": f"Snippet {i}", "link": f"https://news.example/{i}"}
        for i in range(n)
    ]


# ---------------------------------------------------------------------------
# Date helpers
# ---------------------------------------------------------------------------


class TestEventYear:
    @pytest.mark.parametrize("value, expected", [
        ("2019-03-01", 2019),
        ("01.03.2019", 2019),
        ("March 2019", 2019),
        ("1999", 1999),
        ("unknown", None),
        ("", None),
        (None, None),
        ("12345", None),
    ])
    def test_parses_year(self, value, expected):
        assert event_year(value) == expected


class TestDateWindow:
    def test_window_around_year(self):
        assert date_window(2019) == (2018, 2020, "y2")

    def test_unknown_year_keeps_width(self):
        assert date_window(None) == (None, None, "y2")


def test_build_query():
    assert build_query("Bridge opened", 2019) == "Bridge opened 2019"
    assert build_query("Bridge opened", None) == "Bridge opened"


# ---------------------------------------------------------------------------
# search()
# ---------------------------------------------------------------------------


class TestSearch:
    def test_maps_items_to_snippets(self):
        resp = _mock_response({"items": _items(2)})

        with patch("pagefacts.retrieval.google_search.requests.get", return_value=resp) as get:
            snippets = search("bridge 2019", "g-key", "cx-id", date_restrict="y2")

        assert snippets == [
            SearchSnippet(title="Title 0", excerpt="Snippet 0", source_link="https://news.example/0"),
            SearchSnippet(title="Title 1", excerpt="Snippet 1", source_link="https://news.example/1"),
        ]
        args, kwargs = get.call_args
        assert args[0] == GOOGLE_SEARCH_URL
        assert kwargs["params"] == {
            "key": "g-key",
            "cx": "cx-id",
            "q": "bridge 2019",
            "num": 10,
            "dateRestrict": "y2",
        }

    def test_caps_at_ten_results(self):
        resp = _mock_response({"items": _items(15)})

        with patch("pagefacts.retrieval.google_search.requests.get", return_value=resp) as get:
            snippets = search("q", "k", "cx", max_results=50)

        assert len(snippets) == 10
        assert get.call_args.kwargs["params"]["num"] == 10

    def test_missing_fields_default_to_empty(self):
        resp = _mock_response({"items": [{"link": "https://a.example"}]})

        with patch("pagefacts.retrieval.google_search.requests.get", return_value=resp):
            snippets = search("q", "k", "cx")

        assert snippets[0].title == ""
        assert snippets[0].excerpt == ""

    def test_no_items(self):
        resp = _mock_response({"searchInformation": {"totalResults": "0"}})

        with patch("pagefacts.retrieval.google_search.requests.get", return_value=resp):
            assert search("q", "k", "cx") == []

    def test_http_error(self):
        resp = _mock_response(status_code=403)

        with patch("pagefacts.retrieval.google_search.requests.get", return_value=resp):
            assert search("q", "k", "cx") == []

    def test_timeout(self):
        with patch(
            "pagefacts.retrieval.google_search.requests.get",
            side_effect=requests.exceptions.Timeout("slow"),
        ):
            assert search("q", "k", "cx") == []


class TestSearchForVerification:
    def test_query_and_window_from_event_date(self):
        resp = _mock_response({"items": _items(1)})

        with patch("pagefacts.retrieval.google_search.requests.get", return_value=resp) as get:
            snippets = search_for_verification("The bridge opened", "2019-05-04", "k", "cx")

        assert len(snippets) == 1
        params = get.call_args.kwargs["params"]
        assert params["q"] == "The bridge opened 2019"
        assert params["dateRestrict"] == "y2"

    def test_unparseable_date_searches_claim_only(self):
        resp = _mock_response({"items": []})

        with patch("pagefacts.retrieval.google_search.requests.get", return_value=resp) as get:
            search_for_verification("The bridge opened", "sometime", "k", "cx")

        params = get.call_args.kwargs["params"]
        assert params["q"] == "The bridge opened"
        assert params["dateRestrict"] == "y2"
