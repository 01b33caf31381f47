"""Data models and graph state for the page claim checking pipeline."""

from __future__ import annotations

from typing import Any, List, Literal, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pagefacts.config import HIGH_CONFIDENCE, MEDIUM_CONFIDENCE, Credentials


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractedItem(BaseModel):
    """An excerpt the model judged relevant to the query.

    Values are kept exactly as the model produced them; any of them may be
    missing or of an unexpected type.
    """
    content: Any = None
    identifier: Any = None
    date: Any = None

    @property
    def text(self) -> str:
        if self.content is None:
            return ""
        return str(self.content).strip()


class ClaimStatement(_CamelModel):
    """The core assertion of an item and the date of the event it concerns."""
    claim: str
    event_date: str = ""


class SearchSnippet(_CamelModel):
    """One web search result."""
    title: str = ""
    excerpt: str = ""
    source_link: str = ""


class VerificationOutcome(_CamelModel):
    """Credibility score of one claim against search evidence."""
    confidence_score: int = Field(default=0, ge=0, le=100)
    summary: str = ""
    notes: str = ""

    @property
    def band(self) -> Literal["high", "medium", "low"]:
        if self.confidence_score >= HIGH_CONFIDENCE:
            return "high"
        if self.confidence_score >= MEDIUM_CONFIDENCE:
            return "medium"
        return "low"


class ResultEntry(_CamelModel):
    """One extracted item together with its verification outcome."""
    identifier: Any = None
    date: Any = None
    content: Any = None
    verification: VerificationOutcome


class AnalysisResponse(_CamelModel):
    """Top-level result of one analysis request."""
    status: Literal["success", "empty", "error"]
    message: Optional[str] = None
    results: List[ResultEntry] = []


class StageTrace(BaseModel):
    """Trace of a single pipeline stage's execution."""
    stage: str
    duration_seconds: float
    cost_usd: float
    input_summary: str
    output_summary: str
    success: bool
    tools_called: List[str] = []


class AnalysisState(TypedDict):
    """Main state passed through the LangGraph workflow."""
    # Input
    url: str
    query: str
    credentials: Credentials

    # Fetch
    content: Optional[str]

    # Extraction
    items: List[ExtractedItem]

    # Verification (one outcome per item, same order)
    outcomes: List[VerificationOutcome]

    # Set by any stage that fails the whole request
    error: Optional[str]

    # Aggregation
    response: Optional[AnalysisResponse]

    # Tracing
    stage_trace: List[StageTrace]
    total_cost_usd: float
    total_duration_seconds: float
