"""Configuration and settings for the page claim checker."""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Credentials (environment variable names)
FIRECRAWL_API_KEY_VAR = "FIRECRAWL_API_KEY"
ANTHROPIC_API_KEY_VAR = "ANTHROPIC_API_KEY"
GOOGLE_SEARCH_API_KEY_VAR = "GOOGLE_SEARCH_API_KEY"
GOOGLE_SEARCH_ENGINE_ID_VAR = "GOOGLE_SEARCH_ENGINE_ID"

# Model configs
CLAUDE_MODEL = os.getenv("PAGEFACTS_MODEL", "claude-sonnet-4-20250514")

# Sonnet pricing, USD per million tokens
INPUT_COST_PER_MTOK = 3.0
OUTPUT_COST_PER_MTOK = 15.0

# Generation parameters per stage
EXTRACTION_GENERATION = {
    "temperature": 0.2,
    "top_p": 0.95,
    "top_k": 40,
    "max_tokens": 8192,
}
CLAIM_GENERATION = {
    "temperature": 0.2,
    "top_p": 0.95,
    "top_k": 40,
    "max_tokens": 1024,
}
SCORING_GENERATION = {
    "temperature": 0.3,
    "top_p": 0.95,
    "top_k": 40,
    "max_tokens": 1024,
}

# External services
FIRECRAWL_SCRAPE_URL = "https://api.firecrawl.dev/v1/scrape"
FIRECRAWL_TIMEOUT = 60
GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
GOOGLE_SEARCH_TIMEOUT = 15
MAX_SEARCH_RESULTS = 10

# Search window around the event year, in years on each side
SEARCH_WINDOW_YEARS = 1

# Confidence score bands
HIGH_CONFIDENCE = 80
MEDIUM_CONFIDENCE = 60

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class ConfigurationError(RuntimeError):
    """Raised when required credentials are missing."""


class Credentials(BaseModel):
    """API credentials for the three external services."""
    firecrawl_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    google_search_api_key: Optional[str] = None
    google_search_engine_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Credentials":
        return cls(
            firecrawl_api_key=os.getenv(FIRECRAWL_API_KEY_VAR) or None,
            anthropic_api_key=os.getenv(ANTHROPIC_API_KEY_VAR) or None,
            google_search_api_key=os.getenv(GOOGLE_SEARCH_API_KEY_VAR) or None,
            google_search_engine_id=os.getenv(GOOGLE_SEARCH_ENGINE_ID_VAR) or None,
        )

    def missing(self) -> list[str]:
        """Names of the environment variables whose values are absent."""
        pairs = [
            (FIRECRAWL_API_KEY_VAR, self.firecrawl_api_key),
            (ANTHROPIC_API_KEY_VAR, self.anthropic_api_key),
            (GOOGLE_SEARCH_API_KEY_VAR, self.google_search_api_key),
            (GOOGLE_SEARCH_ENGINE_ID_VAR, self.google_search_engine_id),
        ]
        return [name for name, value in pairs if not value]

    def require(self) -> "Credentials":
        missing = self.missing()
        if missing:
            raise ConfigurationError(f"Missing credentials: {', '.join(missing)}")
        return self

    def __repr__(self) -> str:
        configured = [name for name in type(self).model_fields if getattr(self, name)]
        return f"Credentials(configured={configured})"

    __str__ = __repr__
