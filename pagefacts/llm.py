"""Thin wrapper around the Anthropic Messages API for single-prompt completions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import anthropic

from pagefacts.config import CLAUDE_MODEL, INPUT_COST_PER_MTOK, OUTPUT_COST_PER_MTOK

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    """Text of a model response and its estimated cost."""
    text: str
    cost_usd: float = 0.0


def estimate_cost(input_tokens: int, output_tokens: int) -> float:
    return (input_tokens * INPUT_COST_PER_MTOK + output_tokens * OUTPUT_COST_PER_MTOK) / 1_000_000


def generate(
    prompt: str,
    api_key: str,
    max_tokens: int,
    temperature: float,
    top_p: Optional[float] = None,
    top_k: Optional[int] = None,
    model: str = CLAUDE_MODEL,
) -> Completion:
    """Send one user prompt and return the response text.

    Args:
        prompt: The full prompt text.
        api_key: Anthropic API key.
        max_tokens: Output length cap.
        temperature: Sampling temperature.
        top_p: Nucleus sampling width; omitted from the request when None.
        top_k: Top-k sampling; omitted from the request when None.
        model: Model identifier.

    Returns:
        Completion with the response text (empty if the model returned
        no content) and estimated cost.

    Raises:
        anthropic.APIError: on any API or transport failure.
    """
    params = {
        "model": model,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": [{"role": "user", "content": prompt}],
    }
    if top_p is not None:
        params["top_p"] = top_p
    if top_k is not None:
        params["top_k"] = top_k

    # One attempt per call; failures surface to the caller as APIError.
    client = anthropic.Anthropic(api_key=api_key, max_retries=0)
    message = client.messages.create(**params)

    text = message.content[0].text.strip() if message.content else ""
    cost = estimate_cost(message.usage.input_tokens, message.usage.output_tokens)
    logger.debug("Completion: %d chars, $%.6f", len(text), cost)

    return Completion(text=text, cost_usd=cost)
