"""Singleton accessor for the OpenAI SDK client."""

from __future__ import annotations

from openai import OpenAI as _OpenAIClient

from ..config import OPENAI_API_KEY

_client: _OpenAIClient | None = None


def get_openai() -> _OpenAIClient | None:
    """Return a singleton :class:`openai.OpenAI`, or ``None`` without a key.

    The client never retries on its own: a failed or timed-out call is
    handed straight to the caller's fallback path.
    """
    global _client
    if _client is None and OPENAI_API_KEY:
        _client = _OpenAIClient(api_key=OPENAI_API_KEY, max_retries=0)
    return _client

__all__ = ["get_openai"]
