"""Embedding generation using the OpenAI API, with a deterministic fallback."""

from __future__ import annotations

import logging
from numbers import Real
from typing import Any, List

from ..clients.openai_client import get_openai
from ..config import EMBEDDING_DIMENSIONS, EMBEDDING_MODEL, EMBEDDING_TIMEOUT_SECONDS
from ..errors import InvalidInputError
from ..models import EmbeddingResult
from .fallback import fallback_embed

logger = logging.getLogger(__name__)


def _is_valid_vector(embedding: Any) -> bool:
    if not isinstance(embedding, list) or len(embedding) != EMBEDDING_DIMENSIONS:
        return False
    return all(isinstance(v, Real) and not isinstance(v, bool) for v in embedding)


def generate_embedding(text: str) -> List[float]:
    """Call the embedding model for *text* and return the raw vector.

    Raises whatever the SDK raises (including ``openai.APITimeoutError``) and
    ``RuntimeError`` when no client is configured or the result is malformed.
    """
    client = get_openai()
    if client is None:
        raise RuntimeError("OPENAI_API_KEY is not set; embedding model unavailable")

    response = client.embeddings.create(
        model=EMBEDDING_MODEL,
        input=text,
        dimensions=EMBEDDING_DIMENSIONS,
        timeout=EMBEDDING_TIMEOUT_SECONDS,
    )
    embedding = response.data[0].embedding if response.data else None
    if not _is_valid_vector(embedding):
        raise RuntimeError("Embedding model returned an invalid vector")
    logger.debug("Generated embedding of length %d", len(embedding))
    return list(embedding)


def embed(text: str) -> EmbeddingResult:
    """Embed *text*, degrading to :func:`fallback_embed` on any model failure.

    Only malformed input raises (:class:`InvalidInputError`); model errors,
    timeouts and bad results are logged and reported through
    ``EmbeddingResult.used_fallback``.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Valid text is required")

    trimmed = text.strip()
    logger.info("Generating embedding for text (first 50 chars): %s…", trimmed[:50])
    try:
        return EmbeddingResult(vector=generate_embedding(trimmed), used_fallback=False)
    except Exception as exc:
        logger.warning("Embedding model unavailable (%s) – using fallback embedding", exc)
        return EmbeddingResult(vector=fallback_embed(trimmed), used_fallback=True)

__all__ = ["embed", "generate_embedding"]
