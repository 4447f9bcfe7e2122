"""Singleton accessor for Pinecone and helper for obtaining the Index."""

from __future__ import annotations

from pinecone import Pinecone as _Pinecone, Index  # type: ignore

from ..config import PINECONE_API_KEY, PINECONE_INDEX_NAME

_pc: _Pinecone | None = None


def get_pinecone() -> _Pinecone | None:
    """Return a singleton :class:`pinecone.Pinecone` client, if configured."""
    global _pc
    if _pc is None and PINECONE_API_KEY:
        _pc = _Pinecone(api_key=PINECONE_API_KEY)
    return _pc


def get_index() -> Index | None:  # type: ignore[name-defined]
    """Return the configured Pinecone Index, or ``None`` when Pinecone is off.

    The index must already exist with dimension ``EMBEDDING_DIMENSIONS`` and
    the cosine metric.
    """
    pc = get_pinecone()
    if pc is None:
        return None
    return pc.Index(PINECONE_INDEX_NAME)

__all__ = ["get_pinecone", "get_index"]
