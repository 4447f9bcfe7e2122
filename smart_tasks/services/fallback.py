"""Deterministic character-hash embedding used when the model is unavailable."""

from __future__ import annotations

from typing import List

from ..config import EMBEDDING_DIMENSIONS
from .vector_math import normalize

# Mixing constants for the bucket index
_WORD_STRIDE = 37
_CHAR_STRIDE = 13


def fallback_embed(text: str, dimensions: int = EMBEDDING_DIMENSIONS) -> List[float]:
    """Derive a unit-length pseudo-embedding of *dimensions* floats from *text*.

    Every character of every whitespace-separated, lowercased word adds
    ``code_point / 255 * 0.1`` to the bucket
    ``(code_point + word_index * 37 + char_index * 13) % dimensions``.
    Empty text yields the zero vector.
    """
    embedding = [0.0] * dimensions
    for i, word in enumerate(text.lower().split()):
        for j, char in enumerate(word):
            code = ord(char)
            index = (code + i * _WORD_STRIDE + j * _CHAR_STRIDE) % dimensions
            embedding[index] += (code / 255) * 0.1
    return normalize(embedding)

__all__ = ["fallback_embed"]
