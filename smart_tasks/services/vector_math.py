"""Pure vector helpers for comparing embeddings."""

from __future__ import annotations

import math
from typing import Sequence

from ..errors import DimensionMismatchError


def l2_norm(vec: Sequence[float]) -> float:
    return math.sqrt(sum(v * v for v in vec))


def normalize(vec: Sequence[float]) -> list[float]:
    """Scale *vec* to unit length; a zero vector is returned unchanged."""
    norm = l2_norm(vec)
    return [v / norm for v in vec] if norm else list(vec)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of *a* and *b*.

    Raises :class:`DimensionMismatchError` when the lengths differ. If either
    vector has zero norm the result is ``0.0``.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))

__all__ = ["cosine_similarity", "l2_norm", "normalize"]
