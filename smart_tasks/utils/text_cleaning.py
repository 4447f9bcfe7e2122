"""Shared helper utilities for cleaning LLM output."""

from __future__ import annotations

import re
from typing import Final

# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def strip_think_blocks(text: str) -> str:
    """Extract content after the closing </think> tag from an LLM response.

    Handles missing tags and safely removes JSON code fences if present.
    """
    if not text:
        return text.strip()

    marker: Final[str] = "</think>"
    idx: int = text.rfind(marker)

    # Fallback to full text if marker is missing
    after: str = text if idx == -1 else text[idx + len(marker) :]

    cleaned: str = after.strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json") :].strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:].strip()
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3].strip()

    return cleaned


def clean_list_item(text: str) -> str:
    """Normalise a single generated list entry.

    Strips list bullets (``-``, ``*``, ``+``), numbering (``1.``, ``2)``),
    emphasis markers, surrounding quotes and collapses inner whitespace.
    """
    cleaned: str = text.strip()
    # Strip unordered list bullets
    cleaned = re.sub(r"^[-*+•]\s+", "", cleaned)
    # Strip numbered list markers (1. 2) etc.)
    cleaned = re.sub(r"^\d+[.)]\s+", "", cleaned)
    # Remove emphasis (**bold**, __bold__)
    cleaned = re.sub(r"(\*\*|__)", "", cleaned)
    cleaned = cleaned.strip().strip("\"'").strip()
    return re.sub(r"\s+", " ", cleaned)


def normalize_title(text: str) -> str:
    """Lowercase, trim and collapse whitespace for lookup comparisons."""
    return re.sub(r"\s+", " ", text.strip().lower())

__all__ = ["strip_think_blocks", "clean_list_item", "normalize_title"]
