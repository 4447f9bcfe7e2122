"""Utilities for parsing structured outputs returned by LLM calls.

Models asked for "a JSON array of strings" reply in many shapes: the bare
array, an object wrapping it, a fenced code block, or JSON followed by
commentary. The helpers here recover the array from all of them.
"""

from __future__ import annotations

import json
import re
from typing import Any, List

from .text_cleaning import strip_think_blocks

__all__ = ["extract_json_array"]


def _as_list(parsed: Any) -> List[Any] | None:
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        # e.g. {"subtasks": [...]} – take the first array-valued field
        for value in parsed.values():
            if isinstance(value, list):
                return value
    return None


def extract_json_array(response_text: str) -> List[Any]:
    """Robustly extract a JSON array from an LLM response.

    Parameters
    ----------
    response_text
        The raw message content returned by the chat completion.

    Returns
    -------
    list[Any]
        The parsed array. When the top-level parsed value is an object, the
        first array-valued field is returned instead.

    Raises
    ------
    ValueError
        If no JSON array can be located in *response_text*.
    """

    cleaned: str = strip_think_blocks(response_text or "").strip()

    # 1. Try to parse the whole string first (fast path)
    try:
        found = _as_list(json.loads(cleaned))
        if found is not None:
            return found
    except json.JSONDecodeError:
        pass

    # 2. Search for fenced JSON block, with or without explicit `json` label
    fenced = re.search(
        r"```(?:json)?\s*([\[{].*?[\]}])\s*```",
        cleaned,
        flags=re.DOTALL | re.IGNORECASE,
    )
    if fenced:
        snippet = fenced.group(1).strip()
        try:
            found = _as_list(json.loads(snippet))
            if found is not None:
                return found
        except json.JSONDecodeError:
            cleaned = snippet  # Narrow search space.

    # 3. Progressive truncation from first [ or {
    first_curly = cleaned.find("{")
    first_bracket = cleaned.find("[")
    starts = [i for i in (first_curly, first_bracket) if i != -1]
    if not starts:
        raise ValueError("Could not locate a JSON array in LLM response")

    candidate = cleaned[min(starts):]

    for end in range(len(candidate), 0, -1):
        snippet = candidate[:end].strip()
        try:
            parsed = json.loads(snippet)
        except json.JSONDecodeError:
            continue
        found = _as_list(parsed)
        if found is not None:
            return found
        break

    raise ValueError("Could not locate a JSON array in LLM response")
