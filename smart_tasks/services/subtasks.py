"""Subtask suggestions: OpenAI decomposition with lookup-table fallbacks."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..clients.openai_client import get_openai
from ..config import (
    OPENAI_SUBTASK_MODEL,
    SUBTASK_MAX_ITEMS,
    SUBTASK_MIN_ITEMS,
    SUBTASK_TIMEOUT_SECONDS,
)
from ..errors import InvalidInputError
from ..utils.llm_parsing import extract_json_array
from ..utils.text_cleaning import clean_list_item, normalize_title

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Curated breakdowns, keyed by normalised title. Order matters for the
# substring pass: the first key that matches wins.
# ---------------------------------------------------------------------------
SUBTASK_TEMPLATES: Dict[str, List[str]] = {
    "plan a wedding": [
        "Book wedding venue",
        "Hire photographer",
        "Send invitations",
        "Arrange catering",
        "Plan wedding ceremony",
        "Choose wedding dress",
        "Plan honeymoon",
    ],
    "start a business": [
        "Choose business idea",
        "Write business plan",
        "Register business",
        "Set up finances",
        "Build online presence",
        "Hire staff",
        "Launch business",
    ],
    "organize a birthday party": [
        "Choose party theme",
        "Book venue",
        "Send invitations",
        "Order cake",
        "Arrange food and drinks",
        "Plan activities",
        "Buy decorations",
    ],
    "move to a new home": [
        "Set a moving date",
        "Declutter and donate unused items",
        "Book movers or rent a truck",
        "Pack belongings room by room",
        "Update address with banks and services",
        "Transfer utilities and internet",
        "Unpack and set up essentials",
    ],
    "plan a vacation": [
        "Pick destination and dates",
        "Set travel budget",
        "Book flights",
        "Reserve accommodation",
        "Plan daily itinerary",
        "Check passport and travel documents",
        "Pack luggage",
    ],
    "learn a new language": [
        "Choose the language and set a goal",
        "Pick a course or learning app",
        "Schedule daily practice time",
        "Learn core vocabulary",
        "Practice with a conversation partner",
        "Consume media in the language",
        "Take a progress test",
    ],
    "find a new job": [
        "Update resume",
        "Refresh professional profiles",
        "List target companies",
        "Apply to open positions",
        "Prepare for interviews",
        "Follow up with recruiters",
        "Negotiate the offer",
    ],
}

_SYSTEM_PROMPT = (
    "You are a productivity assistant that breaks tasks into subtasks."
    " Reply with ONLY a JSON array of strings, no markdown, no fences,"
    " no commentary."
)


def _generic_template(title: str) -> List[str]:
    return [
        f'Define scope and requirements for "{title}"',
        "Research and gather necessary resources",
        "Break the work into milestones",
        "Create a timeline with deadlines",
        "Complete the first milestone",
        "Review progress and adjust the plan",
        f'Finalize and wrap up "{title}"',
    ]


def _parse_suggestions(response_text: str) -> List[str]:
    """Turn a model reply into 3–7 cleaned subtask strings, or raise ValueError."""
    items = extract_json_array(response_text)
    suggestions = [clean_list_item(item) for item in items if isinstance(item, str)]
    suggestions = [s for s in suggestions if s][:SUBTASK_MAX_ITEMS]
    if len(suggestions) < SUBTASK_MIN_ITEMS:
        raise ValueError(f"Expected at least {SUBTASK_MIN_ITEMS} subtasks, got {len(suggestions)}")
    return suggestions


def generate_subtasks_with_llm(title: str) -> List[str]:
    """Ask the chat model for 5–7 actionable steps for *title*."""
    client = get_openai()
    if client is None:
        raise RuntimeError("OPENAI_API_KEY is not set; generative subtasks unavailable")

    resp = client.chat.completions.create(
        model=OPENAI_SUBTASK_MODEL,
        messages=[
            {"role": "system", "content": _SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f'Break down the task "{title}" into 5-7 actionable, concise subtasks.'
                    " Each subtask should be a short imperative phrase (≤60 characters)."
                ),
            },
        ],
        temperature=0.3,
        max_tokens=300,
        timeout=SUBTASK_TIMEOUT_SECONDS,
    )
    content: str = resp.choices[0].message.content or ""
    logger.debug("Raw subtask response: %s", content)
    return _parse_suggestions(content)


def lookup_subtasks(title: str) -> Optional[List[str]]:
    """Return a curated breakdown for *title*, or ``None`` if nothing matches.

    Exact match on the normalised title first, then substring containment in
    either direction.
    """
    normalized = normalize_title(title)
    if normalized in SUBTASK_TEMPLATES:
        return list(SUBTASK_TEMPLATES[normalized])
    for key, steps in SUBTASK_TEMPLATES.items():
        if key in normalized or normalized in key:
            logger.info("Partial template match '%s' for '%s'", key, title)
            return list(steps)
    return None


def suggest_subtasks(parent_title: str) -> List[str]:
    """Suggest 3–7 subtasks for *parent_title*.

    Falls through generative model → curated lookup → generic template; only
    a missing or blank title raises.
    """
    if not isinstance(parent_title, str) or not parent_title.strip():
        raise InvalidInputError("Parent task title is required")

    title = parent_title.strip()
    try:
        suggestions = generate_subtasks_with_llm(title)
        logger.info("Generated %d subtasks for '%s'", len(suggestions), title)
        return suggestions
    except Exception as exc:
        logger.warning("Subtask generation failed (%s) – using templates", exc)

    curated = lookup_subtasks(title)
    if curated is not None:
        return curated

    logger.info("No template for '%s' – using generic breakdown", title)
    return _generic_template(title)

__all__ = [
    "suggest_subtasks",
    "lookup_subtasks",
    "generate_subtasks_with_llm",
    "SUBTASK_TEMPLATES",
]
