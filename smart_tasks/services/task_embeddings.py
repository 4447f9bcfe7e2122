"""Keep each task's stored embedding consistent with its title."""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import InvalidInputError
from ..models import Task, validate_priority, validate_status, validate_title
from ..utils.datetime_utils import get_current_timestamp
from .embeddings import embed

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "priority", "status")


def attach_embedding(task: Task) -> Task:
    """Set ``task.embedding`` from its title.

    Embeddings are best effort: if generation raises, the task is returned
    without one so creation can still go ahead.
    """
    try:
        result = embed(task.title)
    except Exception as exc:
        logger.warning("No embedding generated for '%s' (%s) – proceeding without", task.title, exc)
        task.embedding = None
        return task

    task.embedding = result.vector
    logger.info(
        "Attached %s embedding to task '%s'",
        "fallback" if result.used_fallback else "model",
        task.title,
    )
    return task


def prepare_task_update(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Validate *updates* and return the field set for a single store write.

    A new embedding is computed only when ``title`` is part of *updates*, and
    it travels in the same payload as the title. ``updated_at`` is always set.
    """
    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidInputError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    fields: Dict[str, Any] = {}
    if "priority" in updates:
        fields["priority"] = validate_priority(updates["priority"])
    if "status" in updates:
        fields["status"] = validate_status(updates["status"])

    if "title" in updates:
        title = validate_title(updates["title"])
        fields["title"] = title
        logger.info("Title changed, generating new embedding for: %s", title)
        try:
            fields["embedding"] = embed(title).vector
        except Exception as exc:
            # never keep the old vector next to a new title
            logger.warning("Embedding refresh failed (%s) – dropping stored embedding", exc)
            fields["embedding"] = None

    fields["updated_at"] = get_current_timestamp()
    return fields

__all__ = ["attach_embedding", "prepare_task_update", "UPDATABLE_FIELDS"]
