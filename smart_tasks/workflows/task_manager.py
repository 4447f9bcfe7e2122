"""Task and subtask operations with embedding upkeep and AI subtask suggestions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..logging_config import logging as _  # noqa: F401  # ensure config applied early
from ..errors import InvalidInputError
from ..models import (
    Subtask,
    Task,
    validate_priority,
    validate_status,
    validate_title,
)
from ..services.storage import TaskStore, get_task_store
from ..services.subtasks import suggest_subtasks
from ..services.task_embeddings import attach_embedding, prepare_task_update
from ..utils.datetime_utils import get_current_timestamp

logger = logging.getLogger(__name__)


def _store(store: Optional[TaskStore]) -> TaskStore:
    return store if store is not None else get_task_store()


def _require_owner(owner_id: str) -> None:
    if not owner_id:
        raise InvalidInputError("Owner id is required")


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def create_task(
    owner_id: str,
    title: str,
    priority: str = "medium",
    store: Optional[TaskStore] = None,
) -> Task:
    """Create a pending task, attaching a title embedding when one can be made."""
    _require_owner(owner_id)
    task = Task(
        title=validate_title(title),
        owner_id=owner_id,
        priority=validate_priority(priority),
    )
    logger.info("Adding task with title: %s", task.title)
    attach_embedding(task)
    if task.embedding is None:
        logger.warning("No embedding generated, proceeding without embedding")
    return _store(store).insert_task(task)


def update_task(
    task_id: str,
    owner_id: str,
    updates: Dict[str, Any],
    store: Optional[TaskStore] = None,
) -> Task:
    """Apply *updates* (title/priority/status) in one write.

    The embedding is refreshed only when the title is updated.
    """
    _require_owner(owner_id)
    fields = prepare_task_update(updates)
    return _store(store).update_task(task_id, owner_id, fields)


def delete_task(task_id: str, owner_id: str, store: Optional[TaskStore] = None) -> None:
    _require_owner(owner_id)
    _store(store).delete_task(task_id, owner_id)


def list_tasks(owner_id: str, store: Optional[TaskStore] = None) -> List[Task]:
    _require_owner(owner_id)
    return _store(store).list_tasks(owner_id)


# ---------------------------------------------------------------------------
# Subtasks
# ---------------------------------------------------------------------------

def add_subtask(
    parent_task_id: str,
    owner_id: str,
    title: str,
    priority: str = "medium",
    store: Optional[TaskStore] = None,
) -> Subtask:
    """Create a pending subtask under an existing task of the same owner."""
    _require_owner(owner_id)
    if not parent_task_id:
        raise InvalidInputError("Parent task ID is required")
    store = _store(store)
    store.get_task(parent_task_id, owner_id)
    subtask = Subtask(
        title=validate_title(title),
        parent_task_id=parent_task_id,
        owner_id=owner_id,
        priority=validate_priority(priority),
    )
    return store.insert_subtask(subtask)


def update_subtask(
    subtask_id: str,
    owner_id: str,
    updates: Dict[str, Any],
    store: Optional[TaskStore] = None,
) -> Subtask:
    _require_owner(owner_id)
    fields: Dict[str, Any] = {}
    for key, value in updates.items():
        if key == "title":
            fields["title"] = validate_title(value)
        elif key == "priority":
            fields["priority"] = validate_priority(value)
        elif key == "status":
            fields["status"] = validate_status(value)
        else:
            raise InvalidInputError(f"Cannot update field: {key}")
    fields["updated_at"] = get_current_timestamp()
    return _store(store).update_subtask(subtask_id, owner_id, fields)


def delete_subtask(subtask_id: str, owner_id: str, store: Optional[TaskStore] = None) -> None:
    _require_owner(owner_id)
    _store(store).delete_subtask(subtask_id, owner_id)


def list_subtasks(
    parent_task_id: str, owner_id: str, store: Optional[TaskStore] = None
) -> List[Subtask]:
    _require_owner(owner_id)
    return _store(store).list_subtasks(parent_task_id, owner_id)


def generate_subtasks(
    parent_task_id: str, owner_id: str, store: Optional[TaskStore] = None
) -> List[str]:
    """Suggest subtasks for a stored task. Nothing is persisted."""
    _require_owner(owner_id)
    parent = _store(store).get_task(parent_task_id, owner_id)
    return suggest_subtasks(parent.title)


def accept_suggestion(
    parent_task_id: str,
    owner_id: str,
    suggestion: str,
    priority: str = "medium",
    store: Optional[TaskStore] = None,
) -> Subtask:
    """Persist one suggested step as a real subtask."""
    return add_subtask(parent_task_id, owner_id, suggestion, priority=priority, store=store)

__all__ = [
    "create_task",
    "update_task",
    "delete_task",
    "list_tasks",
    "add_subtask",
    "update_subtask",
    "delete_subtask",
    "list_subtasks",
    "generate_subtasks",
    "accept_suggestion",
]
