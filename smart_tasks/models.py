"""Domain models used across the project."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import InvalidInputError
from .utils.datetime_utils import get_current_timestamp

# Type alias for 384-dimensional embedding vector
Embedding = List[float]

PRIORITIES = ("low", "medium", "high")
STATUSES = ("pending", "in-progress", "done")


def _new_id() -> str:
    return str(uuid.uuid4())


def validate_title(title: Any) -> str:
    """Return *title* stripped, or raise :class:`InvalidInputError`."""
    if not isinstance(title, str) or not title.strip():
        raise InvalidInputError("Title must be a non-empty string")
    return title.strip()


def validate_priority(priority: Any) -> str:
    if priority not in PRIORITIES:
        raise InvalidInputError(f"Priority must be one of {PRIORITIES}, got {priority!r}")
    return priority


def validate_status(status: Any) -> str:
    if status not in STATUSES:
        raise InvalidInputError(f"Status must be one of {STATUSES}, got {status!r}")
    return status


@dataclass(slots=True)
class EmbeddingResult:
    """Outcome of an embedding request.

    ``used_fallback`` is ``True`` when the primary model was unavailable and
    the vector came from the deterministic fallback embedder.
    """

    vector: Embedding
    used_fallback: bool = False


@dataclass(slots=True)
class Task:
    """A user-owned task and its optional title embedding."""

    title: str
    owner_id: str
    priority: str = "medium"
    status: str = "pending"
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=get_current_timestamp)
    updated_at: datetime = field(default_factory=get_current_timestamp)
    embedding: Optional[Embedding] = None

    def to_document(self) -> Dict[str, Any]:
        """Return the MongoDB document for this task."""
        doc: Dict[str, Any] = {
            "_id": self.id,
            "title": self.title,
            "priority": self.priority,
            "status": self.status,
            "owner_id": self.owner_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.embedding is not None:
            doc["embedding"] = list(self.embedding)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Task":
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            priority=doc.get("priority", "medium"),
            status=doc.get("status", "pending"),
            owner_id=doc["owner_id"],
            created_at=doc["created_at"],
            updated_at=doc.get("updated_at", doc["created_at"]),
            embedding=doc.get("embedding"),
        )


@dataclass(slots=True)
class Subtask:
    """A step belonging to a parent task. Subtasks carry no embedding."""

    title: str
    parent_task_id: str
    owner_id: str
    priority: str = "medium"
    status: str = "pending"
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=get_current_timestamp)
    updated_at: datetime = field(default_factory=get_current_timestamp)

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "parent_task_id": self.parent_task_id,
            "priority": self.priority,
            "status": self.status,
            "owner_id": self.owner_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Subtask":
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            parent_task_id=doc["parent_task_id"],
            priority=doc.get("priority", "medium"),
            status=doc.get("status", "pending"),
            owner_id=doc["owner_id"],
            created_at=doc["created_at"],
            updated_at=doc.get("updated_at", doc["created_at"]),
        )


@dataclass(slots=True)
class SimilarityResult:
    """Projection of a task matched by smart search, with its score."""

    id: str
    title: str
    priority: str
    status: str
    created_at: datetime
    similarity: float

    @classmethod
    def from_task(cls, task: Task, similarity: float) -> "SimilarityResult":
        return cls(
            id=task.id,
            title=task.title,
            priority=task.priority,
            status=task.status,
            created_at=task.created_at,
            similarity=similarity,
        )


__all__ = [
    "Embedding",
    "EmbeddingResult",
    "Task",
    "Subtask",
    "SimilarityResult",
    "PRIORITIES",
    "STATUSES",
    "validate_title",
    "validate_priority",
    "validate_status",
]
