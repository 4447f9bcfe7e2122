"""Persistence layer: task/subtask store port with MongoDB and in-memory backends.

The MongoDB store can mirror task embeddings into a Pinecone index, which
then serves similarity ranking server-side via :meth:`TaskStore.match_tasks`.
Store errors are never wrapped or retried here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from pinecone import Index  # type: ignore
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from ..clients.mongodb_client import get_mongo_client
from ..clients.pinecone_client import get_index
from ..config import (
    MONGODB_DATABASE,
    SUBTASKS_COLLECTION,
    TASKS_COLLECTION,
    TASKS_NAMESPACE,
)
from ..errors import TaskNotFoundError
from ..models import SimilarityResult, Subtask, Task

logger = logging.getLogger(__name__)


class TaskStore(ABC):
    """Owner-scoped task and subtask storage."""

    @abstractmethod
    def insert_task(self, task: Task) -> Task: ...

    @abstractmethod
    def get_task(self, task_id: str, owner_id: str) -> Task: ...

    @abstractmethod
    def update_task(self, task_id: str, owner_id: str, fields: Dict[str, Any]) -> Task:
        """Apply *fields* to the task in a single write and return the result."""

    @abstractmethod
    def delete_task(self, task_id: str, owner_id: str) -> None: ...

    @abstractmethod
    def list_tasks(self, owner_id: str) -> List[Task]:
        """Return all tasks of *owner_id*, newest first."""

    @abstractmethod
    def insert_subtask(self, subtask: Subtask) -> Subtask: ...

    @abstractmethod
    def update_subtask(self, subtask_id: str, owner_id: str, fields: Dict[str, Any]) -> Subtask: ...

    @abstractmethod
    def delete_subtask(self, subtask_id: str, owner_id: str) -> None: ...

    @abstractmethod
    def list_subtasks(self, parent_task_id: str, owner_id: str) -> List[Subtask]:
        """Return the subtasks of *parent_task_id*, newest first."""

    def match_tasks(
        self,
        owner_id: str,
        query_vector: Sequence[float],
        threshold: float,
        limit: int,
    ) -> List[SimilarityResult]:
        """Rank the owner's tasks against *query_vector* inside the store.

        Only tasks the store's index is known to hold are ranked; the rest
        come from :meth:`list_unindexed_tasks`. Stores without server-side
        similarity raise ``NotImplementedError``.
        """
        raise NotImplementedError

    def list_unindexed_tasks(self, owner_id: str) -> List[Task]:
        """Return the owner's tasks that :meth:`match_tasks` cannot see, newest first."""
        raise NotImplementedError


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------

def _copy_task(task: Task) -> Task:
    embedding = list(task.embedding) if task.embedding is not None else None
    return replace(task, embedding=embedding)


class InMemoryTaskStore(TaskStore):
    """Dict-backed store for tests and offline use. Returns copies only."""

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self._subtasks: Dict[str, Subtask] = {}

    def insert_task(self, task: Task) -> Task:
        self._tasks[task.id] = _copy_task(task)
        return _copy_task(task)

    def _owned_task(self, task_id: str, owner_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    def get_task(self, task_id: str, owner_id: str) -> Task:
        return _copy_task(self._owned_task(task_id, owner_id))

    def update_task(self, task_id: str, owner_id: str, fields: Dict[str, Any]) -> Task:
        updated = replace(self._owned_task(task_id, owner_id), **fields)
        self._tasks[task_id] = _copy_task(updated)
        return _copy_task(updated)

    def delete_task(self, task_id: str, owner_id: str) -> None:
        self._owned_task(task_id, owner_id)
        del self._tasks[task_id]
        for sub_id in [s.id for s in self._subtasks.values() if s.parent_task_id == task_id]:
            del self._subtasks[sub_id]

    def list_tasks(self, owner_id: str) -> List[Task]:
        owned = [_copy_task(t) for t in self._tasks.values() if t.owner_id == owner_id]
        return sorted(owned, key=lambda t: t.created_at, reverse=True)

    def insert_subtask(self, subtask: Subtask) -> Subtask:
        self._subtasks[subtask.id] = replace(subtask)
        return replace(subtask)

    def _owned_subtask(self, subtask_id: str, owner_id: str) -> Subtask:
        subtask = self._subtasks.get(subtask_id)
        if subtask is None or subtask.owner_id != owner_id:
            raise TaskNotFoundError(f"Subtask {subtask_id} not found")
        return subtask

    def update_subtask(self, subtask_id: str, owner_id: str, fields: Dict[str, Any]) -> Subtask:
        updated = replace(self._owned_subtask(subtask_id, owner_id), **fields)
        self._subtasks[subtask_id] = updated
        return replace(updated)

    def delete_subtask(self, subtask_id: str, owner_id: str) -> None:
        self._owned_subtask(subtask_id, owner_id)
        del self._subtasks[subtask_id]

    def list_subtasks(self, parent_task_id: str, owner_id: str) -> List[Subtask]:
        subs = [
            replace(s)
            for s in self._subtasks.values()
            if s.parent_task_id == parent_task_id and s.owner_id == owner_id
        ]
        return sorted(subs, key=lambda s: s.created_at, reverse=True)


# ---------------------------------------------------------------------------
# MongoDB (+ optional Pinecone) backend
# ---------------------------------------------------------------------------

def _iso(value: Any) -> str:
    return value.isoformat() if isinstance(value, datetime) else str(value)


class MongoTaskStore(TaskStore):
    """Tasks and subtasks in MongoDB; task vectors optionally in Pinecone.

    MongoDB is the system of record. Each task document carries a
    ``vector_synced`` flag that is ``True`` only once Pinecone holds the
    task's current vector; Pinecone failures are logged and leave the flag
    unset, so those tasks are scored client-side instead.
    """

    def __init__(self, db: Database, pinecone_index: Optional[Index] = None) -> None:
        self._tasks = db[TASKS_COLLECTION]
        self._subtasks = db[SUBTASKS_COLLECTION]
        self._index = pinecone_index

    # -- vector mirror -------------------------------------------------------

    def _upsert_vector(self, task: Task) -> bool:
        """Mirror *task*'s vector into Pinecone; return ``True`` on success."""
        if self._index is None or not task.embedding:
            return False
        metadata = {
            "owner_id": task.owner_id,
            "title": task.title,
            "priority": task.priority,
            "status": task.status,
            "created_at": _iso(task.created_at),
        }
        try:
            self._index.upsert(
                namespace=TASKS_NAMESPACE,
                vectors=[(task.id, task.embedding, metadata)],
            )
        except Exception as exc:
            logger.warning("Pinecone upsert failed for task %s (%s) – left unsynced", task.id, exc)
            return False
        logger.debug("Upserted vector for task %s to Pinecone", task.id)
        return True

    def _delete_vector(self, task_id: str) -> None:
        if self._index is None:
            return
        try:
            self._index.delete(ids=[task_id], namespace=TASKS_NAMESPACE)
        except Exception as exc:
            logger.warning("Pinecone delete failed for task %s (%s)", task_id, exc)

    def _sync_vector(self, task: Task) -> None:
        if self._upsert_vector(task):
            self._tasks.update_one({"_id": task.id}, {"$set": {"vector_synced": True}})

    # -- tasks ---------------------------------------------------------------

    def insert_task(self, task: Task) -> Task:
        doc = task.to_document()
        doc["vector_synced"] = False
        result = self._tasks.insert_one(doc)
        logger.info("Stored task to MongoDB with _id=%s", result.inserted_id)
        self._sync_vector(task)
        return task

    def get_task(self, task_id: str, owner_id: str) -> Task:
        doc = self._tasks.find_one({"_id": task_id, "owner_id": owner_id})
        if doc is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return Task.from_document(doc)

    def update_task(self, task_id: str, owner_id: str, fields: Dict[str, Any]) -> Task:
        # the flag flips back to True only after Pinecone accepts the new record
        doc = self._tasks.find_one_and_update(
            {"_id": task_id, "owner_id": owner_id},
            {"$set": {**fields, "vector_synced": False}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        task = Task.from_document(doc)
        if task.embedding:
            self._sync_vector(task)
        elif "embedding" in fields:
            # embedding dropped with a title change; the old vector is stale
            self._delete_vector(task.id)
        return task

    def delete_task(self, task_id: str, owner_id: str) -> None:
        result = self._tasks.delete_one({"_id": task_id, "owner_id": owner_id})
        if result.deleted_count == 0:
            raise TaskNotFoundError(f"Task {task_id} not found")
        self._subtasks.delete_many({"parent_task_id": task_id, "owner_id": owner_id})
        self._delete_vector(task_id)
        logger.info("Deleted task %s", task_id)

    def list_tasks(self, owner_id: str) -> List[Task]:
        cursor = self._tasks.find({"owner_id": owner_id}).sort("created_at", DESCENDING)
        return [Task.from_document(doc) for doc in cursor]

    def list_unindexed_tasks(self, owner_id: str) -> List[Task]:
        if self._index is None:
            raise NotImplementedError("No Pinecone index configured")
        cursor = self._tasks.find(
            {"owner_id": owner_id, "vector_synced": {"$ne": True}}
        ).sort("created_at", DESCENDING)
        return [Task.from_document(doc) for doc in cursor]

    def match_tasks(
        self,
        owner_id: str,
        query_vector: Sequence[float],
        threshold: float,
        limit: int,
    ) -> List[SimilarityResult]:
        """Rank with Pinecone, then resolve the hits against MongoDB.

        Hits whose document is gone or no longer ``vector_synced`` are
        dropped, so stale or orphaned vectors never surface. Results are
        built from the MongoDB documents.
        """
        if self._index is None:
            raise NotImplementedError("No Pinecone index configured")

        query_response = self._index.query(
            namespace=TASKS_NAMESPACE,
            vector=list(query_vector),
            top_k=limit,
            filter={"owner_id": {"$eq": owner_id}},
            include_metadata=False,
        )

        scores: Dict[str, float] = {}
        for match in query_response.matches:
            if match.score > threshold:  # type: ignore[attr-defined]
                scores[match.id] = float(match.score)
        if not scores:
            return []

        docs = self._tasks.find(
            {"_id": {"$in": list(scores)}, "owner_id": owner_id, "vector_synced": True}
        )
        tasks = {str(doc["_id"]): Task.from_document(doc) for doc in docs}
        results = [
            SimilarityResult.from_task(tasks[task_id], score)
            for task_id, score in scores.items()
            if task_id in tasks
        ]
        logger.info("Pinecone returned %d matches above %.2f", len(results), threshold)
        return results

    # -- subtasks ------------------------------------------------------------

    def insert_subtask(self, subtask: Subtask) -> Subtask:
        result = self._subtasks.insert_one(subtask.to_document())
        logger.info("Stored subtask to MongoDB with _id=%s", result.inserted_id)
        return subtask

    def update_subtask(self, subtask_id: str, owner_id: str, fields: Dict[str, Any]) -> Subtask:
        doc = self._subtasks.find_one_and_update(
            {"_id": subtask_id, "owner_id": owner_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise TaskNotFoundError(f"Subtask {subtask_id} not found")
        return Subtask.from_document(doc)

    def delete_subtask(self, subtask_id: str, owner_id: str) -> None:
        result = self._subtasks.delete_one({"_id": subtask_id, "owner_id": owner_id})
        if result.deleted_count == 0:
            raise TaskNotFoundError(f"Subtask {subtask_id} not found")

    def list_subtasks(self, parent_task_id: str, owner_id: str) -> List[Subtask]:
        cursor = self._subtasks.find(
            {"parent_task_id": parent_task_id, "owner_id": owner_id}
        ).sort("created_at", DESCENDING)
        return [Subtask.from_document(doc) for doc in cursor]


_store: TaskStore | None = None


def get_task_store() -> TaskStore:
    """Return the process-wide MongoDB store, with Pinecone when configured."""
    global _store
    if _store is None:
        _store = MongoTaskStore(get_mongo_client()[MONGODB_DATABASE], pinecone_index=get_index())
    return _store

__all__ = ["TaskStore", "InMemoryTaskStore", "MongoTaskStore", "get_task_store"]
