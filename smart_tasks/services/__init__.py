"""Service layer modules grouping business logic by concern.

This module provides convenience re-exports so that callers can simply do for
example `from smart_tasks.services import search_tasks` without having to
know which underlying module provides the symbol.
"""

from .vector_math import cosine_similarity  # noqa: F401
from .fallback import fallback_embed  # noqa: F401
from .embeddings import embed, generate_embedding  # noqa: F401
from .task_embeddings import attach_embedding, prepare_task_update  # noqa: F401
from .storage import TaskStore, InMemoryTaskStore, MongoTaskStore, get_task_store  # noqa: F401
from .search import search_tasks  # noqa: F401
from .subtasks import suggest_subtasks  # noqa: F401

__all__ = [
    "cosine_similarity",
    "fallback_embed",
    "embed",
    "generate_embedding",
    "attach_embedding",
    "prepare_task_update",
    "TaskStore",
    "InMemoryTaskStore",
    "MongoTaskStore",
    "get_task_store",
    "search_tasks",
    "suggest_subtasks",
]
