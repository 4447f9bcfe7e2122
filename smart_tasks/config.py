"""Centralised configuration for smart_tasks.

Environment variables are loaded once and all related constants are
grouped by service for easier maintenance.
"""

from __future__ import annotations

import os
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load environment variables from `.env` (if present)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Core credentials (from environment)
# ---------------------------------------------------------------------------
OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
PINECONE_API_KEY: str | None = os.getenv("PINECONE_API_KEY")
MONGODB_URI: str | None = os.getenv("MONGODB_URI")

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------
MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "smart_tasks")
TASKS_COLLECTION: str = "tasks"
SUBTASKS_COLLECTION: str = "subtasks"
PINECONE_INDEX_NAME: str = os.getenv("PINECONE_INDEX_NAME", "tasks")
TASKS_NAMESPACE: str = "task-titles"

# ---------------------------------------------------------------------------
# Embeddings
# The fallback embedder produces vectors of the same dimension so both are
# interchangeable downstream.
# ---------------------------------------------------------------------------
EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
EMBEDDING_DIMENSIONS: int = 384
EMBEDDING_TIMEOUT_SECONDS: float = float(os.getenv("EMBEDDING_TIMEOUT_SECONDS", 15))

# ---------------------------------------------------------------------------
# Smart search (design constants, not user-configurable)
# ---------------------------------------------------------------------------
SIMILARITY_THRESHOLD: float = 0.7
SEARCH_TOP_K: int = 5

# ---------------------------------------------------------------------------
# Subtask suggestions
# ---------------------------------------------------------------------------
OPENAI_SUBTASK_MODEL: str = os.getenv("OPENAI_SUBTASK_MODEL", "gpt-4o-mini")
SUBTASK_MIN_ITEMS: int = 3
SUBTASK_MAX_ITEMS: int = 7
SUBTASK_TIMEOUT_SECONDS: float = float(os.getenv("SUBTASK_TIMEOUT_SECONDS", 30))

# ---------------------------------------------------------------------------
# Miscellaneous
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Re-exported names
# ---------------------------------------------------------------------------
__all__ = [
    # credentials
    "OPENAI_API_KEY",
    "PINECONE_API_KEY",
    "MONGODB_URI",
    # storage
    "MONGODB_DATABASE",
    "TASKS_COLLECTION",
    "SUBTASKS_COLLECTION",
    "PINECONE_INDEX_NAME",
    "TASKS_NAMESPACE",
    # embeddings
    "EMBEDDING_MODEL",
    "EMBEDDING_DIMENSIONS",
    "EMBEDDING_TIMEOUT_SECONDS",
    # search
    "SIMILARITY_THRESHOLD",
    "SEARCH_TOP_K",
    # subtasks
    "OPENAI_SUBTASK_MODEL",
    "SUBTASK_MIN_ITEMS",
    "SUBTASK_MAX_ITEMS",
    "SUBTASK_TIMEOUT_SECONDS",
    # misc
    "LOG_LEVEL",
]
