"""Top-level package for the smart_tasks project.

This package exposes the three AI-assisted entry points so callers can do
`from smart_tasks import search_tasks` or run `python -m smart_tasks`.
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("smart-tasks")
except _metadata.PackageNotFoundError:  # pragma: no cover – running from source
    __version__ = "0.0.0"

from .services.embeddings import embed  # convenience re-exports
from .services.search import search_tasks
from .services.subtasks import suggest_subtasks

__all__ = ["embed", "search_tasks", "suggest_subtasks", "__version__"]
