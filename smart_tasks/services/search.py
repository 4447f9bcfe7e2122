"""Smart search: rank a user's tasks by semantic similarity to a query."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from ..config import SEARCH_TOP_K, SIMILARITY_THRESHOLD
from ..errors import DimensionMismatchError, InvalidInputError
from ..models import SimilarityResult, Task
from .embeddings import embed
from .storage import TaskStore, get_task_store
from .vector_math import cosine_similarity

logger = logging.getLogger(__name__)


def _candidate_vector(task: Task) -> Optional[List[float]]:
    """Return the stored embedding, or embed the title on the fly."""
    if task.embedding:
        return task.embedding
    logger.debug("Task %s has no stored embedding – embedding title at query time", task.id)
    try:
        return embed(task.title).vector
    except InvalidInputError as exc:
        logger.warning("Skipping task %s: %s", task.id, exc)
        return None


def score_tasks(
    query_vector: Sequence[float],
    tasks: Iterable[Task],
    threshold: float = SIMILARITY_THRESHOLD,
) -> List[SimilarityResult]:
    """Score *tasks* against *query_vector*, keeping those strictly above *threshold*.

    Results keep the order of *tasks*. A candidate whose vector has the wrong
    dimension is logged and left out; it never aborts the whole scoring run.
    """
    results: List[SimilarityResult] = []
    for task in tasks:
        vector = _candidate_vector(task)
        if vector is None:
            continue
        try:
            similarity = cosine_similarity(query_vector, vector)
        except DimensionMismatchError as exc:
            logger.warning("Skipping task %s: %s", task.id, exc)
            continue
        if similarity > threshold:
            results.append(SimilarityResult.from_task(task, similarity))
    return results


def rank_results(results: List[SimilarityResult], top_k: int = SEARCH_TOP_K) -> List[SimilarityResult]:
    """Sort by similarity descending and keep the first *top_k*.

    The sort is stable, so ties keep their incoming (fetch) order.
    """
    return sorted(results, key=lambda r: r.similarity, reverse=True)[:top_k]


def search_tasks(
    query: str,
    owner_id: str,
    store: Optional[TaskStore] = None,
    *,
    threshold: float = SIMILARITY_THRESHOLD,
    top_k: int = SEARCH_TOP_K,
) -> List[SimilarityResult]:
    """Return up to *top_k* of *owner_id*'s tasks most similar to *query*.

    The store's own similarity ranking is used when it offers one, merged
    with locally scored results for tasks its index does not hold. Otherwise,
    or if that call fails, the owner's tasks are fetched and scored here:
    stored embeddings are used as-is and tasks without one are embedded at
    query time. Store errors while listing tasks propagate.
    """
    if not isinstance(query, str) or not query.strip():
        raise InvalidInputError("Query is required")
    if not owner_id:
        raise InvalidInputError("Owner id is required")

    store = store if store is not None else get_task_store()
    logger.info("Smart search for owner %s: %s", owner_id, query)

    query_result = embed(query)
    if query_result.used_fallback:
        logger.warning("Query embedded with fallback model – match quality is degraded")
    query_vector = query_result.vector

    try:
        matches = store.match_tasks(owner_id, query_vector, threshold, top_k)
        unindexed = store.list_unindexed_tasks(owner_id)
    except NotImplementedError:
        pass
    except Exception as exc:
        logger.warning("Server-side similarity failed (%s) – scoring client-side", exc)
    else:
        # tasks missing from the index are scored here and merged in
        merged = [m for m in matches if m.similarity > threshold]
        merged.extend(score_tasks(query_vector, unindexed, threshold))
        results = rank_results(merged, top_k)
        logger.info("Found %d matching tasks (%d scored locally)", len(results), len(unindexed))
        return results

    tasks = store.list_tasks(owner_id)
    if not tasks:
        logger.info("Owner %s has no tasks", owner_id)
        return []

    results = rank_results(score_tasks(query_vector, tasks, threshold), top_k)
    logger.info("Found %d matching tasks out of %d", len(results), len(tasks))
    return results

__all__ = ["search_tasks", "score_tasks", "rank_results"]
