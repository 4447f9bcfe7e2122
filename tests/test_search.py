import math
import unittest
from unittest.mock import patch, MagicMock
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from smart_tasks.errors import InvalidInputError
from smart_tasks.models import EmbeddingResult, SimilarityResult, Task
from smart_tasks.services.search import search_tasks
from smart_tasks.services.storage import InMemoryTaskStore, TaskStore

DIM = 384
QUERY_VECTOR = [1.0] + [0.0] * (DIM - 1)


def vector_with_similarity(similarity):
    """Unit vector whose cosine with QUERY_VECTOR equals *similarity*."""
    vec = [0.0] * DIM
    vec[0] = similarity
    vec[1] = math.sqrt(1 - similarity * similarity)
    return vec


class TestSearch(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryTaskStore()
        self.owner = "user-1"

    def _add(self, title, similarity=None, embedding=None, owner=None):
        if embedding is None and similarity is not None:
            embedding = vector_with_similarity(similarity)
        task = Task(title=title, owner_id=owner or self.owner, embedding=embedding)
        return self.store.insert_task(task)

    @patch('smart_tasks.services.search.embed')
    def test_threshold_sort_and_exclusion(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        low = self._add("Water the plants", 0.5)
        mid = self._add("Buy groceries", 0.75)
        high = self._add("Buy milk", 0.9)

        results = search_tasks("milk", self.owner, self.store)

        self.assertEqual([r.id for r in results], [high.id, mid.id])
        self.assertAlmostEqual(results[0].similarity, 0.9)
        self.assertAlmostEqual(results[1].similarity, 0.75)
        self.assertNotIn(low.id, [r.id for r in results])
        self.assertIsInstance(results[0], SimilarityResult)
        self.assertEqual(results[0].title, "Buy milk")
        # only the query is embedded on the precomputed path
        mock_embed.assert_called_once_with("milk")

    @patch('smart_tasks.services.search.embed')
    def test_threshold_is_strict(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        self._add("Exactly at threshold", embedding=[0.7, math.sqrt(1 - 0.49)] + [0.0] * (DIM - 2))
        with patch('smart_tasks.services.search.cosine_similarity', return_value=0.7):
            self.assertEqual(search_tasks("anything", self.owner, self.store), [])

    @patch('smart_tasks.services.search.embed')
    def test_truncates_to_five(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        for i in range(8):
            self._add(f"Task {i}", 0.71 + i * 0.03)

        results = search_tasks("task", self.owner, self.store)

        self.assertEqual(len(results), 5)
        scores = [r.similarity for r in results]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(results[0].title, "Task 7")

    @patch('smart_tasks.services.search.embed')
    def test_ties_keep_fetch_order(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        self._add("First", 0.8)
        self._add("Second", 0.8)
        fetched = [t.title for t in self.store.list_tasks(self.owner)]

        results = search_tasks("x", self.owner, self.store)

        self.assertEqual([r.title for r in results], fetched)

    @patch('smart_tasks.services.search.embed')
    def test_empty_query_rejected(self, mock_embed):
        for bad in ("", "   ", None):
            with self.assertRaises(InvalidInputError):
                search_tasks(bad, self.owner, self.store)
        mock_embed.assert_not_called()

    @patch('smart_tasks.services.search.embed')
    def test_missing_owner_rejected(self, mock_embed):
        with self.assertRaises(InvalidInputError):
            search_tasks("milk", "", self.store)
        mock_embed.assert_not_called()

    @patch('smart_tasks.services.search.embed')
    def test_owner_without_tasks(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        self._add("Someone else's task", 0.99, owner="user-2")

        self.assertEqual(search_tasks("milk", self.owner, self.store), [])

    @patch('smart_tasks.services.search.embed')
    def test_dimension_mismatch_skips_only_that_task(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        good = self._add("Good", 0.95)
        self._add("Broken", embedding=[1.0] * 10)

        results = search_tasks("x", self.owner, self.store)

        self.assertEqual([r.id for r in results], [good.id])

    @patch('smart_tasks.services.search.embed')
    def test_on_the_fly_embedding_for_tasks_without_vectors(self, mock_embed):
        vectors = {
            "milk": EmbeddingResult(vector=QUERY_VECTOR),
            "Buy milk": EmbeddingResult(vector=vector_with_similarity(0.92), used_fallback=False),
            "Fix the car": EmbeddingResult(vector=vector_with_similarity(0.1)),
        }
        mock_embed.side_effect = lambda text: vectors[text]
        stored = self._add("Buy oat milk", 0.8)
        fresh = self._add("Buy milk")
        self._add("Fix the car")

        results = search_tasks("milk", self.owner, self.store)

        self.assertEqual([r.id for r in results], [fresh.id, stored.id])
        self.assertEqual(mock_embed.call_count, 3)

    @patch('smart_tasks.services.search.embed')
    def test_prefers_server_side_ranking(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        store = MagicMock(spec=TaskStore)
        store.match_tasks.return_value = [
            SimilarityResult("a", "A", "low", "pending", None, 0.8),
            SimilarityResult("b", "B", "high", "done", None, 0.95),
        ]
        store.list_unindexed_tasks.return_value = []

        results = search_tasks("q", self.owner, store)

        self.assertEqual([r.id for r in results], ["b", "a"])
        store.match_tasks.assert_called_once_with(self.owner, QUERY_VECTOR, 0.7, 5)
        store.list_unindexed_tasks.assert_called_once_with(self.owner)
        store.list_tasks.assert_not_called()

    @patch('smart_tasks.services.search.embed')
    def test_unindexed_tasks_found_when_index_has_no_match(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        store = MagicMock(spec=TaskStore)
        store.match_tasks.return_value = []
        legacy = Task(title="Buy milk", owner_id=self.owner, embedding=vector_with_similarity(0.9))
        store.list_unindexed_tasks.return_value = [legacy]

        results = search_tasks("milk", self.owner, store)

        self.assertEqual([r.id for r in results], [legacy.id])
        self.assertAlmostEqual(results[0].similarity, 0.9)
        store.list_tasks.assert_not_called()

    @patch('smart_tasks.services.search.embed')
    def test_index_matches_merge_with_unindexed_tasks(self, mock_embed):
        vectors = {
            "milk": EmbeddingResult(vector=QUERY_VECTOR),
            "Buy oat milk": EmbeddingResult(vector=vector_with_similarity(0.85)),
        }
        mock_embed.side_effect = lambda text: vectors[text]
        store = MagicMock(spec=TaskStore)
        store.match_tasks.return_value = [
            SimilarityResult("indexed", "Buy milk", "low", "pending", None, 0.93),
            SimilarityResult("weak", "Milk the cow", "low", "pending", None, 0.72),
        ]
        no_vector = Task(title="Buy oat milk", owner_id=self.owner)
        unrelated = Task(title="Fix car", owner_id=self.owner, embedding=vector_with_similarity(0.2))
        store.list_unindexed_tasks.return_value = [no_vector, unrelated]

        results = search_tasks("milk", self.owner, store, top_k=2)

        self.assertEqual([r.id for r in results], ["indexed", no_vector.id])

    @patch('smart_tasks.services.search.embed')
    def test_server_side_failure_falls_back_to_client(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        store = MagicMock(spec=TaskStore)
        store.match_tasks.side_effect = RuntimeError("index down")
        task = Task(title="Buy milk", owner_id=self.owner, embedding=vector_with_similarity(0.9))
        store.list_tasks.return_value = [task]

        results = search_tasks("milk", self.owner, store)

        self.assertEqual([r.id for r in results], [task.id])
        store.list_tasks.assert_called_once_with(self.owner)
        store.list_unindexed_tasks.assert_not_called()

    @patch('smart_tasks.services.search.embed')
    def test_store_failure_propagates(self, mock_embed):
        mock_embed.return_value = EmbeddingResult(vector=QUERY_VECTOR)
        store = MagicMock(spec=TaskStore)
        store.match_tasks.side_effect = NotImplementedError
        store.list_tasks.side_effect = ConnectionError("store unreachable")

        with self.assertRaises(ConnectionError):
            search_tasks("milk", self.owner, store)


if __name__ == '__main__':
    unittest.main()
