import unittest
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from smart_tasks.errors import DimensionMismatchError
from smart_tasks.services.vector_math import cosine_similarity, l2_norm, normalize


class TestVectorMath(unittest.TestCase):

    def test_identical_vectors(self):
        for vec in ([1.0, 2.0, 3.0], [0.5, -0.25, 4.0, 9.0], [1e-3] * 384):
            self.assertAlmostEqual(cosine_similarity(vec, vec), 1.0, places=9)

    def test_opposite_vectors(self):
        vec = [0.3, -1.2, 5.0]
        self.assertAlmostEqual(cosine_similarity(vec, [-v for v in vec]), -1.0, places=9)

    def test_orthogonal_vectors(self):
        self.assertEqual(cosine_similarity([1.0, 0.0], [0.0, 1.0]), 0.0)

    def test_zero_vector_scores_zero(self):
        self.assertEqual(cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]), 0.0)
        self.assertEqual(cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]), 0.0)
        self.assertEqual(cosine_similarity([0.0, 0.0], [0.0, 0.0]), 0.0)

    def test_dimension_mismatch(self):
        with self.assertRaises(DimensionMismatchError) as ctx:
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])
        self.assertEqual((ctx.exception.left, ctx.exception.right), (2, 3))

    def test_normalize(self):
        unit = normalize([3.0, 4.0])
        self.assertAlmostEqual(unit[0], 0.6)
        self.assertAlmostEqual(unit[1], 0.8)
        self.assertAlmostEqual(l2_norm(unit), 1.0)

    def test_normalize_zero_vector_unchanged(self):
        self.assertEqual(normalize([0.0, 0.0]), [0.0, 0.0])


if __name__ == '__main__':
    unittest.main()
