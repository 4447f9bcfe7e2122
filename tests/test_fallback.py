import unittest
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from smart_tasks.services.fallback import fallback_embed
from smart_tasks.services.vector_math import l2_norm


class TestFallbackEmbed(unittest.TestCase):

    def test_deterministic(self):
        self.assertEqual(fallback_embed("buy milk"), fallback_embed("buy milk"))

    def test_dimension_and_unit_norm(self):
        vec = fallback_embed("buy milk")
        self.assertEqual(len(vec), 384)
        self.assertAlmostEqual(l2_norm(vec), 1.0, places=9)

    def test_case_and_whitespace_insensitive(self):
        self.assertEqual(fallback_embed("Buy   Milk"), fallback_embed("buy milk"))

    def test_empty_text_is_zero_vector(self):
        vec = fallback_embed("")
        self.assertEqual(len(vec), 384)
        self.assertTrue(all(v == 0.0 for v in vec))

    def test_different_inputs_differ(self):
        self.assertNotEqual(fallback_embed("buy milk"), fallback_embed("walk the dog"))

    def test_bucket_formula(self):
        # single character "a" (97) lands in bucket 97 and is normalised to 1
        vec = fallback_embed("a")
        self.assertAlmostEqual(vec[97], 1.0)
        self.assertEqual(sum(1 for v in vec if v), 1)

    def test_word_and_char_offsets(self):
        # "b a": "b" (98) in word 0 -> 98, "a" (97) in word 1 -> 97 + 37 = 134
        vec = fallback_embed("b a")
        self.assertGreater(vec[98], 0)
        self.assertGreater(vec[134], 0)
        # "ab": "a" -> 97, "b" at char 1 -> 98 + 13 = 111
        vec = fallback_embed("ab")
        self.assertGreater(vec[97], 0)
        self.assertGreater(vec[111], 0)


if __name__ == '__main__':
    unittest.main()
