import unittest

from core.scorer import formula


class TestFormula(unittest.TestCase):

    def test_contribution_absent_is_zero(self):
        self.assertEqual(formula.contribution(0.7, None), 0.0)

    def test_contribution_is_proportional_and_capped(self):
        self.assertAlmostEqual(formula.contribution(0.5, 50), 0.25)
        self.assertAlmostEqual(formula.contribution(0.5, 150), 0.5)
        self.assertAlmostEqual(formula.contribution(0.5, -10), 0.0)

    def test_round_score_half_up(self):
        self.assertEqual(formula.round_score(12.345, 2), 12.35)
        self.assertEqual(formula.round_score(12.344, 2), 12.34)
        self.assertEqual(formula.round_score(0.125, 2), 0.13)

    def test_normalize(self):
        self.assertEqual(formula.normalize(0.88, 1.0), 88.0)
        self.assertEqual(formula.normalize(2.64, 3.0), 88.0)

    def test_normalize_rejects_zero_weight(self):
        with self.assertRaises(ValueError):
            formula.normalize(0.0, 0.0)


if __name__ == '__main__':
    unittest.main()
