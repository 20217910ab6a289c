import math
import unittest

import numpy as np

from chembalance.fraction import Fraction


class TestFraction(unittest.TestCase):
    def test_reduces_and_normalizes_sign(self):
        self.assertEqual(Fraction(2, 4), Fraction(1, 2))
        f = Fraction(3, -6)
        self.assertEqual((f.numerator, f.denominator), (-1, 2))
        zero = Fraction(0, 5)
        self.assertEqual((zero.numerator, zero.denominator), (0, 1))

    def test_invariant_holds_for_many_inputs(self):
        for numerator in range(-12, 13):
            for denominator in (-9, -4, -1, 1, 3, 6, 10):
                f = Fraction(numerator, denominator)
                self.assertGreater(f.denominator, 0)
                self.assertIn(math.gcd(abs(f.numerator), f.denominator), (0, 1))

    def test_zero_denominator(self):
        with self.assertRaises(ZeroDivisionError):
            Fraction(1, 0)
        with self.assertRaises(ZeroDivisionError):
            Fraction(1, 2).divide(Fraction(0))

    def test_arithmetic(self):
        half, third = Fraction(1, 2), Fraction(1, 3)
        self.assertEqual(half.add(third), Fraction(5, 6))
        self.assertEqual(half.subtract(third), Fraction(1, 6))
        self.assertEqual(Fraction(2, 3).multiply(Fraction(3, 4)), Fraction(1, 2))
        self.assertEqual(half.divide(Fraction(1, 4)), Fraction(2))

    def test_operators_accept_integers(self):
        self.assertEqual(Fraction(1, 2) + 1, Fraction(3, 2))
        self.assertEqual(1 - Fraction(1, 2), Fraction(1, 2))
        self.assertEqual(3 * Fraction(1, 6), Fraction(1, 2))
        self.assertEqual(1 / Fraction(2, 5), Fraction(5, 2))
        self.assertEqual(-Fraction(1, 3), Fraction(-1, 3))

    def test_arbitrary_precision(self):
        big = Fraction(10**40 + 10**20, 10**20)
        self.assertEqual(big, Fraction(10**20 + 1))
        self.assertTrue(big.is_integer)

    def test_numpy_object_rows(self):
        row = np.array([Fraction(1, 2), Fraction(1, 3)], dtype=object)
        self.assertEqual(list(row / Fraction(1, 2)), [Fraction(1), Fraction(2, 3)])
        self.assertEqual(list(Fraction(6) * row), [Fraction(3), Fraction(2)])
        self.assertEqual(list(row - row), [Fraction(0), Fraction(0)])


if __name__ == '__main__':
    unittest.main()
