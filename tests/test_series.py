import math
import numbers
import unittest
import warnings
from decimal import Decimal
from fractions import Fraction

import numpy as np

from exactseries import Rational, exp_series, log_series


class Ratio:
    """Bare exact fraction registered as a ``numbers.Rational``."""

    def __init__(self, numerator, denominator):
        self.numerator = numerator
        self.denominator = denominator

    def __float__(self):
        return self.numerator / self.denominator


numbers.Rational.register(Ratio)


class ExpSeriesTests(unittest.TestCase):
    def test_zero_power(self):
        self.assertEqual(exp_series(Rational(0), 0), 0)
        for terms in range(1, 12):
            result = exp_series(Rational(0), terms)
            self.assertEqual(result, Rational(1))
            self.assertEqual((result.numerator, result.denominator), (1, 1))

    def test_first_terms(self):
        for power in (Rational(7, 3), Rational(-5, 2), Rational(0), Rational(10**20, 3)):
            self.assertEqual(exp_series(power, 0), 0)
            self.assertEqual(exp_series(power, 1), 1)
            self.assertEqual(exp_series(power, 2), 1 + power)

    def test_exact_partial_sum(self):
        self.assertEqual(exp_series(Rational(1), 4), Rational(8, 3))
        self.assertEqual(exp_series(Rational(1, 2), 3), Rational(13, 8))
        self.assertEqual(exp_series(Rational(-1), 5), Rational(3, 8))

    def test_negative_terms_rejected(self):
        for power in (Rational(0), Rational(3, 4), Rational(-2)):
            with self.assertRaisesRegex(ValueError, "terms must be non-negative"):
                exp_series(power, -1)

    def test_non_integral_terms_rejected(self):
        with self.assertRaises(TypeError):
            exp_series(Rational(1), 2.5)
        with self.assertRaises(TypeError):
            exp_series(Rational(1), True)
        self.assertEqual(exp_series(Rational(1), np.int64(2)), 2)

    def test_euler_number(self):
        self.assertAlmostEqual(float(exp_series(Rational(1), 10)), math.e, places=6)
        self.assertEqual(exp_series(Rational(1), 30).to_decimal(20), "2.71828182845904523536")

    def test_positive_power_increases_monotonically(self):
        power = Rational(3, 2)
        sums = [exp_series(power, terms) for terms in range(1, 25)]
        for previous, current in zip(sums, sums[1:]):
            self.assertLess(previous, current)
        reference = exp_series(power, 60)
        self.assertLess(sums[-1], reference)
        self.assertAlmostEqual(float(sums[-1]), math.exp(1.5), places=12)
        self.assertAlmostEqual(float(reference), math.exp(1.5), places=12)

    def test_negative_power_converges(self):
        self.assertAlmostEqual(float(exp_series(Rational(-3), 60)), math.exp(-3), places=12)

    def test_repeated_calls_are_identical(self):
        power = Rational(5, 7)
        first = exp_series(power, 15)
        second = exp_series(power, 15)
        self.assertEqual((first.numerator, first.denominator), (second.numerator, second.denominator))
        self.assertEqual(power, Rational(5, 7))

    def test_fraction_in_fraction_out(self):
        result = exp_series(Fraction(1, 2), 3)
        self.assertIsInstance(result, Fraction)
        self.assertEqual(result, Fraction(13, 8))
        self.assertIsInstance(exp_series(Fraction(1, 2), 0), Fraction)

    def test_other_exact_fraction_types_stay_exact(self):
        result = exp_series(Ratio(1, 3), 3)
        self.assertIsInstance(result, Rational)
        self.assertEqual(result.as_fraction(), Fraction(25, 18))

    def test_plain_numbers_are_promoted_exactly(self):
        self.assertIsInstance(exp_series(1, 3), Rational)
        self.assertEqual(exp_series(1, 3), Rational(5, 2))
        self.assertEqual(exp_series(0.5, 3), Rational(13, 8))
        self.assertEqual(exp_series(Decimal("0.5"), 3), Rational(13, 8))
        self.assertEqual(exp_series(np.int32(2), 3), Rational(5))
        with self.assertRaises(TypeError):
            exp_series("1", 3)
        with self.assertRaises(ValueError):
            exp_series(float("inf"), 3)

    def test_elementwise_evaluation(self):
        result = exp_series(np.array([Rational(0), Rational(1), Rational(-1)], dtype=object), 4)
        self.assertEqual(result.shape, (3,))
        self.assertEqual(list(result), [Rational(1), Rational(8, 3), Rational(1, 3)])

        grid = exp_series([[0, 1], [2, 3]], 2)
        self.assertEqual(grid.shape, (2, 2))
        self.assertEqual(grid[1, 1], Rational(4))

        with self.assertRaises(ValueError):
            exp_series([Rational(1)], -2)

    def test_bounded_input_warns(self):
        power = Rational(1, 3, max_denominator=1000)
        with self.assertWarns(UserWarning):
            result = exp_series(power, 10)
        self.assertLessEqual(result.denominator, 1000)

    def test_exact_input_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            exp_series(Rational(1, 3), 10)


class LogSeriesTests(unittest.TestCase):
    def test_ln_two(self):
        result = log_series(Rational(2), 50)
        self.assertAlmostEqual(float(result), math.log(2), places=10)
        self.assertEqual(result.to_decimal(30), "0.693147180559945309417232121458")

    def test_first_term(self):
        # factor = (x - 1)/(x + 1) = 1/3 for x = 2
        self.assertEqual(log_series(Rational(2), 1), Rational(2, 3))
        self.assertEqual(log_series(Rational(2), 2), Rational(2, 3) + Rational(2, 81))

    def test_singularity_at_one(self):
        with self.assertRaises(ZeroDivisionError):
            log_series(Rational(1), 10)
        with self.assertRaises(ZeroDivisionError):
            log_series(Fraction(1), 10)
        with self.assertRaises(ZeroDivisionError):
            log_series(1, 0)

    def test_non_positive_argument_rejected(self):
        for x in (Rational(0), Rational(-1), Rational(-5, 2)):
            with self.assertRaises(ValueError):
                log_series(x, 10)

    def test_terms_validation_matches_exp(self):
        self.assertEqual(log_series(Rational(2), 0), 0)
        with self.assertRaisesRegex(ValueError, "terms must be non-negative"):
            log_series(Rational(2), -1)
        with self.assertRaises(TypeError):
            log_series(Rational(2), 1.0)

    def test_error_is_non_increasing(self):
        for x in (Rational(1, 10), Rational(1, 2), Rational(3, 2), Rational(5), Rational(40)):
            oracle = math.log(float(x))
            errors = [abs(float(log_series(x, terms)) - oracle) for terms in range(1, 30)]
            for previous, current in zip(errors, errors[1:]):
                self.assertLessEqual(current, previous + 1e-15)

    def test_reciprocal_is_negated(self):
        self.assertEqual(log_series(Rational(1, 3), 12), -log_series(Rational(3), 12))

    def test_values_below_one_are_negative(self):
        self.assertLess(log_series(Rational(9, 10), 5), 0)
        self.assertAlmostEqual(float(log_series(Rational(9, 10), 20)), math.log(0.9), places=14)

    def test_fraction_in_fraction_out(self):
        result = log_series(Fraction(2), 2)
        self.assertIsInstance(result, Fraction)
        self.assertEqual(result, Fraction(56, 81))

    def test_other_exact_fraction_types_stay_exact(self):
        self.assertEqual(log_series(Ratio(1, 3), 1).as_fraction(), Fraction(-1))
        self.assertEqual(log_series(Ratio(1, 3), 12), log_series(Rational(1, 3), 12))
        with self.assertRaises(ZeroDivisionError):
            log_series(Ratio(5, 5), 3)

    def test_repeated_calls_are_identical(self):
        first = log_series(Rational(7, 4), 20)
        second = log_series(Rational(7, 4), 20)
        self.assertEqual((first.numerator, first.denominator), (second.numerator, second.denominator))

    def test_elementwise_evaluation(self):
        result = log_series(np.array([Rational(2), Rational(1, 2)], dtype=object), 3)
        self.assertEqual(result[0], -result[1])
        with self.assertRaises(ZeroDivisionError):
            log_series([Rational(2), Rational(1)], 3)


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
