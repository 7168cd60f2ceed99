import unittest

from fractional_investor.exceptions import InvalidInputError
from fractional_investor.models import Allocation, InvestmentResult, Stock, parse_amount


class TestParseAmount(unittest.TestCase):

    def test_accepts_numbers_and_text(self):
        self.assertEqual(parse_amount(45), 45.0)
        self.assertEqual(parse_amount(0), 0.0)
        self.assertEqual(parse_amount("45"), 45.0)
        self.assertEqual(parse_amount(" $1,250.50 "), 1250.5)

    def test_rejects_invalid(self):
        for bad in ("abc", "", "  ", "12abc", -1, "-3", float("nan"), float("inf"),
                    "inf", None, True):
            with self.assertRaises(InvalidInputError, msg=repr(bad)):
                parse_amount(bad)

    def test_field_name_in_message(self):
        with self.assertRaises(InvalidInputError) as ctx:
            parse_amount("x", "price")
        self.assertIn("price", str(ctx.exception))


class TestStock(unittest.TestCase):

    def test_from_input_parses_text(self):
        s = Stock.from_input("  ACME ", "120.50", "8")
        self.assertEqual(s.name, "ACME")
        self.assertEqual(s.price, 120.5)
        self.assertEqual(s.expected_return, 8.0)
        self.assertTrue(s.id)

    def test_from_input_generates_unique_ids(self):
        a = Stock.from_input("A", 1, 1)
        b = Stock.from_input("A", 1, 1)
        self.assertNotEqual(a.id, b.id)

    def test_from_input_keeps_given_id(self):
        self.assertEqual(Stock.from_input("A", 1, 1, stock_id="abc").id, "abc")

    def test_from_input_rejects_bad_fields(self):
        for args in (("", 10, 5), ("A", 0, 5), ("A", -1, 5), ("A", 10, -1),
                     ("A", "ten", 5), ("A", 10, "five")):
            with self.assertRaises(InvalidInputError, msg=repr(args)):
                Stock.from_input(*args)

    def test_from_input_error_message(self):
        with self.assertRaises(InvalidInputError) as ctx:
            Stock.from_input("A", 0, 5)
        self.assertEqual(
            str(ctx.exception),
            "Please enter a valid stock name, positive price, and non-negative return.",
        )

    def test_every_bad_field_gives_same_message(self):
        for args in (("", 10, 5), ("A", 0, 5), ("A", "0", 5), ("A", 10, -1), ("A", "x", 5)):
            with self.assertRaises(InvalidInputError, msg=repr(args)) as ctx:
                Stock.from_input(*args)
            self.assertEqual(
                str(ctx.exception),
                "Please enter a valid stock name, positive price, and non-negative return.",
            )

    def test_zero_return_allowed(self):
        self.assertEqual(Stock("x", "Flat", 10, 0).efficiency, 0.0)

    def test_efficiency(self):
        self.assertAlmostEqual(Stock("x", "A", 50, 10).efficiency, 0.2)

    def test_constructor_validates(self):
        with self.assertRaises(InvalidInputError):
            Stock("x", "A", 0, 5)
        with self.assertRaises(InvalidInputError):
            Stock("x", " ", 10, 5)

    def test_stock_is_frozen(self):
        s = Stock("x", "A", 10, 5)
        with self.assertRaises(AttributeError):
            s.price = 20


class TestAllocation(unittest.TestCase):

    def setUp(self):
        self.a = Stock("a", "A", 10, 10)
        self.b = Stock("b", "B", 20, 5)
        self.alloc = Allocation(
            budget=100,
            stocks=(self.a, self.b),
            results=(
                InvestmentResult("a", "A", 3, 30, 3),
                InvestmentResult.empty(self.b),
            ),
            total_invested=30,
            total_return=3,
        )

    def test_remaining_budget(self):
        self.assertEqual(self.alloc.remaining_budget, 70)

    def test_lookups(self):
        self.assertEqual(self.alloc.result_for("a").invested_amount, 30)
        self.assertIs(self.alloc.stock_for("b"), self.b)
        self.assertIsNone(self.alloc.result_for("zzz"))
        self.assertIsNone(self.alloc.stock_for("zzz"))

    def test_empty_result(self):
        r = self.alloc.result_for("b")
        self.assertEqual((r.stock_name, r.fraction, r.invested_amount, r.actual_return),
                         ("B", 0.0, 0.0, 0.0))


if __name__ == "__main__":
    unittest.main()
