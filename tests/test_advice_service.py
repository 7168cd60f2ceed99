"""
tests/test_advice_service.py
----------------------------
Unit tests for AdviceService and parse_stock_ideas.

A recording fake stands in for the Gemini adapter, so no network access
is needed.
"""

import unittest

from fractional_investor.advice_service import AdviceService, parse_stock_ideas
from fractional_investor.allocation_engine import AllocationEngine
from fractional_investor.enums import AIErrorKind, ModelTier
from fractional_investor.exceptions import TextGenerationError
from fractional_investor.models import Allocation, Stock
from fractional_investor.text_generator import USER_MESSAGES


class _FakeGenerator:
    def __init__(self, reply="model reply", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_text(self, prompt, tier=ModelTier.FAST):
        self.calls.append((prompt, tier))
        if self.error is not None:
            raise self.error
        return self.reply


_IDEAS_REPLY = """\
Here are some ideas:
- SolarFlare Energy (Price: $120.50, Return: 12%)
- **WindWorks** (Price: $85, Return: 9.5%)
* Tidal Power Co (Price: $1,020.00, Expected Return: 15%)
2. GeoHeat (Price: $45, Return: 7%)
- Broken Line (Price: abc, Return: 5%)
- ZeroPrice (Price: $0, Return: 5%)
"""


def _stocks():
    return [
        Stock("a", "Alpha", 100, 10),
        Stock("b", "Beta", 50, 10),
    ]


# ===========================================================================
# 1. Stock idea parsing
# ===========================================================================

class TestParseStockIdeas(unittest.TestCase):

    def test_parses_valid_lines(self):
        stocks = parse_stock_ideas(_IDEAS_REPLY)
        self.assertEqual(
            [s.name for s in stocks],
            ["SolarFlare Energy", "WindWorks", "Tidal Power Co", "GeoHeat"],
        )
        self.assertEqual(stocks[0].price, 120.5)
        self.assertEqual(stocks[1].expected_return, 9.5)
        self.assertEqual(stocks[2].price, 1020.0)

    def test_invalid_lines_skipped(self):
        names = [s.name for s in parse_stock_ideas(_IDEAS_REPLY)]
        self.assertNotIn("Broken Line", names)
        self.assertNotIn("ZeroPrice", names)

    def test_no_ideas(self):
        self.assertEqual(parse_stock_ideas("I cannot help with that."), [])
        self.assertEqual(parse_stock_ideas(""), [])


# ===========================================================================
# 2. Input validation
# ===========================================================================

class TestInputValidation(unittest.TestCase):

    def setUp(self):
        self.fake = _FakeGenerator()
        self.service = AdviceService(self.fake)

    def test_blank_question(self):
        self.assertEqual(self.service.ask("   "), "Please enter a question for Gemini.")
        self.assertEqual(self.fake.calls, [])

    def test_blank_theme(self):
        self.assertEqual(
            self.service.stock_ideas(""), "Please enter a description for stock ideas."
        )
        self.assertEqual(self.fake.calls, [])

    def test_market_without_stocks(self):
        self.assertEqual(
            self.service.analyze_market([]),
            "Please add some stocks to analyze market data.",
        )
        self.assertEqual(self.fake.calls, [])

    def test_advice_without_results(self):
        self.assertEqual(
            self.service.portfolio_advice(Allocation(budget=100)),
            "Please add stocks and calculate your investment to get portfolio advice.",
        )
        self.assertEqual(self.fake.calls, [])


# ===========================================================================
# 3. Successful replies
# ===========================================================================

class TestReplies(unittest.TestCase):

    def setUp(self):
        self.fake = _FakeGenerator()
        self.service = AdviceService(self.fake)

    def test_ask_returns_reply_verbatim(self):
        self.assertEqual(self.service.ask(" What is a P/E ratio? "), "model reply")
        self.assertEqual(self.fake.calls, [("What is a P/E ratio?", ModelTier.FAST)])

    def test_stock_ideas_heading_and_prompt(self):
        reply = self.service.stock_ideas("green energy")
        self.assertTrue(reply.startswith('**Stock Ideas for "green energy":**\n'))
        prompt, tier = self.fake.calls[0]
        self.assertIn('"green energy"', prompt)
        self.assertIn("5 fictional stock names", prompt)
        self.assertEqual(tier, ModelTier.FAST)

    def test_market_uses_pro_model(self):
        reply = self.service.analyze_market(_stocks())
        self.assertTrue(reply.startswith("**Market Analysis for your selected stocks:**"))
        prompt, tier = self.fake.calls[0]
        self.assertEqual(tier, ModelTier.PRO)
        self.assertIn("Alpha (Price: $100, Return: 10%)", prompt)
        self.assertIn("Beta (Price: $50, Return: 10%)", prompt)

    def test_portfolio_prompt_contents(self):
        allocation = AllocationEngine.allocate(120, _stocks())
        reply = self.service.portfolio_advice(allocation)
        self.assertTrue(reply.startswith("**Portfolio Advice:**"))

        prompt, tier = self.fake.calls[0]
        self.assertEqual(tier, ModelTier.PRO)
        self.assertIn("budget of $120.00", prompt)
        self.assertIn("- Alpha (Price: $100.00, Expected Return: 10.00%)", prompt)
        self.assertIn("- Beta: Invested $100.00 (Fraction: 2.0000), Actual Return: $10.00", prompt)
        self.assertIn("- Alpha: Invested $20.00 (Fraction: 0.2000), Actual Return: $2.00", prompt)
        self.assertIn("Total Invested: $120.00", prompt)
        self.assertIn("Total Actual Return: $12.00", prompt)
        self.assertIn("Remaining Budget: $0.00", prompt)
        self.assertIn("not financial advice", prompt)


# ===========================================================================
# 4. Failures
# ===========================================================================

class TestFailures(unittest.TestCase):

    def test_classified_failure_message(self):
        err = TextGenerationError(AIErrorKind.QUOTA, USER_MESSAGES[AIErrorKind.QUOTA])
        service = AdviceService(_FakeGenerator(error=err))
        self.assertEqual(service.ask("hi"), USER_MESSAGES[AIErrorKind.QUOTA])

    def test_failure_has_no_heading(self):
        err = TextGenerationError(AIErrorKind.AUTH, USER_MESSAGES[AIErrorKind.AUTH])
        service = AdviceService(_FakeGenerator(error=err))
        self.assertEqual(service.stock_ideas("tech"), USER_MESSAGES[AIErrorKind.AUTH])

    def test_raw_error_is_classified(self):
        service = AdviceService(_FakeGenerator(error=RuntimeError("429 quota exceeded")))
        self.assertEqual(service.ask("hi"), USER_MESSAGES[AIErrorKind.QUOTA])

    def test_unrecognised_error_gets_generic_message(self):
        service = AdviceService(_FakeGenerator(error=RuntimeError("boom")))
        with self.assertLogs("fractional_investor.advice_service", level="ERROR"):
            reply = service.analyze_market(_stocks())
        self.assertEqual(reply, USER_MESSAGES[AIErrorKind.UNKNOWN])


if __name__ == "__main__":
    unittest.main()
