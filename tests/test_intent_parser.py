import unittest

from fractional_investor.enums import Intent
from fractional_investor.intent_parser import IntentParser


class TestIntentParser(unittest.TestCase):
    def setUp(self):
        self.parser = IntentParser()

    # -- Intent detection --------------------------------------------------

    def test_quit_intent(self):
        self.assertEqual(self.parser.parse_intent("exit"), Intent.QUIT)
        self.assertEqual(self.parser.parse_intent("Quit"), Intent.QUIT)

    def test_restart_intent(self):
        self.assertEqual(self.parser.parse_intent("start over"), Intent.RESTART)
        self.assertEqual(self.parser.parse_intent("reset"), Intent.RESTART)

    def test_help_intent(self):
        self.assertEqual(self.parser.parse_intent("help"), Intent.SHOW_KEYWORDS)
        self.assertEqual(self.parser.parse_intent("what can you do"), Intent.SHOW_KEYWORDS)

    def test_greeting(self):
        self.assertEqual(self.parser.parse_intent("hello"), Intent.GREET)

    def test_add_ideas_checked_before_add(self):
        self.assertEqual(self.parser.parse_intent("add ideas"), Intent.ADD_IDEAS)
        self.assertEqual(self.parser.parse_intent("add ACME 120 8"), Intent.ADD_STOCK)

    def test_bare_stock_line_is_add(self):
        self.assertEqual(self.parser.parse_intent("ACME 120 8"), Intent.ADD_STOCK)
        self.assertEqual(self.parser.parse_intent("Big Corp, $1,200, 12.5%"), Intent.ADD_STOCK)

    def test_bare_amount_is_budget(self):
        self.assertEqual(self.parser.parse_intent("5000"), Intent.PROVIDE_BUDGET)
        self.assertEqual(self.parser.parse_intent("$25k"), Intent.PROVIDE_BUDGET)

    def test_engine_commands(self):
        cases = {
            "budget 500": Intent.SET_BUDGET,
            "remove ACME": Intent.REMOVE_STOCK,
            "delete 2": Intent.REMOVE_STOCK,
            "adjust ACME 45": Intent.ADJUST_INVESTMENT,
            "set 1 to 20": Intent.ADJUST_INVESTMENT,
            "calculate": Intent.CALCULATE,
            "done": Intent.CALCULATE,
            "list": Intent.LIST_STOCKS,
            "load stocks.csv": Intent.LOAD_STOCKS,
        }
        for text, intent in cases.items():
            self.assertEqual(self.parser.parse_intent(text), intent, text)

    def test_set_budget_is_not_an_adjustment(self):
        self.assertEqual(self.parser.parse_intent("set budget 5000"), Intent.SET_BUDGET)
        self.assertAlmostEqual(self.parser.extract_budget("set budget 5000"), 5000)
        self.assertEqual(self.parser.parse_intent("set ACME 20"), Intent.ADJUST_INVESTMENT)

    def test_ai_commands(self):
        cases = {
            "ideas green energy": Intent.STOCK_IDEAS,
            "analyze": Intent.ANALYZE_MARKET,
            "advice": Intent.PORTFOLIO_ADVICE,
            "ask what is a dividend?": Intent.ASK_AI,
        }
        for text, intent in cases.items():
            self.assertEqual(self.parser.parse_intent(text), intent, text)

    def test_command_must_be_whole_word(self):
        # "address" starts with "add" but is not the add command
        self.assertEqual(self.parser.parse_intent("address"), Intent.UNKNOWN)

    def test_unknown(self):
        self.assertEqual(self.parser.parse_intent("tell me a joke"), Intent.UNKNOWN)

    # -- Extraction ----------------------------------------------------------

    def test_budget_extraction(self):
        self.assertAlmostEqual(self.parser.extract_budget("50k"), 50000)
        self.assertAlmostEqual(self.parser.extract_budget("1.5m"), 1500000)
        self.assertAlmostEqual(self.parser.extract_budget("$1,000"), 1000)
        self.assertAlmostEqual(self.parser.extract_budget("budget 120"), 120)
        self.assertIsNone(self.parser.extract_budget("lots"))
        self.assertIsNone(self.parser.extract_budget("-5"))

    def test_stock_field_extraction(self):
        self.assertEqual(self.parser.extract_stock_fields("add ACME 120 8"), ("ACME", "120", "8"))
        self.assertEqual(
            self.parser.extract_stock_fields("Big Corp, $1,200.50, 12.5%"),
            ("Big Corp", "1,200.50", "12.5"),
        )
        self.assertIsNone(self.parser.extract_stock_fields("add ACME"))

    def test_negative_fields_left_for_validation(self):
        self.assertEqual(self.parser.extract_stock_fields("X -5 3"), ("X", "-5", "3"))

    def test_argument_extraction(self):
        self.assertEqual(self.parser.extract_argument("ideas green energy"), "green energy")
        self.assertEqual(self.parser.extract_argument("remove ACME"), "ACME")
        self.assertEqual(self.parser.extract_argument("load"), "")

    def test_adjustment_extraction(self):
        self.assertEqual(self.parser.extract_adjustment("adjust ACME 45"), ("ACME", "45"))
        self.assertEqual(self.parser.extract_adjustment("set 2 to $300"), ("2", "$300"))
        self.assertEqual(self.parser.extract_adjustment("adjust ACME = 45"), ("ACME", "45"))
        self.assertEqual(
            self.parser.extract_adjustment("adjust Big Corp 10"), ("Big Corp", "10")
        )
        self.assertIsNone(self.parser.extract_adjustment("adjust"))


if __name__ == "__main__":
    unittest.main()
