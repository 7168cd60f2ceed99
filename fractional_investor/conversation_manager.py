import logging
from typing import Optional

from fractional_investor.advice_service import AdviceService, parse_stock_ideas
from fractional_investor.allocation_engine import AllocationEngine
from fractional_investor.config import Settings, load_settings
from fractional_investor.constants import ACCEPT_PHRASES
from fractional_investor.data_loader import DataLoader
from fractional_investor.enums import ConversationState, Intent
from fractional_investor.exceptions import FractionalInvestorError, InvalidInputError
from fractional_investor.intent_parser import IntentParser
from fractional_investor.models import Stock
from fractional_investor.response_generator import ResponseGenerator
from fractional_investor.session_context import SessionContext
from fractional_investor.text_generator import GeminiTextGenerator, TextGenerator

logger = logging.getLogger(__name__)


class ConversationManager:
    """
    Orchestrates the multi-turn conversation via a finite-state machine.

    Flow::

        GREETING
          → COLLECT_BUDGET
          → COLLECT_STOCKS
          → SHOW_RESULTS  (loop: adjust / remove / add / AI / restart / exit)
          → DONE

    Commands (budget, add, remove, adjust, calculate, list, load and the AI
    features) are global and work in any state; the state only decides
    what a bare reply such as '5000' or 'ACME 120 8' means.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        generator: Optional[TextGenerator] = None,
        loader: Optional[DataLoader] = None,
    ):
        self.settings = settings or load_settings()
        self.context = SessionContext()
        self.parser = IntentParser()
        self.generator = ResponseGenerator()
        self.advisor = AdviceService(generator or GeminiTextGenerator(self.settings))
        self._loader = loader or DataLoader()

    # ------------------------------------------------------------------ #
    #  Public entry point (called by main.py)
    # ------------------------------------------------------------------ #

    def handle_message(self, user_input: str) -> str:
        """Process one turn of user text and return the bot's reply."""
        text = user_input.strip()
        state = self.context.state

        if not text and state != ConversationState.COLLECT_BUDGET:
            return "Please type something, I'm listening!"

        intent = self.parser.parse_intent(text)
        logger.debug("state=%s intent=%s", state.name, intent.name)

        # ---- Global overrides: work in ANY conversation state -----------

        if intent == Intent.QUIT:
            self.context.state = ConversationState.DONE
            return self.generator.quit_message()

        if intent == Intent.RESTART:
            self.context.reset()
            self.context.state = ConversationState.COLLECT_BUDGET
            return self.generator.restart_message(self.settings.default_budget)

        if state == ConversationState.DONE:
            return self.generator.quit_message()

        if intent == Intent.SHOW_KEYWORDS:
            return self.generator.show_keywords()

        global_handlers = {
            Intent.SET_BUDGET:        self._handle_budget,
            Intent.ADD_STOCK:         self._handle_add_stock,
            Intent.ADD_IDEAS:         self._handle_add_ideas,
            Intent.REMOVE_STOCK:      self._handle_remove,
            Intent.ADJUST_INVESTMENT: self._handle_adjust,
            Intent.CALCULATE:         self._handle_calculate,
            Intent.LIST_STOCKS:       self._handle_list,
            Intent.LOAD_STOCKS:       self._handle_load,
            Intent.STOCK_IDEAS:       self._handle_ideas,
            Intent.ANALYZE_MARKET:    self._handle_analyze,
            Intent.PORTFOLIO_ADVICE:  self._handle_advice,
            Intent.ASK_AI:            self._handle_ask,
        }
        handler = global_handlers.get(intent)
        if handler is not None:
            return handler(text)

        return self._dispatch(text, intent)

    def start(self) -> str:
        """Return the opening greeting without requiring user input."""
        self.context.state = ConversationState.COLLECT_BUDGET
        return self.generator.greeting(self.settings.default_budget)

    # ------------------------------------------------------------------ #
    #  State dispatcher
    # ------------------------------------------------------------------ #

    def _dispatch(self, text: str, intent: Intent) -> str:
        state = self.context.state

        if state == ConversationState.GREETING:
            self.context.state = ConversationState.COLLECT_BUDGET
            return self.generator.greeting(self.settings.default_budget)

        if state == ConversationState.COLLECT_BUDGET:
            if intent == Intent.PROVIDE_BUDGET or text.lower() in ACCEPT_PHRASES:
                return self._handle_budget(text)
            return self.generator.ask_budget()

        if intent == Intent.PROVIDE_BUDGET:
            return self._handle_budget(text)

        return self.generator.unknown()

    # ------------------------------------------------------------------ #
    #  Budget and stock list
    # ------------------------------------------------------------------ #

    def _handle_budget(self, text: str) -> str:
        if text.lower() in ACCEPT_PHRASES:
            budget = self.settings.default_budget
        else:
            budget = self.parser.extract_budget(text)
        if budget is None or budget <= 0:
            return self.generator.ask_budget()

        self.context.budget = budget

        if self.context.state == ConversationState.COLLECT_BUDGET:
            self.context.state = ConversationState.COLLECT_STOCKS
            return self.generator.confirm_budget(budget) + "\n\n" + self.generator.ask_stocks()
        if self.context.allocation is not None:
            # The stored allocation was computed for the old budget.
            allocation = AllocationEngine.allocate(budget, self.context.stocks)
            return self.generator.confirm_budget(budget) + "\n" + self._show_allocation(allocation)
        return self.generator.confirm_budget(budget)

    def _handle_add_stock(self, text: str) -> str:
        fields = self.parser.extract_stock_fields(text)
        if fields is None:
            return self.generator.error(
                "Please enter a valid stock name, positive price, and non-negative return "
                "(e.g. 'add ACME 120 8')."
            )
        try:
            stock = Stock.from_input(*fields)
        except InvalidInputError as e:
            return self.generator.error(str(e))
        self._append_stocks([stock])
        return self.generator.stock_added(stock, len(self.context.stocks))

    def _handle_add_ideas(self, text: str) -> str:
        if not self.context.last_ideas:
            return "No stock ideas yet. Try 'ideas <theme>' first."
        stocks = parse_stock_ideas(self.context.last_ideas)
        if not stocks:
            return self.generator.error("I couldn't find any usable stocks in the last ideas reply.")
        self._append_stocks(stocks)
        return self.generator.stocks_added(stocks, len(self.context.stocks))

    def _handle_load(self, text: str) -> str:
        path = self.parser.extract_argument(text)
        if not path:
            return "Which file? E.g. 'load stocks.csv'"
        try:
            stocks = self._loader.load_stocks(path)
        except FileNotFoundError as e:
            return self.generator.error(str(e))
        except InvalidInputError as e:
            return self.generator.error(str(e))
        self._append_stocks(stocks)
        return self.generator.stocks_added(stocks, len(self.context.stocks))

    def _append_stocks(self, stocks) -> None:
        self.context.stocks.extend(stocks)
        self.context.sync_allocation()
        if self.context.state in (ConversationState.GREETING, ConversationState.COLLECT_BUDGET):
            if self.context.budget is None:
                self.context.budget = self.settings.default_budget
            self.context.state = ConversationState.COLLECT_STOCKS

    def _handle_list(self, text: str) -> str:
        listing = self.generator.stock_list(self.context.stocks, self.context.budget)
        if self.context.allocation is not None and self.context.stocks:
            return listing + "\n\n" + self.generator.allocation_table(self.context.allocation)
        return listing

    # ------------------------------------------------------------------ #
    #  Allocation engine operations
    # ------------------------------------------------------------------ #

    def _handle_calculate(self, text: str) -> str:
        budget = self.context.budget if self.context.budget is not None else 0.0
        allocation = AllocationEngine.allocate(budget, self.context.stocks)
        return self._show_allocation(allocation)

    def _handle_remove(self, text: str) -> str:
        target = self.parser.extract_argument(text)
        stock = self.context.find_stock(target) if target else None
        if stock is None:
            return self.generator.stock_not_found(target)

        budget = self.context.budget if self.context.budget is not None else 0.0
        allocation = AllocationEngine.remove_stock(budget, self.context.stocks, stock.id)
        self.context.stocks = list(allocation.stocks)
        return self.generator.stock_removed(stock) + "\n" + self._show_allocation(allocation)

    def _handle_adjust(self, text: str) -> str:
        parsed = self.parser.extract_adjustment(text)
        if parsed is None:
            return self.generator.adjustment_usage()
        target, amount_text = parsed

        if self.context.allocation is None:
            return self.generator.need_allocation()
        stock = self.context.find_stock(target)
        if stock is None:
            return self.generator.stock_not_found(target)

        try:
            allocation = AllocationEngine.adjust(self.context.allocation, stock.id, amount_text)
        except FractionalInvestorError as e:
            return self.generator.error(str(e))

        self.context.allocation = allocation
        return (
            self.generator.adjustment_applied(allocation.result_for(stock.id))
            + "\n\n"
            + self.generator.allocation_table(allocation)
        )

    def _show_allocation(self, allocation) -> str:
        self.context.allocation = allocation if allocation.is_valid else None
        if not allocation.is_valid:
            return self.generator.allocation_table(allocation)
        self.context.state = ConversationState.SHOW_RESULTS
        return self.generator.allocation_table(allocation) + "\n" + self.generator.follow_up()

    # ------------------------------------------------------------------ #
    #  AI assistant
    # ------------------------------------------------------------------ #

    def _handle_ideas(self, text: str) -> str:
        theme = self.parser.extract_argument(text)
        if not theme:
            return self.advisor.stock_ideas(theme)
        print(self.generator.ai_pending())
        reply = self.advisor.stock_ideas(theme)
        if parse_stock_ideas(reply):
            self.context.last_ideas = reply
            reply += "\n\nType 'add ideas' to add these stocks to your list."
        return reply

    def _handle_analyze(self, text: str) -> str:
        if not self.context.stocks:
            return self.advisor.analyze_market(self.context.stocks)
        print(self.generator.ai_pending())
        return self.advisor.analyze_market(self.context.stocks)

    def _handle_advice(self, text: str) -> str:
        allocation = self.context.allocation
        if allocation is None or not self.context.stocks:
            return "Please add stocks and calculate your optimal investment before getting portfolio advice."
        print(self.generator.ai_pending())
        return self.advisor.portfolio_advice(allocation)

    def _handle_ask(self, text: str) -> str:
        question = self.parser.extract_argument(text)
        if not question:
            return self.advisor.ask(question)
        print(self.generator.ai_pending())
        return self.advisor.ask(question)
