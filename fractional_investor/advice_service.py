"""
fractional_investor/advice_service.py
-------------------------------------
Builds prompts for the AI assistant features and turns every reply, or
failure, into display text.

Features:
    ask              – free-form question
    stock_ideas      – five fictional stocks for a theme
    analyze_market   – educational outlook for the current stocks
    portfolio_advice – review of the current allocation

Failures from the :class:`TextGenerator` are mapped to a user message here,
once; methods of this class never raise for a failed AI call.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from fractional_investor.enums import ModelTier
from fractional_investor.exceptions import InvalidInputError, TextGenerationError
from fractional_investor.models import Allocation, Stock
from fractional_investor.text_generator import USER_MESSAGES, TextGenerator, classify_failure

logger = logging.getLogger(__name__)


_STOCK_IDEAS_PROMPT = """\
Generate a list of 5 fictional stock names with realistic-sounding prices (e.g., $50-$1000) \
and expected returns (e.g., 5-25%) based on the theme "{theme}". \
Provide the output in a markdown list format, like:
- StockName1 (Price: $XXX, Return: Y%)
- StockName2 (Price: $XXX, Return: Y%)
...
"""

_MARKET_PROMPT = (
    "For educational purposes, analyze the market outlook for the following fictional "
    "stocks and provide brief insights: {stock_details}. Consider general market "
    "conditions and potential trends. This is a hypothetical scenario."
)

_PORTFOLIO_PROMPT = """\
You are an AI assistant designed to analyze hypothetical investment scenarios for \
educational purposes. **This is not financial advice.**

I have a hypothetical initial investment budget of ${budget:.2f}.

Here are the fictional stocks I am considering:
{stock_lines}

My current hypothetical investment allocations are:
{allocation_lines}

Total Invested: ${total_invested:.2f}
Total Actual Return: ${total_return:.2f}
Remaining Budget: ${remaining:.2f}

Please provide a comprehensive analysis of this hypothetical portfolio for educational discussion.
Specifically, consider:
1.  **Diversification**: How well-diversified is this hypothetical portfolio? What are potential gaps?
2.  **Risk Assessment**: What are the potential risks and opportunities associated with this \
portfolio composition in a hypothetical market?
3.  **Optimization/Rebalancing**: What are some theoretical strategies for rebalancing or \
adjusting these investments to explore different risk/return profiles?
4.  **Next Steps**: What are some general concepts an investor might study next to improve \
their understanding of investment strategy?

Provide your analysis in a well-structured, easy-to-read markdown format with clear headings. \
Conclude with a clear disclaimer that this is a fictional analysis for educational purposes \
only and not financial advice."""

# "- Name (Price: $123.45, Return: 12%)"; bullets may be "-", "*" or "1."
_IDEA_LINE_RE = re.compile(
    r"^\s*(?:[-*•]|\d+[.)])\s*\**(?P<name>[^(*]+?)\**\s*"
    r"\(\s*Price:\s*\$?\s*(?P<price>[\d,]*\.?\d+)\s*,\s*"
    r"(?:Expected\s+)?Return:\s*(?P<ret>\d*\.?\d+)\s*%\s*\)",
    re.IGNORECASE,
)


def parse_stock_ideas(text: str) -> List[Stock]:
    """
    Extract stocks from an ideas reply.

    Lines that do not match ``- Name (Price: $X, Return: Y%)`` or that fail
    stock validation are skipped.
    """
    stocks: List[Stock] = []
    for line in (text or "").splitlines():
        match = _IDEA_LINE_RE.match(line)
        if not match:
            continue
        try:
            stocks.append(Stock.from_input(
                match.group("name"),
                match.group("price"),
                match.group("ret"),
            ))
        except InvalidInputError:
            logger.debug("Skipping unusable idea line: %r", line)
    return stocks


class AdviceService:
    """
    Formatting and error-mapping layer over a :class:`TextGenerator`.

    Each public method validates its input, builds the prompt, and returns
    the text to display: the model reply on success, otherwise a short
    explanation.
    """

    def __init__(self, generator: TextGenerator):
        self._generator = generator

    # ------------------------------------------------------------------ #
    #  Public features
    # ------------------------------------------------------------------ #

    def ask(self, question: str) -> str:
        if not (question or "").strip():
            return "Please enter a question for Gemini."
        return self._generate(question.strip(), ModelTier.FAST)

    def stock_ideas(self, theme: str) -> str:
        theme = (theme or "").strip()
        if not theme:
            return "Please enter a description for stock ideas."
        return self._generate(
            self.stock_ideas_prompt(theme),
            ModelTier.FAST,
            heading=f'**Stock Ideas for "{theme}":**',
        )

    def analyze_market(self, stocks: Sequence[Stock]) -> str:
        if not stocks:
            return "Please add some stocks to analyze market data."
        return self._generate(
            self.market_prompt(stocks),
            ModelTier.PRO,
            heading="**Market Analysis for your selected stocks:**",
        )

    def portfolio_advice(self, allocation: Allocation) -> str:
        if not allocation.stocks or not allocation.results:
            return "Please add stocks and calculate your investment to get portfolio advice."
        return self._generate(
            self.portfolio_prompt(allocation),
            ModelTier.PRO,
            heading="**Portfolio Advice:**",
        )

    # ------------------------------------------------------------------ #
    #  Prompt builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def stock_ideas_prompt(theme: str) -> str:
        return _STOCK_IDEAS_PROMPT.format(theme=theme)

    @staticmethod
    def market_prompt(stocks: Sequence[Stock]) -> str:
        details = ", ".join(
            f"{s.name} (Price: ${s.price:g}, Return: {s.expected_return:g}%)" for s in stocks
        )
        return _MARKET_PROMPT.format(stock_details=details)

    @staticmethod
    def portfolio_prompt(allocation: Allocation) -> str:
        stock_lines = "\n".join(
            f"- {s.name} (Price: ${s.price:.2f}, Expected Return: {s.expected_return:.2f}%)"
            for s in allocation.stocks
        )
        allocation_lines = "\n".join(
            f"- {r.stock_name}: Invested ${r.invested_amount:.2f} "
            f"(Fraction: {r.fraction:.4f}), Actual Return: ${r.actual_return:.2f}"
            for r in allocation.results
        )
        total_invested = sum(r.invested_amount for r in allocation.results)
        total_return = sum(r.actual_return for r in allocation.results)
        return _PORTFOLIO_PROMPT.format(
            budget=allocation.budget,
            stock_lines=stock_lines,
            allocation_lines=allocation_lines,
            total_invested=total_invested,
            total_return=total_return,
            remaining=allocation.budget - total_invested,
        )

    # ------------------------------------------------------------------ #
    #  Generator call
    # ------------------------------------------------------------------ #

    def _generate(self, prompt: str, tier: ModelTier, heading: Optional[str] = None) -> str:
        """Return the reply (under *heading*, if given) or the failure message."""
        try:
            reply = self._generator.generate_text(prompt, tier)
        except TextGenerationError as e:
            logger.warning("AI request failed: %s", e.error_code)
            return str(e)
        except Exception as e:
            # Generators other than the Gemini adapter may leak raw errors.
            kind = classify_failure(e)
            logger.exception("AI request failed with an unclassified error")
            return USER_MESSAGES[kind]
        return f"{heading}\n{reply}" if heading else reply
