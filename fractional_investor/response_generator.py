from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd

from fractional_investor.constants import COMMAND_HELP
from fractional_investor.models import Allocation, InvestmentResult, Stock


class ResponseGenerator:
    """
    Builds human-readable bot messages.

    **Formatting-only**: all computation is delegated to
    :class:`AllocationEngine` and :class:`AdviceService`.
    This class must not perform calculations itself beyond display
    rounding.
    """

    # ------------------------------------------------------------------ #
    #  Conversational prompts
    # ------------------------------------------------------------------ #

    def greeting(self, default_budget: float) -> str:
        return (
            "👋 Welcome to **Fractional Stock Investor**!\n\n"
            "Give me a budget and a few candidate stocks (price and expected return) "
            "and I'll spread the budget across them to maximise expected return, "
            "buying whole shares first and a fraction of the last one.\n\n"
            f"What is your **investment budget**? Press Enter or type 'yes' to use "
            f"${default_budget:,.2f} (e.g. '10000', '$25k')."
        )

    def ask_budget(self) -> str:
        return "Please enter a valid positive budget amount (e.g. '10000' or '10k')."

    def confirm_budget(self, amount: float) -> str:
        return f"✅ Budget set to **${amount:,.2f}**."

    def ask_stocks(self) -> str:
        return (
            "Add candidate stocks one per line as '<name> <price> <return%>' "
            "(e.g. 'ACME 120 8'), or 'load <file.csv>'.\n"
            "Type 'calculate' when you're done."
        )

    def stock_added(self, stock: Stock, count: int) -> str:
        return (
            f"✅ Added **{stock.name}** @ ${stock.price:,.2f}, "
            f"expected return {stock.expected_return:g}% ({count} stock(s) in the list)."
        )

    def stocks_added(self, stocks: Sequence[Stock], count: int) -> str:
        names = ", ".join(s.name for s in stocks)
        return f"✅ Added {len(stocks)} stock(s): {names} ({count} in the list)."

    def stock_not_found(self, target: str) -> str:
        return (
            f"⚠️  No stock matches '{target}'. "
            "Use the name or the # shown by 'list'."
        )

    def adjustment_usage(self) -> str:
        return "Usage: 'adjust <name|#> <amount>' (e.g. 'adjust ACME 250')."

    def need_allocation(self) -> str:
        return "Please calculate an allocation first (type 'calculate')."

    def adjustment_applied(self, result: InvestmentResult) -> str:
        return (
            f"✅ {result.stock_name}: invested ${result.invested_amount:,.2f} "
            f"({result.fraction:.4f} shares), expected return ${result.actual_return:,.2f}."
        )

    def stock_removed(self, stock: Stock) -> str:
        return f"🗑️  Removed **{stock.name}**."

    def error(self, message: str) -> str:
        return f"⚠️  {message}"

    def unknown(self) -> str:
        return (
            "🤔 I didn't quite understand that. "
            "Please try again, or type 'help' for guidance."
        )

    def quit_message(self) -> str:
        return "👋 Thanks for using Fractional Stock Investor. Goodbye!"

    def restart_message(self, default_budget: float) -> str:
        return "🔄 Session restarted. Let's begin again.\n\n" + self.greeting(default_budget)

    def follow_up(self) -> str:
        return (
            "\nWhat next?\n"
            "  • 'adjust <name|#> <amount>' — override one allocation\n"
            "  • 'remove <name|#>'          — drop a stock and re-run\n"
            "  • 'advice' / 'analyze'       — ask Gemini about this portfolio\n"
            "  • 'help' for all commands, 'exit' to quit"
        )

    def show_keywords(self) -> str:
        width = max(len(cmd) for cmd, _ in COMMAND_HELP)
        lines = ["Available commands:"]
        lines += [f"  {cmd:<{width}}  — {desc}" for cmd, desc in COMMAND_HELP]
        return "\n".join(lines)

    def ai_pending(self) -> str:
        return "\n⏳ Asking Gemini… (this may take a few seconds)\n"

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def stock_list(self, stocks: Sequence[Stock], budget: Optional[float]) -> str:
        if not stocks:
            return "No stocks added yet. Use 'add <name> <price> <return%>' to add some!"
        df = pd.DataFrame(
            {
                "Name": [s.name for s in stocks],
                "Price": [f"${s.price:,.2f}" for s in stocks],
                "Return": [f"{s.expected_return:g}%" for s in stocks],
                "Ret/Price": [f"{s.efficiency:.4f}" for s in stocks],
            },
            index=pd.RangeIndex(1, len(stocks) + 1, name="#"),
        )
        header = f"Budget: ${budget:,.2f}\n" if budget is not None else ""
        return header + df.to_string()

    def allocation_table(self, allocation: Allocation) -> str:
        """Render the per-stock results and the budget summary."""
        if not allocation.is_valid:
            return self.error(allocation.message or "Nothing to allocate.")

        prices = {s.id: s.price for s in allocation.stocks}
        rows: List[InvestmentResult] = list(allocation.results)
        df = pd.DataFrame(
            {
                "Stock": [r.stock_name for r in rows],
                "Price": [f"${prices.get(r.stock_id, 0.0):,.2f}" for r in rows],
                "Shares": [f"{r.fraction:.4f}" for r in rows],
                "Invested": [f"${r.invested_amount:,.2f}" for r in rows],
                "Exp. Return": [f"${r.actual_return:,.2f}" for r in rows],
            },
            index=pd.RangeIndex(1, len(rows) + 1, name="#"),
        )

        sep = "=" * 64
        lines = [
            sep,
            df.to_string(),
            sep,
            f"  Budget:                ${allocation.budget:,.2f}",
            f"  Total invested:        ${allocation.total_invested:,.2f}",
            f"  Remaining budget:      ${allocation.remaining_budget:,.2f}",
            f"  Total expected return: ${allocation.total_return:,.2f}",
        ]
        return "\n".join(lines)
