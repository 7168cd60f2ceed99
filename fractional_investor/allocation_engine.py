"""
fractional_investor/allocation_engine.py
----------------------------------------
Pure transformation engine: budget + candidate stocks → per-stock allocations.

Design contract:
  - No I/O, no AI calls, no FSM awareness
  - Fully deterministic and stateless (all methods are @staticmethod)
  - Every operation takes the full prior state and returns the full next
    state as a new :class:`Allocation`; inputs are never mutated
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np

from fractional_investor.config import BUDGET_TOLERANCE
from fractional_investor.exceptions import BudgetExceededError, StockNotFoundError
from fractional_investor.models import Allocation, InvestmentResult, Stock, parse_amount

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Please enter a positive budget and add at least one stock."
OVERFLOW_MESSAGE = "The budget is too large for these share prices. Please enter a smaller budget."


class AllocationEngine:
    """
    Greedy fractional allocation of a cash budget across candidate stocks.

    Stocks are ranked by efficiency (``expected_return / price``) and the
    budget is walked down that ranking:

    * while the remaining budget covers at least one share, buy as many
      **whole** shares of the current stock as it affords;
    * otherwise spend everything that is left on a **fractional** share of
      the current stock, which exhausts the budget.

    Each stock is visited once. A remainder smaller than one share of the
    current stock is carried to the next stock, or stays uninvested if
    there is none.

    .. note::
        Preferring whole shares is a deliberate policy, not a bug. It is
        return-suboptimal in some orderings: a pure fractional model would
        invest the remainder in the best stock instead of passing it down.
    """

    # ------------------------------------------------------------------ #
    #  Public entry points
    # ------------------------------------------------------------------ #

    @staticmethod
    def allocate(budget: float, stocks: Sequence[Stock]) -> Allocation:
        """
        Run the greedy pass over *stocks* with *budget*.

        Parameters
        ----------
        budget : float
            Cash available. Non-positive budgets do not allocate.
        stocks : Sequence[Stock]
            Candidate stocks. Input order decides ties in efficiency.

        Returns
        -------
        Allocation
            One result per stock, in input order. When ``budget`` is not a
            positive finite number, *stocks* is empty, or ``budget / price``
            overflows for some stock, every result is zero and ``is_valid``
            is False, with a user-facing ``message``; this never raises.
        """
        stocks = tuple(stocks)
        results: Dict[str, InvestmentResult] = {
            s.id: InvestmentResult.empty(s) for s in stocks
        }

        message = None
        if not (budget > 0) or not math.isfinite(budget) or not stocks:
            message = INVALID_INPUT_MESSAGE
        elif any(not math.isfinite(budget / s.price) for s in stocks):
            # The whole-share count could not be represented.
            message = OVERFLOW_MESSAGE

        if message is not None:
            logger.warning(
                "Allocation skipped: budget=%s, stocks=%d", budget, len(stocks)
            )
            return Allocation(
                budget=budget,
                stocks=stocks,
                results=tuple(results[s.id] for s in stocks),
                is_valid=False,
                message=message,
            )

        remaining = float(budget)
        total_invested = 0.0
        total_return = 0.0

        for stock in AllocationEngine.rank(stocks):
            if remaining <= 0:
                break

            if remaining >= stock.price:
                shares = math.floor(remaining / stock.price)
                invested = shares * stock.price
                fraction = float(shares)
            else:
                invested = remaining
                fraction = remaining / stock.price

            actual_return = invested * stock.expected_return / 100
            results[stock.id] = InvestmentResult(
                stock_id=stock.id,
                stock_name=stock.name,
                fraction=fraction,
                invested_amount=invested,
                actual_return=actual_return,
            )

            remaining -= invested
            total_invested += invested
            total_return += actual_return

        logger.info(
            "Allocation complete: invested=%.2f of %.2f across %d stocks, return=%.2f",
            total_invested,
            budget,
            sum(1 for r in results.values() if r.invested_amount > 0),
            total_return,
        )

        return Allocation(
            budget=budget,
            stocks=stocks,
            results=tuple(results[s.id] for s in stocks),
            total_invested=total_invested,
            total_return=total_return,
        )

    @staticmethod
    def remove_stock(budget: float, stocks: Sequence[Stock], stock_id: str) -> Allocation:
        """
        Drop *stock_id* and re-run the full greedy pass on what remains.

        This is a full recomputation: removing a high-efficiency stock can
        change which of the others get whole versus fractional buys.
        The returned ``Allocation.stocks`` is the reduced list.
        """
        remaining_stocks = [s for s in stocks if s.id != stock_id]
        if len(remaining_stocks) == len(stocks):
            logger.warning("remove_stock: id %s not in the current set", stock_id)
        return AllocationEngine.allocate(budget, remaining_stocks)

    @staticmethod
    def adjust(
        allocation: Allocation,
        stock_id: str,
        new_amount: Union[float, str],
    ) -> Allocation:
        """
        Manually override the invested amount of one stock.

        No greedy re-run happens: only the target entry changes, then both
        totals are re-summed over all entries.

        Parameters
        ----------
        allocation : Allocation
            Current state (budget, stocks, results).
        stock_id : str
            Stock to override.
        new_amount : float | str
            New invested amount; text is parsed.

        Returns
        -------
        Allocation
            New state. The input allocation is left untouched.

        Raises
        ------
        InvalidInputError
            *new_amount* is not a finite, non-negative number.
        StockNotFoundError
            *stock_id* is not in ``allocation.stocks``.
        BudgetExceededError
            The new total would exceed ``allocation.budget``.
        """
        amount = parse_amount(new_amount, "invested amount")

        stock = allocation.stock_for(stock_id)
        if stock is None:
            raise StockNotFoundError(stock_id)

        current_results = AllocationEngine._aligned_results(allocation)
        current_total = allocation.total_invested
        current_amount = current_results[stock_id].invested_amount
        delta = amount - current_amount

        if current_total + delta > allocation.budget + BUDGET_TOLERANCE:
            logger.warning(
                "Adjustment rejected for %s: %.2f would bring total to %.2f (budget %.2f)",
                stock.name, amount, current_total + delta, allocation.budget,
            )
            raise BudgetExceededError(amount, allocation.budget, current_total)

        current_results[stock_id] = InvestmentResult(
            stock_id=stock.id,
            stock_name=current_results[stock_id].stock_name,
            fraction=amount / stock.price,
            invested_amount=amount,
            actual_return=amount * stock.expected_return / 100,
        )

        results = tuple(current_results[s.id] for s in allocation.stocks)
        total_invested, total_return = AllocationEngine.recompute_totals(results)

        return Allocation(
            budget=allocation.budget,
            stocks=allocation.stocks,
            results=results,
            total_invested=total_invested,
            total_return=total_return,
            is_valid=allocation.is_valid,
            message=allocation.message,
        )

    @staticmethod
    def align(allocation: Allocation, stocks: Sequence[Stock]) -> Allocation:
        """
        Re-key *allocation* to a changed stock list without a greedy re-run.

        Stocks that are new get a zero entry, stocks that are gone lose
        theirs, and both totals are re-summed.
        """
        rekeyed = replace(allocation, stocks=tuple(stocks))
        results = tuple(AllocationEngine._aligned_results(rekeyed).values())
        total_invested, total_return = AllocationEngine.recompute_totals(results)
        return replace(
            rekeyed,
            results=results,
            total_invested=total_invested,
            total_return=total_return,
        )

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def rank(stocks: Sequence[Stock]) -> List[Stock]:
        """Order *stocks* by efficiency, descending, keeping input order on ties."""
        if not stocks:
            return []
        efficiencies = np.array([s.efficiency for s in stocks], dtype=float)
        order = np.argsort(-efficiencies, kind="stable")
        return [stocks[i] for i in order]

    @staticmethod
    def recompute_totals(results: Iterable[InvestmentResult]) -> Tuple[float, float]:
        """Return ``(total_invested, total_return)`` by fresh summation."""
        total_invested = 0.0
        total_return = 0.0
        for r in results:
            total_invested += r.invested_amount
            total_return += r.actual_return
        return total_invested, total_return

    @staticmethod
    def _aligned_results(allocation: Allocation) -> Dict[str, InvestmentResult]:
        # Stocks added after the last greedy run have no entry yet; give them
        # a zero entry so the result set keeps matching the stock set.
        existing = {r.stock_id: r for r in allocation.results}
        return {
            s.id: existing.get(s.id) or InvestmentResult.empty(s)
            for s in allocation.stocks
        }
