"""
fractional_investor/exceptions.py
---------------------------------
Exception hierarchy for the allocation engine and the AI text layer.

Engine errors are all recoverable: every operation that raises leaves the
caller's state untouched, so the conversation layer can show ``str(error)``
and carry on.
"""

from __future__ import annotations

from typing import Optional

from fractional_investor.enums import AIErrorKind


class FractionalInvestorError(Exception):
    """
    Base exception for all framework errors.

    Catching this covers every error the engine or the advice layer raises.
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__


# ============================================================================
# ALLOCATION ENGINE
# ============================================================================

class InvalidInputError(FractionalInvestorError):
    """
    Raised for malformed user input.

    Example:
        raise InvalidInputError("Price must be a positive number.")
    """
    pass


class StockNotFoundError(FractionalInvestorError):
    """Raised when an operation references a stock id that is not in the current set."""

    def __init__(self, stock_id: str):
        super().__init__(f"Stock '{stock_id}' was not found in the current stock list.")
        self.stock_id = stock_id


class BudgetExceededError(FractionalInvestorError):
    """
    Raised when a manual adjustment would push the total invested above the budget.

    Carries the numbers needed to build the user-facing message.
    """

    def __init__(self, attempted_amount: float, budget: float, current_total: float):
        super().__init__(
            f"Cannot invest ${attempted_amount:,.2f}. This would exceed your total "
            f"budget of ${budget:,.2f} (Current total: ${current_total:,.2f})."
        )
        self.attempted_amount = attempted_amount
        self.budget = budget
        self.current_total = current_total


# ============================================================================
# AI TEXT GENERATION
# ============================================================================

class TextGenerationError(FractionalInvestorError):
    """
    Raised by a text generator when the external service call fails.

    ``kind`` is the classified failure; ``str(error)`` is already safe to
    show to the user.
    """

    def __init__(self, kind: AIErrorKind, message: str):
        super().__init__(message, error_code=kind.name)
        self.kind = kind
