"""
fractional_investor/models.py
-----------------------------
Value types shared by the engine, the advice layer and the CLI.

All three are frozen dataclasses: engine operations return new values
instead of mutating their inputs.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from fractional_investor.exceptions import InvalidInputError


Number = Union[int, float]


def parse_amount(value: Union[Number, str], field_name: str = "amount") -> float:
    """
    Parse user input into a finite, non-negative float.

    Accepts numbers or text such as ``"45"``, ``"1,250.50"`` or ``"$300"``.

    Raises
    ------
    InvalidInputError
        If the value is not numeric, not finite, or negative.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Please enter a valid non-negative number for the {field_name}.")

    if isinstance(value, str):
        text = value.strip().lstrip("$").replace(",", "").strip()
        try:
            number = float(text)
        except ValueError:
            raise InvalidInputError(
                f"Please enter a valid non-negative number for the {field_name}."
            ) from None
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidInputError(
                f"Please enter a valid non-negative number for the {field_name}."
            ) from None

    if not math.isfinite(number) or number < 0:
        raise InvalidInputError(f"Please enter a valid non-negative number for the {field_name}.")
    return number


@dataclass(frozen=True)
class Stock:
    """
    A candidate investment.

    ``expected_return`` is a percentage: 10 means 10 %.
    """
    id: str
    name: str
    price: float
    expected_return: float

    def __post_init__(self) -> None:
        name = (self.name or "").strip()
        if not name:
            raise InvalidInputError("Stock name must not be empty.")
        object.__setattr__(self, "name", name)

        if not isinstance(self.price, (int, float)) or isinstance(self.price, bool) \
                or not math.isfinite(self.price) or self.price <= 0:
            raise InvalidInputError(f"Price for {name} must be a positive number.")
        if not isinstance(self.expected_return, (int, float)) or isinstance(self.expected_return, bool) \
                or not math.isfinite(self.expected_return) or self.expected_return < 0:
            raise InvalidInputError(f"Expected return for {name} must be a non-negative number.")

        object.__setattr__(self, "price", float(self.price))
        object.__setattr__(self, "expected_return", float(self.expected_return))

    @property
    def efficiency(self) -> float:
        """Expected return per dollar of share price; the greedy ranking key."""
        return self.expected_return / self.price

    @classmethod
    def from_input(
        cls,
        name: str,
        price: Union[Number, str],
        expected_return: Union[Number, str],
        stock_id: Optional[str] = None,
    ) -> "Stock":
        """
        Build a stock from raw form values, generating a fresh id.

        Raises
        ------
        InvalidInputError
            If the name is blank, the price is not positive, or the return
            is negative / non-numeric.
        """
        if not (name or "").strip():
            raise InvalidInputError(
                "Please enter a valid stock name, positive price, and non-negative return."
            )
        try:
            return cls(
                id=stock_id or uuid.uuid4().hex,
                name=name,
                price=parse_amount(price, "price"),
                expected_return=parse_amount(expected_return, "expected return"),
            )
        except InvalidInputError:
            raise InvalidInputError(
                "Please enter a valid stock name, positive price, and non-negative return."
            ) from None


@dataclass(frozen=True)
class InvestmentResult:
    """How much of one stock the current allocation buys."""
    stock_id: str
    stock_name: str
    fraction: float = 0.0
    invested_amount: float = 0.0
    actual_return: float = 0.0

    @classmethod
    def empty(cls, stock: Stock) -> "InvestmentResult":
        """Zero-valued entry for a stock that receives no investment."""
        return cls(stock_id=stock.id, stock_name=stock.name)


@dataclass(frozen=True)
class Allocation:
    """
    Complete engine state after an allocate / remove / adjust step.

    ``results`` is aligned with ``stocks`` (same order, one entry each).
    ``is_valid`` is False only for the degenerate run produced by a
    non-positive budget or an empty stock list; ``message`` then says why.
    """
    budget: float
    stocks: Tuple[Stock, ...] = field(default_factory=tuple)
    results: Tuple[InvestmentResult, ...] = field(default_factory=tuple)
    total_invested: float = 0.0
    total_return: float = 0.0
    is_valid: bool = True
    message: Optional[str] = None

    @property
    def remaining_budget(self) -> float:
        return self.budget - self.total_invested

    def result_for(self, stock_id: str) -> Optional[InvestmentResult]:
        for result in self.results:
            if result.stock_id == stock_id:
                return result
        return None

    def stock_for(self, stock_id: str) -> Optional[Stock]:
        for stock in self.stocks:
            if stock.id == stock_id:
                return stock
        return None
