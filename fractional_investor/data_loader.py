from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from fractional_investor.exceptions import InvalidInputError
from fractional_investor.models import Stock


# Accepted header spellings → canonical column name
_COLUMN_ALIASES = {
    "name": "name",
    "stock": "name",
    "stock name": "name",
    "price": "price",
    "price per share": "price",
    "expected_return": "expected_return",
    "expected return": "expected_return",
    "expectedreturn": "expected_return",
    "return": "expected_return",
}

_REQUIRED = {"name", "price", "expected_return"}


class DataLoader:
    """
    Imports candidate stocks from a CSV file.

    File layout::

        name,price,expected_return
        ACME,120.50,8
        Globex,45,12.5

    Headers are matched case-insensitively; ``return`` and
    ``expected return`` are accepted for the return column. Every row goes
    through :meth:`Stock.from_input`, so the same validation as manual entry
    applies.
    """

    def load_stocks(self, path: str | Path) -> List[Stock]:
        """
        Return the stocks listed in the CSV at *path*, in file order.

        Raises
        ------
        FileNotFoundError
            If *path* does not exist.
        InvalidInputError
            If a required column is missing, the file has no rows, or a row
            holds an invalid name / price / return.
        """
        path = Path(path).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"No CSV file found at {path}")

        try:
            df = pd.read_csv(path, skipinitialspace=True)
        except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
            raise InvalidInputError(f"Could not read {path.name}: {e}") from e

        df = df.rename(columns=lambda c: _COLUMN_ALIASES.get(str(c).strip().lower(), str(c)))
        missing = _REQUIRED - set(df.columns)
        if missing:
            raise InvalidInputError(
                f"{path.name} is missing columns: {', '.join(sorted(missing))}"
            )
        if df.empty:
            raise InvalidInputError(f"{path.name} contains no stocks.")

        stocks: List[Stock] = []
        # Row numbers in messages count the header as line 1.
        rows = df[["name", "price", "expected_return"]].itertuples(index=False)
        for line_no, row in enumerate(rows, start=2):
            name = "" if pd.isna(row.name) else str(row.name)
            try:
                stocks.append(Stock.from_input(name, row.price, row.expected_return))
            except InvalidInputError as e:
                raise InvalidInputError(f"{path.name}, line {line_no}: {e}") from e
        return stocks
