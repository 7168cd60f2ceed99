import re
from typing import Optional, Tuple

from fractional_investor.constants import COMMAND_MAP, GREET_PHRASES
from fractional_investor.enums import Intent


# "<name> <price> <return>[%]"; separators may be spaces or commas.
_STOCK_FIELDS_RE = re.compile(
    r"^(?P<name>.+?)[\s,]+\$?(?P<price>-?(?:\d[\d,]*\.?\d*|\.\d+))"
    r"[\s,]+(?P<ret>-?(?:\d+\.?\d*|\.\d+))\s*%?\s*$"
)

# "<target> [to|=] <amount>"
_ADJUST_RE = re.compile(
    r"^(?P<target>.+?)(?:\s+to\s+|\s*=\s*|\s+)(?P<amount>\S+)\s*$",
    re.IGNORECASE,
)

_BUDGET_RE = re.compile(r"^\$?\s*(\d[\d,]*\.?\d*|\.\d+)\s*(k|m)?$", re.IGNORECASE)


class IntentParser:
    """
    Parses raw user input into structured intents and extracted values.

    Detection priority (checked in order):
    1. COMMAND_MAP (quit, help, add, remove, adjust …)
    2. Greeting
    3. Bare "<name> <price> <return>" line → ADD_STOCK
    4. Bare amount → PROVIDE_BUDGET
    5. UNKNOWN fallback
    """

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def parse_intent(self, text: str) -> Intent:
        """Return the most likely Intent for *text*."""
        normalized = text.strip().lower()

        command = self._command_phrase(normalized)
        if command is not None:
            return command[0]

        if normalized in GREET_PHRASES:
            return Intent.GREET

        # Stock fields before budget: "ACME 120 8" also contains a number.
        if self.extract_stock_fields(text) is not None:
            return Intent.ADD_STOCK
        if self.extract_budget(text) is not None:
            return Intent.PROVIDE_BUDGET

        return Intent.UNKNOWN

    # ------------------------------------------------------------------ #
    #  Value extractors
    # ------------------------------------------------------------------ #

    def extract_argument(self, text: str) -> str:
        """
        Return *text* with its leading command phrase removed.

        e.g. "ideas green energy" → "green energy",  "remove ACME" → "ACME"
        """
        stripped = text.strip()
        match = self._command_phrase(stripped.lower())
        if match is None:
            return stripped
        return stripped[len(match[1]):].strip()

    def extract_budget(self, text: str) -> Optional[float]:
        """
        Extract a budget amount (supports ``$``, thousands separators and
        k/m suffixes). Returns None when *text* is not a plain amount.
        """
        match = _BUDGET_RE.match(self.extract_argument(text))
        if not match:
            return None
        raw = float(match.group(1).replace(",", ""))
        suffix = (match.group(2) or "").lower()
        if suffix == "k":
            raw *= 1_000
        elif suffix == "m":
            raw *= 1_000_000
        return raw

    def extract_stock_fields(self, text: str) -> Optional[Tuple[str, str, str]]:
        """
        Split "[add] <name> <price> <return>" into raw ``(name, price, return)``
        strings. Validation is left to :meth:`Stock.from_input`.
        """
        candidate = text.strip()
        if candidate.lower().startswith("add "):
            candidate = candidate[4:].strip()
        match = _STOCK_FIELDS_RE.match(candidate)
        if not match:
            return None
        return match.group("name").strip(" ,"), match.group("price"), match.group("ret")

    def extract_adjustment(self, text: str) -> Optional[Tuple[str, str]]:
        """
        Split "adjust <name|#> [to] <amount>" into ``(target, amount_text)``.

        The amount is returned unparsed; the engine validates it.
        """
        argument = self.extract_argument(text)
        match = _ADJUST_RE.match(argument)
        if not match:
            return None
        return match.group("target").strip(), match.group("amount")

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _command_phrase(normalized: str) -> Optional[Tuple[Intent, str]]:
        for intent, phrases in COMMAND_MAP.items():
            for phrase in phrases:
                if normalized == phrase or normalized.startswith(phrase + " "):
                    return intent, phrase
        return None
