from dataclasses import dataclass, field
from typing import Optional, List

from fractional_investor.allocation_engine import AllocationEngine
from fractional_investor.enums import ConversationState
from fractional_investor.models import Allocation, Stock


@dataclass
class SessionContext:
    """
    Holds all state gathered during a single conversation session.
    Tracks the conversation stage, the user's budget and stocks, the
    current allocation and the last AI reply.
    """
    state: ConversationState = ConversationState.GREETING

    budget: Optional[float] = None

    # Candidate stocks in the order the user added them
    stocks: List[Stock] = field(default_factory=list)

    # Last allocation (greedy run, removal, or manual adjustment)
    allocation: Optional[Allocation] = None

    # Last ideas reply, kept so 'add ideas' can import it
    last_ideas: Optional[str] = None

    def is_complete(self) -> bool:
        """Return True when the conversation has fully finished."""
        return self.state == ConversationState.DONE

    def find_stock(self, target: str) -> Optional[Stock]:
        """
        Resolve a user reference to a stock: 1-based list position,
        case-insensitive name, or id.
        """
        target = target.strip()
        if target.isdigit():
            index = int(target) - 1
            return self.stocks[index] if 0 <= index < len(self.stocks) else None
        lowered = target.lower()
        for stock in self.stocks:
            if stock.name.lower() == lowered or stock.id == target:
                return stock
        return None

    def sync_allocation(self) -> None:
        """Carry stock edits made since the last run into the allocation."""
        if self.allocation is not None:
            self.allocation = AllocationEngine.align(self.allocation, self.stocks)

    def reset(self):
        """Reset the session to its initial state."""
        self.__init__()
