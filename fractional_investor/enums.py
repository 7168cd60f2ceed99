from enum import Enum, auto


class ConversationState(Enum):
    """Tracks the current stage of the conversation flow."""
    GREETING = auto()
    COLLECT_BUDGET = auto()
    COLLECT_STOCKS = auto()
    SHOW_RESULTS = auto()
    DONE = auto()


class Intent(Enum):
    """User intent categories detected from input."""
    GREET = auto()
    PROVIDE_BUDGET = auto()
    SET_BUDGET = auto()          # "budget 5000", global, works in any state
    ADD_STOCK = auto()           # add <name> <price> <return>
    ADD_IDEAS = auto()           # add the stocks from the last AI ideas list
    REMOVE_STOCK = auto()
    ADJUST_INVESTMENT = auto()
    CALCULATE = auto()
    LIST_STOCKS = auto()
    LOAD_STOCKS = auto()         # load <csv path>
    STOCK_IDEAS = auto()         # ideas <theme>
    ANALYZE_MARKET = auto()
    PORTFOLIO_ADVICE = auto()
    ASK_AI = auto()              # ask <question>
    SHOW_KEYWORDS = auto()
    RESTART = auto()
    QUIT = auto()
    UNKNOWN = auto()


class AIErrorKind(Enum):
    """Classified failure of an external text-generation call."""
    AUTH = auto()
    QUOTA = auto()
    TRANSPORT = auto()
    EMPTY_RESPONSE = auto()
    NOT_CONFIGURED = auto()
    UNKNOWN = auto()


class ModelTier(Enum):
    """Which configured model a prompt should be sent to."""
    FAST = "fast"   # short, list-style answers
    PRO = "pro"     # longer analysis
