"""
fractional_investor/constants.py
--------------------------------
Command/UI constants shared across modules.

Placing these here keeps the parsing layer (IntentParser) and the
formatting layer (ResponseGenerator) aligned on a single source of truth
without creating circular imports.
"""

from __future__ import annotations

from fractional_investor.enums import Intent


# ---------------------------------------------------------------------------
# COMMAND_MAP: keyword → intent mappings.
# A phrase matches when the input equals it or starts with it followed by a
# space. Order matters: "add ideas" must be checked before "add", and
# "set budget" before "set".
# ---------------------------------------------------------------------------

COMMAND_MAP: dict[Intent, list[str]] = {
    Intent.QUIT:              ["exit", "quit", "bye", "goodbye"],
    Intent.RESTART:           ["restart", "reset", "start over", "new session"],
    Intent.SHOW_KEYWORDS:     ["help", "keywords", "commands", "what can you do"],
    Intent.ADD_IDEAS:         ["add ideas", "use ideas", "import ideas"],
    Intent.ADD_STOCK:         ["add"],
    Intent.REMOVE_STOCK:      ["remove", "delete", "drop"],
    Intent.SET_BUDGET:        ["budget", "set budget"],
    Intent.ADJUST_INVESTMENT: ["adjust", "set", "invest"],
    Intent.CALCULATE:         ["calculate", "calc", "allocate", "optimize", "optimise",
                               "compute", "done"],
    Intent.LIST_STOCKS:       ["list", "show", "stocks", "results", "portfolio"],
    Intent.LOAD_STOCKS:       ["load", "import"],
    Intent.STOCK_IDEAS:       ["ideas", "idea", "suggest"],
    Intent.ANALYZE_MARKET:    ["analyze", "analyse", "market"],
    Intent.PORTFOLIO_ADVICE:  ["advice", "advise"],
    Intent.ASK_AI:            ["ask", "gemini"],
}

GREET_PHRASES = {"hi", "hello", "hey", "start"}

ACCEPT_PHRASES = {"yes", "y", "ok", "default", "sure", ""}


# ---------------------------------------------------------------------------
# Help text: one line per command, rendered by ResponseGenerator
# ---------------------------------------------------------------------------

COMMAND_HELP: list[tuple[str, str]] = [
    ("budget <amount>",              "set the total budget (e.g. 'budget 10k')"),
    ("add <name> <price> <return%>", "add a candidate stock (e.g. 'add ACME 120 8')"),
    ("remove <name|#>",              "remove a stock and re-run the allocation"),
    ("calculate",                    "compute the greedy allocation"),
    ("adjust <name|#> <amount>",     "manually set the dollars invested in one stock"),
    ("list",                         "show stocks and the current allocation"),
    ("load <file.csv>",              "import stocks from a CSV (name, price, expected_return)"),
    ("ideas <theme>",                "ask Gemini for fictional stock ideas"),
    ("add ideas",                    "add the stocks from the last ideas reply"),
    ("analyze",                      "Gemini market outlook for your stocks"),
    ("advice",                       "Gemini review of your current allocation"),
    ("ask <question>",               "ask Gemini anything"),
    ("restart",                      "start a new session"),
    ("exit",                         "quit"),
]
