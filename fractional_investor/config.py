"""
fractional_investor/config.py
-----------------------------
Shared configuration: tunable numeric constants plus runtime settings
loaded from the environment.

Keeping these separate from fractional_investor/constants.py (which holds
UI/command constants) ensures a clean boundary: this file owns parameters
that change behaviour, not presentation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Floating-point tolerance
# ---------------------------------------------------------------------------
# Budget comparisons use this slack so that an adjustment landing exactly on
# the remaining budget is not rejected because of accumulated rounding.

BUDGET_TOLERANCE: float = 1e-9

# ---------------------------------------------------------------------------
# Session defaults
# ---------------------------------------------------------------------------

DEFAULT_BUDGET: float = 10_000.0

# ---------------------------------------------------------------------------
# Gemini text generation
# ---------------------------------------------------------------------------
# The fast model answers short list-style prompts (stock ideas, free-form
# questions); the pro model is used for the longer market and portfolio
# analyses.

DEFAULT_FAST_MODEL: str = "gemini-2.5-flash"
DEFAULT_PRO_MODEL: str = "gemini-2.5-pro"
MAX_OUTPUT_TOKENS: int = 1024
DEFAULT_REQUEST_TIMEOUT: float = 60.0   # seconds


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from environment variables."""
    api_key: Optional[str] = None
    fast_model: str = DEFAULT_FAST_MODEL
    pro_model: str = DEFAULT_PRO_MODEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_output_tokens: int = MAX_OUTPUT_TOKENS
    default_budget: float = DEFAULT_BUDGET
    log_level: str = "WARNING"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number (got {raw!r}).")


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Build :class:`Settings` from the process environment.

    A ``.env`` file (current directory, or *dotenv_path*) is loaded first;
    variables already set in the environment take precedence over it.

    Recognised variables::

        GEMINI_API_KEY        API key (falls back to API_KEY)
        FSI_FAST_MODEL        model for ideas / free-form questions
        FSI_PRO_MODEL         model for market and portfolio analysis
        FSI_REQUEST_TIMEOUT   per-request timeout in seconds
        FSI_DEFAULT_BUDGET    budget pre-filled at session start
        FSI_LOG_LEVEL         logging level name
    """
    load_dotenv(dotenv_path)

    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
        fast_model=os.getenv("FSI_FAST_MODEL", DEFAULT_FAST_MODEL),
        pro_model=os.getenv("FSI_PRO_MODEL", DEFAULT_PRO_MODEL),
        request_timeout=_env_float("FSI_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        default_budget=_env_float("FSI_DEFAULT_BUDGET", DEFAULT_BUDGET),
        log_level=os.getenv("FSI_LOG_LEVEL", "WARNING").upper(),
    )
