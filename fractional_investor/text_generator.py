"""
fractional_investor/text_generator.py
-------------------------------------
The one external capability the application consumes: "given a text
prompt, return a text response or fail".

``TextGenerator`` is the structural interface; ``GeminiTextGenerator`` is
the production adapter over ``google-generativeai``. All failures leave
this module as :class:`TextGenerationError` with a classified
:class:`AIErrorKind`, so callers never see raw transport exceptions.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from fractional_investor.config import Settings
from fractional_investor.enums import AIErrorKind, ModelTier
from fractional_investor.exceptions import TextGenerationError

logger = logging.getLogger(__name__)


USER_MESSAGES: Dict[AIErrorKind, str] = {
    AIErrorKind.AUTH: "API key might be invalid or unauthorized. Please check your setup.",
    AIErrorKind.QUOTA: (
        "Gemini is rate limiting requests or the quota is exhausted. "
        "Please wait a moment and try again."
    ),
    AIErrorKind.TRANSPORT: (
        "Could not reach the Gemini service. "
        "Please check your network connection and try again."
    ),
    AIErrorKind.EMPTY_RESPONSE: "Gemini returned an empty response. Try rephrasing your request.",
    AIErrorKind.NOT_CONFIGURED: (
        "Gemini is not configured. Set GEMINI_API_KEY in your environment or .env file."
    ),
    AIErrorKind.UNKNOWN: "Failed to get a response from Gemini. Please try again later.",
}


class TextGenerator(Protocol):
    """Structural interface for prompt → text services."""

    def generate_text(self, prompt: str, tier: ModelTier = ModelTier.FAST) -> str:
        """Return the model's reply, or raise :class:`TextGenerationError`."""
        ...


def classify_failure(error: BaseException) -> AIErrorKind:
    """
    Map an exception raised during a Gemini call to an :class:`AIErrorKind`.

    Typed ``google.api_core`` errors are checked first; the message text is
    used as a fallback for errors the SDK surfaces untyped.
    """
    if isinstance(error, TextGenerationError):
        return error.kind

    if isinstance(error, (google_exceptions.Unauthenticated,
                          google_exceptions.PermissionDenied,
                          google_exceptions.NotFound)):
        return AIErrorKind.AUTH
    if isinstance(error, (google_exceptions.ResourceExhausted,
                          google_exceptions.TooManyRequests)):
        return AIErrorKind.QUOTA
    if isinstance(error, (google_exceptions.ServiceUnavailable,
                          google_exceptions.DeadlineExceeded,
                          google_exceptions.GatewayTimeout,
                          google_exceptions.RetryError,
                          ConnectionError,
                          TimeoutError)):
        return AIErrorKind.TRANSPORT

    text = str(error).lower()
    if "api key" in text or "requested entity was not found" in text or "unauthorized" in text:
        return AIErrorKind.AUTH
    if "429" in text or "quota" in text or "rate limit" in text:
        return AIErrorKind.QUOTA
    if "timed out" in text or "timeout" in text or "connection" in text:
        return AIErrorKind.TRANSPORT
    return AIErrorKind.UNKNOWN


class GeminiTextGenerator:
    """
    ``TextGenerator`` backed by Google Gemini.

    Parameters
    ----------
    settings : Settings
        Supplies the API key, the fast/pro model names, the output token
        limit and the request timeout.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        if settings.api_key:
            genai.configure(api_key=settings.api_key)

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.api_key)

    def model_name(self, tier: ModelTier) -> str:
        if tier is ModelTier.PRO:
            return self._settings.pro_model
        return self._settings.fast_model

    def generate_text(self, prompt: str, tier: ModelTier = ModelTier.FAST) -> str:
        if not self.is_configured:
            raise TextGenerationError(
                AIErrorKind.NOT_CONFIGURED, USER_MESSAGES[AIErrorKind.NOT_CONFIGURED]
            )

        model_name = self.model_name(tier)
        logger.info("Sending %d-char prompt to %s", len(prompt), model_name)

        try:
            model = genai.GenerativeModel(
                model_name=model_name,
                generation_config=genai.GenerationConfig(
                    max_output_tokens=self._settings.max_output_tokens,
                ),
            )
            response = model.generate_content(
                prompt,
                request_options={"timeout": self._settings.request_timeout},
            )
        except Exception as e:
            kind = classify_failure(e)
            logger.warning("Gemini call to %s failed (%s): %s", model_name, kind.name, e)
            raise TextGenerationError(kind, USER_MESSAGES[kind]) from e

        text = self._extract_text(response)
        if not text:
            raise TextGenerationError(
                AIErrorKind.EMPTY_RESPONSE, USER_MESSAGES[AIErrorKind.EMPTY_RESPONSE]
            )
        return text

    @staticmethod
    def _extract_text(response) -> Optional[str]:
        # ``response.text`` raises ValueError when the candidate was blocked
        # or carries no text parts.
        try:
            text = response.text
        except ValueError:
            logger.warning("Gemini response carried no text parts")
            return None
        return text.strip() if text else None
