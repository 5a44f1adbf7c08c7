# =============================================================
# AICodeExplainer — Generation Service
# Uses google.genai (new SDK) async client for single-turn text
# generation. The API key comes from GeminiConfig and is passed
# explicitly; there is no module-level client.
# =============================================================

from __future__ import annotations

import logging
import time
from typing import Protocol

from google import genai
from google.genai import errors, types

from aicodeexplainer.config.settings import GeminiConfig
from aicodeexplainer.services.errors import CredentialError, TransportOrServiceError

logger = logging.getLogger(__name__)

# HTTP codes Gemini uses for a rejected or inactive key
_CREDENTIAL_STATUS_CODES = (401, 403)


class TextGenerator(Protocol):
    """Anything that turns one prompt into text. Injected into the controller."""

    async def generate(self, prompt: str) -> str: ...


def is_credential_failure(exc: BaseException) -> bool:
    """True if the failure indicates an invalid, missing or inactive API key."""
    if isinstance(exc, CredentialError):
        return True
    if isinstance(exc, errors.APIError) and exc.code in _CREDENTIAL_STATUS_CODES:
        return True
    return "API key" in str(exc)


class GenerationService:
    """
    Sends a single user turn to Gemini and returns the raw response text.

    Usage:
        svc = GenerationService(config.gemini)
        svc.init()
        text = await svc.generate("Explain this code ...")
    """

    def __init__(self, config: GeminiConfig):
        self._config = config
        self._client: genai.Client | None = None
        self._ready = False

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def init(self) -> None:
        """
        Mark the service ready. The Gemini client itself is built on the
        first call so that a missing key is reported as a failed request
        rather than a failed startup.
        """
        self._ready = True
        logger.info(
            "GenerationService ready | model=%s | api_version=%s | key_configured=%s",
            self._config.model,
            self._config.api_version,
            self._config.is_configured(),
        )

    @property
    def model(self) -> str:
        return self._config.model

    # ------------------------------------------------------------------ #
    # Core API
    # ------------------------------------------------------------------ #

    async def generate(self, prompt: str) -> str:
        """
        Generate text for a single prompt.

        Args:
            prompt: Final prompt string built from a template.

        Returns:
            The model's text, or "" when the response carries none.

        Raises:
            CredentialError:         Key missing or rejected by the service.
            TransportOrServiceError: Any other failure of the call.
        """
        self._check_ready()
        client = self._get_client()

        logger.debug("Generating content | model=%s | prompt_len=%d", self._config.model, len(prompt))
        start = time.perf_counter()

        try:
            response = await client.aio.models.generate_content(
                model=self._config.model,
                contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
            )
        except errors.APIError as e:
            if is_credential_failure(e):
                raise CredentialError(str(e)) from e
            raise TransportOrServiceError(str(e)) from e
        except Exception as e:
            raise TransportOrServiceError(str(e)) from e

        text = response.text or ""
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Content generated | model=%s | response_len=%d | latency_ms=%.1f",
            self._config.model,
            len(text),
            elapsed_ms,
        )
        return text

    # ------------------------------------------------------------------ #
    # Internal
    # ------------------------------------------------------------------ #

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._config.is_configured():
                raise CredentialError("GEMINI_API_KEY is not configured.")
            self._client = genai.Client(
                api_key=self._config.api_key,
                http_options=types.HttpOptions(api_version=self._config.api_version),
            )
        return self._client

    def _check_ready(self) -> None:
        if not self._ready:
            raise RuntimeError(
                "GenerationService not initialised. Call init() first."
            )
