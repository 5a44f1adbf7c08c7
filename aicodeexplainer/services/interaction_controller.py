# =============================================================
# AICodeExplainer — Interaction Controller
#
# Holds one user's transient state and turns a trigger into a
# single prompt sent to the injected text generator.
#
#   - set_source_code()     → replace the pasted code
#   - set_target_language() → replace the convert target
#   - trigger_action()      → explain / convert, gated by loading
#   - mount() / unmount()   → Ctrl + Enter shortcut listener
# =============================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Awaitable, Optional

from aicodeexplainer.prompts import (
    DEFAULT_TARGET_LANGUAGE,
    TargetLanguage,
    TaskIntent,
    build_prompt,
    parse_target_language,
)
from aicodeexplainer.services.errors import UserInputError
from aicodeexplainer.services.generation_service import TextGenerator, is_credential_failure
from aicodeexplainer.services.keyboard import KeyBinding, KeyboardDispatcher, KeyEvent

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
# User-facing messages
# ------------------------------------------------------------------ #

EMPTY_INPUT_MESSAGE     = "Please enter some code!"
THINKING_MESSAGE        = "AI is thinking..."
EMPTY_RESPONSE_MESSAGE  = "AI could not generate a response. Try again."
INVALID_KEY_MESSAGE     = "Error: Invalid API Key. Please check your key."
GENERIC_ERROR_MESSAGE   = "Error: Could not get a response from the AI service. Please try again."

EXPLAIN_SHORTCUT = KeyBinding("Enter", ctrl=True)


# ------------------------------------------------------------------ #
# State record + pure transitions
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class ControllerState:
    """
    Everything the UI renders. Replaced wholesale on every transition.

    loading is True strictly while a request is outstanding; output_text
    reflects the most recent completed or in-flight request.
    """
    source_code: str = ""
    target_language: TargetLanguage = DEFAULT_TARGET_LANGUAGE
    output_text: str = ""
    loading: bool = False


def with_source_code(state: ControllerState, text: str) -> ControllerState:
    return replace(state, source_code=text)


def with_target_language(state: ControllerState, language: TargetLanguage | str) -> ControllerState:
    return replace(state, target_language=parse_target_language(language))


def begin_request(state: ControllerState) -> ControllerState:
    return replace(state, loading=True, output_text=THINKING_MESSAGE)


def complete_request(state: ControllerState, text: Optional[str]) -> ControllerState:
    return replace(state, loading=False, output_text=text or EMPTY_RESPONSE_MESSAGE)


def fail_request(state: ControllerState, message: str) -> ControllerState:
    return replace(state, loading=False, output_text=message)


def describe_failure(exc: BaseException) -> str:
    """Map any generation failure to a message that is safe to show the user."""
    if is_credential_failure(exc):
        return INVALID_KEY_MESSAGE
    return GENERIC_ERROR_MESSAGE


# ------------------------------------------------------------------ #
# Cancellation hook
# ------------------------------------------------------------------ #

class CancellationToken:
    """
    Checked once before a request is dispatched. Nothing cancels a
    request that is already running.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


# ------------------------------------------------------------------ #
# InteractionController
# ------------------------------------------------------------------ #

class InteractionController:
    """
    One controller per user session. The text generator is injected, so
    tests substitute a fake and production passes a GenerationService.
    """

    def __init__(
        self,
        generator: TextGenerator,
        state: ControllerState | None = None,
    ):
        self._generator = generator
        self._state = state or ControllerState()
        self._dispatcher: KeyboardDispatcher | None = None

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._dispatcher is not None

    # ------------------------------------------------------------------ #
    # Input
    # ------------------------------------------------------------------ #

    def set_source_code(self, text: str) -> None:
        self._state = with_source_code(self._state, text)

    def set_target_language(self, language: TargetLanguage | str) -> None:
        """
        Raises:
            ValueError: If the language is not one of the supported set.
        """
        self._state = with_target_language(self._state, language)

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #

    async def trigger_action(
        self,
        intent: TaskIntent | str,
        token: CancellationToken | None = None,
    ) -> bool:
        """
        Explain or convert the current source code.

        Args:
            intent: TaskIntent.EXPLAIN or TaskIntent.CONVERT.
            token:  Optional cancellation token, checked before dispatch.

        Returns:
            True if a request was dispatched and has settled, False if the
            trigger was ignored (request already in flight, or cancelled).

        Raises:
            UserInputError: Source code is empty or whitespace only.
        """
        intent = TaskIntent(intent)

        if not self._state.source_code.strip():
            logger.info("Trigger rejected | intent=%s | reason=empty_input", intent.value)
            raise UserInputError(EMPTY_INPUT_MESSAGE)

        if self._state.loading:
            logger.info("Trigger ignored | intent=%s | reason=request_in_flight", intent.value)
            return False

        if token is not None and token.cancelled:
            logger.info("Trigger ignored | intent=%s | reason=cancelled", intent.value)
            return False

        prompt = build_prompt(intent, self._state.source_code, self._state.target_language)
        self._state = begin_request(self._state)

        logger.info(
            "Request dispatched | intent=%s | target=%s | code_len=%d",
            intent.value,
            self._state.target_language.value,
            len(self._state.source_code),
        )
        start = time.perf_counter()

        try:
            text = await self._generator.generate(prompt)
        except Exception as e:
            logger.error("AI ERROR | intent=%s | %s: %s", intent.value, type(e).__name__, e)
            self._state = fail_request(self._state, describe_failure(e))
        else:
            self._state = complete_request(self._state, text)
            logger.info(
                "Request complete | intent=%s | response_len=%d | duration_ms=%.1f",
                intent.value,
                len(text or ""),
                (time.perf_counter() - start) * 1000,
            )
        finally:
            # Covers task cancellation, which is not an Exception.
            if self._state.loading:
                self._state = replace(self._state, loading=False)

        return True

    # ------------------------------------------------------------------ #
    # Keyboard shortcut
    # ------------------------------------------------------------------ #

    def mount(self, dispatcher: KeyboardDispatcher) -> None:
        """Attach the shortcut listener. Remounting moves it, never duplicates it."""
        if self._dispatcher is not None:
            self.unmount()
        dispatcher.add_listener(self._handle_key_press)
        self._dispatcher = dispatcher
        logger.debug("Shortcut attached | binding=%s", EXPLAIN_SHORTCUT)

    def unmount(self) -> None:
        if self._dispatcher is None:
            return
        self._dispatcher.remove_listener(self._handle_key_press)
        self._dispatcher = None
        logger.debug("Shortcut detached | binding=%s", EXPLAIN_SHORTCUT)

    def _handle_key_press(self, event: KeyEvent) -> Optional[Awaitable[bool]]:
        if EXPLAIN_SHORTCUT.matches(event) and self._state.source_code and not self._state.loading:
            event.prevent_default()
            return self.trigger_action(TaskIntent.EXPLAIN)
        return None
