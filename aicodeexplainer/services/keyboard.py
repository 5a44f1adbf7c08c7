# =============================================================
# AICodeExplainer — Keyboard Events
# A per-session listener registry standing in for the browser
# window: listeners are attached on mount, detached on teardown.
# =============================================================

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

KeyListener = Callable[["KeyEvent"], Optional[Awaitable[object]]]


@dataclass
class KeyEvent:
    """A single key press, mirroring the fields of a DOM keydown event."""
    key: str
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    meta_key: bool = False
    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(frozen=True)
class KeyBinding:
    """A key plus required modifiers. Extra modifiers do not match."""
    key: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False

    def matches(self, event: KeyEvent) -> bool:
        return (
            event.key == self.key
            and event.ctrl_key == self.ctrl
            and event.shift_key == self.shift
            and event.alt_key == self.alt
            and event.meta_key == self.meta
        )

    def __str__(self) -> str:
        mods = [name for name, on in (("Ctrl", self.ctrl), ("Shift", self.shift),
                                      ("Alt", self.alt), ("Meta", self.meta)) if on]
        return " + ".join(mods + [self.key])


class KeyboardDispatcher:
    """
    Holds key listeners and delivers events to them in registration order.

    A listener may return an awaitable (e.g. a triggered request); dispatch
    awaits it before moving on.
    """

    def __init__(self) -> None:
        self._listeners: list[KeyListener] = []

    def add_listener(self, listener: KeyListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def dispatch(self, event: KeyEvent) -> bool:
        """
        Deliver an event to every listener.

        Returns:
            True if any listener called prevent_default() on the event.
        """
        logger.debug("Dispatching key event | key=%s | listeners=%d", event.key, len(self._listeners))
        for listener in list(self._listeners):
            result = listener(event)
            if inspect.isawaitable(result):
                await result
        return event.default_prevented
