"""
Tests for key events, bindings and the listener registry.
"""

import asyncio

from aicodeexplainer.services.keyboard import KeyBinding, KeyboardDispatcher, KeyEvent


class TestKeyBinding:

    def test_matches_exact_modifiers(self):
        binding = KeyBinding("Enter", ctrl=True)
        assert binding.matches(KeyEvent("Enter", ctrl_key=True))
        assert not binding.matches(KeyEvent("Enter"))
        assert not binding.matches(KeyEvent("Enter", ctrl_key=True, alt_key=True))
        assert not binding.matches(KeyEvent("Enter", meta_key=True))

    def test_str(self):
        assert str(KeyBinding("Enter", ctrl=True)) == "Ctrl + Enter"
        assert str(KeyBinding("Escape")) == "Escape"


class TestKeyboardDispatcher:

    def test_listener_added_once(self):
        keyboard = KeyboardDispatcher()
        listener = lambda event: None
        keyboard.add_listener(listener)
        keyboard.add_listener(listener)
        assert keyboard.listener_count == 1
        keyboard.remove_listener(listener)
        keyboard.remove_listener(listener)
        assert keyboard.listener_count == 0

    def test_dispatch_awaits_listener_results(self):
        seen = []

        async def handle(event):
            seen.append(event.key)
            event.prevent_default()

        keyboard = KeyboardDispatcher()
        keyboard.add_listener(lambda event: seen.append("sync"))
        keyboard.add_listener(handle)

        assert asyncio.run(keyboard.dispatch(KeyEvent("Enter"))) is True
        assert seen == ["sync", "Enter"]

    def test_unhandled_event(self):
        keyboard = KeyboardDispatcher()
        assert asyncio.run(keyboard.dispatch(KeyEvent("x"))) is False
