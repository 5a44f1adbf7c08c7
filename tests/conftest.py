"""
Shared fixtures: a fake text generator standing in for Gemini, and a
TestClient wired to an in-memory SessionStore.
"""

import asyncio
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from aicodeexplainer.api.dependencies import get_store
from aicodeexplainer.main import app
from aicodeexplainer.services.interaction_controller import InteractionController
from aicodeexplainer.services.session_store import SessionStore


class FakeGenerator:
    """Records every prompt and returns a canned response or raises a canned error."""

    def __init__(self, response: Optional[str] = "Hello", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []
        self.gate: Optional[asyncio.Event] = None
        self.watch: Optional[InteractionController] = None
        self.loading_seen: list[bool] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.watch is not None:
            self.loading_seen.append(self.watch.state.loading)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def controller(generator):
    ctrl = InteractionController(generator)
    generator.watch = ctrl
    return ctrl


@pytest.fixture
def store(generator):
    return SessionStore(generator)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
