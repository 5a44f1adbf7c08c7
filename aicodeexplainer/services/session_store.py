# =============================================================
# AICodeExplainer — Session Store
# One InteractionController per browser session, kept in memory.
# Creating a session mounts its shortcut; closing it tears down.
# Sessions idle for longer than idle_ttl are closed on the next
# create(), since browsers never say goodbye.
# =============================================================

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from aicodeexplainer.services.errors import SessionNotFoundError
from aicodeexplainer.services.generation_service import TextGenerator
from aicodeexplainer.services.interaction_controller import InteractionController
from aicodeexplainer.services.keyboard import KeyboardDispatcher

logger = logging.getLogger(__name__)


@dataclass
class Session:
    session_id: str
    controller: InteractionController
    keyboard: KeyboardDispatcher = field(default_factory=KeyboardDispatcher)
    last_seen: float = 0.0


class SessionStore:
    """
    In-memory session registry.
    In production this should be replaced with sticky routing or an
    external store; state is lost on restart.

    Args:
        generator: Text generator shared by every controller.
        idle_ttl:  Seconds without access after which a session is closed.
                   None keeps sessions until close() or shutdown.
        clock:     Monotonic time source.
    """

    def __init__(
        self,
        generator: TextGenerator,
        idle_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._generator = generator
        self._idle_ttl = idle_ttl
        self._clock = clock
        self._sessions: Dict[str, Session] = {}

    @property
    def generator(self) -> TextGenerator:
        return self._generator

    def create(self) -> Session:
        self.evict_idle()
        session_id = str(uuid.uuid4())
        session = Session(
            session_id=session_id,
            controller=InteractionController(self._generator),
            last_seen=self._clock(),
        )
        session.controller.mount(session.keyboard)
        self._sessions[session_id] = session
        logger.info("Session created | session_id=%s | active=%d", session_id, len(self._sessions))
        return session

    def get(self, session_id: str) -> Session:
        """
        Raises:
            SessionNotFoundError: If no session has this id.
        """
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        session.last_seen = self._clock()
        return session

    def close(self, session_id: str) -> None:
        session = self.get(session_id)
        session.controller.unmount()
        del self._sessions[session_id]
        logger.info("Session closed | session_id=%s | active=%d", session_id, len(self._sessions))

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def evict_idle(self) -> int:
        """
        Close sessions idle longer than idle_ttl. A session with a request
        in flight is never evicted.

        Returns:
            Number of sessions closed.
        """
        if self._idle_ttl is None:
            return 0

        now = self._clock()
        expired = [
            s.session_id for s in self._sessions.values()
            if now - s.last_seen > self._idle_ttl and not s.controller.state.loading
        ]
        for session_id in expired:
            self.close(session_id)
        if expired:
            logger.info("Idle sessions evicted | count=%d | active=%d", len(expired), len(self._sessions))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
