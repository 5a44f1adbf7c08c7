# =============================================================
# AICodeExplainer — API Routes
#
# GET    /languages                       — supported convert targets
# POST   /sessions                        — open a session (mount)
# GET    /sessions/{id}                   — current state
# PUT    /sessions/{id}/source            — replace source code
# PUT    /sessions/{id}/language          — replace target language
# POST   /sessions/{id}/actions/{intent}  — explain | convert
# POST   /sessions/{id}/keys              — deliver a key press
# DELETE /sessions/{id}                   — close a session (teardown)
# =============================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from aicodeexplainer.api.dependencies import get_store
from aicodeexplainer.api.models import (
    KeyPress,
    KeyPressResponse,
    LanguagesResponse,
    SessionState,
    SourceCodeUpdate,
    TargetLanguageUpdate,
)
from aicodeexplainer.prompts import TargetLanguage, TaskIntent
from aicodeexplainer.services.errors import SessionNotFoundError, UserInputError
from aicodeexplainer.services.keyboard import KeyEvent
from aicodeexplainer.services.session_store import Session, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter()


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #

def _get_session(session_id: str, store: SessionStore) -> Session:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )


def _to_state(session: Session) -> SessionState:
    return SessionState.from_controller(session.session_id, session.controller.state)


# ------------------------------------------------------------------ #
# GET /languages
# ------------------------------------------------------------------ #

@router.get("/languages", response_model=LanguagesResponse, tags=["languages"])
async def list_languages() -> LanguagesResponse:
    return LanguagesResponse(languages=list(TargetLanguage))


# ------------------------------------------------------------------ #
# Session lifecycle
# ------------------------------------------------------------------ #

@router.post(
    "/sessions",
    response_model=SessionState,
    status_code=status.HTTP_201_CREATED,
    tags=["sessions"],
    summary="Open a session",
)
async def create_session(store: SessionStore = Depends(get_store)) -> SessionState:
    return _to_state(store.create())


@router.get("/sessions/{session_id}", response_model=SessionState, tags=["sessions"])
async def get_session(session_id: str, store: SessionStore = Depends(get_store)) -> SessionState:
    return _to_state(_get_session(session_id, store))


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["sessions"],
    summary="Close a session and detach its shortcut",
)
async def close_session(session_id: str, store: SessionStore = Depends(get_store)) -> Response:
    _get_session(session_id, store)
    store.close(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ------------------------------------------------------------------ #
# Input
# ------------------------------------------------------------------ #

@router.put("/sessions/{session_id}/source", response_model=SessionState, tags=["sessions"])
async def update_source(
    session_id: str,
    request: SourceCodeUpdate,
    store: SessionStore = Depends(get_store),
) -> SessionState:
    session = _get_session(session_id, store)
    session.controller.set_source_code(request.source_code)
    return _to_state(session)


@router.put("/sessions/{session_id}/language", response_model=SessionState, tags=["sessions"])
async def update_language(
    session_id: str,
    request: TargetLanguageUpdate,
    store: SessionStore = Depends(get_store),
) -> SessionState:
    session = _get_session(session_id, store)
    session.controller.set_target_language(request.target_language)
    return _to_state(session)


# ------------------------------------------------------------------ #
# POST /sessions/{id}/actions/{intent}
# ------------------------------------------------------------------ #

@router.post(
    "/sessions/{session_id}/actions/{intent}",
    response_model=SessionState,
    tags=["actions"],
    summary="Explain or convert the session's source code",
    description="Waits for the AI response and returns the settled state.",
)
async def trigger_action(
    session_id: str,
    intent: TaskIntent,
    store: SessionStore = Depends(get_store),
) -> SessionState:
    """
    Status codes:
    - 200 : request settled; output_text holds the response or a safe error message
    - 409 : a request is already in flight for this session
    - 422 : source code is empty
    """
    session = _get_session(session_id, store)
    logger.info("POST /sessions/%s/actions/%s", session_id, intent.value)

    try:
        dispatched = await session.controller.trigger_action(intent)
    except UserInputError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    if not dispatched:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A request is already in progress for this session.",
        )

    return _to_state(session)


# ------------------------------------------------------------------ #
# POST /sessions/{id}/keys
# ------------------------------------------------------------------ #

@router.post("/sessions/{session_id}/keys", response_model=KeyPressResponse, tags=["actions"])
async def press_key(
    session_id: str,
    request: KeyPress,
    store: SessionStore = Depends(get_store),
) -> KeyPressResponse:
    session = _get_session(session_id, store)
    event = KeyEvent(
        key=request.key,
        ctrl_key=request.ctrl_key,
        shift_key=request.shift_key,
        alt_key=request.alt_key,
        meta_key=request.meta_key,
    )

    try:
        handled = await session.keyboard.dispatch(event)
    except UserInputError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return KeyPressResponse(handled=handled, state=_to_state(session))
