# =============================================================
# AICodeExplainer — FastAPI Dependencies
# Provides the SessionStore instance to all route handlers
# =============================================================

from aicodeexplainer.services.session_store import SessionStore

# Singleton store instance — set once at startup via lifespan
_store: SessionStore | None = None


def set_store(store: SessionStore | None) -> None:
    """Called at startup to register the store, and at shutdown to clear it."""
    global _store
    _store = store


def get_store() -> SessionStore:
    """FastAPI dependency — inject into route handlers."""
    if _store is None:
        raise RuntimeError("SessionStore not initialised.")
    return _store
