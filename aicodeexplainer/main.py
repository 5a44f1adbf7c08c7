# =============================================================
# AICodeExplainer — FastAPI Application
# Entry point: uvicorn aicodeexplainer.main:app --reload
# =============================================================

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aicodeexplainer import __version__
from aicodeexplainer.api.dependencies import set_store
from aicodeexplainer.api.routes import router
from aicodeexplainer.config.settings import load_config
from aicodeexplainer.services.generation_service import GenerationService
from aicodeexplainer.services.session_store import SessionStore

cfg = load_config()

# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #
logging.basicConfig(
    level=cfg.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
# Lifespan — startup & shutdown
# ------------------------------------------------------------------ #
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the Gemini client wrapper and the session store on startup.
    Close every open session on exit.
    """
    logger.info("AICodeExplainer starting up...")
    start = time.perf_counter()

    generation_svc = GenerationService(cfg.gemini)
    generation_svc.init()

    store = SessionStore(generation_svc, idle_ttl=cfg.session_idle_ttl)
    set_store(store)

    elapsed = (time.perf_counter() - start) * 1000
    logger.info("AICodeExplainer ready | startup_ms=%.1f", elapsed)

    yield  # app is running

    logger.info("AICodeExplainer shutting down | open_sessions=%d", len(store))
    store.close_all()
    set_store(None)


# ------------------------------------------------------------------ #
# App
# ------------------------------------------------------------------ #
app = FastAPI(
    title       = "AICodeExplainer API",
    description = "Your AI-powered Code Explainer & Converter",
    version     = __version__,
    lifespan    = lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(cfg.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


# ------------------------------------------------------------------ #
# Health check
# ------------------------------------------------------------------ #
@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "service": "aicodeexplainer"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "aicodeexplainer.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
