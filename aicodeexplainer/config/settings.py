# =============================================================
# AICodeExplainer — Configuration
# All secrets loaded from environment / .env file
# =============================================================

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str
    model: str
    api_version: str

    def is_configured(self) -> bool:
        """Check if an API key is provided."""
        return bool(self.api_key and self.api_key.strip())


@dataclass(frozen=True)
class AppConfig:
    gemini: GeminiConfig

    log_level: str
    cors_origins: tuple[str, ...]

    # Seconds a browser session may sit unused before it is closed (0 = never)
    session_idle_ttl: Optional[float]


def _log_level(value: str) -> str:
    # Unknown names fall back to INFO rather than breaking logging.basicConfig at import.
    level = value.strip().upper()
    return level if level in LOG_LEVELS else "INFO"


def load_config() -> AppConfig:
    # A missing key is not fatal here; the first generation call reports it.
    idle_ttl = float(os.getenv("CODE_EXPLAINER_SESSION_TTL", "3600"))
    return AppConfig(
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            api_version=os.getenv("GEMINI_API_VERSION", "v1"),
        ),
        log_level=_log_level(os.getenv("CODE_EXPLAINER_LOG_LEVEL", "INFO")),
        cors_origins=tuple(
            origin.strip()
            for origin in os.getenv("CODE_EXPLAINER_CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ),
        session_idle_ttl=idle_ttl if idle_ttl > 0 else None,
    )
