# =============================================================
# AICodeExplainer — API Request / Response Models
# Pydantic models for all FastAPI endpoints
# =============================================================

from __future__ import annotations

from pydantic import BaseModel, Field

from aicodeexplainer.prompts import DEFAULT_TARGET_LANGUAGE, TargetLanguage
from aicodeexplainer.services.interaction_controller import ControllerState


# ------------------------------------------------------------------ #
# Session state — returned by every /sessions endpoint
# ------------------------------------------------------------------ #

class SessionState(BaseModel):
    session_id:      str
    source_code:     str            = Field(description="Code currently in the editor")
    target_language: TargetLanguage = Field(description="Language used by the convert action")
    output_text:     str            = Field(description="Last response, placeholder or error message")
    loading:         bool           = Field(description="True while a request is in flight")

    @classmethod
    def from_controller(cls, session_id: str, state: ControllerState) -> "SessionState":
        return cls(
            session_id      = session_id,
            source_code     = state.source_code,
            target_language = state.target_language,
            output_text     = state.output_text,
            loading         = state.loading,
        )


# ------------------------------------------------------------------ #
# Inputs
# ------------------------------------------------------------------ #

class SourceCodeUpdate(BaseModel):
    source_code: str = Field(description="Replaces the editor contents; not validated")

    model_config = {
        "json_schema_extra": {
            "example": {"source_code": "print(1)"}
        }
    }


class TargetLanguageUpdate(BaseModel):
    target_language: TargetLanguage

    model_config = {
        "json_schema_extra": {
            "example": {"target_language": "Go"}
        }
    }


class KeyPress(BaseModel):
    """Mirrors the DOM keydown fields the shortcut looks at."""
    key:       str  = Field(description="Key name, e.g. 'Enter'")
    ctrl_key:  bool = False
    shift_key: bool = False
    alt_key:   bool = False
    meta_key:  bool = False

    model_config = {
        "json_schema_extra": {
            "example": {"key": "Enter", "ctrl_key": True}
        }
    }


class KeyPressResponse(BaseModel):
    handled: bool = Field(description="True if a shortcut consumed the key press")
    state:   SessionState


# ------------------------------------------------------------------ #
# Misc
# ------------------------------------------------------------------ #

class LanguagesResponse(BaseModel):
    languages: list[TargetLanguage]
    default:   TargetLanguage = DEFAULT_TARGET_LANGUAGE
