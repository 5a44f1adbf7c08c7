"""
prompts.py
----------
All LLM prompts for AICodeExplainer are maintained here.
Each prompt is a function that takes string inputs and returns the final built prompt.
Templates and the supported language list are module-level globals for easy maintenance.
"""

from enum import Enum


# ── INTENTS ────────────────────────────────────────────────────────────────────

class TaskIntent(str, Enum):
    """The two user actions. Selected by which trigger fired, never stored."""
    EXPLAIN = "explain"
    CONVERT = "convert"


# ── TARGET LANGUAGES ───────────────────────────────────────────────────────────
# The value is the exact text substituted into the convert prompt.

class TargetLanguage(str, Enum):
    PYTHON     = "Python"
    JAVASCRIPT = "JavaScript"
    JAVA       = "Java"
    CPP        = "C++"
    PHP        = "PHP"
    GO         = "Go"


DEFAULT_TARGET_LANGUAGE = TargetLanguage.PYTHON


def parse_target_language(value: "TargetLanguage | str") -> TargetLanguage:
    """
    Resolves a target language from its enum member or display name.

    Raises:
        ValueError: If the value is not one of the supported languages.
    """
    if isinstance(value, TargetLanguage):
        return value
    try:
        return TargetLanguage(value)
    except ValueError:
        supported = ", ".join(lang.value for lang in TargetLanguage)
        raise ValueError(
            f"Unsupported target language: {value!r}. Choose one of: {supported}"
        ) from None


# ── TEMPLATES ──────────────────────────────────────────────────────────────────
# The template text is fixed; changing it changes what the model is asked to do.

EXPLAIN_TEMPLATE = "Explain this code logic line by line in simple terms: \n\n{code}"

CONVERT_TEMPLATE = (
    "Strictly convert this code to {target}. "
    "Only provide the code, no extra text: \n\n{code}"
)


def get_explain_prompt(code: str) -> str:
    """Returns the explain prompt with the source code substituted verbatim."""
    return EXPLAIN_TEMPLATE.format(code=code)


def get_convert_prompt(code: str, target: "TargetLanguage | str") -> str:
    """Returns the convert prompt for the given target language."""
    return CONVERT_TEMPLATE.format(target=parse_target_language(target).value, code=code)


def build_prompt(intent: TaskIntent, code: str, target: "TargetLanguage | str") -> str:
    """
    Builds the prompt for an intent.

    Args:
        intent: Explain or Convert.
        code:   Source code exactly as the user entered it.
        target: Target language, only used for Convert.

    Returns:
        The final prompt string sent to the model.
    """
    if TaskIntent(intent) is TaskIntent.EXPLAIN:
        return get_explain_prompt(code)
    return get_convert_prompt(code, target)
