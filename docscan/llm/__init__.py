"""LLM (Large Language Model) integration package.

OpenRouter-compatible client helpers and grammar correction of OCR text.
"""

from .client import (
    CONFIG_PATH,
    get_picked_model,
    get_openrouter_client,
    chat_completion,
    check_model_health,
)
from .grammar import GrammarCorrectionError, correct_grammar

__all__ = [
    "CONFIG_PATH",
    "get_picked_model",
    "get_openrouter_client",
    "chat_completion",
    "check_model_health",
    "GrammarCorrectionError",
    "correct_grammar",
]
