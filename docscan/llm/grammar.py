"""Grammar correction of extracted text through a chat completion model.

The prompt can be overridden by a ``grammar_correct`` entry in
``config/prompts.json``; placeholders are ``{language}`` and ``{text}``.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Dict

from openai import OpenAI

from .client import chat_completion
from .language_detector import detect_source_language, map_lang_code_to_english_name

logger = logging.getLogger(__name__)

_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
PROMPTS_PATH = os.path.join(_ROOT_DIR, "config", "prompts.json")

_DEFAULT_PROMPTS = {
    "grammar_correct": (
        "You are a careful proofreader. The following {language} text was extracted from a scanned "
        "document with OCR. Correct grammar, spelling and punctuation. Keep the meaning, the wording "
        "and the line breaks; do not add, summarize or translate anything. "
        "Return only the corrected text without comments or code blocks.\n\n"
        "Text:\n{text}"
    ),
}


class GrammarCorrectionError(RuntimeError):
    """Raised when grammar correction cannot produce a result."""


def _load_prompts(path: str = PROMPTS_PATH) -> Dict[str, str]:
    prompts = dict(_DEFAULT_PROMPTS)
    if not os.path.exists(path):
        return prompts
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable prompts file %s: %s", path, e)
        return prompts
    if isinstance(data, dict):
        prompts.update({str(k): v for k, v in data.items() if isinstance(v, str)})
    return prompts


def _fill_prompt_template(tmpl: str, **values: str) -> str:
    """Fill only the placeholders we provide; other braces stay literal."""
    safe = tmpl.replace("{", "{{").replace("}", "}}")
    for key in values:
        safe = safe.replace("{{" + key + "}}", "{" + key + "}")
    return safe.format(**values)


def _strip_code_fence(response_text: str) -> str:
    s = (response_text or "").strip()
    if s.startswith("```") and s.endswith("```") and len(s) > 6:
        s = s[3:-3]
        first_line, _, rest = s.partition("\n")
        if rest and (not first_line.strip() or first_line.strip().isalpha()):
            s = rest
    return s.strip()


def build_grammar_prompt(text: str, prompts_path: str = PROMPTS_PATH) -> str:
    code, _prob = detect_source_language([text])
    language = map_lang_code_to_english_name(code) or "OCR"
    tmpl = _load_prompts(prompts_path)["grammar_correct"]
    return _fill_prompt_template(tmpl, language=language, text=text)


def correct_grammar(
    client: OpenAI,
    model: str,
    text: str,
    timeout: float | None = 30.0,
) -> str:
    """Return a grammar-corrected version of ``text``.

    Doxygen:
    - @param client: OpenAI-compatible client.
    - @param model: Model identifier.
    - @param text: Normalized OCR text.
    - @param timeout: Request timeout in seconds.
    - @return: Corrected text.
    - @throws GrammarCorrectionError: On empty input, failed request or empty answer.
    """
    if not text or not text.strip():
        raise GrammarCorrectionError("Please enter some text to correct")

    prompt = build_grammar_prompt(text)
    try:
        out = chat_completion(client, model, messages=[{"role": "user", "content": prompt}], timeout=timeout)
    except Exception as e:
        raise GrammarCorrectionError(f"API Error: {e}") from e

    corrected = _strip_code_fence(out)
    if not corrected:
        raise GrammarCorrectionError("No grammar correction was provided")
    logger.info("Grammar correction applied (%d -> %d chars)", len(text), len(corrected))
    return corrected
