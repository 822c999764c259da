"""OpenRouter access for grammar correction.

The model and key come from ``config/models.json``::

    {"model_number_picked": 0,
     "models": [{"provider": "openrouter", "model": "...", "api_key": "..."}]}
"""

from __future__ import annotations

import json
import os
from typing import Dict, List, Tuple

from openai import OpenAI

CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "config", "models.json")
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def _read_models_file(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def get_picked_model(path: str = CONFIG_PATH) -> Tuple[str, str]:
    """Return ``(model, api_key)`` of the entry selected by ``model_number_picked``.

    Doxygen:
    - @throws FileNotFoundError: If the models file is missing.
    - @throws ValueError: If the selection is not a valid index or the entry is incomplete.
    """
    cfg = _read_models_file(path)
    entries: List[Dict] = cfg.get("models", [])
    picked = cfg.get("model_number_picked")

    # bool is an int subclass; reject it explicitly
    if isinstance(picked, bool) or not isinstance(picked, int):
        raise ValueError("Config must include integer 'model_number_picked'.")
    if not 0 <= picked < len(entries):
        raise ValueError(f"'model_number_picked' ({picked}) does not match any of {len(entries)} model(s).")

    entry = entries[picked]
    model, api_key = entry.get("model"), entry.get("api_key")
    if not (model and api_key):
        raise ValueError("Selected model entry must include both 'model' and 'api_key'.")
    return model, api_key


def get_openrouter_client(api_key: str) -> OpenAI:
    return OpenAI(base_url=OPENROUTER_BASE_URL, api_key=api_key)


def chat_completion(
    client: OpenAI,
    model: str,
    messages: List[Dict[str, str]],
    timeout: float | None = 30.0,
) -> str:
    """Return the first choice's text, or "" when the model sent no content."""
    completion = client.chat.completions.create(model=model, messages=messages, timeout=timeout)
    return completion.choices[0].message.content or ""


def check_model_health(client: OpenAI, model: str, timeout: float | None = 10.0) -> None:
    """Send a one-word request so bad keys or model ids fail before real work.

    Doxygen:
    - @throws RuntimeError: If the request fails.
    """
    try:
        chat_completion(client, model, messages=[{"role": "user", "content": "ping"}], timeout=timeout)
    except Exception as e:
        raise RuntimeError(f"Model health check failed: {e}") from e
