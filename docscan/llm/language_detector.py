from __future__ import annotations

from typing import Iterable, List, Tuple

from langdetect import DetectorFactory, LangDetectException, detect_langs

DetectorFactory.seed = 0


_LANG_CODE_TO_ENGLISH = {
    "en": "english",
    "de": "german",
    "fr": "french",
    "es": "spanish",
    "it": "italian",
    "pt": "portuguese",
    "nl": "dutch",
    "ur": "urdu",
    "hi": "hindi",
    "ar": "arabic",
}

_SAMPLE_LIMIT = 4000


def _sample_text(texts: Iterable[str]) -> str:
    chunks: List[str] = []
    total_len = 0
    for t in texts:
        s = str(t or "").strip()
        if not s:
            continue
        chunks.append(s)
        total_len += len(s)
        if total_len >= _SAMPLE_LIMIT:
            break
    return "\n".join(chunks)[:_SAMPLE_LIMIT]


def detect_source_language(texts: Iterable[str]) -> Tuple[str | None, float | None]:
    """Return the most probable ISO language code and its probability."""
    sample = _sample_text(texts)
    if not sample:
        return None, None
    try:
        candidates = detect_langs(sample)
    except LangDetectException:
        return None, None
    if not candidates:
        return None, None
    best = max(candidates, key=lambda c: c.prob)
    return best.lang.split("-")[0], float(best.prob)


def map_lang_code_to_english_name(code: str | None) -> str | None:
    if not code:
        return None
    return _LANG_CODE_TO_ENGLISH.get(code.lower().split("-")[0])


__all__ = [
    "detect_source_language",
    "map_lang_code_to_english_name",
]
