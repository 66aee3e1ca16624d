"""UI label translations.

Labels are written in English in the code and used as lookup keys; each
``translations/<lang>.json`` maps them to another language.  A missing
label falls back to English, which is the key itself.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

TRANSLATIONS_DIR = Path(__file__).resolve().parents[1] / "translations"
BASE_LANGUAGE = "en"


def available_languages() -> List[str]:
    """English plus every language with a translation file."""
    found = sorted(p.stem for p in TRANSLATIONS_DIR.glob("*.json") if p.stem != BASE_LANGUAGE)
    return [BASE_LANGUAGE] + found


LANGUAGES = available_languages()


@lru_cache()
def load_translations(lang: str) -> Dict[str, str]:
    """Label mapping for ``lang``; empty for English or unknown languages."""
    if lang == BASE_LANGUAGE:
        return {}
    path = TRANSLATIONS_DIR / f"{lang}.json"
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("No translations for language %r", lang)
        return {}


def t(key: str, lang: str) -> str:
    """Translate ``key`` using the specified language."""
    return load_translations(lang).get(key, key)
