"""
i18n core: load_lang (cached JSON), t(key, **kwargs) and translator_for(lang).
t() follows st.session_state["lang"] (EN/RU), EN default; translator_for()
binds a fixed language for callers outside a Streamlit run (CLI, tests).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

import streamlit as st

logger = logging.getLogger(__name__)

_I18N_DIR = Path(__file__).resolve().parent
_CACHE: dict[str, dict[str, str]] = {}
_REPORTED: set[tuple[str, str]] = set()

LANGUAGES = ("EN", "RU")
DEFAULT_LANG = "EN"


def load_lang(lang: str) -> dict[str, str]:
    """Load locale JSON for lang (EN/RU). Cached; unknown languages load as empty."""
    lang = lang.upper()
    if lang not in _CACHE:
        path = _I18N_DIR / f"{lang.lower()}.json"
        if path.exists():
            with path.open(encoding="utf-8") as f:
                _CACHE[lang] = json.load(f)
        else:
            logger.warning("No dictionary for language %s", lang)
            _CACHE[lang] = {}
    return _CACHE[lang]


def _lookup(lang: str, key: str) -> str:
    raw = load_lang(lang).get(key)
    if raw:
        return raw
    if (lang, key) not in _REPORTED:
        _REPORTED.add((lang, key))
        logger.debug("Missing %s translation for %r", lang, key)
    return load_lang(DEFAULT_LANG).get(key, key)


def _format(raw: str, kwargs: dict) -> str:
    if not kwargs:
        return raw
    try:
        return raw.format(**kwargs)
    except (KeyError, ValueError):
        logger.warning("Bad placeholders in %r", raw)
        return raw


def _session_lang() -> str:
    try:
        return str(st.session_state.get("lang", DEFAULT_LANG))
    except Exception:
        # no script run context (plain python import)
        return DEFAULT_LANG


def t(key: str, **kwargs) -> str:
    """
    Translate key using session_state["lang"].
    Supports .format(**kwargs). Fallback: EN string, then the key itself.
    """
    return _format(_lookup(_session_lang(), key), kwargs)


def translator_for(lang: str) -> Callable[..., str]:
    """t() with the language fixed, for code that runs without session state."""
    lang = lang.upper() if lang else DEFAULT_LANG

    def _t(key: str, **kwargs) -> str:
        return _format(_lookup(lang, key), kwargs)

    return _t
