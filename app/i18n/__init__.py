from .core import DEFAULT_LANG, LANGUAGES, load_lang, t, translator_for

__all__ = ["DEFAULT_LANG", "LANGUAGES", "load_lang", "t", "translator_for"]
