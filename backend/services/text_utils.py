"""
Calibration Tracker - Text Helpers
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Accent stripping and name collation
"""

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")


def strip_accents(text: str) -> str:
    """Decompose (NFD) and drop combining marks: 'Výrobná' -> 'Vyrobna'"""
    decomposed = unicodedata.normalize("NFD", text or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collation_key(text: str) -> tuple:
    """
    Locale-style ordering key: base letters first, then case, then the raw string.

    'čas' sorts next to 'cas' instead of after 'z', and 'apple' next to 'Apple'.
    """
    text = text or ""
    return (strip_accents(text).casefold(), text.casefold(), text)


def underscore_whitespace(text: str) -> str:
    """Replace each run of whitespace with a single underscore"""
    return _WHITESPACE.sub("_", text or "")
