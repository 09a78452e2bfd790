"""Per-character and whole-string script classification."""

from __future__ import annotations

from .ranges import is_khmer, is_latin
from .structures import ScriptTag


def classify_char(char: str) -> ScriptTag:
    """Classify a single character by its leading code point.

    Empty input yields ``OTHER``. Khmer is checked before Latin. Never
    returns ``MIXED``.
    """

    if not char:
        return ScriptTag.OTHER
    code = ord(char[0])
    if is_khmer(code):
        return ScriptTag.KHMER
    if is_latin(code):
        return ScriptTag.LATIN
    return ScriptTag.OTHER


def analyze_dominant(text: str) -> ScriptTag:
    """Return the tag holding a strict majority of characters, else ``MIXED``."""

    if not text:
        return ScriptTag.OTHER

    khmer_count = 0
    latin_count = 0
    other_count = 0
    for char in text:
        tag = classify_char(char)
        if tag is ScriptTag.KHMER:
            khmer_count += 1
        elif tag is ScriptTag.LATIN:
            latin_count += 1
        else:
            other_count += 1

    if khmer_count > latin_count and khmer_count > other_count:
        return ScriptTag.KHMER
    if latin_count > khmer_count and latin_count > other_count:
        return ScriptTag.LATIN
    if other_count > khmer_count and other_count > latin_count:
        return ScriptTag.OTHER
    return ScriptTag.MIXED


def contains(text: str, tag: ScriptTag) -> bool:
    """Detect whether any character of the text classifies as ``tag``."""

    for char in text:
        if classify_char(char) is tag:
            return True
    return False


def contains_khmer(text: str) -> bool:
    return contains(text, ScriptTag.KHMER)


def contains_latin(text: str) -> bool:
    return contains(text, ScriptTag.LATIN)


def contains_mixed(text: str) -> bool:
    """Presence check for both Khmer and Latin, unrelated to ``MIXED``."""

    return contains_khmer(text) and contains_latin(text)
