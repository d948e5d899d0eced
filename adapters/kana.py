"""
kana.py - kanji detection and katakana -> hiragana conversion.

Kanji range is the CJK Unified Ideographs block U+4E00..U+9FAF.
"""
from __future__ import annotations

import re

_KANJI_RE = re.compile(r"[一-龯]")

# Katakana ァ..ヶ shift down by 0x60 onto hiragana ぁ..ゖ.
_KATA_TO_HIRA = {code: code - 0x60 for code in range(0x30A1, 0x30F7)}


def contains_kanji(text: str) -> bool:
    return _KANJI_RE.search(text) is not None


def kata_to_hira(text: str) -> str:
    """Converts katakana to hiragana; other characters (e.g. ー) are kept."""
    return text.translate(_KATA_TO_HIRA)
