"""
mock_responses.py — stała tabela odpowiedzi modelu dla trybu mock.

Kolejność kluczy ma znaczenie: przy dopasowaniu częściowym wygrywa
pierwszy klucz zawarty w tekście.
"""
from __future__ import annotations

from contracts import LLMReading


def _pairs(*items: tuple[str, str]) -> list[LLMReading]:
    return [LLMReading(text=text, furigana=furigana) for text, furigana in items]


MOCK_RESPONSES: dict[str, list[LLMReading]] = {
    "日本語": _pairs(("日本語", "にほんご")),
    "漢字": _pairs(("漢字", "かんじ")),
    "勉強": _pairs(("勉強", "べんきょう")),
    "新しい": _pairs(("新しい", "あたら")),
    "日本語を勉強しています": _pairs(
        ("日本語", "にほんご"),
        ("を", ""),
        ("勉強", "べんきょう"),
        ("して", ""),
        ("います", ""),
    ),
    "難しい言葉": _pairs(
        ("難しい", "むずか"),
        ("言葉", "ことば"),
    ),
    "東京に行きました": _pairs(
        ("東京", "とうきょう"),
        ("に", ""),
        ("行き", "い"),
        ("ました", ""),
    ),
    "引っ越せる": _pairs(
        ("引", "ひ"),
        ("っ", ""),
        ("越せる", "こ"),
    ),
    "引っ越す": _pairs(
        ("引", "ひ"),
        ("っ", ""),
        ("越す", "こ"),
    ),
    "今月14日に自分の部屋に引っ越せるんだ": _pairs(
        ("今月", "こんげつ"),
        ("14", ""),
        ("日", "にち"),
        ("に", ""),
        ("自分", "じぶん"),
        ("の", ""),
        ("部屋", "へや"),
        ("に", ""),
        ("引", "ひ"),
        ("っ", ""),
        ("越せる", "こ"),
        ("んだ", ""),
    ),
}


def lookup_mock(text: str) -> list[LLMReading]:
    """Exact match first, then the first table key contained in `text`."""
    if text in MOCK_RESPONSES:
        return [pair.model_copy() for pair in MOCK_RESPONSES[text]]
    for key, pairs in MOCK_RESPONSES.items():
        if key in text:
            return [pair.model_copy() for pair in pairs]
    return []
