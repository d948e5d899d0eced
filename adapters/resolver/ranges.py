"""
ranges.py — śledzenie zakresów tekstu już opisanych furiganą.

Zakresy są półotwarte [start, end), dopisywane w trakcie jednego przebiegu
i nigdy nie scalane; sprawdzenia nakładania to liniowy skan.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from adapters.kana import contains_kanji
from contracts import ProcessedRange


def is_covered(start: int, end: int, ranges: Iterable[ProcessedRange]) -> bool:
    """True if [start, end) overlaps any tracked range (partial or containment)."""
    for r in ranges:
        if (
            (start >= r.start and start < r.end)      # start wewnątrz zakresu
            or (end > r.start and end <= r.end)       # koniec wewnątrz zakresu
            or (start <= r.start and end >= r.end)    # kandydat zawiera zakres
        ):
            return True
    return False


def uncovered_text(text: str, ranges: Sequence[ProcessedRange]) -> str:
    """
    Concatenates the parts of `text` outside every tracked range, in order.

    The result is not contiguous in `text`: positions inside it do not map
    back to the original string.
    """
    if not ranges:
        return text

    parts: list[str] = []
    cursor = 0
    for r in sorted(ranges, key=lambda r: r.start):
        if r.start > cursor:
            parts.append(text[cursor:r.start])
        cursor = max(cursor, r.end)
    if cursor < len(text):
        parts.append(text[cursor:])
    return "".join(parts)


def has_uncovered_kanji(text: str, ranges: Sequence[ProcessedRange]) -> bool:
    return contains_kanji(uncovered_text(text, ranges))


def has_coverage_gaps(text_length: int, ranges: Sequence[ProcessedRange]) -> bool:
    """True if the tracked ranges do not tile [0, text_length) completely."""
    if not ranges:
        return True

    ordered = sorted(ranges, key=lambda r: r.start)
    reach = 0
    for r in ordered:
        if r.start > reach:
            return True
        reach = max(reach, r.end)
    return reach < text_length


class RangeTracker:
    """Append-only zbiór zakresów jednego przebiegu resolvera."""

    def __init__(self) -> None:
        self._ranges: list[ProcessedRange] = []

    @property
    def ranges(self) -> list[ProcessedRange]:
        return list(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def add(self, start: int, end: int) -> None:
        self._ranges.append(ProcessedRange(start=start, end=end))

    def is_covered(self, start: int, end: int) -> bool:
        return is_covered(start, end, self._ranges)

    def uncovered_text(self, text: str) -> str:
        return uncovered_text(text, self._ranges)

    def has_uncovered_kanji(self, text: str) -> bool:
        return has_uncovered_kanji(text, self._ranges)

    def has_gaps(self, text_length: int) -> bool:
        return has_coverage_gaps(text_length, self._ranges)
