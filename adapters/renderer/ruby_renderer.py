"""
ruby_renderer.py - overlap resolution and <ruby> rendering of furigana.

Annotations may overlap when they come from independent resolve calls.
Selection is greedy in (start asc, length desc) order, so at an equal start
the longer annotation wins and shorter competitors inside it are dropped.
Annotations whose span falls outside the text are never rendered.
"""
from __future__ import annotations

import html
from collections.abc import Iterable
from typing import Optional

from adapters.resolver.ranges import is_covered
from contracts import FuriganaInputError, FuriganaItem, ProcessedRange


def _span_fits(item: FuriganaItem, text_length: Optional[int]) -> bool:
    if not 0 <= item.start < item.end:
        return False
    return text_length is None or item.end <= text_length


def check_spans(text: str, items: Iterable[FuriganaItem]) -> None:
    """Raises FuriganaInputError for any annotation not inside [0, len(text))."""
    for item in items:
        if not _span_fits(item, len(text)):
            raise FuriganaInputError(
                f"annotation {item.text!r} has span [{item.start}, {item.end}) "
                f"outside text of length {len(text)}"
            )


def select_annotations(
    items: Iterable[FuriganaItem],
    text_length: Optional[int] = None,
) -> list[FuriganaItem]:
    """Returns the non-overlapping subset of in-bounds annotations with a reading."""
    usable = [item for item in items if item.reading and _span_fits(item, text_length)]
    ordered = sorted(usable, key=lambda item: (item.start, -(item.end - item.start)))

    accepted: list[FuriganaItem] = []
    taken: list[ProcessedRange] = []
    for item in ordered:
        if is_covered(item.start, item.end, taken):
            continue
        accepted.append(item)
        taken.append(ProcessedRange(start=item.start, end=item.end))
    return accepted


def render_furigana(text: str, items: Iterable[FuriganaItem]) -> str:
    """
    Wraps each selected annotation as <ruby>base<rt>reading</rt></ruby>.

    Splices right to left (descending end) so earlier offsets stay valid.
    Base text and reading are HTML-escaped; text outside annotations is not.
    """
    selected = select_annotations(items, len(text))
    if not selected:
        return text

    result = text
    for item in sorted(selected, key=lambda item: item.end, reverse=True):
        before = result[: item.start]
        target = html.escape(result[item.start : item.end])
        after = result[item.end :]
        result = f"{before}<ruby>{target}<rt>{html.escape(item.reading)}</rt></ruby>{after}"
    return result
