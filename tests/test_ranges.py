from adapters.resolver.ranges import (
    RangeTracker,
    has_coverage_gaps,
    has_uncovered_kanji,
    is_covered,
    uncovered_text,
)
from contracts import ProcessedRange


def _r(start: int, end: int) -> ProcessedRange:
    return ProcessedRange(start=start, end=end)


def test_is_covered_detects_partial_and_containment_overlap():
    ranges = [_r(0, 3)]
    assert is_covered(0, 2, ranges)       # inside
    assert is_covered(2, 5, ranges)       # start inside
    assert is_covered(0, 5, ranges)       # contains range
    assert not is_covered(3, 5, ranges)   # adjacent, half-open
    assert not is_covered(5, 6, [])


def test_uncovered_text_concatenates_gaps_in_order():
    text = "日本語を勉強しています"
    assert uncovered_text(text, []) == text
    assert uncovered_text(text, [_r(0, 3), _r(4, 6)]) == "をしています"
    # order of insertion does not matter
    assert uncovered_text(text, [_r(4, 6), _r(0, 3)]) == "をしています"


def test_uncovered_text_with_nested_ranges():
    text = "abcdef"
    assert uncovered_text(text, [_r(0, 4), _r(1, 2)]) == "ef"


def test_has_uncovered_kanji():
    text = "東京に行きました"
    assert has_uncovered_kanji(text, [_r(0, 2)])
    assert not has_uncovered_kanji(text, [_r(0, 2), _r(3, 5)])


def test_has_coverage_gaps():
    assert has_coverage_gaps(3, [])
    assert not has_coverage_gaps(3, [_r(0, 3)])
    assert has_coverage_gaps(6, [_r(0, 3), _r(4, 6)])
    assert has_coverage_gaps(6, [_r(0, 3)])
    assert has_coverage_gaps(6, [_r(1, 6)])
    # a range nested inside a longer one is not a gap
    assert not has_coverage_gaps(6, [_r(0, 5), _r(1, 2), _r(5, 6)])


def test_range_tracker_wraps_helpers():
    tracker = RangeTracker()
    assert len(tracker) == 0
    tracker.add(0, 2)
    tracker.add(3, 5)

    assert len(tracker) == 2
    assert tracker.ranges == [_r(0, 2), _r(3, 5)]
    assert tracker.is_covered(1, 2)
    assert not tracker.is_covered(2, 3)
    assert tracker.uncovered_text("東京に行きました") == "にました"
    assert not tracker.has_uncovered_kanji("東京に行きました")
    assert tracker.has_gaps(8)
