from __future__ import annotations

import asyncio

import pytest

from adapters.reading_cache.memory_reading_cache import InMemoryReadingCache
from adapters.reading_generator.llm_generator import LLMReadingGenerator
from adapters.resolver import LayeredFuriganaResolver
from adapters.word_store.memory_word_store import InMemoryWordStore
from contracts import (
    Confidence,
    FuriganaInputError,
    FuriganaItem,
    FuriganaSource,
    LLMReading,
    MorphologyPolicy,
    MorphToken,
)


def _tok(surface: str, pos: str, reading: str = "") -> MorphToken:
    return MorphToken(surface_form=surface, part_of_speech=pos, reading=reading)


TOKENS = {
    "日本語を勉強しています": [
        _tok("日本語", "名詞", "ニホンゴ"),
        _tok("を", "助詞", "ヲ"),
        _tok("勉強", "名詞", "ベンキョウ"),
        _tok("し", "動詞", "シ"),
        _tok("て", "助詞", "テ"),
        _tok("い", "動詞", "イ"),
        _tok("ます", "助動詞", "マス"),
    ],
    "東京に行きました": [
        _tok("東京", "名詞", "トウキョウ"),
        _tok("に", "助詞", "ニ"),
        _tok("行き", "動詞", "イキ"),
        _tok("まし", "助動詞", "マシ"),
        _tok("た", "助動詞", "タ"),
    ],
    "日本": [_tok("日本", "名詞", "ニホン")],
    "ひらがな": [_tok("ひらがな", "名詞", "ヒラガナ")],
    "生": [_tok("生", "名詞", "セイ")],
}


class _StubTokenizer:
    def __init__(self, table=None) -> None:
        self._table = TOKENS if table is None else table
        self.calls: list[str] = []

    async def tokenize(self, text: str) -> list[MorphToken]:
        self.calls.append(text)
        return list(self._table.get(text, []))


class _BrokenTokenizer:
    async def tokenize(self, text: str) -> list[MorphToken]:
        raise RuntimeError("dictionary missing")


class _BrokenWordStore:
    async def lookup_word(self, word: str):
        raise ConnectionError("db down")


class _BrokenCache(InMemoryReadingCache):
    async def lookup(self, word: str):
        raise ConnectionError("db down")

    async def store(self, word, reading, confidence, source):
        raise ConnectionError("db down")


def _resolver(vocab=(), cache=None, tokenizer=None, policy=MorphologyPolicy.COVERAGE_GAPS):
    return LayeredFuriganaResolver(
        word_store=vocab if hasattr(vocab, "lookup_word") else InMemoryWordStore(vocab),
        reading_cache=cache if cache is not None else InMemoryReadingCache(),
        tokenizer=tokenizer or _StubTokenizer(),
        generator=LLMReadingGenerator(),
        morphology_policy=policy,
    )


def test_vocabulary_annotates_known_segments():
    resolver = _resolver(vocab=[("日本語", "にほんご"), ("勉強", "べんきょう")])

    items = asyncio.run(resolver.resolve("日本語を勉強しています"))

    assert items == [
        FuriganaItem(text="日本語", reading="にほんご", start=0, end=3),
        FuriganaItem(text="勉強", reading="べんきょう", start=4, end=6),
    ]


def test_vocabulary_wins_over_cache():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("日本", "にっぽん", 90, "cache"))
    resolver = _resolver(vocab=[("日本", "にほん")], cache=cache)

    items = asyncio.run(resolver.resolve("日本"))

    assert items == [FuriganaItem(text="日本", reading="にほん", start=0, end=2)]


def test_cache_fallback_and_morphology_fill_the_gaps():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("東京", "とうきょう", 90, "llm"))
    resolver = _resolver(cache=cache)

    items = asyncio.run(resolver.resolve("東京に行きました"))

    assert items == [
        FuriganaItem(text="東京", reading="とうきょう", start=0, end=2),
        FuriganaItem(text="行き", reading="いき", start=3, end=5),
    ]
    learned = cache.get("行き", "いき")
    assert learned is not None
    assert learned.confidence == Confidence.MORPHOLOGY
    assert learned.source == FuriganaSource.MORPHOLOGY.value


def test_no_candidates_policy_skips_morphology_after_a_hit():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("東京", "とうきょう", 90, "llm"))
    resolver = _resolver(cache=cache, policy=MorphologyPolicy.NO_CANDIDATES)

    items = asyncio.run(resolver.resolve("東京に行きました"))

    assert [i.text for i in items] == ["東京"]
    assert cache.get("行き", "いき") is None


def test_kana_only_text_yields_no_annotations():
    resolver = _resolver()
    assert asyncio.run(resolver.resolve("ひらがな")) == []
    assert asyncio.run(resolver.resolve("ひらがな", api_key="k", mock_mode=True)) == []


def test_empty_text_yields_empty_list():
    assert asyncio.run(_resolver().resolve("")) == []


def test_llm_layer_runs_only_with_api_key():
    resolver = _resolver(tokenizer=_StubTokenizer(table={}))

    assert asyncio.run(resolver.resolve("東京に行きました", mock_mode=True)) == []

    items = asyncio.run(resolver.resolve("東京に行きました", api_key="k", mock_mode=True))
    assert items == [
        FuriganaItem(text="東京", reading="とうきょう", start=0, end=2),
        FuriganaItem(text="行き", reading="い", start=3, end=5),
    ]


def test_llm_readings_are_learned_into_cache():
    cache = InMemoryReadingCache()
    resolver = _resolver(cache=cache, tokenizer=_StubTokenizer(table={}))

    asyncio.run(resolver.resolve("漢字", api_key="k", mock_mode=True))

    entry = cache.get("漢字", "かんじ")
    assert entry is not None
    assert entry.confidence == Confidence.LLM
    assert entry.source == FuriganaSource.LLM.value


def test_llm_layer_skipped_when_all_kanji_covered():
    class _CountingGenerator:
        def __init__(self) -> None:
            self.calls = 0

        async def generate(self, text, *, api_key=None, mock_mode=False):
            self.calls += 1
            return []

    generator = _CountingGenerator()
    resolver = LayeredFuriganaResolver(
        word_store=InMemoryWordStore([("日本語", "にほんご"), ("勉強", "べんきょう")]),
        reading_cache=InMemoryReadingCache(),
        tokenizer=_StubTokenizer(),
        generator=generator,
    )

    asyncio.run(resolver.resolve("日本語を勉強しています", api_key="k"))

    assert generator.calls == 0


def test_annotations_never_overlap_and_are_sorted():
    resolver = _resolver(vocab=[("勉強", "べんきょう")])

    items = asyncio.run(resolver.resolve("日本語を勉強しています", api_key="k", mock_mode=True))

    starts = [i.start for i in items]
    assert starts == sorted(starts)
    for a, b in zip(items, items[1:]):
        assert a.end <= b.start
    for item in items:
        assert "日本語を勉強しています"[item.start:item.end] == item.text


def test_resolve_is_repeatable():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("東京", "とうきょう", 90, "llm"))
    resolver = _resolver(cache=cache)

    first = asyncio.run(resolver.resolve("東京に行きました"))
    second = asyncio.run(resolver.resolve("東京に行きました"))

    assert first == second


def test_failing_collaborators_degrade_to_empty_result():
    resolver = _resolver(vocab=_BrokenWordStore(), cache=_BrokenCache(), tokenizer=_BrokenTokenizer())

    assert asyncio.run(resolver.resolve("東京に行きました")) == []


def test_failing_tokenizer_still_allows_llm_layer():
    resolver = _resolver(tokenizer=_BrokenTokenizer())

    items = asyncio.run(resolver.resolve("漢字", api_key="k", mock_mode=True))

    assert items == [FuriganaItem(text="漢字", reading="かんじ", start=0, end=2)]


# ─── Korekty ──────────────────────────────────────────────────────────────────

def test_correction_is_stored_even_when_reading_unchanged():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("漢字", "かんじ", 70, "morphology"))
    resolver = _resolver(cache=cache)

    result = asyncio.run(resolver.apply_correction("漢字", "かんじ", "かんじ"))

    assert result.reading == "かんじ"
    assert result.confidence == 100
    assert result.source == FuriganaSource.USER
    assert (result.start, result.end) == (0, 2)
    entry = cache.get("漢字", "かんじ")
    assert entry.confidence == 100
    assert entry.source == "user"


def test_correction_creates_new_user_entry():
    cache = InMemoryReadingCache()
    resolver = _resolver(cache=cache)

    asyncio.run(resolver.apply_correction("生", "せい", "なま"))

    entry = cache.get("生", "なま")
    assert entry is not None
    assert entry.confidence == Confidence.USER
    assert entry.source == "user"


def test_corrected_reading_wins_in_next_resolve():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("生", "せい", 70, "morphology"))
    resolver = _resolver(cache=cache)

    asyncio.run(resolver.apply_correction("生", "せい", "なま"))
    items = asyncio.run(resolver.resolve("生"))

    assert items == [FuriganaItem(text="生", reading="なま", start=0, end=1)]


def test_correction_requires_text_and_reading():
    resolver = _resolver()
    with pytest.raises(FuriganaInputError):
        asyncio.run(resolver.apply_correction("", "", "かんじ"))
    with pytest.raises(FuriganaInputError):
        asyncio.run(resolver.apply_correction("漢字", "かんじ", ""))


# ─── Lokalizacja w tekście ────────────────────────────────────────────────────

class _ScriptedGenerator:
    def __init__(self, pairs) -> None:
        self._pairs = pairs
        self.seen: list[str] = []

    async def generate(self, text, *, api_key=None, mock_mode=False):
        self.seen.append(text)
        return [LLMReading(text=t, furigana=f) for t, f in self._pairs]


def _scripted_resolver(vocab, tokens, pairs, policy=MorphologyPolicy.NO_CANDIDATES):
    generator = _ScriptedGenerator(pairs)
    resolver = LayeredFuriganaResolver(
        word_store=InMemoryWordStore(vocab),
        reading_cache=InMemoryReadingCache(),
        tokenizer=_StubTokenizer(table=tokens),
        generator=generator,
        morphology_policy=policy,
    )
    return resolver, generator


def test_segment_missing_from_text_is_skipped():
    tokens = {"東京": [_tok("京都", "名詞", "キョウト"), _tok("東京", "名詞", "トウキョウ")]}
    resolver, _ = _scripted_resolver([("京都", "きょうと"), ("東京", "とうきょう")], tokens, [])

    items = asyncio.run(resolver.resolve("東京"))

    assert items == [FuriganaItem(text="東京", reading="とうきょう", start=0, end=2)]


def test_llm_pair_missing_from_text_is_skipped():
    resolver, _ = _scripted_resolver([], {}, [("大阪", "おおさか"), ("東京", "とうきょう")])

    items = asyncio.run(resolver.resolve("東京へ", api_key="k"))

    assert items == [FuriganaItem(text="東京", reading="とうきょう", start=0, end=2)]


def test_llm_receives_uncovered_text_and_pairs_are_placed_in_original():
    tokens = {"日本と東京日本": [
        _tok("日本", "名詞", "ニホン"),
        _tok("と", "助詞", "ト"),
        _tok("東京", "名詞", "トウキョウ"),
        _tok("日本", "名詞", "ニホン"),
    ]}
    resolver, generator = _scripted_resolver(
        [("日本", "にほん")], tokens, [("日本", "にっぽん"), ("東京", "とうきょう")],
    )

    items = asyncio.run(resolver.resolve("日本と東京日本", api_key="k"))

    assert generator.seen == ["と東京"]
    assert items == [
        FuriganaItem(text="日本", reading="にほん", start=0, end=2),
        FuriganaItem(text="東京", reading="とうきょう", start=3, end=5),
        FuriganaItem(text="日本", reading="にほん", start=5, end=7),
    ]


def test_llm_pair_is_dropped_when_first_occurrence_is_covered():
    # drugie 日本 jest wolne, ale para LLM trafia tylko w pierwsze wystąpienie
    tokens = {"日本の日本": [_tok("日本", "名詞", "ニホン")]}
    resolver, generator = _scripted_resolver([("日本", "にほん")], tokens, [("日本", "にっぽん")])

    items = asyncio.run(resolver.resolve("日本の日本", api_key="k"))

    assert generator.seen == ["の日本"]
    assert items == [FuriganaItem(text="日本", reading="にほん", start=0, end=2)]
