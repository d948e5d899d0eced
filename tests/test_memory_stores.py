import asyncio

import pytest

from adapters.reading_cache.memory_reading_cache import InMemoryReadingCache
from adapters.sentence_store.memory_sentence_store import InMemorySentenceStore
from adapters.word_store.memory_word_store import InMemoryWordStore
from contracts import FuriganaItem, SentenceIn, VocabularyEntry


def test_cache_store_keeps_maximum_confidence():
    cache = InMemoryReadingCache()

    asyncio.run(cache.store("漢字", "かんじ", 70, "morphology"))
    raised = asyncio.run(cache.store("漢字", "かんじ", 85, "llm"))
    assert raised.confidence == 85

    kept = asyncio.run(cache.store("漢字", "かんじ", 70, "morphology"))
    assert kept.confidence == 85
    assert kept.usage_count == 3


def test_cache_lookup_prefers_highest_confidence_and_counts_usage():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("生", "せい", 70, "morphology"))
    asyncio.run(cache.store("生", "なま", 90, "llm"))

    hit = asyncio.run(cache.lookup("生"))

    assert hit.reading == "なま"
    assert hit.confidence == 90
    assert cache.get("生", "なま").usage_count == 2
    assert cache.get("生", "せい").usage_count == 1


def test_cache_lookup_miss_returns_none():
    assert asyncio.run(InMemoryReadingCache().lookup("東京")) is None


def test_cache_update_confidence_overwrites_and_changes_owner():
    cache = InMemoryReadingCache()
    asyncio.run(cache.store("漢字", "かんじ", 90, "llm"))

    updated = asyncio.run(cache.update_confidence("漢字", "かんじ", 60, "user"))

    assert updated.confidence == 60
    assert updated.source == "user"
    assert asyncio.run(cache.update_confidence("無い", "ない", 60)) is None


def test_cache_list_and_delete():
    cache = InMemoryReadingCache()
    low = asyncio.run(cache.store("行き", "いき", 70, "morphology"))
    asyncio.run(cache.store("東京", "とうきょう", 85, "llm"))

    listed = asyncio.run(cache.list_entries())
    assert [e.word for e in listed] == ["東京", "行き"]
    assert [e.word for e in asyncio.run(cache.list_entries(word="行き"))] == ["行き"]

    assert asyncio.run(cache.delete(low.cache_id)) is True
    assert asyncio.run(cache.delete(low.cache_id)) is False
    assert [e.word for e in asyncio.run(cache.list_entries())] == ["東京"]


def test_confidence_is_clamped():
    cache = InMemoryReadingCache()
    entry = asyncio.run(cache.store("漢字", "かんじ", 150, "user"))
    assert entry.confidence == 100


def test_word_store_returns_first_inserted_reading():
    store = InMemoryWordStore([("日本", "にほん"), ("日本", "にっぽん")])
    assert asyncio.run(store.lookup_word("日本")) == "にほん"
    assert asyncio.run(store.lookup_word("東京")) is None


def test_word_store_add_word_upserts():
    store = InMemoryWordStore()
    first = asyncio.run(store.add_word(VocabularyEntry(word="勉強", reading="べんきょう")))
    again = asyncio.run(store.add_word(VocabularyEntry(word="勉強", reading="べんきょう", meaning="study")))

    assert again.vocab_id == first.vocab_id
    words = asyncio.run(store.list_words())
    assert len(words) == 1
    assert words[0].meaning == "study"


def test_sentence_store_crud():
    store = InMemorySentenceStore()
    created = asyncio.run(store.create_sentence(SentenceIn(sentence="東京に行きました")))
    assert created.sentence_id == 1
    assert created.llm_processed is False

    items = [FuriganaItem(text="東京", reading="とうきょう", start=0, end=2)]
    updated = asyncio.run(store.update_furigana(1, items, llm_processed=True))
    assert updated.furigana_data == items
    assert updated.llm_processed is True

    # llm_processed is sticky
    again = asyncio.run(store.update_furigana(1, [], llm_processed=False))
    assert again.llm_processed is True

    asyncio.run(store.delete_sentence(1))
    with pytest.raises(KeyError):
        asyncio.run(store.get_sentence(1))
    with pytest.raises(KeyError):
        asyncio.run(store.delete_sentence(1))
