"""
sources.py — adaptery źródeł odczytów dla resolvera.

Każde źródło opakowuje jednego kolaboratora (port) i normalizuje jego wynik.
Błąd kolaboratora (dowolny wyjątek) jest łapany tutaj i traktowany jako
"brak kandydata"; resolver zawsze kończy przebieg.

Źródła uczące (morphology, LLM) zapisują każdy znaleziony odczyt do cache.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from adapters.kana import kata_to_hira
from contracts import Confidence, FuriganaSource, LLMReading, MorphReading, MorphToken
from ports.reading_cache import ReadingCache
from ports.reading_generator import ReadingGenerator
from ports.tokenizer import Tokenizer
from ports.word_store import WordStore

logger = logging.getLogger("furigana.sources")

# Kategorie POS bez własnego odczytu: symbole, partykuły, czasowniki posiłkowe.
SKIPPED_POS = frozenset({"記号", "補助記号", "助詞", "助動詞"})


@dataclass(frozen=True)
class SourceHit:
    """Trafienie źródła dokładnego (vocabulary / cache) dla całego segmentu."""
    reading: str
    confidence: int
    source: FuriganaSource


# ─── Warstwa 1: źródła dokładne ───────────────────────────────────────────────

class VocabularySource:
    source = FuriganaSource.VOCABULARY

    def __init__(self, store: WordStore) -> None:
        self._store = store

    async def lookup(self, segment: str) -> Optional[SourceHit]:
        try:
            reading = await self._store.lookup_word(segment)
        except Exception as exc:
            logger.warning("Vocabulary lookup failed for %r: %s", segment, exc)
            return None
        if not reading:
            return None
        return SourceHit(reading=reading, confidence=Confidence.VOCABULARY, source=self.source)


class CacheSource:
    source = FuriganaSource.CACHE

    def __init__(self, cache: ReadingCache) -> None:
        self._cache = cache

    async def lookup(self, segment: str) -> Optional[SourceHit]:
        # Cache sam liczy użycia przy każdym trafieniu.
        try:
            cached = await self._cache.lookup(segment)
        except Exception as exc:
            logger.warning("Cache lookup failed for %r: %s", segment, exc)
            return None
        if cached is None or not cached.reading:
            return None
        return SourceHit(reading=cached.reading, confidence=cached.confidence, source=self.source)


# ─── Warstwa 2: analiza morfologiczna ─────────────────────────────────────────

def extract_readings(tokens: list[MorphToken]) -> list[MorphReading]:
    """Keeps tokens that carry a reading and are not punctuation/particles/auxiliaries."""
    return [
        MorphReading(word=t.surface_form, reading=kata_to_hira(t.reading))
        for t in tokens
        if t.reading and t.surface_form and t.part_of_speech not in SKIPPED_POS
    ]


class MorphologySource:
    source = FuriganaSource.MORPHOLOGY

    def __init__(self, tokenizer: Tokenizer, cache: ReadingCache) -> None:
        self._tokenizer = tokenizer
        self._cache = cache

    async def _analyze(self, text: str) -> list[MorphToken]:
        try:
            return await self._tokenizer.tokenize(text)
        except Exception as exc:
            logger.warning("Morphological analysis failed: %s", exc)
            return []

    async def segment(self, text: str) -> list[str]:
        """Surface forms of all tokens, in order."""
        tokens = await self._analyze(text)
        return [t.surface_form for t in tokens]

    async def readings(self, text: str) -> list[MorphReading]:
        """
        Readings for every token whose reading differs from its surface form.
        Each of them is learned into the cache at morphology confidence.
        """
        tokens = await self._analyze(text)
        results: list[MorphReading] = []
        for item in extract_readings(tokens):
            if not item.reading or item.reading == item.word:
                continue
            await _learn(self._cache, item.word, item.reading, Confidence.MORPHOLOGY, self.source)
            results.append(item)
        return results


# ─── Warstwa 3: model językowy ────────────────────────────────────────────────

class LLMSource:
    source = FuriganaSource.LLM

    def __init__(self, generator: ReadingGenerator, cache: ReadingCache) -> None:
        self._generator = generator
        self._cache = cache

    async def readings(
        self,
        text: str,
        api_key: Optional[str],
        mock_mode: bool = False,
    ) -> list[LLMReading]:
        try:
            pairs = await self._generator.generate(text, api_key=api_key, mock_mode=mock_mode)
        except Exception as exc:
            logger.warning("Reading generator failed: %s", exc)
            return []

        for pair in pairs:
            if pair.text and pair.furigana and pair.text != pair.furigana:
                await _learn(self._cache, pair.text, pair.furigana, Confidence.LLM, self.source)
        return pairs


async def _learn(
    cache: ReadingCache,
    word: str,
    reading: str,
    confidence: int,
    source: FuriganaSource,
) -> None:
    try:
        await cache.store(word, reading, confidence, source.value)
    except Exception as exc:
        logger.warning("Could not cache %r -> %r (%s): %s", word, reading, source.value, exc)
