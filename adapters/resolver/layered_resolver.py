"""
LayeredFuriganaResolver — warstwowe rozwiązywanie furigany dla tekstu.

Pipeline (jeden przebieg, bez powtórzeń):
  1. Segmentacja tokenizerem
  2. Warstwa 1: dla każdego segmentu z kanji: vocabulary, potem cache
  3. Warstwa 2: analiza morfologiczna całego tekstu (wg MorphologyPolicy)
  4. Warstwa 3: LLM na nieopisanym fragmencie (tylko z kluczem API)
  5. Sortowanie po pozycji, usunięcie metadanych

Każdy przyjęty kandydat rejestruje zakres w RangeTracker; kolejne warstwy
pomijają kandydatów nakładających się na już opisany tekst.
Stan (kandydaci, zakresy) jest lokalny dla jednego wywołania resolve().
"""
from __future__ import annotations

import logging
from typing import Optional

from adapters.kana import contains_kanji
from contracts import (
    AnnotationCandidate,
    Confidence,
    CorrectionResult,
    FuriganaInputError,
    FuriganaItem,
    FuriganaSource,
    MorphologyPolicy,
)
from ports.reading_cache import ReadingCache
from ports.reading_generator import ReadingGenerator
from ports.tokenizer import Tokenizer
from ports.word_store import WordStore

from .ranges import RangeTracker
from .sources import CacheSource, LLMSource, MorphologySource, VocabularySource

logger = logging.getLogger("furigana.resolver")


class _Run:
    """Stan jednego przebiegu: tekst, kandydaci i zakresy."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.candidates: list[AnnotationCandidate] = []
        self.tracker = RangeTracker()

    def record(
        self,
        start: int,
        end: int,
        reading: str,
        confidence: int,
        source: FuriganaSource,
    ) -> None:
        self.candidates.append(AnnotationCandidate(
            text=self.text[start:end],
            reading=reading,
            start=start,
            end=end,
            confidence=confidence,
            source=source,
        ))
        self.tracker.add(start, end)

    def try_record_anywhere(
        self,
        word: str,
        reading: str,
        confidence: int,
        source: FuriganaSource,
    ) -> bool:
        """Places `word` at its first occurrence in the text unless that span is taken."""
        start = self.text.find(word)
        if start == -1:
            return False
        end = start + len(word)
        if self.tracker.is_covered(start, end):
            return False
        self.record(start, end, reading, confidence, source)
        return True


class LayeredFuriganaResolver:
    """
    Orkiestrator źródeł odczytów.

    Użycie:
        resolver = LayeredFuriganaResolver(
            word_store=vocab, reading_cache=cache,
            tokenizer=SudachiTokenizer(), generator=LLMReadingGenerator(),
        )
        items = await resolver.resolve("日本語を勉強しています", api_key="sk-...")
        await resolver.apply_correction("漢字", "かんじ", "かんじ")
    """

    def __init__(
        self,
        word_store: WordStore,
        reading_cache: ReadingCache,
        tokenizer: Tokenizer,
        generator: ReadingGenerator,
        morphology_policy: MorphologyPolicy = MorphologyPolicy.COVERAGE_GAPS,
    ) -> None:
        self._cache = reading_cache
        self._morphology = MorphologySource(tokenizer, reading_cache)
        self._llm = LLMSource(generator, reading_cache)
        # Kolejność = priorytet; pierwsze trafienie wygrywa.
        self._exact_sources = [
            VocabularySource(word_store),
            CacheSource(reading_cache),
        ]
        self._policy = morphology_policy

    # ── Resolve ───────────────────────────────────────────────────────────────

    async def resolve(
        self,
        text: str,
        api_key: Optional[str] = None,
        mock_mode: bool = False,
    ) -> list[FuriganaItem]:
        segments = await self._morphology.segment(text)
        if not text:
            return []

        run = _Run(text)
        await self._exact_layer(run, segments)

        if self._should_run_morphology(run):
            await self._morphology_layer(run)

        if api_key and (len(run.tracker) == 0 or run.tracker.has_uncovered_kanji(text)):
            await self._llm_layer(run, api_key, mock_mode)

        # sort stabilny: przy równym starcie zostaje kolejność dodania
        ordered = sorted(run.candidates, key=lambda c: c.start)
        logger.debug(
            "Resolved %d annotation(s) for %r: %s",
            len(ordered), text, [c.source.value for c in ordered],
        )
        return [c.to_item() for c in ordered]

    async def _exact_layer(self, run: _Run, segments: list[str]) -> None:
        cursor = 0
        for segment in segments:
            if not segment:
                continue
            start = run.text.find(segment, cursor)
            if start == -1:
                continue
            end = start + len(segment)
            cursor = end

            if not contains_kanji(segment):
                continue

            for source in self._exact_sources:
                hit = await source.lookup(segment)
                if hit is not None:
                    run.record(start, end, hit.reading, hit.confidence, hit.source)
                    break

    def _should_run_morphology(self, run: _Run) -> bool:
        if self._policy is MorphologyPolicy.NO_CANDIDATES:
            return not run.candidates
        return len(run.tracker) == 0 or run.tracker.has_gaps(len(run.text))

    async def _morphology_layer(self, run: _Run) -> None:
        for item in await self._morphology.readings(run.text):
            if not contains_kanji(item.word):
                continue
            run.try_record_anywhere(item.word, item.reading, item.confidence, FuriganaSource.MORPHOLOGY)

    async def _llm_layer(self, run: _Run, api_key: str, mock_mode: bool) -> None:
        remaining = run.tracker.uncovered_text(run.text)
        pairs = await self._llm.readings(remaining, api_key, mock_mode)
        for pair in pairs:
            if not pair.furigana or not pair.text or not contains_kanji(pair.text):
                continue
            # pozycje z `remaining` nie odpowiadają oryginałowi, szukamy w pełnym tekście
            run.try_record_anywhere(pair.text, pair.furigana, Confidence.LLM, FuriganaSource.LLM)

    # ── Korekty ───────────────────────────────────────────────────────────────

    async def apply_correction(
        self,
        text: str,
        previous_reading: str,
        corrected_reading: str,
    ) -> CorrectionResult:
        """
        Stores the user's reading for `text` at maximum confidence.

        The write always happens, even when nothing changed. The returned
        record spans the whole of `text` (start=0); callers that need the
        position inside a longer sentence must locate it themselves.
        """
        if not text or not corrected_reading:
            raise FuriganaInputError("text and corrected_reading are required")

        entry = await self._cache.store(
            text, corrected_reading, Confidence.USER, FuriganaSource.USER.value,
        )
        if entry.source != FuriganaSource.USER.value:
            # istniejący wpis z innego źródła przechodzi na własność użytkownika
            entry = await self._cache.update_confidence(
                text, corrected_reading, Confidence.USER, FuriganaSource.USER.value,
            ) or entry
        logger.info(
            "Correction applied: %r %r -> %r (confidence=%d)",
            text, previous_reading, corrected_reading, entry.confidence,
        )
        return CorrectionResult(
            text=text,
            reading=corrected_reading,
            confidence=entry.confidence,
            source=FuriganaSource.USER,
            start=0,
            end=len(text),
        )
