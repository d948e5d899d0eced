"""
contracts.py — Jedyne źródło prawdy dla wszystkich typów danych w serwisie furigana.
Wszystkie moduły importują WYŁĄCZNIE stąd. Nie modyfikować bez versioning.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

CONTRACTS_VERSION = "1.0.0"


# ─────────────────────────── Helpers ─────────────────────────────────────

def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


# ─────────────────────────── Errors ──────────────────────────────────────

class FuriganaInputError(ValueError):
    """Brak wymaganych danych wejściowych (tekst, odczyt, klucz API)."""


# ─────────────────────────── Źródła i pewność ────────────────────────────

class FuriganaSource(str, Enum):
    VOCABULARY = "vocabulary"
    CACHE = "cache"
    MORPHOLOGY = "morphology"
    LLM = "llm"
    USER = "user"


class Confidence:
    """Statyczny ranking źródeł: wyższy wygrywa przy konflikcie."""

    VOCABULARY = 100
    USER = 100
    LLM = 85
    MORPHOLOGY = 70


def clamp_confidence(value: int) -> int:
    return max(0, min(Confidence.USER, value))


class MorphologyPolicy(str, Enum):
    """Kiedy uruchamiać warstwę morfologiczną (warstwa 2)."""

    NO_CANDIDATES = "no_candidates"  # tylko gdy warstwa 1 nic nie znalazła
    COVERAGE_GAPS = "coverage_gaps"  # gdy zakresy nie pokrywają całego tekstu


# ─────────────────────────── Annotacje ───────────────────────────────────

class ProcessedRange(BaseModel):
    """Przedział [start, end) już opisany w bieżącym przebiegu."""
    start: int
    end: int


class AnnotationCandidate(BaseModel):
    text: str
    reading: str
    start: int
    end: int
    confidence: int
    source: FuriganaSource

    @model_validator(mode="after")
    def _check_span(self) -> "AnnotationCandidate":
        if not 0 <= self.start < self.end:
            raise ValueError(f"invalid span [{self.start}, {self.end})")
        if self.end - self.start != len(self.text):
            raise ValueError("span length does not match text")
        return self

    def to_item(self) -> "FuriganaItem":
        return FuriganaItem(
            text=self.text,
            reading=self.reading,
            start=self.start,
            end=self.end,
        )


class FuriganaItem(BaseModel):
    """Publiczny kształt annotacji (bez metadanych pewności / źródła)."""
    text: str
    reading: Optional[str] = None
    start: int
    end: int


class CorrectionResult(BaseModel):
    text: str
    reading: str
    confidence: int
    source: FuriganaSource
    start: int
    end: int


# ─────────────────────────── WordStore ───────────────────────────────────

class VocabularyEntry(BaseModel):
    vocab_id: Optional[int] = None
    word: str
    reading: str
    meaning: Optional[str] = None
    part_of_speech: Optional[str] = None
    jlpt_level: Optional[int] = None
    source: str = "system"
    added_at: datetime = Field(default_factory=_now)


# ─────────────────────────── ReadingCache ────────────────────────────────

class ReadingCacheEntry(BaseModel):
    cache_id: Optional[int] = None
    word: str
    reading: str
    confidence: int = 0
    source: str
    usage_count: int = 1
    created_at: datetime = Field(default_factory=_now)
    last_used_at: datetime = Field(default_factory=_now)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, v: int) -> int:
        return clamp_confidence(v)


class CachedReading(BaseModel):
    """Wynik odczytu z cache: najlepszy odczyt dla słowa."""
    reading: str
    confidence: int


# ─────────────────────────── Tokenizer ───────────────────────────────────

class MorphToken(BaseModel):
    surface_form: str
    part_of_speech: str  # główna kategoria, np. "名詞", "助詞", "補助記号"
    reading: str = ""    # katakana; pusty gdy słownik nie zna odczytu


class MorphReading(BaseModel):
    word: str
    reading: str  # hiragana
    confidence: int = Confidence.MORPHOLOGY


# ─────────────────────────── ReadingGenerator ────────────────────────────

class LLMReading(BaseModel):
    text: str
    furigana: str = ""  # pusty = brak potrzeby odczytu


# ─────────────────────────── SentenceStore ───────────────────────────────

class SentenceIn(BaseModel):
    sentence: str
    translation: Optional[str] = None
    furigana_data: list[FuriganaItem] = Field(default_factory=list)
    difficulty_level: Optional[int] = None
    tags: Optional[str] = None
    source: Optional[str] = None


class Sentence(SentenceIn):
    sentence_id: int
    created_at: datetime = Field(default_factory=_now)
    llm_processed: bool = False
