"""
schemas.py — Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from contracts import FuriganaItem, ReadingCacheEntry


# ─────────────────────────── /furigana ───────────────────────────

class GenerateRequest(BaseModel):
    text: str = Field(default="", max_length=10_000)
    use_mock_llm: bool = False
    api_key: Optional[str] = None  # klucz klienta; brak → klucz z konfiguracji


class GenerateResponse(BaseModel):
    furigana: list[FuriganaItem]


class UpdateRequest(BaseModel):
    text: str = ""
    reading: Optional[str] = None
    corrected_reading: str = ""


class UpdateResponse(BaseModel):
    success: bool
    entry: Optional[ReadingCacheEntry] = None


class RenderRequest(BaseModel):
    text: str
    furigana: list[FuriganaItem] = Field(default_factory=list)


class RenderResponse(BaseModel):
    html: str


# ─────────────────────────── /vocabulary ─────────────────────────

class VocabularyRequest(BaseModel):
    word: str = Field(..., min_length=1)
    reading: str = Field(..., min_length=1)
    meaning: Optional[str] = None
    part_of_speech: Optional[str] = None
    jlpt_level: Optional[int] = Field(default=None, ge=1, le=5)


# ─────────────────────────── /sentences ──────────────────────────

class SentenceFuriganaRequest(BaseModel):
    furigana_data: list[FuriganaItem]


class SentenceGenerateRequest(BaseModel):
    use_mock_llm: bool = False
    api_key: Optional[str] = None


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    db: str
    version: str
