"""
dependencies.py — FastAPI Dependency Injection.
Każda zależność zwraca odpowiedni adapter przez Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.resolver import LayeredFuriganaResolver
from config import Settings
from ports.reading_cache import ReadingCache
from ports.sentence_store import SentenceStore
from ports.word_store import WordStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_word_store(request: Request) -> WordStore:
    return request.app.state.word_store


def get_reading_cache(request: Request) -> ReadingCache:
    return request.app.state.reading_cache


def get_sentence_store(request: Request) -> SentenceStore:
    return request.app.state.sentence_store


def get_resolver(request: Request) -> LayeredFuriganaResolver:
    return request.app.state.resolver
