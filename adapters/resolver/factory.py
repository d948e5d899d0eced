"""
factory.py — składanie LayeredFuriganaResolver z konfiguracji.

Wspólne dla API (lifespan) i CLI; nie otwiera połączeń do bazy,
magazyny są przekazywane z zewnątrz.
"""
from __future__ import annotations

from adapters.reading_generator.llm_generator import LLMReadingGenerator
from adapters.tokenizer.sudachi_tokenizer import SudachiTokenizer
from config import Settings
from ports.reading_cache import ReadingCache
from ports.word_store import WordStore

from .layered_resolver import LayeredFuriganaResolver


def build_resolver(
    settings: Settings,
    word_store: WordStore,
    reading_cache: ReadingCache,
) -> LayeredFuriganaResolver:
    return LayeredFuriganaResolver(
        word_store=word_store,
        reading_cache=reading_cache,
        tokenizer=SudachiTokenizer(
            dict_variant=settings.sudachi_dict,
            split_mode=settings.sudachi_split_mode,
        ),
        generator=LLMReadingGenerator(
            provider=settings.llm_provider,
            model=settings.llm_model,
            url=settings.openai_url if settings.llm_provider == "openai" else settings.anthropic_url,
            timeout_ms=settings.llm_timeout_ms,
        ),
        morphology_policy=settings.morphology_policy,
    )
