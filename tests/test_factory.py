from adapters.reading_cache.memory_reading_cache import InMemoryReadingCache
from adapters.resolver import LayeredFuriganaResolver
from adapters.resolver.factory import build_resolver
from adapters.word_store.memory_word_store import InMemoryWordStore
from config import Settings
from contracts import MorphologyPolicy


def test_build_resolver_uses_settings():
    settings = Settings(
        _env_file=None,
        llm_provider="anthropic",
        morphology_policy=MorphologyPolicy.NO_CANDIDATES,
        sudachi_split_mode="A",
    )

    resolver = build_resolver(settings, InMemoryWordStore(), InMemoryReadingCache())

    assert isinstance(resolver, LayeredFuriganaResolver)
    assert resolver._policy is MorphologyPolicy.NO_CANDIDATES
    assert resolver._morphology._tokenizer.split_mode == "A"
    assert resolver._llm._generator._provider == "anthropic"
