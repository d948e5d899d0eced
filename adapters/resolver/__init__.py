"""
Resolver furigana: warstwowe rozwiązywanie odczytów (vocabulary → cache →
morphology → LLM) oraz pętla korekt użytkownika.
"""
from .layered_resolver import LayeredFuriganaResolver
from .sources import CacheSource, LLMSource, MorphologySource, VocabularySource

__all__ = [
    "LayeredFuriganaResolver",
    "VocabularySource",
    "CacheSource",
    "MorphologySource",
    "LLMSource",
]
