"""
Port: WordStore
Odpowiedzialność: słownik zaufanych odczytów (vocabulary), dopasowanie dokładne.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import VocabularyEntry


@runtime_checkable
class WordStore(Protocol):
    async def lookup_word(self, word: str) -> Optional[str]:
        """Returns the trusted reading for an exact word match, or None."""
        ...

    async def add_word(self, entry: VocabularyEntry) -> VocabularyEntry:
        """
        Insert or update a vocabulary entry by (word, reading) uniqueness.
        Returns the stored entry with vocab_id assigned.
        """
        ...

    async def list_words(self, limit: int = 200) -> list[VocabularyEntry]:
        """Returns vocabulary entries ordered by word."""
        ...
