"""
Adapter: InMemoryWordStore
Implementuje port WordStore za pomocą słownika in-memory.
Używany w CLI (tryb bez bazy) i w testach.
"""
from __future__ import annotations

from typing import Iterable, Optional

from contracts import VocabularyEntry


class InMemoryWordStore:
    """
    Prosty WordStore oparty na słowniku.
    Brak locka – jeden event loop.
    """

    def __init__(self, entries: Iterable[tuple[str, str]] = ()) -> None:
        # (word, reading) → VocabularyEntry; kolejność wstawienia = priorytet
        self._entries: dict[tuple[str, str], VocabularyEntry] = {}
        self._next_id = 1
        for word, reading in entries:
            self._insert(VocabularyEntry(word=word, reading=reading))

    # -- WordStore protocol ---------------------------------

    async def lookup_word(self, word: str) -> Optional[str]:
        for (entry_word, _), entry in self._entries.items():
            if entry_word == word:
                return entry.reading
        return None

    async def add_word(self, entry: VocabularyEntry) -> VocabularyEntry:
        existing = self._entries.get((entry.word, entry.reading))
        if existing is not None:
            updated = entry.model_copy(update={"vocab_id": existing.vocab_id})
            self._entries[(entry.word, entry.reading)] = updated
            return updated
        return self._insert(entry)

    async def list_words(self, limit: int = 200) -> list[VocabularyEntry]:
        return sorted(self._entries.values(), key=lambda e: e.word)[:limit]

    # -- Prywatne ------------------------------------------

    def _insert(self, entry: VocabularyEntry) -> VocabularyEntry:
        stored = entry.model_copy(update={"vocab_id": self._next_id})
        self._next_id += 1
        self._entries[(stored.word, stored.reading)] = stored
        return stored
