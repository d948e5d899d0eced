"""
Port: ReadingCache
Odpowiedzialność: pamięć par słowo→odczyt z pewnością i statystyką użycia.
Para (word, reading) jest unikalna; jedno słowo może mieć kilka odczytów.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import CachedReading, ReadingCacheEntry


@runtime_checkable
class ReadingCache(Protocol):
    async def lookup(self, word: str) -> Optional[CachedReading]:
        """
        Returns the highest-confidence cached reading for `word`, or None.
        Every hit increments usage_count and refreshes last_used_at.
        """
        ...

    async def store(
        self,
        word: str,
        reading: str,
        confidence: int,
        source: str,
    ) -> ReadingCacheEntry:
        """
        Creates the (word, reading) entry or updates the existing one:
        confidence = max(existing, new), usage_count + 1, last_used_at = now.
        The source of an existing entry is kept.
        """
        ...

    async def update_confidence(
        self,
        word: str,
        reading: str,
        confidence: int,
        source: str = "user",
    ) -> Optional[ReadingCacheEntry]:
        """
        Overwrites confidence and source of an existing entry (no max-merge).
        Returns None if the (word, reading) pair is not cached.
        """
        ...

    async def delete(self, cache_id: int) -> bool:
        """Deletes one entry. Returns False if it did not exist."""
        ...

    async def list_entries(
        self,
        word: Optional[str] = None,
        limit: int = 200,
    ) -> list[ReadingCacheEntry]:
        """Lists entries (optionally for one word), highest confidence first."""
        ...
