"""
Adapter: InMemoryReadingCache
Implementuje port ReadingCache w pamięci procesu (CLI bez bazy, testy).
Semantyka jak w PostgresReadingCache: max-merge pewności, liczniki użycia.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from contracts import CachedReading, ReadingCacheEntry, clamp_confidence


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


class InMemoryReadingCache:
    """Cache odczytów trzymany w słowniku (word, reading) → entry."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], ReadingCacheEntry] = {}
        self._next_id = 1

    # ── lookup ────────────────────────────────────────────────────────────────

    async def lookup(self, word: str) -> Optional[CachedReading]:
        best: Optional[ReadingCacheEntry] = None
        for entry in self._entries.values():
            if entry.word == word and (best is None or entry.confidence > best.confidence):
                best = entry
        if best is None:
            return None

        best.usage_count += 1
        best.last_used_at = _now()
        return CachedReading(reading=best.reading, confidence=best.confidence)

    async def list_entries(
        self,
        word: Optional[str] = None,
        limit: int = 200,
    ) -> list[ReadingCacheEntry]:
        entries = [e for e in self._entries.values() if word is None or e.word == word]
        entries.sort(key=lambda e: (-e.confidence, e.cache_id or 0))
        return [e.model_copy() for e in entries[:limit]]

    def get(self, word: str, reading: str) -> Optional[ReadingCacheEntry]:
        """Bezpośredni podgląd wpisu, bez liczenia użycia."""
        return self._entries.get((word, reading))

    # ── zapis ─────────────────────────────────────────────────────────────────

    async def store(
        self,
        word: str,
        reading: str,
        confidence: int,
        source: str,
    ) -> ReadingCacheEntry:
        now = _now()
        existing = self._entries.get((word, reading))
        if existing is not None:
            existing.confidence = max(existing.confidence, clamp_confidence(confidence))
            existing.usage_count += 1
            existing.last_used_at = now
            return existing.model_copy()

        entry = ReadingCacheEntry(
            cache_id=self._next_id,
            word=word,
            reading=reading,
            confidence=confidence,
            source=source,
            usage_count=1,
            created_at=now,
            last_used_at=now,
        )
        self._next_id += 1
        self._entries[(word, reading)] = entry
        return entry.model_copy()

    async def update_confidence(
        self,
        word: str,
        reading: str,
        confidence: int,
        source: str = "user",
    ) -> Optional[ReadingCacheEntry]:
        existing = self._entries.get((word, reading))
        if existing is None:
            return None
        existing.confidence = clamp_confidence(confidence)
        existing.source = source
        existing.last_used_at = _now()
        return existing.model_copy()

    async def delete(self, cache_id: int) -> bool:
        for key, entry in self._entries.items():
            if entry.cache_id == cache_id:
                del self._entries[key]
                return True
        return False
