"""
PostgresReadingCache — implementacja portu ReadingCache na PostgreSQL.

Schemat:
  - furigana_cache: pary (word, reading) z pewnością, źródłem i statystyką użycia

Unikalność:
  - UNIQUE(word, reading) → store() jest upsertem z GREATEST(confidence)

Odczyt i aktualizacja licznika użycia nie są atomowe względem innych
wywołań; zgubiony inkrement jest akceptowalny (statystyka best-effort).
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import asyncpg

from contracts import CachedReading, ReadingCacheEntry, clamp_confidence

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS furigana_cache (
    cache_id     SERIAL PRIMARY KEY,
    word         TEXT NOT NULL,
    reading      TEXT NOT NULL,
    confidence   INTEGER NOT NULL DEFAULT 0,
    source       TEXT NOT NULL,
    created_at   TIMESTAMPTZ NOT NULL DEFAULT now(),
    last_used_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    usage_count  INTEGER NOT NULL DEFAULT 1,
    CONSTRAINT uq_furigana_cache_word_reading UNIQUE (word, reading)
);

CREATE INDEX IF NOT EXISTS idx_furigana_cache_word ON furigana_cache(word);
"""


class PostgresReadingCache:
    """Implementacja ReadingCache na PostgreSQL + asyncpg."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    # ──────────────────────── Lifecycle ──────────────────────────────────

    @classmethod
    async def create(cls, dsn: str) -> "PostgresReadingCache":
        """Factory: tworzy pool połączeń i aplikuje schemat."""
        pool = await asyncpg.create_pool(dsn, min_size=2, max_size=10)
        store = cls(pool)
        await store._apply_schema()
        return store

    async def _apply_schema(self) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute(_SCHEMA_SQL)

    async def close(self) -> None:
        await self._pool.close()

    # ──────────────────────── Odczyt ─────────────────────────────────────

    async def lookup(self, word: str) -> Optional[CachedReading]:
        """Najwyższa pewność wygrywa; każde trafienie podbija usage_count."""
        now = datetime.now(tz=timezone.utc)
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT cache_id, reading, confidence FROM furigana_cache
                WHERE word = $1
                ORDER BY confidence DESC, cache_id
                LIMIT 1
                """,
                word,
            )
            if row is None:
                return None
            await conn.execute(
                """
                UPDATE furigana_cache
                SET usage_count = usage_count + 1, last_used_at = $1
                WHERE cache_id = $2
                """,
                now,
                row["cache_id"],
            )
        return CachedReading(reading=row["reading"], confidence=row["confidence"])

    async def list_entries(
        self,
        word: Optional[str] = None,
        limit: int = 200,
    ) -> list[ReadingCacheEntry]:
        if word is not None:
            sql = """
                SELECT * FROM furigana_cache WHERE word = $1
                ORDER BY confidence DESC, cache_id LIMIT $2
            """
            params = [word, limit]
        else:
            sql = "SELECT * FROM furigana_cache ORDER BY confidence DESC, cache_id LIMIT $1"
            params = [limit]

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(sql, *params)
        return [_row_to_entry(r) for r in rows]

    # ──────────────────────── Zapis ──────────────────────────────────────

    async def store(
        self,
        word: str,
        reading: str,
        confidence: int,
        source: str,
    ) -> ReadingCacheEntry:
        """
        INSERT … ON CONFLICT (word, reading) DO UPDATE.
        Pewność nigdy nie maleje: GREATEST(istniejąca, nowa).
        """
        now = datetime.now(tz=timezone.utc)
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO furigana_cache
                    (word, reading, confidence, source, created_at, last_used_at, usage_count)
                VALUES ($1, $2, $3, $4, $5, $5, 1)
                ON CONFLICT (word, reading) DO UPDATE
                    SET confidence   = GREATEST(furigana_cache.confidence, EXCLUDED.confidence),
                        usage_count  = furigana_cache.usage_count + 1,
                        last_used_at = EXCLUDED.last_used_at
                RETURNING *
                """,
                word,
                reading,
                clamp_confidence(confidence),
                source,
                now,
            )
        return _row_to_entry(row)

    async def update_confidence(
        self,
        word: str,
        reading: str,
        confidence: int,
        source: str = "user",
    ) -> Optional[ReadingCacheEntry]:
        now = datetime.now(tz=timezone.utc)
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                UPDATE furigana_cache
                SET confidence = $3, source = $4, last_used_at = $5
                WHERE word = $1 AND reading = $2
                RETURNING *
                """,
                word,
                reading,
                clamp_confidence(confidence),
                source,
                now,
            )
        return _row_to_entry(row) if row is not None else None

    async def delete(self, cache_id: int) -> bool:
        async with self._pool.acquire() as conn:
            deleted = await conn.fetchval(
                "DELETE FROM furigana_cache WHERE cache_id = $1 RETURNING cache_id",
                cache_id,
            )
        return deleted is not None


def _row_to_entry(row: asyncpg.Record) -> ReadingCacheEntry:
    return ReadingCacheEntry(
        cache_id=row["cache_id"],
        word=row["word"],
        reading=row["reading"],
        confidence=row["confidence"],
        source=row["source"],
        usage_count=row["usage_count"],
        created_at=row["created_at"],
        last_used_at=row["last_used_at"],
    )
