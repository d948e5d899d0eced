"""
PostgresWordStore — implementacja portu WordStore na PostgreSQL.

Schema jest tworzona automatycznie przy pierwszym połączeniu (apply_schema).
Unikalność: vocabulary UNIQUE(word, reading) → upsert idempotentny.
"""
from __future__ import annotations

from typing import Optional

import asyncpg

from contracts import VocabularyEntry

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS vocabulary (
    vocab_id       SERIAL PRIMARY KEY,
    word           TEXT NOT NULL,
    reading        TEXT NOT NULL,
    meaning        TEXT,
    part_of_speech TEXT,
    jlpt_level     INTEGER,
    source         TEXT NOT NULL DEFAULT 'system',
    added_at       TIMESTAMPTZ NOT NULL DEFAULT now(),
    CONSTRAINT uq_vocabulary_word_reading UNIQUE (word, reading)
);

CREATE INDEX IF NOT EXISTS idx_vocabulary_word ON vocabulary(word);
"""


class PostgresWordStore:
    """Implementacja WordStore na PostgreSQL + asyncpg."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    # ──────────────────────── Lifecycle ──────────────────────────────────

    @classmethod
    async def create(cls, dsn: str) -> "PostgresWordStore":
        """Factory: tworzy pool połączeń i aplikuje schemat."""
        pool = await asyncpg.create_pool(dsn, min_size=1, max_size=5)
        store = cls(pool)
        await store._apply_schema()
        return store

    async def _apply_schema(self) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute(_SCHEMA_SQL)

    async def close(self) -> None:
        await self._pool.close()

    # ──────────────────────── WordStore ──────────────────────────────────

    async def lookup_word(self, word: str) -> Optional[str]:
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT reading FROM vocabulary WHERE word = $1 ORDER BY vocab_id LIMIT 1",
                word,
            )

    async def add_word(self, entry: VocabularyEntry) -> VocabularyEntry:
        """INSERT … ON CONFLICT (word, reading) DO UPDATE metadanych."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO vocabulary
                    (word, reading, meaning, part_of_speech, jlpt_level, source, added_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                ON CONFLICT (word, reading) DO UPDATE
                    SET meaning        = EXCLUDED.meaning,
                        part_of_speech = EXCLUDED.part_of_speech,
                        jlpt_level     = EXCLUDED.jlpt_level,
                        source         = EXCLUDED.source
                RETURNING *
                """,
                entry.word,
                entry.reading,
                entry.meaning,
                entry.part_of_speech,
                entry.jlpt_level,
                entry.source,
                entry.added_at,
            )
        return _row_to_entry(row)

    async def list_words(self, limit: int = 200) -> list[VocabularyEntry]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM vocabulary ORDER BY word, vocab_id LIMIT $1", limit
            )
        return [_row_to_entry(r) for r in rows]


def _row_to_entry(row: asyncpg.Record) -> VocabularyEntry:
    return VocabularyEntry(
        vocab_id=row["vocab_id"],
        word=row["word"],
        reading=row["reading"],
        meaning=row["meaning"],
        part_of_speech=row["part_of_speech"],
        jlpt_level=row["jlpt_level"],
        source=row["source"],
        added_at=row["added_at"],
    )
