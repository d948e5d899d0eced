"""
PostgresSentenceStore — implementacja portu SentenceStore na PostgreSQL.

furigana_data przechowywane jako JSONB (lista FuriganaItem).
"""
from __future__ import annotations

import json

import asyncpg

from contracts import FuriganaItem, Sentence, SentenceIn

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sentences (
    sentence_id      SERIAL PRIMARY KEY,
    sentence         TEXT NOT NULL,
    translation      TEXT,
    furigana_data    JSONB NOT NULL DEFAULT '[]',
    difficulty_level INTEGER,
    tags             TEXT,
    source           TEXT,
    created_at       TIMESTAMPTZ NOT NULL DEFAULT now(),
    llm_processed    BOOLEAN NOT NULL DEFAULT false
);
"""


class PostgresSentenceStore:
    """Implementacja SentenceStore na PostgreSQL + asyncpg."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    # ──────────────────────── Lifecycle ──────────────────────────────────

    @classmethod
    async def create(cls, dsn: str) -> "PostgresSentenceStore":
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

    # ──────────────────────── CRUD ───────────────────────────────────────

    async def create_sentence(self, sentence: SentenceIn) -> Sentence:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO sentences
                    (sentence, translation, furigana_data, difficulty_level, tags, source)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING *
                """,
                sentence.sentence,
                sentence.translation,
                _dump_items(sentence.furigana_data),
                sentence.difficulty_level,
                sentence.tags,
                sentence.source,
            )
        return _row_to_sentence(row)

    async def get_sentence(self, sentence_id: int) -> Sentence:
        """Rzuca KeyError jeśli nie znaleziono."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM sentences WHERE sentence_id = $1", sentence_id
            )
        if row is None:
            raise KeyError(f"Sentence not found: {sentence_id}")
        return _row_to_sentence(row)

    async def list_sentences(self, limit: int = 50, offset: int = 0) -> list[Sentence]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT * FROM sentences
                ORDER BY created_at DESC, sentence_id DESC
                LIMIT $1 OFFSET $2
                """,
                limit,
                offset,
            )
        return [_row_to_sentence(r) for r in rows]

    async def update_furigana(
        self,
        sentence_id: int,
        items: list[FuriganaItem],
        llm_processed: bool = False,
    ) -> Sentence:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                UPDATE sentences
                SET furigana_data = $2,
                    llm_processed = llm_processed OR $3
                WHERE sentence_id = $1
                RETURNING *
                """,
                sentence_id,
                _dump_items(items),
                llm_processed,
            )
        if row is None:
            raise KeyError(f"Sentence not found: {sentence_id}")
        return _row_to_sentence(row)

    async def delete_sentence(self, sentence_id: int) -> None:
        async with self._pool.acquire() as conn:
            deleted = await conn.fetchval(
                "DELETE FROM sentences WHERE sentence_id = $1 RETURNING sentence_id",
                sentence_id,
            )
        if deleted is None:
            raise KeyError(f"Sentence not found: {sentence_id}")


def _dump_items(items: list[FuriganaItem]) -> str:
    return json.dumps([i.model_dump() for i in items], ensure_ascii=False)


def _row_to_sentence(row: asyncpg.Record) -> Sentence:
    raw = row["furigana_data"]
    data = json.loads(raw) if isinstance(raw, str) else (raw or [])
    return Sentence(
        sentence_id=row["sentence_id"],
        sentence=row["sentence"],
        translation=row["translation"],
        furigana_data=[FuriganaItem.model_validate(d) for d in data],
        difficulty_level=row["difficulty_level"],
        tags=row["tags"],
        source=row["source"],
        created_at=row["created_at"],
        llm_processed=row["llm_processed"],
    )
