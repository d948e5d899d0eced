#!/usr/bin/env python3
"""
furigana_cli.py — CLI narzędzie serwisu furigana.

Działa lokalnie: łączy się bezpośrednio z PostgreSQL,
nie wymaga uruchomionego serwera API. Z --memory działa bez bazy
(słownik i cache w pamięci procesu, tylko na czas jednego polecenia).

Konfiguracja: zmienne środowiskowe z prefiksem FURIGANA_
lub plik .env (np. FURIGANA_DB_URL=postgresql://...).

Podkomendy:
    resolve       — wygeneruj furiganę dla tekstu
    render        — wyrenderuj tekst z annotacjami <ruby>
    correct       — zapisz korektę odczytu (pewność 100)
    cache         — listuj wpisy cache odczytów
    cache-delete  — usuń wpis cache po ID
    vocab-add     — dodaj słowo do słownika
    seed          — załaduj przykładowy słownik i zdania
    health        — sprawdź połączenie z bazą danych
    serve         — uruchom API (uvicorn)

Użycie:
    python furigana_cli.py resolve --text "日本語を勉強しています" --memory
    python furigana_cli.py resolve --text "東京に行きました" --api-key sk-... --mock
    python furigana_cli.py render --text "日本語" --json '[{"text":"日本語","reading":"にほんご","start":0,"end":3}]'
    python furigana_cli.py correct --text 漢字 --reading かんじ --corrected かんじ
    python furigana_cli.py cache --word 日本語
    python furigana_cli.py vocab-add --word 勉強 --reading べんきょう
    python furigana_cli.py serve --port 8000
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None

SEED_VOCABULARY: list[tuple[str, str, str]] = [
    ("日本語", "にほんご", "Japanese language"),
    ("勉強", "べんきょう", "study"),
    ("漢字", "かんじ", "kanji"),
    ("東京", "とうきょう", "Tokyo"),
    ("友達", "ともだち", "friend"),
    ("明日", "あした", "tomorrow"),
    ("昨日", "きのう", "yesterday"),
    ("料理", "りょうり", "cooking, food"),
    ("電車", "でんしゃ", "train"),
    ("会議", "かいぎ", "meeting"),
]

SEED_SENTENCES: list[tuple[str, str, int, str]] = [
    ("私は日本語を勉強しています。", "I am studying Japanese.", 1, "beginner,JLPT N5"),
    ("明日は友達と東京に行きます。", "Tomorrow I will go to Tokyo with my friend.", 1, "beginner,JLPT N5,travel"),
    ("本を読むことが好きです。", "I like reading books.", 1, "beginner,JLPT N5,hobbies"),
    ("電車が遅れたので、会議に遅刻しました。",
     "Because the train was delayed, I was late for the meeting.", 3, "intermediate,JLPT N3"),
]


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _settings():
    from config import Settings
    return Settings()


def _dsn() -> str:
    return _settings().db_url.replace("postgresql+asyncpg://", "postgresql://", 1)


def _read_text(args: argparse.Namespace) -> str:
    text = getattr(args, "text", None) or sys.stdin.read().strip()
    if not text:
        print("Błąd: podaj tekst przez --text lub stdin", file=sys.stderr)
        sys.exit(1)
    return text


def _print_items_table(text: str, items: list[Any]) -> None:
    table = Table(title=f"Furigana: {text} [{len(items)}]", box=box.ASCII)
    table.add_column("Text", no_wrap=True, style="bold cyan")
    table.add_column("Reading")
    table.add_column("Start", justify="right", no_wrap=True)
    table.add_column("End", justify="right", no_wrap=True)
    for item in items:
        table.add_row(item.text, item.reading or "", str(item.start), str(item.end))
    _console().print(table)


def _print_cache_table(entries: list[Any]) -> None:
    table = Table(title=f"Reading cache [{len(entries)}]", box=box.ASCII)
    table.add_column("ID", justify="right", no_wrap=True, style="cyan")
    table.add_column("Word", no_wrap=True)
    table.add_column("Reading")
    table.add_column("Conf", justify="right", no_wrap=True)
    table.add_column("Source", no_wrap=True)
    table.add_column("Used", justify="right", no_wrap=True)
    table.add_column("Last used", no_wrap=True)
    for e in entries:
        table.add_row(
            str(e.cache_id),
            e.word,
            e.reading,
            str(e.confidence),
            e.source,
            str(e.usage_count),
            e.last_used_at.strftime("%Y-%m-%d %H:%M"),
        )
    _console().print(table)


async def _open_stores(memory: bool):
    """Zwraca (word_store, reading_cache, close)."""
    if memory:
        from adapters.reading_cache.memory_reading_cache import InMemoryReadingCache
        from adapters.word_store.memory_word_store import InMemoryWordStore

        async def _noop() -> None:
            return None

        vocab = InMemoryWordStore((w, r) for w, r, _ in SEED_VOCABULARY)
        return vocab, InMemoryReadingCache(), _noop

    from adapters.reading_cache.postgres_reading_cache import PostgresReadingCache
    from adapters.word_store.postgres_word_store import PostgresWordStore

    dsn = _dsn()
    vocab = await PostgresWordStore.create(dsn)
    cache = await PostgresReadingCache.create(dsn)

    async def _close() -> None:
        await vocab.close()
        await cache.close()

    return vocab, cache, _close


# -- commands --------------------------------------------------------------

async def _resolve(args: argparse.Namespace) -> None:
    from adapters.renderer import render_furigana
    from adapters.resolver.factory import build_resolver

    text = _read_text(args)
    settings = _settings()
    vocab, cache, close = await _open_stores(args.memory)
    try:
        resolver = build_resolver(settings, vocab, cache)
        items = await resolver.resolve(
            text,
            api_key=args.api_key or settings.llm_api_key,
            mock_mode=args.mock or settings.mock_llm,
        )
    finally:
        await close()

    if args.json:
        print(json.dumps([i.model_dump() for i in items], ensure_ascii=False, indent=2))
        return
    _print_items_table(text, items)
    if args.render:
        print(render_furigana(text, items))


def _render(args: argparse.Namespace) -> None:
    from adapters.renderer import check_spans, render_furigana
    from contracts import FuriganaInputError, FuriganaItem

    text = _read_text(args)
    try:
        raw = json.loads(args.json)
    except json.JSONDecodeError as exc:
        print(f"Błąd: niepoprawny JSON annotacji: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(raw, list):
        print("Błąd: annotacje muszą być tablicą JSON", file=sys.stderr)
        sys.exit(1)
    items = [FuriganaItem.model_validate(d) for d in raw]
    try:
        check_spans(text, items)
    except FuriganaInputError as exc:
        print(f"Błąd: {exc}", file=sys.stderr)
        sys.exit(1)
    print(render_furigana(text, items))


async def _correct(args: argparse.Namespace) -> None:
    from adapters.resolver.factory import build_resolver
    from contracts import FuriganaInputError

    vocab, cache, close = await _open_stores(memory=False)
    try:
        resolver = build_resolver(_settings(), vocab, cache)
        result = await resolver.apply_correction(args.text, args.reading or "", args.corrected)
    except FuriganaInputError as exc:
        print(f"Błąd: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        await close()

    print(f"text:       {result.text}")
    print(f"reading:    {result.reading}")
    print(f"confidence: {result.confidence}")
    print(f"source:     {result.source.value}")


async def _cache(args: argparse.Namespace) -> None:
    from adapters.reading_cache.postgres_reading_cache import PostgresReadingCache

    store = await PostgresReadingCache.create(_dsn())
    try:
        entries = await store.list_entries(word=args.word, limit=args.limit)
    finally:
        await store.close()
    _print_cache_table(entries)


async def _cache_delete(args: argparse.Namespace) -> None:
    from adapters.reading_cache.postgres_reading_cache import PostgresReadingCache

    store = await PostgresReadingCache.create(_dsn())
    try:
        deleted = await store.delete(args.cache_id)
    finally:
        await store.close()
    if not deleted:
        print(f"Brak wpisu cache: {args.cache_id}", file=sys.stderr)
        sys.exit(1)
    print(f"Usunięto wpis cache {args.cache_id}.")


async def _vocab_add(args: argparse.Namespace) -> None:
    from adapters.word_store.postgres_word_store import PostgresWordStore
    from contracts import VocabularyEntry

    store = await PostgresWordStore.create(_dsn())
    try:
        entry = await store.add_word(VocabularyEntry(
            word=args.word,
            reading=args.reading,
            meaning=args.meaning,
            source="user",
        ))
    finally:
        await store.close()
    print(f"vocab_id: {entry.vocab_id}")
    print(f"word:     {entry.word}")
    print(f"reading:  {entry.reading}")


async def _seed(args: argparse.Namespace) -> None:
    from adapters.sentence_store.postgres_sentence_store import PostgresSentenceStore
    from adapters.word_store.postgres_word_store import PostgresWordStore
    from contracts import SentenceIn, VocabularyEntry

    dsn = _dsn()
    vocab = await PostgresWordStore.create(dsn)
    sentences = await PostgresSentenceStore.create(dsn)
    try:
        for word, reading, meaning in SEED_VOCABULARY:
            await vocab.add_word(VocabularyEntry(
                word=word, reading=reading, meaning=meaning, source="seed",
            ))
        if not args.no_sentences:
            for sentence, translation, level, tags in SEED_SENTENCES:
                await sentences.create_sentence(SentenceIn(
                    sentence=sentence,
                    translation=translation,
                    difficulty_level=level,
                    tags=tags,
                    source="seed",
                ))
    finally:
        await vocab.close()
        await sentences.close()

    print(f"Słownik: {len(SEED_VOCABULARY)} słów.")
    if not args.no_sentences:
        print(f"Zdania:  {len(SEED_SENTENCES)}.")


async def _health(args: argparse.Namespace) -> None:
    import asyncpg
    dsn = _dsn()
    try:
        conn = await asyncpg.connect(dsn, timeout=5)
        await conn.fetchval("SELECT 1")
        await conn.close()
        host_db = dsn.split("@")[-1]
        print("status:  ok")
        print(f"db:      {host_db}")
    except Exception as exc:
        print("status:  error", file=sys.stderr)
        print(f"db:      {exc}", file=sys.stderr)
        sys.exit(1)


def _serve(args: argparse.Namespace) -> None:
    import uvicorn
    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


# -- main ------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(
        prog="furigana",
        description="Furigana — CLI (lokalny, bez serwera API)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # resolve
    p = sub.add_parser("resolve", help="Wygeneruj furiganę dla tekstu")
    p.add_argument("--text", "-t", help="Tekst (lub stdin)")
    p.add_argument("--api-key", help="Klucz API modelu (włącza warstwę LLM)")
    p.add_argument("--mock", action="store_true", help="Odpowiedzi LLM ze stałej tabeli")
    p.add_argument("--memory", action="store_true",
                   help="Bez bazy: przykładowy słownik i pusty cache w pamięci")
    p.add_argument("--json", action="store_true", help="Wynik jako JSON")
    p.add_argument("--render", action="store_true", help="Pokaż też tekst z <ruby>")

    # render
    p = sub.add_parser("render", help="Wyrenderuj tekst z annotacjami <ruby>")
    p.add_argument("--text", "-t", help="Tekst (lub stdin)")
    p.add_argument("--json", "-j", required=True, help="Annotacje jako tablica JSON")

    # correct
    p = sub.add_parser("correct", help="Zapisz korektę odczytu")
    p.add_argument("--text", "-t", required=True)
    p.add_argument("--reading", "-r", default="", help="Poprzedni odczyt")
    p.add_argument("--corrected", "-c", required=True, help="Poprawny odczyt")

    # cache
    p = sub.add_parser("cache", help="Listuj wpisy cache odczytów")
    p.add_argument("--word", "-w")
    p.add_argument("--limit", type=int, default=200, metavar="N")

    # cache-delete
    p = sub.add_parser("cache-delete", help="Usuń wpis cache po ID")
    p.add_argument("cache_id", type=int)

    # vocab-add
    p = sub.add_parser("vocab-add", help="Dodaj słowo do słownika")
    p.add_argument("--word", "-w", required=True)
    p.add_argument("--reading", "-r", required=True)
    p.add_argument("--meaning", "-m")

    # seed
    p = sub.add_parser("seed", help="Załaduj przykładowy słownik i zdania")
    p.add_argument("--no-sentences", action="store_true")

    # health
    sub.add_parser("health", help="Sprawdź połączenie z bazą danych")

    # serve
    p = sub.add_parser("serve", help="Uruchom API (uvicorn)")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--reload", action="store_true")

    args = parser.parse_args()
    logging.basicConfig(level=_settings().log_level.upper())

    async_cmds = {
        "resolve":      _resolve,
        "correct":      _correct,
        "cache":        _cache,
        "cache-delete": _cache_delete,
        "vocab-add":    _vocab_add,
        "seed":         _seed,
        "health":       _health,
    }

    if args.command in async_cmds:
        asyncio.run(async_cmds[args.command](args))
    elif args.command == "render":
        _render(args)
    elif args.command == "serve":
        _serve(args)


if __name__ == "__main__":
    main()
