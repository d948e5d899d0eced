"""
api/main.py — punkt wejścia FastAPI.

Lifespan:
  - Tworzy pule asyncpg dla WordStore, ReadingCache i SentenceStore
  - Składa resolver (adapters/resolver/factory.py)
  - Przy zamknięciu zamyka połączenia do bazy

DSN: config.db_url może mieć prefiks 'postgresql+asyncpg://' (SQLAlchemy-style);
asyncpg oczekuje 'postgresql://'. Prefiks jest tu konwertowany.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adapters.reading_cache.postgres_reading_cache import PostgresReadingCache
from adapters.resolver.factory import build_resolver
from adapters.sentence_store.postgres_sentence_store import PostgresSentenceStore
from adapters.word_store.postgres_word_store import PostgresWordStore
from api.routers import cache, furigana, sentences, vocabulary
from api.schemas import HealthResponse
from config import Settings
from contracts import FuriganaInputError

logger = logging.getLogger("furigana")


def _asyncpg_dsn(url: str) -> str:
    """Konwertuje 'postgresql+asyncpg://...' → 'postgresql://...'."""
    return url.replace("postgresql+asyncpg://", "postgresql://", 1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    dsn = _asyncpg_dsn(settings.db_url)

    logger.info("Connecting to PostgreSQL...")
    app.state.word_store = await PostgresWordStore.create(dsn)
    app.state.reading_cache = await PostgresReadingCache.create(dsn)
    app.state.sentence_store = await PostgresSentenceStore.create(dsn)

    app.state.resolver = build_resolver(
        settings, app.state.word_store, app.state.reading_cache,
    )

    logger.info(
        "Furigana API ready (llm=%s, morphology=%s).",
        settings.llm_provider, settings.morphology_policy.value,
    )
    yield

    logger.info("Shutting down, closing DB pools.")
    await app.state.word_store.close()
    await app.state.reading_cache.close()
    await app.state.sentence_store.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(furigana.router)
    app.include_router(cache.router)
    app.include_router(vocabulary.router)
    app.include_router(sentences.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health(request: Request):
        db_status = "ok"
        try:
            pool = request.app.state.reading_cache._pool
            await pool.fetchval("SELECT 1")
        except Exception as e:
            db_status = f"error: {e}"

        return HealthResponse(
            status="ok" if db_status == "ok" else "degraded",
            db=db_status,
            version=settings.app_version,
        )

    # Globalne handlery błędów
    @app.exception_handler(KeyError)
    async def key_error_handler(request: Request, exc: KeyError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(FuriganaInputError)
    async def input_error_handler(request: Request, exc: FuriganaInputError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


app = create_app()
