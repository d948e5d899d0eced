"""
Router: POST /vocabulary, GET /vocabulary
Zarządzanie słownikiem zaufanych odczytów (warstwa 1).
"""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_word_store
from api.schemas import VocabularyRequest
from contracts import VocabularyEntry

router = APIRouter(prefix="/vocabulary", tags=["vocabulary"])


@router.post("", response_model=VocabularyEntry)
async def add_word(
    body: VocabularyRequest,
    store=Depends(get_word_store),
) -> VocabularyEntry:
    entry = VocabularyEntry(
        word=body.word,
        reading=body.reading,
        meaning=body.meaning,
        part_of_speech=body.part_of_speech,
        jlpt_level=body.jlpt_level,
        source="user",
    )
    return await store.add_word(entry)


@router.get("", response_model=list[VocabularyEntry])
async def list_words(
    limit: int = Query(200, ge=1, le=1000),
    store=Depends(get_word_store),
) -> list[VocabularyEntry]:
    return await store.list_words(limit=limit)
