"""
Router: /sentences
Biblioteka zdań z zapisanymi annotacjami.

POST /sentences/{id}/generate-furigana:
  1. Pobiera zdanie (404 jeśli brak)
  2. Rozwiązuje furiganę resolverem
  3. Zapisuje wynik (llm_processed=True gdy użyto klucza API)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_resolver, get_sentence_store, get_settings
from api.schemas import SentenceFuriganaRequest, SentenceGenerateRequest
from contracts import Sentence, SentenceIn

router = APIRouter(prefix="/sentences", tags=["sentences"])


@router.post("", response_model=Sentence, status_code=201)
async def create_sentence(
    body: SentenceIn,
    store=Depends(get_sentence_store),
) -> Sentence:
    return await store.create_sentence(body)


@router.get("", response_model=list[Sentence])
async def list_sentences(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    store=Depends(get_sentence_store),
) -> list[Sentence]:
    return await store.list_sentences(limit=limit, offset=offset)


@router.get("/{sentence_id}", response_model=Sentence)
async def get_sentence(
    sentence_id: int,
    store=Depends(get_sentence_store),
) -> Sentence:
    return await store.get_sentence(sentence_id)


@router.put("/{sentence_id}/furigana", response_model=Sentence)
async def update_sentence_furigana(
    sentence_id: int,
    body: SentenceFuriganaRequest,
    store=Depends(get_sentence_store),
) -> Sentence:
    return await store.update_furigana(sentence_id, body.furigana_data)


@router.post("/{sentence_id}/generate-furigana", response_model=Sentence)
async def generate_sentence_furigana(
    sentence_id: int,
    body: SentenceGenerateRequest,
    store=Depends(get_sentence_store),
    resolver=Depends(get_resolver),
    settings=Depends(get_settings),
) -> Sentence:
    sentence = await store.get_sentence(sentence_id)
    api_key = body.api_key or settings.llm_api_key
    items = await resolver.resolve(
        sentence.sentence,
        api_key=api_key,
        mock_mode=body.use_mock_llm or settings.mock_llm,
    )
    return await store.update_furigana(sentence_id, items, llm_processed=bool(api_key))


@router.delete("/{sentence_id}", status_code=204)
async def delete_sentence(
    sentence_id: int,
    store=Depends(get_sentence_store),
) -> None:
    await store.delete_sentence(sentence_id)
