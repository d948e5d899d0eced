"""
Router: /furigana
  POST /furigana/generate — warstwowe rozwiązanie furigany dla tekstu
  POST /furigana/update   — korekta użytkownika (zapis do cache z pewnością 100)
  POST /furigana/render   — tekst z annotacjami <ruby>
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from adapters.renderer import check_spans, render_furigana
from adapters.resolver import LayeredFuriganaResolver
from api.dependencies import get_reading_cache, get_resolver, get_settings
from api.schemas import (
    GenerateRequest,
    GenerateResponse,
    RenderRequest,
    RenderResponse,
    UpdateRequest,
    UpdateResponse,
)
from config import Settings
from contracts import FuriganaInputError

logger = logging.getLogger("furigana.api")

router = APIRouter(prefix="/furigana", tags=["furigana"])


@router.post("/generate", response_model=GenerateResponse)
async def generate_furigana(
    body: GenerateRequest,
    resolver: LayeredFuriganaResolver = Depends(get_resolver),
    settings: Settings = Depends(get_settings),
) -> GenerateResponse:
    if not body.text:
        raise FuriganaInputError("Text is required")

    # Klucz klienta ma pierwszeństwo przed kluczem serwera
    api_key = body.api_key or settings.llm_api_key
    if not api_key:
        raise FuriganaInputError(
            "No API key provided. Pass api_key or set FURIGANA_LLM_API_KEY on the server."
        )

    items = await resolver.resolve(
        body.text,
        api_key=api_key,
        mock_mode=body.use_mock_llm or settings.mock_llm,
    )
    return GenerateResponse(furigana=items)


@router.post("/update", response_model=UpdateResponse)
async def update_furigana(
    body: UpdateRequest,
    resolver: LayeredFuriganaResolver = Depends(get_resolver),
    cache=Depends(get_reading_cache),
) -> UpdateResponse:
    logger.info(
        "Furigana update request: text=%r reading=%r corrected=%r",
        body.text, body.reading or "", body.corrected_reading,
    )
    result = await resolver.apply_correction(
        body.text, body.reading or "", body.corrected_reading,
    )
    entries = await cache.list_entries(word=result.text)
    entry = next((e for e in entries if e.reading == result.reading), None)
    return UpdateResponse(success=True, entry=entry)


@router.post("/render", response_model=RenderResponse)
async def render(body: RenderRequest) -> RenderResponse:
    check_spans(body.text, body.furigana)
    return RenderResponse(html=render_furigana(body.text, body.furigana))
