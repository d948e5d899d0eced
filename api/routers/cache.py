"""
Router: GET /cache, DELETE /cache/{cache_id}
Podgląd i ręczne usuwanie wpisów cache odczytów.
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_reading_cache
from contracts import ReadingCacheEntry

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("", response_model=list[ReadingCacheEntry])
async def list_cache(
    word: str | None = Query(None, description="tylko wpisy dla tego słowa"),
    limit: int = Query(200, ge=1, le=1000),
    cache=Depends(get_reading_cache),
) -> list[ReadingCacheEntry]:
    return await cache.list_entries(word=word, limit=limit)


@router.delete("/{cache_id}", status_code=204)
async def delete_cache_entry(
    cache_id: int,
    cache=Depends(get_reading_cache),
) -> None:
    if not await cache.delete(cache_id):
        raise HTTPException(status_code=404, detail=f"Cache entry not found: {cache_id}")
