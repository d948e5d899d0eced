"""
Adapter: InMemorySentenceStore
Implementuje port SentenceStore w pamięci (CLI bez bazy, testy).
"""
from __future__ import annotations

from contracts import FuriganaItem, Sentence, SentenceIn


class InMemorySentenceStore:
    def __init__(self) -> None:
        self._sentences: dict[int, Sentence] = {}
        self._next_id = 1

    async def create_sentence(self, sentence: SentenceIn) -> Sentence:
        stored = Sentence(sentence_id=self._next_id, **sentence.model_dump())
        self._sentences[stored.sentence_id] = stored
        self._next_id += 1
        return stored

    async def get_sentence(self, sentence_id: int) -> Sentence:
        try:
            return self._sentences[sentence_id]
        except KeyError:
            raise KeyError(f"Sentence not found: {sentence_id}")

    async def list_sentences(self, limit: int = 50, offset: int = 0) -> list[Sentence]:
        newest_first = sorted(self._sentences.values(), key=lambda s: -s.sentence_id)
        return newest_first[offset:offset + limit]

    async def update_furigana(
        self,
        sentence_id: int,
        items: list[FuriganaItem],
        llm_processed: bool = False,
    ) -> Sentence:
        current = await self.get_sentence(sentence_id)
        updated = current.model_copy(update={
            "furigana_data": list(items),
            "llm_processed": current.llm_processed or llm_processed,
        })
        self._sentences[sentence_id] = updated
        return updated

    async def delete_sentence(self, sentence_id: int) -> None:
        if self._sentences.pop(sentence_id, None) is None:
            raise KeyError(f"Sentence not found: {sentence_id}")
