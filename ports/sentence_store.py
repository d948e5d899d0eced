"""
Port: SentenceStore
Odpowiedzialność: biblioteka zdań z zapisanymi annotacjami furigana.
"""
from typing import Protocol, runtime_checkable

from contracts import FuriganaItem, Sentence, SentenceIn


@runtime_checkable
class SentenceStore(Protocol):
    async def create_sentence(self, sentence: SentenceIn) -> Sentence:
        """Persists a sentence and returns it with sentence_id assigned."""
        ...

    async def get_sentence(self, sentence_id: int) -> Sentence:
        """Returns a Sentence by ID. Raises KeyError if not found."""
        ...

    async def list_sentences(self, limit: int = 50, offset: int = 0) -> list[Sentence]:
        """Returns sentences, newest first."""
        ...

    async def update_furigana(
        self,
        sentence_id: int,
        items: list[FuriganaItem],
        llm_processed: bool = False,
    ) -> Sentence:
        """Replaces furigana_data of a sentence. Raises KeyError if not found."""
        ...

    async def delete_sentence(self, sentence_id: int) -> None:
        """Deletes a sentence. Raises KeyError if not found."""
        ...
