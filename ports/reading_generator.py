"""
Port: ReadingGenerator
Odpowiedzialność: odczyty segmentów z kanji generowane przez model językowy.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import LLMReading


@runtime_checkable
class ReadingGenerator(Protocol):
    async def generate(
        self,
        text: str,
        *,
        api_key: Optional[str] = None,
        mock_mode: bool = False,
    ) -> list[LLMReading]:
        """
        Returns best-effort (text, furigana) pairs for `text`.
        furigana == "" means the segment needs no reading.

        mock_mode=True answers from a fixed table without any network call.
        Never raises; any backend failure yields an empty list.
        """
        ...
