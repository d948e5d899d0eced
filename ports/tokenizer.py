"""
Port: Tokenizer
Odpowiedzialność: segmentacja tekstu japońskiego na tokeny z POS i odczytem (katakana).
"""
from typing import Protocol, runtime_checkable

from contracts import MorphToken


@runtime_checkable
class Tokenizer(Protocol):
    async def tokenize(self, text: str) -> list[MorphToken]:
        """
        Splits text into ordered surface-form tokens.
        Readings are katakana and may be empty for unknown words.
        """
        ...
