"""
sudachi_tokenizer.py — leniwie ładowany adapter Tokenizer oparty na SudachiPy.

Obsługuje:
  - lazy init (słownik ładowany przy pierwszym użyciu)
  - wybór słownika (small / core / full) i trybu podziału (A / B / C)
  - mapowanie morfemów na MorphToken (forma, główny POS, odczyt katakana)
"""
from __future__ import annotations

from typing import Any

from contracts import MorphToken

SUDACHI_DICTIONARY_VARIANTS = ("small", "core", "full")
SUPPORTED_SPLIT_MODES = ("A", "B", "C")


class TokenizerUnavailableError(RuntimeError):
    """Raised when SudachiPy or its dictionary cannot be loaded."""


class SudachiTokenizer:
    """
    Wrapper wokół sudachipy.Tokenizer z lazy init.

    Użycie:
        tok = SudachiTokenizer(dict_variant="core", split_mode="C")
        tokens = await tok.tokenize("日本語を勉強しています")
        for t in tokens:
            print(t.surface_form, t.part_of_speech, t.reading)
    """

    def __init__(self, dict_variant: str = "core", split_mode: str = "C") -> None:
        if dict_variant not in SUDACHI_DICTIONARY_VARIANTS:
            raise ValueError(f"Unsupported Sudachi dictionary variant: {dict_variant}")
        mode = split_mode.upper()
        if mode not in SUPPORTED_SPLIT_MODES:
            raise ValueError(f"Unsupported Sudachi split mode: {split_mode}")
        self.dict_variant = dict_variant
        self.split_mode = mode
        self._tokenizer: Any = None  # lazy
        self._mode: Any = None

    def _load(self) -> None:
        try:
            from sudachipy import Dictionary, SplitMode
        except ImportError as exc:
            raise TokenizerUnavailableError(
                "SudachiPy nie jest zainstalowany. "
                "Zainstaluj go: pip install sudachipy sudachidict_core"
            ) from exc

        try:
            self._tokenizer = Dictionary(dict=self.dict_variant).create()
        except Exception as exc:
            raise TokenizerUnavailableError(
                f"Nie można załadować słownika Sudachi {self.dict_variant!r}: {exc}"
            ) from exc
        self._mode = getattr(SplitMode, self.split_mode)

    def analyze(self, text: str) -> list[MorphToken]:
        """Synchroniczna analiza; ładuje słownik przy pierwszym wywołaniu."""
        if not text:
            return []
        if self._tokenizer is None:
            self._load()

        tokens: list[MorphToken] = []
        for morpheme in self._tokenizer.tokenize(text, self._mode):
            pos_info = morpheme.part_of_speech()
            tokens.append(MorphToken(
                surface_form=morpheme.surface(),
                part_of_speech=pos_info[0] if pos_info else "*",
                reading=morpheme.reading_form() or "",
            ))
        return tokens

    # ── Port Tokenizer ────────────────────────────────────────────────────────

    async def tokenize(self, text: str) -> list[MorphToken]:
        return self.analyze(text)
