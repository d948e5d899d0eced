"""
Adapter: LLMReadingGenerator
Generuje odczyty furigana przez zewnętrzny model językowy (OpenAI lub Anthropic).

Kontrakt:
  - odpowiedź modelu to dowolny tekst zawierający tablicę JSON
    [{"text": "...", "furigana": "..."}, ...]
  - pierwsza tablica w tekście jest parsowana; błędne elementy są pomijane
  - każdy błąd (sieć, status HTTP, JSON) → pusta lista, nigdy wyjątek

Tryb mock odpowiada ze stałej tabeli (mock_responses.py) bez wywołań sieci.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Literal, Optional

import httpx
from pydantic import ValidationError

from contracts import LLMReading

from .mock_responses import lookup_mock

logger = logging.getLogger("furigana.llm_generator")

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-3-haiku-20240307",
}

SYSTEM_PROMPT = """\
Generate the hiragana reading (furigana) for Japanese text. Follow these rules carefully:
1. Only provide readings for kanji characters or kanji compounds.
2. Do NOT include readings for hiragana or katakana that are already in the text.
3. For words that mix kanji and hiragana (like "新しい"), only provide the reading for the kanji part.
4. Group consecutive kanji together and provide a single reading for the group.
5. Format your response as a JSON array where each element contains:
   - "text" field (the original text segment with kanji)
   - "furigana" field (the reading in hiragana)
6. For non-kanji segments, either omit them or set an empty furigana value.

Analyze the grammatical context and choose appropriate readings for words with multiple possible readings.
Response must be valid JSON.
"""

USER_PROMPT_TEMPLATE = """\
Text: "{text}"

Example format:
[
  {{"text": "日本語", "furigana": "にほんご"}},
  {{"text": "を", "furigana": ""}},
  {{"text": "勉強", "furigana": "べんきょう"}},
  {{"text": "して", "furigana": ""}},
  {{"text": "います", "furigana": ""}}
]

For words mixing kanji and hiragana like "新しい", only provide reading for the kanji:
{{"text": "新しい", "furigana": "あたら"}}

For compound kanji like "今月", give a single reading for the entire compound:
{{"text": "今月", "furigana": "こんげつ"}}
"""

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def parse_readings(content: str) -> list[LLMReading]:
    """Extracts the first JSON array from a free-text model reply."""
    match = _JSON_ARRAY_RE.search(content)
    if not match:
        logger.warning("Could not find a JSON array in LLM reply: %.200r", content)
        return []
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        logger.warning("Malformed JSON in LLM reply (%s): %.200r", exc, content)
        return []
    if not isinstance(payload, list):
        logger.warning("LLM reply is not a JSON array: %.200r", content)
        return []

    result: list[LLMReading] = []
    for raw in payload:
        try:
            result.append(LLMReading.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping invalid LLM pair %r: %s", raw, exc)
    return result


class LLMReadingGenerator:
    """
    Wysyła tekst do API modelu i mapuje odpowiedź na listę LLMReading.
    Implementuje port ReadingGenerator (ports/reading_generator.py).
    """

    def __init__(
        self,
        provider: Literal["openai", "anthropic"] = "openai",
        model: Optional[str] = None,
        url: Optional[str] = None,
        timeout_ms: int = 30_000,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if provider not in DEFAULT_MODELS:
            raise ValueError(f"Unknown LLM provider: {provider!r}")
        self._provider = provider
        self._model = model or DEFAULT_MODELS[provider]
        self._url = url or (OPENAI_URL if provider == "openai" else ANTHROPIC_URL)
        self._timeout = timeout_ms / 1000.0
        self._transport = transport

    # ── Port ReadingGenerator ─────────────────────────────────────────────────

    async def generate(
        self,
        text: str,
        *,
        api_key: Optional[str] = None,
        mock_mode: bool = False,
    ) -> list[LLMReading]:
        if mock_mode:
            pairs = lookup_mock(text)
            if pairs:
                logger.info("Using mock LLM response for: %s", text)
            else:
                logger.warning("No mock LLM response found for: %s", text)
            return pairs

        if not api_key:
            logger.error("API key not provided for LLM service")
            return []

        try:
            content = await self._call_backend(text, api_key)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "LLM API error: HTTP %s %s",
                exc.response.status_code, exc.response.text[:200],
            )
            return []
        except Exception as exc:
            logger.warning("LLM call failed: %s", exc)
            return []
        return parse_readings(content)

    # ── Wywołanie backendu ────────────────────────────────────────────────────

    async def _call_backend(self, text: str, api_key: str) -> str:
        """POST do API providera, zwraca surową treść odpowiedzi modelu."""
        headers, body = self._build_request(text, api_key)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(self._url, headers=headers, json=body)
            response.raise_for_status()
            payload: Any = response.json()
        return self._extract_content(payload)

    def _build_request(self, text: str, api_key: str) -> tuple[dict[str, str], dict[str, Any]]:
        user_prompt = USER_PROMPT_TEMPLATE.format(text=text)
        if self._provider == "anthropic":
            headers = {
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            }
            body = {
                "model": self._model,
                "system": SYSTEM_PROMPT,
                "messages": [{"role": "user", "content": user_prompt}],
                "temperature": 0.1,
                "max_tokens": 1000,
            }
        else:
            headers = {"Authorization": f"Bearer {api_key}"}
            body = {
                "model": self._model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": 0.1,
                "max_tokens": 1000,
            }
        return headers, body

    def _extract_content(self, payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""
        if self._provider == "anthropic":
            blocks = payload.get("content") or []
            first = blocks[0] if blocks else {}
            return str(first.get("text") or "") if isinstance(first, dict) else ""
        choices = payload.get("choices") or []
        first = choices[0] if choices else {}
        message = first.get("message") if isinstance(first, dict) else None
        return str(message.get("content") or "") if isinstance(message, dict) else ""
