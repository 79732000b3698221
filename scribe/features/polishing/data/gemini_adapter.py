# File: scribe/features/polishing/data/gemini_adapter.py
import logging
from typing import Optional

import httpx

from scribe.core.common.errors import RateLimitedError, FetchFailedError
from scribe.core.config.settings import settings
from ..domain.interfaces import ITextRewriter

logger = logging.getLogger(__name__)

_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "index": {"type": "INTEGER"},
            "text": {"type": "STRING"},
        },
        "required": ["index", "text"],
    },
}


class GeminiRewriter(ITextRewriter):
    """
    Google Gemini generateContent over HTTP.
    With structured=True the request pins a JSON response schema.
    """

    def __init__(self,
                 api_key: Optional[str] = None,
                 model: Optional[str] = None,
                 base_url: Optional[str] = None,
                 structured: bool = False,
                 timeout: Optional[float] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_AI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.supports_structured_output = structured
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def _build_body(self, prompt: str) -> dict:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        if self.supports_structured_output:
            body["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": _RESPONSE_SCHEMA,
            }
        return body

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> httpx.Response:
        return await client.post(self.endpoint, params={"key": self.api_key}, json=self._build_body(prompt))

    async def rewrite(self, prompt: str) -> str:
        try:
            if self._client is not None:
                response = await self._post(self._client, prompt)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, prompt)
        except httpx.TimeoutException as e:
            raise FetchFailedError(f"Gemini request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise FetchFailedError(f"Gemini request failed: {type(e).__name__}: {e}") from e

        if response.is_error:
            body = response.text
            if response.status_code == 429 or "RESOURCE_EXHAUSTED" in body:
                raise RateLimitedError(f"Gemini API rate limited: {response.status_code}")
            raise FetchFailedError(f"Gemini API error: {response.status_code} - {body[:500]}")

        try:
            data = response.json()
        except ValueError as e:
            raise FetchFailedError("Gemini returned a non-JSON body") from e

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            logger.warning("Gemini response had no candidates.")
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts)

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
