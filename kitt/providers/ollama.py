"""Ollama ``/api/generate`` client.

One blocking (non-streaming) request per call, fixed sampling options,
no retries. Callers decide what to do when a call fails.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
from loguru import logger

from kitt.settings import KittSettings, get_settings

TEMPERATURE = 0.3
TOP_P = 0.9
DEFAULT_MAX_TOKENS = 300


class InferenceError(RuntimeError):
    """The inference endpoint failed or returned a non-success status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TextGenerator(Protocol):
    async def generate(self, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str: ...


class OllamaClient:
    """Async client for a local Ollama text-generation endpoint."""

    def __init__(
        self,
        api_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        http: httpx.AsyncClient | None = None,
        settings: KittSettings | None = None,
    ) -> None:
        s = settings or get_settings()
        self.api_url = api_url or s.ollama_api
        self.model = model or s.ollama_model
        self._http = http or httpx.AsyncClient(timeout=timeout if timeout is not None else s.inference_timeout)

    def build_payload(self, prompt: str, max_tokens: int) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": TEMPERATURE,
                "num_predict": max_tokens,
                "top_p": TOP_P,
            },
        }

    async def generate(self, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
        """Generate text for *prompt* within a *max_tokens* budget.

        Returns the ``response`` field (or ``thinking`` when the model only
        produced reasoning), stripped of surrounding whitespace.

        Raises:
            InferenceError: on a non-2xx status, a transport failure, or a
                body that is not a JSON object.
        """
        try:
            resp = await self._http.post(self.api_url, json=self.build_payload(prompt, max_tokens))
        except httpx.HTTPError as exc:
            logger.error(f"Ollama API error ({self.model}): {exc}")
            raise InferenceError(f"Ollama request failed: {exc}") from exc

        if not resp.is_success:
            logger.error(f"Ollama API error ({self.model}): HTTP {resp.status_code}")
            raise InferenceError(f"Ollama API error: {resp.status_code}", status=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise InferenceError("Ollama returned a non-JSON body", status=resp.status_code) from exc
        if not isinstance(data, dict):
            raise InferenceError("unexpected response shape", status=resp.status_code)

        text = data.get("response") or data.get("thinking") or ""
        if not isinstance(text, str):
            raise InferenceError("unexpected response shape", status=resp.status_code)
        return text.strip()

    async def aclose(self) -> None:
        await self._http.aclose()
