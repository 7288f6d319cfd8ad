from __future__ import annotations

import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from textscan.core.config import Settings, get_settings
from textscan.core.errors import RemoteCallError
from textscan.core.logging import get_logger

logger = get_logger(__name__)


class OpenAIClient:
    """Thin async wrapper over the chat, embedding and model-listing endpoints."""

    def __init__(
        self,
        api_key: str,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            base_url=self.settings.openai_base_url,
            timeout=httpx.Timeout(self.settings.openai_timeout_seconds),
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            transport=transport,
        )

    async def __aenter__(self) -> OpenAIClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("openai_transport_error", path=path, error=str(exc))
            raise RemoteCallError(f"Request to {path} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "openai_http_error",
                path=path,
                status_code=response.status_code,
                preview=response.text[:180],
            )
            raise RemoteCallError(
                f"{path} returned HTTP {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("openai_unparseable_response", path=path, preview=response.text[:180])
            raise RemoteCallError(f"{path} returned a non-JSON body") from exc

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        json_mode: bool = True,
    ) -> str:
        payload: dict[str, Any] = {
            "model": model or self.settings.completion_model,
            "messages": messages,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        body = await self._request("POST", "/chat/completions", payload)
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RemoteCallError("Completion response has no message content") from exc
        if not isinstance(content, str):
            raise RemoteCallError("Completion response has no message content")
        return content

    async def create_embedding(self, text: str, *, model: str | None = None) -> list[float]:
        body = await self._request(
            "POST",
            "/embeddings",
            {"model": model or self.settings.embedding_model, "input": text},
        )
        try:
            vector = body["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RemoteCallError("Embedding response has no vector") from exc
        if not isinstance(vector, list):
            raise RemoteCallError("Embedding response has no vector")
        try:
            values = [float(value) for value in vector]
        except (TypeError, ValueError) as exc:
            raise RemoteCallError("Embedding vector contains non-numeric values") from exc
        if not all(math.isfinite(value) for value in values):
            raise RemoteCallError("Embedding vector contains non-finite values")
        return values

    async def list_models(self) -> Any:
        return await self._request("GET", "/models")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:180] or response.reason_phrase
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return response.reason_phrase


@asynccontextmanager
async def client_scope(
    api_key: str,
    *,
    settings: Settings | None = None,
    client: OpenAIClient | None = None,
) -> AsyncIterator[OpenAIClient]:
    """Yield ``client`` untouched, or open a fresh one for ``api_key`` and close it afterwards."""
    if client is not None:
        yield client
        return
    async with OpenAIClient(api_key, settings=settings) as owned:
        yield owned
