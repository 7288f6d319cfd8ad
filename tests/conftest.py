from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from textscan.core.config import Settings
from textscan.services.openai_client import OpenAIClient

DEFAULT_COMPLETION = {
    "aiProbability": 80,
    "confidence": 90,
    "factors": ["Uniform sentence length", "Formal tone"],
    "likelySource": "ai",
    "reasoning": "The text reads like generated prose.",
}


def make_settings(**overrides) -> Settings:
    values = {
        "OPENAI_API_KEY": "",
        "OPENAI_BASE_URL": "https://api.test/v1",
        "EMBEDDING_DIMENSIONS": 4,
        "BATCH_GROUP_DELAY_SECONDS": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeOpenAI:
    """In-process stand-in for the chat, embedding and model-listing endpoints."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.completion: dict | Callable[[str], dict | str] = dict(DEFAULT_COMPLETION)
        self.embedding: list[float] = [0.5, 0.5, 0.5, 0.5]
        self.embedding_body: bytes | None = None
        self.models: object = {"object": "list", "data": [{"id": "gpt-4o"}]}
        self.status_code = 200
        self.delay: Callable[[str], float] | None = None
        self.in_flight = 0
        self.max_in_flight = 0

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            return await self._respond(request)
        finally:
            self.in_flight -= 1

    async def _respond(self, request: httpx.Request) -> httpx.Response:
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"error": {"message": "Incorrect API key provided"}})

        path = request.url.path
        if path.endswith("/models"):
            return httpx.Response(200, json=self.models)

        body = json.loads(request.content)
        if path.endswith("/embeddings"):
            if self.embedding_body is not None:
                return httpx.Response(200, content=self.embedding_body)
            return httpx.Response(200, json={"data": [{"embedding": self.embedding}]})

        prompt = body["messages"][-1]["content"]
        if self.delay is not None:
            await asyncio.sleep(self.delay(prompt))
        completion = self.completion(prompt) if callable(self.completion) else self.completion
        content = completion if isinstance(completion, str) else json.dumps(completion)
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})

    def client(self, settings: Settings, api_key: str = "sk-test") -> OpenAIClient:
        return OpenAIClient(api_key, settings=settings, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings
