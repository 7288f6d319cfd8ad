import httpx
import pytest

from textscan.services.credentials import validate_credential
from textscan.services.openai_client import OpenAIClient


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["abc123", "", None, "SK-upper"])
async def test_wrong_prefix_is_rejected_without_remote_call(fake_openai, settings, key):
    async with fake_openai.client(settings) as client:
        assert await validate_credential(key, settings=settings, client=client) is False

    assert fake_openai.requests == []


@pytest.mark.asyncio
async def test_valid_key_lists_models(fake_openai, settings):
    async with fake_openai.client(settings, api_key="sk-live") as client:
        assert await validate_credential("sk-live", settings=settings, client=client) is True

    request = fake_openai.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v1/models"
    assert request.headers["Authorization"] == "Bearer sk-live"


@pytest.mark.asyncio
async def test_rejected_key_returns_false(fake_openai, settings):
    fake_openai.status_code = 401

    async with fake_openai.client(settings) as client:
        assert await validate_credential("sk-revoked", settings=settings, client=client) is False


@pytest.mark.asyncio
async def test_unrecognized_listing_returns_false(fake_openai, settings):
    fake_openai.models = {"object": "list"}

    async with fake_openai.client(settings) as client:
        assert await validate_credential("sk-test", settings=settings, client=client) is False


@pytest.mark.asyncio
async def test_transport_error_returns_false(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with OpenAIClient("sk-test", settings=settings, transport=httpx.MockTransport(handler)) as client:
        assert await validate_credential("sk-test", settings=settings, client=client) is False


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["sk-tést", "sk-line\nbreak", "sk-tab\there"])
async def test_key_outside_printable_ascii_returns_false(settings, key):
    # No client is passed, so building one for this key must not be attempted.
    assert await validate_credential(key, settings=settings) is False
