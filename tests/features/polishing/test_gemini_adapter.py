# File: tests/features/polishing/test_gemini_adapter.py
import json
import httpx
import pytest

from scribe.core.common.errors import RateLimitedError, FetchFailedError
from scribe.features.polishing.data.gemini_adapter import GeminiRewriter


def _rewriter(handler, structured=False):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiRewriter(
        api_key="g-key",
        model="gemini-2.0-flash",
        base_url="https://gemini.test/v1beta",
        structured=structured,
        client=client
    )


def _answer(*parts):
    return {"candidates": [{"content": {"parts": [{"text": p} for p in parts]}}]}


@pytest.mark.asyncio
async def test_rewrite_posts_prompt_and_joins_parts():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["key"] = request.url.params["key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_answer("0|你好。\n", "1|再見。"))

    rewriter = _rewriter(handler)
    text = await rewriter.rewrite("0|你好\n1|再見")
    await rewriter.aclose()

    assert text == "0|你好。\n1|再見。"
    assert seen["path"] == "/v1beta/models/gemini-2.0-flash:generateContent"
    assert seen["key"] == "g-key"
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "0|你好\n1|再見"
    assert "generationConfig" not in seen["body"]


@pytest.mark.asyncio
async def test_structured_mode_pins_schema():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_answer("[]"))

    await _rewriter(handler, structured=True).rewrite("0|x")

    config = seen["body"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["responseSchema"]["type"] == "ARRAY"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(429, text="Too Many Requests"),
    httpx.Response(503, json={"error": {"status": "RESOURCE_EXHAUSTED"}}),
])
async def test_rate_limiting_is_classified(response):
    with pytest.raises(RateLimitedError):
        await _rewriter(lambda r: response).rewrite("0|x")


@pytest.mark.asyncio
async def test_server_error_is_fetch_failure():
    with pytest.raises(FetchFailedError, match="500"):
        await _rewriter(lambda r: httpx.Response(500, text="internal")).rewrite("0|x")


@pytest.mark.asyncio
async def test_network_error_is_fetch_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchFailedError):
        await _rewriter(handler).rewrite("0|x")


@pytest.mark.asyncio
async def test_timeout_is_fetch_failure():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(FetchFailedError, match="timed out"):
        await _rewriter(handler).rewrite("0|x")


@pytest.mark.asyncio
async def test_no_candidates_yields_empty_text():
    assert await _rewriter(lambda r: httpx.Response(200, json={"candidates": []})).rewrite("0|x") == ""


@pytest.mark.asyncio
async def test_non_json_body_is_fetch_failure():
    with pytest.raises(FetchFailedError):
        await _rewriter(lambda r: httpx.Response(200, text="<html>")).rewrite("0|x")
