"""InferenceClient backends — SDK classes are patched, no network."""
import asyncio
import base64
import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from conftest import make_payload
from imagecheck.config import Config
from imagecheck.constants import ANALYSIS_TOOL_NAME, FORENSIC_PROMPT, SDK_MAX_RETRIES
from imagecheck.errors import (
    ConfigurationError,
    InferenceError,
    SchemaValidationError,
    UnsupportedImageError,
)
from imagecheck.inference.client import InferenceClient
from imagecheck.models import Verdict
from imagecheck.schema import RESPONSE_SCHEMA


def tool_use_response(tool_input) -> MagicMock:
    block = MagicMock()
    block.type = "tool_use"
    block.input = tool_input
    response = MagicMock()
    response.content = [block]
    return response


def chat_response(content) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def make_claude(mock_cls, *, return_value=None, side_effect=None, timeout=60.0):
    from imagecheck.inference.claude import ClaudeInferenceClient

    mock_anthropic = AsyncMock()
    mock_anthropic.messages.create = AsyncMock(return_value=return_value, side_effect=side_effect)
    mock_cls.return_value = mock_anthropic
    return ClaudeInferenceClient(api_key="test-key", timeout=timeout), mock_anthropic


def make_openai(mock_cls, *, return_value=None, side_effect=None):
    from imagecheck.inference.openai import OpenAIInferenceClient

    mock_openai = AsyncMock()
    mock_openai.chat.completions.create = AsyncMock(return_value=return_value, side_effect=side_effect)
    mock_cls.return_value = mock_openai
    return OpenAIInferenceClient(api_key="test-key"), mock_openai


# ── ClaudeInferenceClient ─────────────────────────────────────────────────────


async def test_claude_analyze_sends_image_and_prompt():
    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, mock_anthropic = make_claude(
            mock_cls, return_value=tool_use_response(make_payload())
        )
        await client.analyze(b"png-bytes", "image/png")

    call_kwargs = mock_anthropic.messages.create.call_args.kwargs
    content = call_kwargs["messages"][0]["content"]
    image = next(block for block in content if block["type"] == "image")
    text = next(block for block in content if block["type"] == "text")
    assert image["source"]["media_type"] == "image/png"
    assert base64.standard_b64decode(image["source"]["data"]) == b"png-bytes"
    assert text["text"] == FORENSIC_PROMPT


async def test_claude_analyze_declares_schema_as_forced_tool():
    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, mock_anthropic = make_claude(
            mock_cls, return_value=tool_use_response(make_payload())
        )
        await client.analyze(b"bytes", "image/jpeg")

    call_kwargs = mock_anthropic.messages.create.call_args.kwargs
    assert call_kwargs["tools"][0]["input_schema"] is RESPONSE_SCHEMA
    assert call_kwargs["tool_choice"] == {"type": "tool", "name": ANALYSIS_TOOL_NAME}


async def test_claude_analyze_returns_validated_result():
    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, _ = make_claude(mock_cls, return_value=tool_use_response(make_payload()))
        result = await client.analyze(b"bytes", "image/jpeg")

    assert result.verdict is Verdict.LIKELY_AI
    assert 0 <= result.ai_likelihood <= 100
    assert 0 <= result.human_likelihood <= 100


async def test_claude_client_is_built_once_without_retries():
    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, _ = make_claude(mock_cls, return_value=tool_use_response(make_payload()))
        await client.analyze(b"a", "image/jpeg")
        await client.analyze(b"b", "image/jpeg")

    mock_cls.assert_called_once()
    assert mock_cls.call_args.kwargs["max_retries"] == SDK_MAX_RETRIES


async def test_claude_analyze_without_tool_use_raises_inference_error():
    text_block = MagicMock()
    text_block.type = "text"
    response = MagicMock()
    response.content = [text_block]

    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, _ = make_claude(mock_cls, return_value=response)

        with pytest.raises(InferenceError):
            await client.analyze(b"bytes", "image/jpeg")


async def test_claude_analyze_wraps_api_error():
    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, _ = make_claude(mock_cls, side_effect=RuntimeError("API down"))

        with pytest.raises(InferenceError, match="API down") as info:
            await client.analyze(b"bytes", "image/jpeg")

    assert info.value.retryable
    assert isinstance(info.value.__cause__, RuntimeError)


async def test_claude_analyze_rejects_unknown_verdict():
    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, _ = make_claude(
            mock_cls, return_value=tool_use_response(make_payload(verdict="MAYBE"))
        )

        with pytest.raises(SchemaValidationError) as info:
            await client.analyze(b"bytes", "image/jpeg")

    assert not info.value.retryable


async def test_claude_analyze_times_out():
    async def _hang(**_):
        await asyncio.sleep(10)

    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, _ = make_claude(mock_cls, side_effect=_hang, timeout=0.01)

        with pytest.raises(InferenceError, match="timed out"):
            await client.analyze(b"bytes", "image/jpeg")


def test_claude_missing_key_fails_before_sdk():
    from imagecheck.inference.claude import ClaudeInferenceClient

    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            ClaudeInferenceClient(api_key=None)

    mock_cls.assert_not_called()


async def test_claude_aclose_closes_sdk_client():
    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client, mock_anthropic = make_claude(mock_cls)
        async with client:
            pass

    mock_anthropic.close.assert_awaited_once()


# ── OpenAIInferenceClient ─────────────────────────────────────────────────────


async def test_openai_analyze_sends_data_url_with_mime_type():
    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        client, mock_openai = make_openai(
            mock_cls, return_value=chat_response(json.dumps(make_payload()))
        )
        await client.analyze(b"webp-bytes", "image/webp")

    call_kwargs = mock_openai.chat.completions.create.call_args.kwargs
    content = call_kwargs["messages"][0]["content"]
    image = next(block for block in content if block["type"] == "image_url")
    assert image["image_url"]["url"].startswith("data:image/webp;base64,")


async def test_openai_analyze_declares_strict_json_schema():
    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        client, mock_openai = make_openai(
            mock_cls, return_value=chat_response(json.dumps(make_payload()))
        )
        await client.analyze(b"bytes", "image/png")

    response_format = mock_openai.chat.completions.create.call_args.kwargs["response_format"]
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["strict"] is True
    assert response_format["json_schema"]["schema"] is RESPONSE_SCHEMA


async def test_openai_analyze_returns_validated_result():
    payload = make_payload(verdict="LIKELY_HUMAN", aiLikelihood=5, humanLikelihood=95)

    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        client, _ = make_openai(mock_cls, return_value=chat_response(json.dumps(payload)))
        result = await client.analyze(b"bytes", "image/png")

    assert result.verdict is Verdict.LIKELY_HUMAN
    assert result.human_likelihood == 95


@pytest.mark.parametrize("content", [None, "", "   "])
async def test_openai_empty_reply_raises_inference_error(content):
    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        client, _ = make_openai(mock_cls, return_value=chat_response(content))

        with pytest.raises(InferenceError, match="No response"):
            await client.analyze(b"bytes", "image/png")


async def test_openai_non_json_reply_raises_schema_error():
    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        client, _ = make_openai(mock_cls, return_value=chat_response("I think it is AI."))

        with pytest.raises(SchemaValidationError):
            await client.analyze(b"bytes", "image/png")


async def test_openai_analyze_wraps_api_error():
    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        client, _ = make_openai(mock_cls, side_effect=RuntimeError("rate limited"))

        with pytest.raises(InferenceError, match="rate limited"):
            await client.analyze(b"bytes", "image/png")


def test_openai_missing_key_fails_before_sdk():
    from imagecheck.inference.openai import OpenAIInferenceClient

    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            OpenAIInferenceClient(api_key="")

    mock_cls.assert_not_called()


# ── input checks shared by every backend ─────────────────────────────────────


class _RecordingClient(InferenceClient):
    provider = "fake"
    supported_mime_types = frozenset({"image/png", "image/jpeg"})

    def __init__(self) -> None:
        super().__init__(model="fake-model")
        self.calls: list[tuple[str, str]] = []

    async def _request(self, image_data, mime_type):
        self.calls.append((image_data, mime_type))
        return json.dumps(make_payload())

    async def aclose(self) -> None:
        pass


async def test_empty_image_is_rejected_before_request():
    client = _RecordingClient()

    with pytest.raises(UnsupportedImageError) as info:
        await client.analyze(b"", "image/png")

    assert client.calls == []
    assert not info.value.retryable


async def test_unsupported_mime_is_rejected_before_request():
    client = _RecordingClient()

    with pytest.raises(UnsupportedImageError, match="image/tiff"):
        await client.analyze(b"bytes", "image/tiff")

    assert client.calls == []


async def test_mime_type_is_normalized():
    client = _RecordingClient()

    await client.analyze(b"bytes", "IMAGE/PNG")

    assert client.calls[0][1] == "image/png"


# ── factory ───────────────────────────────────────────────────────────────────


def _config(provider: str) -> Config:
    return Config(
        provider=provider,
        model="some-model",
        inference_timeout=12.0,
        log_level="INFO",
        anthropic_api_key="sk-ant",
        openai_api_key="sk-oai",
    )


def test_build_client_claude():
    from imagecheck.inference.claude import ClaudeInferenceClient
    from imagecheck.inference.factory import build_client

    with patch("imagecheck.inference.claude.AsyncAnthropic") as mock_cls:
        client = build_client(_config("claude"))

    assert isinstance(client, ClaudeInferenceClient)
    assert client.model == "some-model"
    assert mock_cls.call_args.kwargs["api_key"] == "sk-ant"


def test_build_client_openai():
    from imagecheck.inference.factory import build_client
    from imagecheck.inference.openai import OpenAIInferenceClient

    with patch("imagecheck.inference.openai.AsyncOpenAI") as mock_cls:
        client = build_client(_config("openai"))

    assert isinstance(client, OpenAIInferenceClient)
    assert mock_cls.call_args.kwargs["timeout"] == 12.0
    assert mock_cls.call_args.kwargs["api_key"] == "sk-oai"


def test_build_client_unknown_provider():
    from imagecheck.inference.factory import build_client

    with pytest.raises(ConfigurationError):
        build_client(_config("gemini"))
