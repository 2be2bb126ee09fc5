"""
tests/inference/test_adapters.py

Wire-level tests for provider adapters using httpx.MockTransport.

Verifies:
✔ OpenAI-style adapter posts to /chat/completions with bearer auth and
  the documented payload, and reads choices[0].message.content
✔ Hugging Face adapter flattens messages and treats "loading" as transient
✔ Gemini adapter moves system messages into systemInstruction and keeps
  the key out of the URL
✔ A 503 from the wire is retried by the client
"""

import json

import httpx
import pytest

from inference import (
    ErrorKind,
    GeminiAdapter,
    HuggingFaceAdapter,
    InferenceClient,
    InferenceRequest,
    Message,
    OpenAIStyleAdapter,
    Role,
)
from inference.huggingface import flatten_messages

KEY = "test-key-123"


def make_request() -> InferenceRequest:
    return InferenceRequest(
        model="llama-3.1-8b-instant",
        messages=(
            Message(Role.SYSTEM, "You are a rewriting assistant."),
            Message(Role.USER, "Rewrite this."),
        ),
        max_output_tokens=1500,
        temperature=0.7,
    )


def client_for(adapter, handler, recording_sleep, **kwargs) -> InferenceClient:
    return InferenceClient(
        adapter,
        api_key_env="TEST_PROVIDER_KEY",
        sleep=recording_sleep,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.fixture(autouse=True)
def provider_key(monkeypatch):
    monkeypatch.setenv("TEST_PROVIDER_KEY", KEY)


class TestOpenAIStyleAdapter:

    @pytest.mark.asyncio
    async def test_request_shape_and_reply(self, recording_sleep):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "hi there"}}]})

        adapter = OpenAIStyleAdapter("https://api.groq.com/openai/v1/", name="groq")
        result = await client_for(adapter, handler, recording_sleep).infer(make_request())

        assert result.ok is True
        assert result.text == "hi there"
        assert seen["url"] == "https://api.groq.com/openai/v1/chat/completions"
        assert seen["auth"] == f"Bearer {KEY}"
        assert seen["body"] == {
            "model": "llama-3.1-8b-instant",
            "messages": [
                {"role": "system", "content": "You are a rewriting assistant."},
                {"role": "user", "content": "Rewrite this."},
            ],
            "max_tokens": 1500,
            "temperature": 0.7,
            "stream": False,
        }

    @pytest.mark.asyncio
    async def test_503_retried_then_success(self, recording_sleep):
        responses = iter([
            httpx.Response(503, json={"error": "warming up"}),
            httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]}),
        ])

        adapter = OpenAIStyleAdapter("https://example.test/v1")
        result = await client_for(adapter, lambda r: next(responses), recording_sleep).infer(make_request())

        assert result.ok is True
        assert result.attempts == 2
        assert recording_sleep.delays == [20.0]

    @pytest.mark.asyncio
    async def test_error_body_kept_for_diagnostics(self, recording_sleep):
        adapter = OpenAIStyleAdapter("https://example.test/v1")
        handler = lambda r: httpx.Response(400, text="bad model")
        result = await client_for(adapter, handler, recording_sleep).infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert result.status_code == 400
        assert result.detail == "bad model"
        assert KEY not in result.detail

    @pytest.mark.asyncio
    async def test_missing_choices(self, recording_sleep):
        adapter = OpenAIStyleAdapter("https://example.test/v1")
        handler = lambda r: httpx.Response(200, json={"choices": []})
        result = await client_for(adapter, handler, recording_sleep).infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert result.status_code is None


class TestHuggingFaceAdapter:

    def test_flatten_messages(self):
        prompt = flatten_messages(make_request())
        assert prompt == (
            "System: You are a rewriting assistant.\n\n"
            "User: Rewrite this.\n\n"
            "Assistant:"
        )

    @pytest.mark.asyncio
    async def test_loading_then_generated_text(self, recording_sleep):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            if len(seen) == 1:
                return httpx.Response(503, json={"error": "Model is currently loading", "estimated_time": 20.0})
            return httpx.Response(200, json=[{"generated_text": '{"a": 1}'}])

        adapter = HuggingFaceAdapter("https://hf.example.test")
        result = await client_for(adapter, handler, recording_sleep).infer(make_request())

        assert result.ok is True
        assert result.text == '{"a": 1}'
        assert seen[0] == "https://hf.example.test/models/llama-3.1-8b-instant"

    def test_loading_body_is_transient(self):
        adapter = HuggingFaceAdapter()
        assert adapter.is_transient(503, "") is True
        assert adapter.is_transient(500, "Model x is currently loading") is True
        assert adapter.is_transient(500, "boom") is False


class TestGeminiAdapter:

    def test_payload(self):
        payload = GeminiAdapter().build_payload(make_request())
        assert payload["systemInstruction"] == {"parts": [{"text": "You are a rewriting assistant."}]}
        assert payload["contents"] == [{"role": "user", "parts": [{"text": "Rewrite this."}]}]
        assert payload["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 1500}

    @pytest.mark.asyncio
    async def test_key_in_header_not_url(self, recording_sleep):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            return httpx.Response(200, json={
                "candidates": [{"content": {"parts": [{"text": "part one "}, {"text": "part two"}]}}]
            })

        adapter = GeminiAdapter("https://gemini.example.test/v1beta")
        result = await client_for(adapter, handler, recording_sleep).infer(make_request())

        assert result.text == "part one part two"
        assert seen["key"] == KEY
        assert KEY not in seen["url"]
        assert seen["url"].endswith("/models/llama-3.1-8b-instant:generateContent")
