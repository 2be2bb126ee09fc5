"""
tests/inference/test_client.py

Tests for InferenceClient retry, timeout and error mapping.

Verifies:
✔ Missing credential fails fast, before any provider call
✔ One transient signal then success → success after exactly one retry
✔ Two transient signals with a retry budget of 1 → terminal failure
✔ Non-503 errors are never retried
✔ Transport errors and timeouts are terminal, not retried
✔ The credential never appears in a result
✔ Never raises for provider failures
"""

import asyncio

import httpx
import pytest

from inference import (
    ErrorKind,
    InferenceClient,
    InferenceRequest,
    Message,
    ProviderHTTPError,
    ProviderResponseError,
    Role,
    StubProviderAdapter,
)
from inference.base import ProviderAdapter

SECRET = "sk-test-secret-value"


def make_request() -> InferenceRequest:
    return InferenceRequest(
        model="test-model",
        messages=(Message(Role.SYSTEM, "be brief"), Message(Role.USER, "hello")),
    )


class KeyedStubAdapter(StubProviderAdapter):
    """Stub that demands a credential, like a real provider."""
    requires_credential = True


class HangingAdapter(ProviderAdapter):
    name = "hanging"
    requires_credential = False

    async def send(self, http, request, api_key):
        await asyncio.sleep(10)
        return "never"


# ─────────────────────────────────────────────────────
# Credential
# ─────────────────────────────────────────────────────


class TestCredential:

    @pytest.mark.asyncio
    async def test_missing_credential_fails_before_network(self, monkeypatch, recording_sleep):
        monkeypatch.delenv("TEST_LLM_KEY", raising=False)
        adapter = KeyedStubAdapter(replies=["{}"])
        client = InferenceClient(adapter, api_key_env="TEST_LLM_KEY", sleep=recording_sleep)

        result = await client.infer(make_request())

        assert result.ok is False
        assert result.error_kind == ErrorKind.CONFIGURATION
        assert adapter.call_count == 0
        assert client.credential_present() is False

    @pytest.mark.asyncio
    async def test_credential_read_at_call_time(self, monkeypatch):
        adapter = KeyedStubAdapter(replies=["done"])
        client = InferenceClient(adapter, api_key_env="TEST_LLM_KEY")
        monkeypatch.setenv("TEST_LLM_KEY", SECRET)

        result = await client.infer(make_request())

        assert result.ok is True
        assert result.text == "done"

    @pytest.mark.asyncio
    async def test_stub_needs_no_credential(self, monkeypatch, inference_client, stub_adapter):
        monkeypatch.delenv("STUB_API_KEY", raising=False)
        result = await inference_client.infer(make_request())
        assert result.ok is True
        assert stub_adapter.call_count == 1


# ─────────────────────────────────────────────────────
# Retry policy
# ─────────────────────────────────────────────────────


class TestRetryPolicy:

    @pytest.mark.asyncio
    async def test_transient_then_success(self, inference_client, stub_adapter, recording_sleep):
        stub_adapter.replies = [StubProviderAdapter.warming_up(), '{"ok": true}']

        result = await inference_client.infer(make_request())

        assert result.ok is True
        assert result.text == '{"ok": true}'
        assert result.attempts == 2
        assert stub_adapter.call_count == 2
        assert recording_sleep.delays == [20.0]

    @pytest.mark.asyncio
    async def test_two_transients_exhaust_budget(self, inference_client, stub_adapter, recording_sleep):
        stub_adapter.replies = [StubProviderAdapter.warming_up(), StubProviderAdapter.warming_up(), "late"]

        result = await inference_client.infer(make_request())

        assert result.ok is False
        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert result.status_code == 503
        assert stub_adapter.call_count == 2
        assert recording_sleep.delays == [20.0]

    @pytest.mark.asyncio
    async def test_zero_retries(self, stub_adapter, recording_sleep):
        stub_adapter.replies = [StubProviderAdapter.warming_up()]
        client = InferenceClient(stub_adapter, max_retries=0, sleep=recording_sleep)

        result = await client.infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert stub_adapter.call_count == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 429, 500, 502])
    async def test_other_statuses_not_retried(self, inference_client, stub_adapter, recording_sleep, status):
        stub_adapter.replies = [ProviderHTTPError(status, '{"error": "nope"}'), "unused"]

        result = await inference_client.infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert result.status_code == status
        assert result.detail == '{"error": "nope"}'
        assert stub_adapter.call_count == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_custom_delay(self, stub_adapter, recording_sleep):
        stub_adapter.replies = [StubProviderAdapter.warming_up(), "ok"]
        client = InferenceClient(stub_adapter, retry_delay_s=1.5, sleep=recording_sleep)

        result = await client.infer(make_request())

        assert result.ok is True
        assert recording_sleep.delays == [1.5]

    def test_negative_retries_rejected(self, stub_adapter):
        with pytest.raises(ValueError):
            InferenceClient(stub_adapter, max_retries=-1)


# ─────────────────────────────────────────────────────
# Transport failures and timeout
# ─────────────────────────────────────────────────────


class TestTransportFailures:

    @pytest.mark.asyncio
    async def test_connect_error_is_terminal(self, inference_client, stub_adapter, recording_sleep):
        stub_adapter.replies = [httpx.ConnectError("refused"), "unused"]

        result = await inference_client.infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert result.status_code is None
        assert "ConnectError" in result.detail
        assert stub_adapter.call_count == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_httpx_timeout_is_terminal(self, inference_client, stub_adapter):
        stub_adapter.replies = [httpx.ReadTimeout("slow")]

        result = await inference_client.infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert "timeout" in result.detail

    @pytest.mark.asyncio
    async def test_hung_provider_is_cut_off(self, recording_sleep):
        client = InferenceClient(HangingAdapter(), timeout_s=0.05, sleep=recording_sleep)

        result = await client.infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert "timeout" in result.detail
        assert result.attempts == 1

    @pytest.mark.asyncio
    async def test_unreadable_envelope_is_terminal(self, inference_client, stub_adapter):
        stub_adapter.replies = [ProviderResponseError("Unreadable chat completion: KeyError")]

        result = await inference_client.infer(make_request())

        assert result.error_kind == ErrorKind.TERMINAL_PROVIDER
        assert result.status_code is None


class TestCredentialHygiene:

    @pytest.mark.asyncio
    async def test_secret_not_in_failure(self, monkeypatch, caplog):
        monkeypatch.setenv("TEST_LLM_KEY", SECRET)
        adapter = KeyedStubAdapter(replies=[ProviderHTTPError(401, "invalid api key")])
        client = InferenceClient(adapter, api_key_env="TEST_LLM_KEY")

        with caplog.at_level("DEBUG"):
            result = await client.infer(make_request())

        assert result.ok is False
        assert SECRET not in repr(result)
        assert SECRET not in caplog.text


class TestLogTagging:

    @pytest.mark.asyncio
    async def test_retry_warning_tagged_transient(self, inference_client, stub_adapter, caplog):
        stub_adapter.replies = [StubProviderAdapter.warming_up(), "ok"]

        with caplog.at_level("WARNING"):
            await inference_client.infer(make_request())

        kinds = [getattr(r, "error_kind", None) for r in caplog.records]
        assert ErrorKind.TRANSIENT_PROVIDER.value in kinds
