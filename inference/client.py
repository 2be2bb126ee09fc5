"""
Inference Client: one provider call per attempt, bounded retry, typed result.

Flow:
  credential check → POST (adapter) → classify → [sleep → retry] → InferenceResult

Invariants:
- Credential is read from the environment at call time and checked before
  any network attempt; it is never logged or placed in a result
- Only the transient signal (HTTP 503 / model loading) is retried,
  at most max_retries times, after retry_delay_s
- Every attempt is bounded by timeout_s
- Never raises for provider or transport failures; cancellation propagates
"""

import asyncio
import logging
import os
from typing import Awaitable, Callable, Optional

import httpx

from .base import ProviderAdapter
from .errors import (
    ConfigurationError,
    ProviderHTTPError,
    ProviderResponseError,
    TerminalProviderError,
    TransientProviderError,
    truncate,
)
from .types import ErrorKind, InferenceRequest, InferenceResult

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]

DEFAULT_MAX_RETRIES = 1
DEFAULT_RETRY_DELAY_S = 20.0
DEFAULT_TIMEOUT_S = 30.0


class InferenceClient:
    """
    Provider-agnostic chat completion client.

    Usage:
        client = InferenceClient(OpenAIStyleAdapter(base_url), api_key_env="GROQ_API_KEY")
        result = await client.infer(request)
        if result.ok:
            text = result.text
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        api_key_env: str = "GROQ_API_KEY",
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_s: float = DEFAULT_RETRY_DELAY_S,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        sleep: Optional[Sleeper] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")

        self.adapter = adapter
        self.api_key_env = api_key_env
        self.max_retries = max_retries
        self.retry_delay_s = retry_delay_s
        self.timeout_s = timeout_s
        self._sleep = sleep or asyncio.sleep
        self._transport = transport   # test hook: httpx.MockTransport

    def credential_present(self) -> bool:
        return bool(self._read_credential()) or not self.adapter.requires_credential

    def _read_credential(self) -> str:
        return (os.getenv(self.api_key_env) or "").strip()

    def _require_credential(self) -> str:
        api_key = self._read_credential()
        if not api_key and self.adapter.requires_credential:
            raise ConfigurationError(f"Missing {self.api_key_env} in environment")
        return api_key

    async def infer(self, request: InferenceRequest) -> InferenceResult:
        """
        Run the request against the provider.

        Returns:
            InferenceResult(status="success", text=...) or
            InferenceResult(status="error", error_kind=...)
        """
        try:
            api_key = self._require_credential()
        except ConfigurationError as e:
            logger.error(f"Inference not configured: {e}")
            return InferenceResult.failure(ErrorKind.CONFIGURATION, detail=str(e))

        attempts = 0
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as http:
            while True:
                attempts += 1
                try:
                    text = await self._attempt(http, request, api_key)
                    logger.info(
                        f"Inference succeeded via {self.adapter.name} after {attempts} attempt(s)",
                        extra={"provider": self.adapter.name, "attempts": attempts},
                    )
                    return InferenceResult.success(text, attempts=attempts)

                except TransientProviderError as e:
                    if attempts > self.max_retries:
                        logger.error(
                            f"Provider {self.adapter.name} still unavailable after {attempts} attempt(s)",
                            extra={"provider": self.adapter.name, "status_code": e.status_code},
                        )
                        return InferenceResult.failure(
                            ErrorKind.TERMINAL_PROVIDER,
                            status_code=e.status_code,
                            detail=e.body,
                            attempts=attempts,
                        )
                    logger.warning(
                        f"Provider {self.adapter.name} warming up, retrying in {self.retry_delay_s}s",
                        extra={
                            "provider": self.adapter.name,
                            "error_kind": ErrorKind.TRANSIENT_PROVIDER.value,
                            "attempts": attempts,
                        },
                    )
                    await self._sleep(self.retry_delay_s)

                except TerminalProviderError as e:
                    logger.error(
                        f"Inference failed via {self.adapter.name}: {e}",
                        extra={"provider": self.adapter.name, "status_code": e.status_code},
                    )
                    return InferenceResult.failure(
                        ErrorKind.TERMINAL_PROVIDER,
                        status_code=e.status_code,
                        detail=e.body or str(e),
                        attempts=attempts,
                    )

    async def _attempt(
        self,
        http: httpx.AsyncClient,
        request: InferenceRequest,
        api_key: str,
    ) -> str:
        """One bounded provider call, with failures classified."""
        logger.debug(
            f"POST via {self.adapter.name}: model={request.model} "
            f"messages={len(request.messages)} "
            f"last={truncate(request.messages[-1].content, 80) if request.messages else ''}"
        )
        try:
            return await asyncio.wait_for(
                self.adapter.send(http, request, api_key),
                timeout=self.timeout_s,
            )

        except ProviderHTTPError as e:
            if self.adapter.is_transient(e.status_code, e.body):
                raise TransientProviderError(e.status_code, e.body)
            raise TerminalProviderError(str(e), status_code=e.status_code, body=e.body)

        except ProviderResponseError as e:
            raise TerminalProviderError(str(e))

        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise TerminalProviderError(f"timeout after {self.timeout_s}s")

        except httpx.HTTPError as e:
            raise TerminalProviderError(f"transport error: {type(e).__name__}")
