"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Never reach a real provider or mail server from the test suite
os.environ.setdefault("LLM_PROVIDER", "stub")
os.environ.setdefault("EMAIL_BACKEND", "log")
os.environ.setdefault("OTP_STORE", "memory")

from api.dependencies import get_inference_client, get_otp_service, get_rate_limiter  # noqa: E402
from api.rate_limit import FixedWindowRateLimiter  # noqa: E402
from inference import InferenceClient, StubProviderAdapter  # noqa: E402
from infra import InfraBootstrap  # noqa: E402
from services.mail import LoggingEmailSender  # noqa: E402
from services.otp import InMemoryOTPStore, OTPService  # noqa: E402


class FakeClock:
    """Manually advanced clock for expiry and window tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """asyncio.sleep stand-in that records delays instead of waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture(autouse=True)
def reset_bootstrap():
    InfraBootstrap.reset()
    yield
    InfraBootstrap.reset()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def stub_adapter():
    return StubProviderAdapter()


@pytest.fixture
def inference_client(stub_adapter, recording_sleep):
    return InferenceClient(
        stub_adapter,
        api_key_env="STUB_API_KEY",
        max_retries=1,
        retry_delay_s=20.0,
        timeout_s=5.0,
        sleep=recording_sleep,
    )


@pytest.fixture
def otp_service(fake_clock):
    return OTPService(InMemoryOTPStore(), LoggingEmailSender(), ttl_s=600, clock=fake_clock)


@pytest.fixture
def app_client(inference_client, otp_service):
    """TestClient with stubbed provider, in-memory OTP and a roomy rate limit."""
    from fastapi.testclient import TestClient
    from main import app

    limiter = FixedWindowRateLimiter(max_requests=1000, window_s=60)
    app.dependency_overrides[get_inference_client] = lambda: inference_client
    app.dependency_overrides[get_otp_service] = lambda: otp_service
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
