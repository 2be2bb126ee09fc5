"""
FastAPI dependencies.

Handlers receive their collaborators through these functions, so tests
swap them with app.dependency_overrides instead of patching globals.
"""

from typing import Optional

from fastapi import Depends, Request

from config import Config
from inference import GenerationOptions, InferenceClient
from infra import InfraBootstrap
from services.otp import OTPService

from .rate_limit import FixedWindowRateLimiter, client_key

# Rate limiter (initialized once)
_rate_limiter: Optional[FixedWindowRateLimiter] = None


def get_inference_client() -> InferenceClient:
    return InfraBootstrap.get_instance().get_inference_client()


def get_generation_options() -> GenerationOptions:
    return InfraBootstrap.get_instance().get_generation_options()


def get_otp_service() -> OTPService:
    return InfraBootstrap.get_instance().get_otp_service()


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Get or create the process-wide rate limiter (singleton)."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = FixedWindowRateLimiter(
            max_requests=Config.RATE_LIMIT_MAX,
            window_s=Config.RATE_LIMIT_WINDOW_S,
        )
    return _rate_limiter


async def enforce_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """Router-level guard; raises RateLimitExceeded past the quota."""
    limiter.hit(client_key(request))
