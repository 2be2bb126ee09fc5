"""
HTTP layer: routers, request schemas and dependencies.
"""

from .llm import router as llm_router
from .otp import router as otp_router
from .health import router as health_router

__all__ = ["llm_router", "otp_router", "health_router"]
