"""
Provider boundary layer for LLM inference.

This package keeps request handlers agnostic of the hosted provider:
every provider sits behind ProviderAdapter, and InferenceClient owns the
credential check, retry policy and timeout for all of them.

Supported adapters:
- StubProviderAdapter: Deterministic scripted provider (default for tests)
- OpenAIStyleAdapter: Groq / Mistral / OpenAI chat completions
- HuggingFaceAdapter: Hugging Face Inference API text generation
- GeminiAdapter: Google Gemini generateContent

Example usage:
    from inference import InferenceClient, StubProviderAdapter

    client = InferenceClient(StubProviderAdapter(replies=['{"ok": true}']))
    result = await client.infer(request)
"""

from .types import (
    ErrorKind,
    GenerationOptions,
    InferenceRequest,
    InferenceResult,
    Message,
    Role,
)
from .errors import (
    ConfigurationError,
    InferenceError,
    ProviderHTTPError,
    ProviderResponseError,
    TerminalProviderError,
    TransientProviderError,
)
from .base import ProviderAdapter
from .stub import StubProviderAdapter
from .openai_style import OpenAIStyleAdapter
from .huggingface import HuggingFaceAdapter
from .gemini import GeminiAdapter
from .client import InferenceClient

__all__ = [
    "ErrorKind",
    "GenerationOptions",
    "InferenceRequest",
    "InferenceResult",
    "Message",
    "Role",
    "ConfigurationError",
    "InferenceError",
    "ProviderHTTPError",
    "ProviderResponseError",
    "TerminalProviderError",
    "TransientProviderError",
    "ProviderAdapter",
    "StubProviderAdapter",
    "OpenAIStyleAdapter",
    "HuggingFaceAdapter",
    "GeminiAdapter",
    "InferenceClient",
]
