"""
OpenAI-style chat completions adapter.

Covers every provider that speaks the /chat/completions wire format:
Groq (default), Mistral and OpenAI itself.
"""

from typing import Any, Dict

import httpx

from .base import ProviderAdapter
from .errors import ProviderHTTPError, ProviderResponseError
from .types import InferenceRequest

DEFAULT_BASE_URLS = {
    "groq": "https://api.groq.com/openai/v1",
    "mistral": "https://api.mistral.ai/v1",
    "openai": "https://api.openai.com/v1",
}


class OpenAIStyleAdapter(ProviderAdapter):
    """POST {base_url}/chat/completions with bearer auth."""

    def __init__(self, base_url: str, name: str = "openai"):
        self.base_url = base_url.rstrip("/")
        self.name = name

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(self, request: InferenceRequest) -> Dict[str, Any]:
        return {
            "model": request.model,
            "messages": [m.to_dict() for m in request.messages],
            "max_tokens": request.max_output_tokens,
            "temperature": request.temperature,
            "stream": request.stream,
        }

    async def send(
        self,
        http: httpx.AsyncClient,
        request: InferenceRequest,
        api_key: str,
    ) -> str:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        response = await http.post(self.endpoint, json=self.build_payload(request), headers=headers)

        if not response.is_success:
            raise ProviderHTTPError(response.status_code, response.text)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"Unreadable chat completion: {type(e).__name__}")

        if not isinstance(content, str):
            raise ProviderResponseError("Chat completion has no text content")
        return content
