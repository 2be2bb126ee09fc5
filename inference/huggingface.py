"""
Hugging Face Inference API adapter (text generation).

The hosted Inference API answers 503 while a cold model is loading, e.g.
    {"error": "Model x is currently loading", "estimated_time": 20.0}
which is the transient signal the client retries on.
"""

from typing import Any, Dict

import httpx

from .base import ProviderAdapter
from .errors import ProviderHTTPError, ProviderResponseError
from .types import InferenceRequest

DEFAULT_BASE_URL = "https://api-inference.huggingface.co"


def flatten_messages(request: InferenceRequest) -> str:
    """Render role-tagged messages as one prompt for text-generation models."""
    parts = [f"{m.role.value.capitalize()}: {m.content}" for m in request.messages]
    parts.append("Assistant:")
    return "\n\n".join(parts)


class HuggingFaceAdapter(ProviderAdapter):
    name = "huggingface"

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def build_payload(self, request: InferenceRequest) -> Dict[str, Any]:
        return {
            "inputs": flatten_messages(request),
            "parameters": {
                "max_new_tokens": request.max_output_tokens,
                "temperature": request.temperature,
                "return_full_text": False,
            },
            # Let the client own the warm-up wait instead of the provider
            "options": {"wait_for_model": False},
        }

    async def send(
        self,
        http: httpx.AsyncClient,
        request: InferenceRequest,
        api_key: str,
    ) -> str:
        response = await http.post(
            f"{self.base_url}/models/{request.model}",
            json=self.build_payload(request),
            headers={"Authorization": f"Bearer {api_key}"},
        )

        if not response.is_success:
            raise ProviderHTTPError(response.status_code, response.text)

        try:
            data = response.json()
            if isinstance(data, list):
                data = data[0]
            text = data["generated_text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"Unreadable generation: {type(e).__name__}")

        if not isinstance(text, str):
            raise ProviderResponseError("Generation has no text content")
        return text

    def is_transient(self, status_code: int, body: str) -> bool:
        return status_code == 503 or "currently loading" in (body or "")
