"""Gemini REST adapter (generateContent)."""

from typing import Any, Dict, List

import httpx

from .base import ProviderAdapter
from .errors import ProviderHTTPError, ProviderResponseError
from .types import InferenceRequest, Role

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiAdapter(ProviderAdapter):
    """System messages become systemInstruction; the key goes in a header, never the URL."""

    name = "gemini"

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def build_payload(self, request: InferenceRequest) -> Dict[str, Any]:
        system_parts: List[str] = []
        contents: List[Dict[str, Any]] = []

        for m in request.messages:
            if m.role == Role.SYSTEM:
                if m.content.strip():
                    system_parts.append(m.content.strip())
                continue
            contents.append({"role": "user", "parts": [{"text": m.content}]})

        payload: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_output_tokens,
            },
        }
        if system_parts:
            payload["systemInstruction"] = {"parts": [{"text": "\n\n".join(system_parts)}]}
        return payload

    async def send(
        self,
        http: httpx.AsyncClient,
        request: InferenceRequest,
        api_key: str,
    ) -> str:
        response = await http.post(
            f"{self.base_url}/models/{request.model}:generateContent",
            json=self.build_payload(request),
            headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
        )

        if not response.is_success:
            raise ProviderHTTPError(response.status_code, response.text)

        try:
            data = response.json()
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts)
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderResponseError(f"Unreadable candidate: {type(e).__name__}")

        return text
