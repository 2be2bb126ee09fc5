from typing import List, Optional, Union

import httpx

from .base import ProviderAdapter
from .errors import ProviderHTTPError
from .types import InferenceRequest

StubReply = Union[str, Exception]

DEFAULT_STUB_REPLY = '{"stub": true}'


class StubProviderAdapter(ProviderAdapter):
    """
    Deterministic fake provider for testing and offline development.

    Replies are consumed in order: a string is returned as completion text,
    an exception is raised as-is (e.g. ProviderHTTPError(503) to simulate a
    warming model). Once the script runs out, default_reply is returned.
    Never touches the network and needs no credential.
    """

    name = "stub"
    requires_credential = False

    def __init__(
        self,
        replies: Optional[List[StubReply]] = None,
        default_reply: str = DEFAULT_STUB_REPLY,
    ):
        self.replies = list(replies or [])
        self.default_reply = default_reply
        self.calls: List[InferenceRequest] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def send(
        self,
        http: httpx.AsyncClient,
        request: InferenceRequest,
        api_key: str,
    ) -> str:
        self.calls.append(request)

        if not self.replies:
            return self.default_reply

        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @classmethod
    def warming_up(cls) -> ProviderHTTPError:
        """The conventional 'model loading' signal."""
        return ProviderHTTPError(503, '{"error": "Model is currently loading"}')
