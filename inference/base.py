from abc import ABC, abstractmethod

import httpx

from .types import InferenceRequest


class ProviderAdapter(ABC):
    """
    Abstract provider boundary.
    The inference client depends ONLY on this interface; retry, timeout
    and error mapping live in the client, never in an adapter.
    """

    name: str = "provider"
    requires_credential: bool = True

    @abstractmethod
    async def send(
        self,
        http: httpx.AsyncClient,
        request: InferenceRequest,
        api_key: str,
    ) -> str:
        """
        Perform one provider call and return the raw completion text.

        Raises:
            ProviderHTTPError: provider answered with a non-2xx status
            ProviderResponseError: 2xx answer without a readable completion
            httpx.HTTPError: transport-level failure
        """
        raise NotImplementedError

    def is_transient(self, status_code: int, body: str) -> bool:
        """True when the provider signals temporary unavailability."""
        return status_code == 503
