"""Abstract interface for remote reranking backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from logging_config import get_logger
from reranker.errors import InvalidResponseError, TransportError, UpstreamAPIError

logger = get_logger("unirerank.backends")

DEFAULT_TIMEOUT = 30.0


class RerankBackend(ABC):
    """A remote service that scores documents against a query.

    Subclasses build the request; this class owns the HTTP exchange and
    maps transport failures onto the rerank error types.
    """

    service: str = ""
    label: str = ""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._timeout = timeout

    @property
    @abstractmethod
    def model(self) -> str:
        """Model name sent to the service."""

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """URL the rerank request is posted to."""

    @abstractmethod
    def build_payload(self, query: str, documents: List[str], top_n: int) -> Dict[str, Any]:
        """Return the JSON request body."""

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    async def fetch(self, query: str, documents: List[str], top_n: int) -> Any:
        """Send one rerank request and return the raw ``results`` value.

        Raises:
            UpstreamAPIError: The service answered with an error status.
            TransportError: The request failed without a response.
            InvalidResponseError: The body is not JSON or not UTF-8.
        """
        payload = self.build_payload(query, documents, top_n)
        headers = self.headers()
        try:
            if self._client is not None:
                response = await self._client.post(self.endpoint, json=payload, headers=headers)
                response.raise_for_status()
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self.endpoint, json=payload, headers=headers)
                    response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("%s rerank call returned %s", self.label, status)
            raise UpstreamAPIError(self.label, status, _response_body(exc.response)) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s rerank call failed: %s", self.label, exc)
            raise TransportError(f"{self.label} request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise InvalidResponseError(
                "Invalid reranking results: response body is not JSON",
                {"body": _decoded_text(response)[:500]},
            ) from exc
        if not isinstance(data, dict):
            return None
        return data.get("results")


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return _decoded_text(response)


def _decoded_text(response: httpx.Response) -> str:
    return response.content.decode("utf-8", "replace")
