"""JSON-over-HTTP transport used by the story pipeline."""

from typing import Any, Protocol

import httpx


class HttpFetcher(Protocol):
    async def get_json(self, url: str) -> Any: ...


def build_timeout(timeout_seconds: float) -> httpx.Timeout:
    return httpx.Timeout(timeout_seconds, connect=min(timeout_seconds, 10.0))


class HttpxFetcher:
    """``HttpFetcher`` backed by a shared ``httpx.AsyncClient``.

    Non-success statuses raise ``httpx.HTTPStatusError``; bodies that are not
    JSON raise ``ValueError``. Nothing is retried.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=build_timeout(timeout_seconds),
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    async def get_json(self, url: str) -> Any:
        response = await self._client.get(url)
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
