"""httpx-backed transport."""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from ._typing import Response


class HttpxTransport:
    """Send requests through an :class:`httpx.AsyncClient`.

    A client passed in stays owned by the caller; one created here is closed
    by :meth:`aclose` or on leaving ``async with``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = 10.0,
        follow_redirects: bool = True,
    ) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError(f"Invalid timeout value: {timeout!r}. Expected a positive number or None.")
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(
            timeout=timeout, follow_redirects=follow_redirects
        )

    async def send(
        self, method: str, url: str, headers: Mapping[str, str] | None = None
    ) -> Response:
        response = await self._client.request(method, url, headers=dict(headers or {}))
        return Response(
            response.status_code,
            response.headers.multi_items(),
            response.content,
            url=str(response.url),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args) -> None:  # type: ignore[no-untyped-def]
        await self.aclose()
