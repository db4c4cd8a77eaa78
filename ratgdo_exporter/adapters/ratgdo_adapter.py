"""Adapter for the ratgdo JSON status endpoint.

Issues a single GET per call and hands back the raw status code and body.
Status codes are not interpreted here; the scrape orchestrator decides what
a 4xx or 5xx means.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from ratgdo_exporter.errors import TransportError


@dataclass(frozen=True)
class FetchResult:
    """Raw outcome of one upstream GET."""

    status_code: int
    body: bytes


class RatgdoAdapter:
    """Async client for the ratgdo status endpoint.

    Parameters:
        json_address: Full URL of the status document
                      (e.g. ``http://ratgdo/status.json``).
        transport: Optional httpx transport, used by tests to stand in
                   for the device.
    """

    def __init__(
        self,
        json_address: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.json_address = json_address
        self._client = httpx.AsyncClient(
            transport=transport,
            follow_redirects=True,
        )

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def fetch(self) -> FetchResult:
        """GET the status document once, without retries.

        Returns:
            The response status code and full body.

        Raises:
            TransportError: If no response was received.
        """
        try:
            resp = await self._client.get(self.json_address)
        except httpx.RequestError as exc:
            raise TransportError(
                f"GET {self.json_address} failed: {exc!r}"
            ) from exc
        return FetchResult(status_code=resp.status_code, body=resp.content)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()
