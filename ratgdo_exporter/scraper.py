"""Scrape orchestration: fetch the status document, count, decode, update.

Every scrape runs under one ``asyncio.Lock`` so concurrent requests to
``/metrics`` are serialized and never interleave gauge writes.  Rendering
through :meth:`ScrapeOrchestrator.collect` happens under the same lock, so
an exposition never mixes fields from two different upstream responses.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass

import structlog

from ratgdo_exporter.adapters.ratgdo_adapter import RatgdoAdapter
from ratgdo_exporter.errors import DecodeError, TransportError
from ratgdo_exporter.metrics import RatgdoMetrics

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScrapeOutcome:
    """Summary of a single scrape cycle.

    Attributes:
        ok: False only when the upstream GET produced no response.
        status_code: Upstream status code, if one was received.
        status_class: Counter bucket that was incremented, if any.
        decoded: Whether the body decoded and the gauges were updated.
        error: Description of the failure, if any.
        duration_seconds: Wall time of the fetch-and-update cycle.
    """

    ok: bool
    status_code: int | None = None
    status_class: str | None = None
    decoded: bool = False
    error: str | None = None
    duration_seconds: float = 0.0


class ScrapeOrchestrator:
    """Runs the fetch-then-map pipeline for each scrape request.

    Parameters:
        adapter: Client for the upstream status endpoint.
        metrics: Instrument registry updated by each scrape.
    """

    def __init__(self, adapter: RatgdoAdapter, metrics: RatgdoMetrics) -> None:
        self.adapter = adapter
        self.metrics = metrics
        self._lock = asyncio.Lock()

    async def scrape(self) -> ScrapeOutcome:
        """Run one scrape cycle under the lock."""
        async with self._lock:
            return await self._scrape_locked()

    async def collect(self) -> tuple[ScrapeOutcome, bytes]:
        """Run one scrape cycle and render the registry, both under the lock.

        The registry is rendered even when the fetch failed, so callers
        always get the last known values.
        """
        async with self._lock:
            outcome = await self._scrape_locked()
            return outcome, self.metrics.render()

    async def _scrape_locked(self) -> ScrapeOutcome:
        start = time.perf_counter()

        try:
            result = await self.adapter.fetch()
        except TransportError as exc:
            outcome = ScrapeOutcome(
                ok=False,
                error=str(exc),
                duration_seconds=_elapsed(start),
            )
            await logger.awarning(
                "scrape_transport_error",
                json_address=self.adapter.json_address,
                detail=outcome.error,
                duration_ms=_ms(outcome.duration_seconds),
            )
            return outcome

        bucket = self.metrics.record_status(result.status_code)

        try:
            snapshot = self.metrics.apply_scrape(result.body)
        except DecodeError as exc:
            outcome = ScrapeOutcome(
                ok=True,
                status_code=result.status_code,
                status_class=bucket,
                error=str(exc),
                duration_seconds=_elapsed(start),
            )
            await logger.awarning(
                "scrape_decode_error",
                status_code=outcome.status_code,
                status_class=outcome.status_class,
                detail=outcome.error,
                duration_ms=_ms(outcome.duration_seconds),
            )
            return outcome

        outcome = ScrapeOutcome(
            ok=True,
            status_code=result.status_code,
            status_class=bucket,
            decoded=True,
            duration_seconds=_elapsed(start),
        )
        await logger.adebug(
            "scrape_completed",
            status_code=outcome.status_code,
            status_class=outcome.status_class,
            device_name=snapshot.device_name,
            door_state=snapshot.garage_door_state,
            duration_ms=_ms(outcome.duration_seconds),
        )
        return outcome


def _elapsed(start: float) -> float:
    return time.perf_counter() - start


def _ms(seconds: float) -> float:
    return round(seconds * 1000, 2)
