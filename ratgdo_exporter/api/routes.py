"""API route definitions for the ratgdo exporter.

``/metrics`` triggers one upstream scrape per request and returns the
Prometheus exposition.  ``/health`` is a liveness probe that never touches
the device.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.responses import Response as StarletteResponse

from ratgdo_exporter import __version__
from ratgdo_exporter.scraper import ScrapeOrchestrator

router = APIRouter()

FETCH_FAILED_BODY = b"Failed to fetch data\n"


def _scraper(request: Request) -> ScrapeOrchestrator:
    return request.app.state.scraper  # type: ignore[no-any-return]


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Liveness probe.

    Returns:
        A JSON object with ``status`` and ``version`` fields.
    """
    return {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# Prometheus metrics
# ---------------------------------------------------------------------------

@router.get("/metrics", tags=["monitoring"])
async def prometheus_metrics(request: Request) -> StarletteResponse:
    """Scrape the ratgdo and return metrics in Prometheus text format.

    If the device could not be reached the response is a 500 whose body
    starts with an error line, followed by the last known metric values.
    """
    outcome, payload = await _scraper(request).collect()
    if not outcome.ok:
        return StarletteResponse(
            content=FETCH_FAILED_BODY + payload,
            status_code=500,
            media_type="text/plain; charset=utf-8",
        )
    return StarletteResponse(
        content=payload,
        media_type=CONTENT_TYPE_LATEST,
    )
