"""Application entry-point for the ratgdo exporter.

Creates and configures the FastAPI application instance, sets up
structured logging, attaches request-logging middleware, and wires the
scrape orchestrator to the ``/metrics`` route.

Run modes::

    # Console script, flags override environment / .env settings
    ratgdo-exporter --json-address http://ratgdo/status.json --port 8080 --location garage

    # Plain uvicorn, configured from environment / .env only
    uvicorn ratgdo_exporter.main:create_app --factory --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import argparse
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

import httpx
import structlog
from fastapi import FastAPI

from ratgdo_exporter import __version__
from ratgdo_exporter.adapters.ratgdo_adapter import RatgdoAdapter
from ratgdo_exporter.api.routes import router
from ratgdo_exporter.config import Settings, settings
from ratgdo_exporter.logging_config import RequestLoggingMiddleware, setup_logging
from ratgdo_exporter.metrics import RatgdoMetrics
from ratgdo_exporter.scraper import ScrapeOrchestrator


def create_app(
    config: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the exporter application.

    The metrics registry and upstream adapter are created here, once per
    application, and stored on ``app.state``.

    Parameters:
        config: Settings to use instead of the module-level ``settings``.
        transport: Optional httpx transport for the upstream client.
    """
    config = config or settings

    adapter = RatgdoAdapter(json_address=config.JSON_ADDRESS, transport=transport)
    metrics = RatgdoMetrics(location=config.LOCATION)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Runs once on startup and shutdown.

        Initialises structured logging on startup and closes the upstream
        HTTP client on shutdown.
        """
        setup_logging(log_level=config.LOG_LEVEL)
        logger = structlog.get_logger("ratgdo_exporter.startup")
        await logger.ainfo(
            "server_starting",
            version=__version__,
            json_address=config.JSON_ADDRESS,
            location=config.LOCATION,
            port=config.PORT,
            log_level=config.LOG_LEVEL,
        )
        yield
        await adapter.close()
        await logger.ainfo("server_shutting_down")

    app = FastAPI(
        title="ratgdo exporter",
        description=(
            "Polls a ratgdo garage-door controller's status.json on every "
            "scrape and republishes it as Prometheus metrics."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.metrics = metrics
    app.state.scraper = ScrapeOrchestrator(adapter=adapter, metrics=metrics)

    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(router)
    return app


# ---------------------------------------------------------------------------
# Command-line entry-point
# ---------------------------------------------------------------------------


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse command-line flags on top of the environment settings."""
    parser = argparse.ArgumentParser(description="Prometheus exporter for ratgdo")
    parser.add_argument("--json-address", default=settings.JSON_ADDRESS,
                        help="The address of the JSON endpoint")
    parser.add_argument("--port", default=settings.PORT,
                        help="The port to expose metrics on")
    parser.add_argument("--location", default=settings.LOCATION,
                        help="The location label for the metrics")
    parser.add_argument("--host", default=settings.HOST,
                        help="The interface to bind to")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        help="Minimum log level")
    args = parser.parse_args(argv)

    if not args.port.isdigit():
        parser.error(f"invalid port: {args.port!r}")

    return settings.model_copy(update={
        "JSON_ADDRESS": args.json_address,
        "PORT": args.port,
        "LOCATION": args.location,
        "HOST": args.host,
        "LOG_LEVEL": args.log_level.upper(),
    })


def main(argv: Sequence[str] | None = None) -> None:
    """Console-script entry-point: parse flags and serve ``/metrics``.

    Parameters:
        argv: Flags to parse instead of ``sys.argv[1:]``.
    """
    import uvicorn

    config = parse_args(argv)
    uvicorn.run(
        create_app(config),
        host=config.HOST,
        port=int(config.PORT),
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
