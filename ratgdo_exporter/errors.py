"""Exception types raised while scraping the ratgdo status endpoint."""

from __future__ import annotations


class ExporterError(Exception):
    """Base exception class for all exporter errors."""


class TransportError(ExporterError):
    """Raised when the upstream GET fails before any response arrives.

    Carries no status code: connection refused, DNS failure, timeout or a
    broken read all land here.
    """


class DecodeError(ExporterError):
    """Raised when a response body does not decode into a status snapshot."""
