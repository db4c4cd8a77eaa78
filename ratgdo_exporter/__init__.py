"""Prometheus exporter for the ratgdo HomeKit garage-door controller."""

__version__ = "0.1.0"
