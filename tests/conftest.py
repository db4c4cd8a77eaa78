"""Shared pytest fixtures for the ratgdo exporter test suite."""

from __future__ import annotations

import json
from typing import Any, AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from ratgdo_exporter.adapters.ratgdo_adapter import RatgdoAdapter
from ratgdo_exporter.config import Settings
from ratgdo_exporter.main import create_app
from ratgdo_exporter.metrics import RatgdoMetrics

JSON_ADDRESS = "http://ratgdo/status.json"

STATUS_PAYLOAD: dict[str, Any] = {
    "upTime": 120,
    "deviceName": "Door1",
    "paired": True,
    "firmwareVersion": "1.9.0",
    "accessoryID": "AA",
    "localIP": "10.0.0.5",
    "subnetMask": "255.255.255.0",
    "gatewayIP": "10.0.0.1",
    "macAddress": "AA:BB",
    "wifiSSID": "home-net",
    "wifiRSSI": "-61 dBm, channel 6",
    "GDOSecurityType": "2",
    "garageDoorState": "Closed",
    "garageLockState": "Unsecured",
    "garageLightOn": True,
    "garageMotion": False,
    "garageObstructed": False,
    "passwordRequired": False,
    "rebootSeconds": 0,
    "freeHeap": 31000,
    "minHeap": 19000,
    "minStack": 1200,
    "crashCount": 2,
    "wifiPhyMode": 3,
    "wifiPower": 20,
    "TTCseconds": 0,
    "motionTriggers": 1,
    "LEDidle": 0,
    "lastDoorUpdateAt": 5000,
    "checkFlashCRC": True,
}

IDENTITY = {
    "location": "garage",
    "accessoryID": "AA",
    "deviceName": "Door1",
    "localIP": "10.0.0.5",
    "macAddress": "AA:BB",
}


class FakeRatgdo:
    """Stand-in for the device, served through ``httpx.MockTransport``.

    Responds with ``status_code`` and ``body`` on every request, or raises
    ``httpx.ConnectError`` while ``refuse`` is set.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.body: bytes = json.dumps(STATUS_PAYLOAD).encode()
        self.refuse = False
        self.requests: list[httpx.Request] = []

    def respond_with(self, payload: dict[str, Any], status_code: int = 200) -> None:
        self.status_code = status_code
        self.body = json.dumps(payload).encode()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.refuse:
            raise httpx.ConnectError("Connection refused", request=request)
        return httpx.Response(self.status_code, content=self.body)


@pytest.fixture()
def status_payload() -> dict[str, Any]:
    return dict(STATUS_PAYLOAD)


@pytest.fixture()
def identity() -> dict[str, str]:
    """Identity labels the fake device's gauges are published under."""
    return dict(IDENTITY)


@pytest.fixture()
def ratgdo() -> FakeRatgdo:
    return FakeRatgdo()


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(JSON_ADDRESS=JSON_ADDRESS, LOCATION="garage")


@pytest.fixture()
def metrics() -> RatgdoMetrics:
    """Return an isolated metrics registry labeled ``location=garage``."""
    return RatgdoMetrics(location="garage")


@pytest_asyncio.fixture()
async def adapter(ratgdo: FakeRatgdo) -> AsyncIterator[RatgdoAdapter]:
    adapter = RatgdoAdapter(JSON_ADDRESS, transport=httpx.MockTransport(ratgdo))
    try:
        yield adapter
    finally:
        await adapter.close()


@pytest.fixture()
def app(test_settings: Settings, ratgdo: FakeRatgdo) -> FastAPI:
    """Return an exporter application wired to the fake device."""
    return create_app(test_settings, transport=httpx.MockTransport(ratgdo))


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """Yield an async HTTP client wired to the ASGI app.

    Uses ``httpx.ASGITransport`` so that requests are handled in-process
    without starting a real server.
    """
    transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://testserver",
    ) as ac:
        yield ac
