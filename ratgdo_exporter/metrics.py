"""Prometheus metrics definitions for the ratgdo exporter.

All instruments live in a dedicated ``CollectorRegistry`` owned by one
:class:`RatgdoMetrics` instance, created at startup and shared with the
scrape orchestrator.  Gauges are labeled with the configured location and
the device identity reported by the latest snapshot; a change in identity
(new IP, renamed device) starts a new series and the old one is kept until
the process exits.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

from ratgdo_exporter.models import StatusSnapshot

PREFIX = "homekit_ratgdo"

IDENTITY_LABELS = ["location", "accessoryID", "deviceName", "localIP", "macAddress"]

INFO_LABELS = [
    "location",
    "firmwareVersion",
    "subnetMask",
    "gatewayIP",
    "wifiSSID",
    "garageLockState",
    "GDOSecurityType",
]

STATUS_CLASSES = ("2xx", "3xx", "4xx", "5xx")

# (metric suffix, help text, snapshot attribute)
GAUGE_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("up_time_seconds", "Uptime of the garage door in seconds.", "up_time"),
    ("paired", "Indicates if the garage door is paired.", "paired"),
    ("light_on", "Indicates if the garage light is on.", "garage_light_on"),
    ("motion", "Indicates if there is motion detected in the garage.", "garage_motion"),
    ("obstructed", "Indicates if the garage door is obstructed.", "garage_obstructed"),
    ("password_required", "Indicates if a password is required.", "password_required"),
    ("free_heap_bytes", "Free heap memory in bytes.", "free_heap"),
    ("min_heap_bytes", "Minimum heap memory in bytes.", "min_heap"),
    ("min_stack_bytes", "Minimum stack memory in bytes.", "min_stack"),
    ("crash_count", "Number of crashes.", "crash_count"),
)


def status_class(status_code: int) -> str | None:
    """Return the ``Nxx`` bucket for *status_code*, or ``None`` below 200."""
    if 200 <= status_code < 300:
        return "2xx"
    if 300 <= status_code < 400:
        return "3xx"
    if 400 <= status_code < 500:
        return "4xx"
    if status_code >= 500:
        return "5xx"
    return None


class RatgdoMetrics:
    """Owner of every instrument the exporter publishes.

    Parameters:
        location: Value of the ``location`` label on every gauge.
        registry: Registry to register into.  A fresh one is created when
                  omitted, which keeps test instances isolated from each
                  other.
    """

    def __init__(
        self,
        location: str,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self.location = location
        self.registry = registry if registry is not None else CollectorRegistry()

        self.gauges: dict[str, Gauge] = {}
        for suffix, doc, attr in GAUGE_FIELDS:
            self.gauges[attr] = Gauge(
                f"{PREFIX}_{suffix}",
                doc,
                IDENTITY_LABELS,
                registry=self.registry,
            )

        self.door_state = Gauge(
            f"{PREFIX}_door_state",
            "The state of the garage door (0 = Closed, 1 = Open).",
            IDENTITY_LABELS,
            registry=self.registry,
        )

        self.device_info = Gauge(
            f"{PREFIX}_info",
            "Garage door device info.",
            INFO_LABELS,
            registry=self.registry,
        )

        self.request_count = Counter(
            f"{PREFIX}_request_count",
            "Count of HTTP requests to the JSON endpoint, labeled by status code class.",
            ["status_code_class"],
            registry=self.registry,
        )
        for bucket in STATUS_CLASSES:
            self.request_count.labels(status_code_class=bucket)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def apply_scrape(self, body: bytes) -> StatusSnapshot:
        """Decode *body* and update every gauge from it.

        Raises:
            DecodeError: If the body is not a valid status payload.  No
                instrument is touched in that case.
        """
        snapshot = StatusSnapshot.from_json(body)
        self.apply_snapshot(snapshot)
        return snapshot

    def apply_snapshot(self, snapshot: StatusSnapshot) -> None:
        identity = self._identity_labels(snapshot)

        for attr, gauge in self.gauges.items():
            gauge.labels(**identity).set(float(getattr(snapshot, attr)))

        # Unknown door states keep the previous value.
        door_value = snapshot.door_state_value
        if door_value is not None:
            self.door_state.labels(**identity).set(door_value)

        self.device_info.labels(
            location=self.location,
            firmwareVersion=snapshot.firmware_version,
            subnetMask=snapshot.subnet_mask,
            gatewayIP=snapshot.gateway_ip,
            wifiSSID=snapshot.wifi_ssid,
            garageLockState=snapshot.garage_lock_state,
            GDOSecurityType=snapshot.gdo_security_type,
        ).set(1)

    def record_status(self, status_code: int) -> str | None:
        """Count one upstream response in its status-class bucket.

        Returns:
            The bucket incremented, or ``None`` for codes below 200.
        """
        bucket = status_class(status_code)
        if bucket is not None:
            self.request_count.labels(status_code_class=bucket).inc()
        return bucket

    # ------------------------------------------------------------------
    # Exposition
    # ------------------------------------------------------------------

    def render(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)

    def _identity_labels(self, snapshot: StatusSnapshot) -> dict[str, str]:
        return {
            "location": self.location,
            "accessoryID": snapshot.accessory_id,
            "deviceName": snapshot.device_name,
            "localIP": snapshot.local_ip,
            "macAddress": snapshot.mac_address,
        }
