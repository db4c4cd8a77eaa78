"""Data model for the ratgdo ``status.json`` payload.

The device reports camel-case keys; the model exposes them as snake-case
attributes.  Every field is optional and falls back to its zero value, so a
firmware that omits a key still produces a usable snapshot.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ratgdo_exporter.errors import DecodeError

# Device counters are 64-bit signed integers.
Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]

DOOR_STATE_VALUES: dict[str, float] = {
    "Closed": 0.0,
    "Open": 1.0,
}


class StatusSnapshot(BaseModel):
    """One decoded response from the ratgdo status endpoint.

    Types are enforced per field: numeric fields only accept JSON integers,
    boolean fields JSON booleans and string fields JSON strings.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Numeric
    up_time: Int64 = Field(0, alias="upTime")
    reboot_seconds: Int64 = Field(0, alias="rebootSeconds")
    free_heap: Int64 = Field(0, alias="freeHeap")
    min_heap: Int64 = Field(0, alias="minHeap")
    min_stack: Int64 = Field(0, alias="minStack")
    crash_count: Int64 = Field(0, alias="crashCount")
    wifi_phy_mode: Int64 = Field(0, alias="wifiPhyMode")
    wifi_power: Int64 = Field(0, alias="wifiPower")
    ttc_seconds: Int64 = Field(0, alias="TTCseconds")
    motion_triggers: Int64 = Field(0, alias="motionTriggers")
    led_idle: Int64 = Field(0, alias="LEDidle")
    last_door_update_at: Int64 = Field(0, alias="lastDoorUpdateAt")

    # Boolean
    paired: bool = Field(False, alias="paired")
    garage_light_on: bool = Field(False, alias="garageLightOn")
    garage_motion: bool = Field(False, alias="garageMotion")
    garage_obstructed: bool = Field(False, alias="garageObstructed")
    password_required: bool = Field(False, alias="passwordRequired")
    check_flash_crc: bool = Field(False, alias="checkFlashCRC")

    # String
    device_name: str = Field("", alias="deviceName")
    firmware_version: str = Field("", alias="firmwareVersion")
    accessory_id: str = Field("", alias="accessoryID")
    local_ip: str = Field("", alias="localIP")
    subnet_mask: str = Field("", alias="subnetMask")
    gateway_ip: str = Field("", alias="gatewayIP")
    mac_address: str = Field("", alias="macAddress")
    wifi_ssid: str = Field("", alias="wifiSSID")
    wifi_rssi: str = Field("", alias="wifiRSSI")
    gdo_security_type: str = Field("", alias="GDOSecurityType")
    garage_door_state: str = Field("", alias="garageDoorState")
    garage_lock_state: str = Field("", alias="garageLockState")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # JSON null leaves the field at its zero value.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def from_json(cls, body: bytes) -> StatusSnapshot:
        """Decode a raw response body.

        Parameters:
            body: The response body exactly as received.

        Returns:
            The decoded snapshot.

        Raises:
            DecodeError: If the body is not JSON, not a JSON object, nested
                too deeply, or any field has the wrong type or an integer
                outside the 64-bit range.
        """
        try:
            data = json.loads(body)
            return cls.model_validate(data)
        except ValidationError as exc:
            raise DecodeError(f"invalid status payload: {exc}") from exc
        except (ValueError, RecursionError) as exc:
            raise DecodeError(f"malformed JSON body: {exc}") from exc

    @property
    def door_state_value(self) -> float | None:
        """Gauge value for the door state, or ``None`` if it is not known."""
        return DOOR_STATE_VALUES.get(self.garage_door_state)
