"""Data models returned by the spexor cloud API.

The cloud adds fields over time, so every model ignores unknown properties
and every enum field falls back to None for values it does not recognize.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .const import SENSOR_AIR_QUALITY_LEVEL

_LOGGER = logging.getLogger(__name__)


def _lenient_enum(enum_cls: type[Enum], value: Any) -> Enum | None:
    """Convert a raw JSON value to an enum member, or None if unknown."""
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        _LOGGER.debug("Unknown %s value %r", enum_cls.__name__, value)
        return None


class SpexorModel(BaseModel):
    """Base model for spexor API payloads."""

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


class EnergyMode(str, Enum):
    """Possible energy modes."""

    ENERGY_SAVING_OFF = "EnergySavingOff"
    ENERGY_SAVING_ALWAYS_ON = "EnergySavingAlwaysOn"
    ENERGY_SAVING_ON_BATTERY = "EnergySavingOnBattery"


class FirmwareState(str, Enum):
    """Update state of the installed firmware."""

    UP_TO_DATE = "UpToDate"
    UPDATE_AVAILABLE = "UpdateAvailable"
    SCHEDULED = "Scheduled"
    INSTALLING = "Installing"
    INSTALLATION_FAILED = "InstallationFailed"


class SensorMode(str, Enum):
    """Activation state of an observation."""

    ACTIVATED = "Activated"
    DEACTIVATED = "Deactivated"
    IN_ACTIVATION = "InActivation"
    IN_DEACTIVATION = "InDeactivation"


class StatusCode(str, Enum):
    """Result of an observation change."""

    SUCCESS = "Success"
    FAILURE = "Failure"


class SensorValue(SpexorModel):
    """A single sensor reading.

    ``AirQualityLevel`` readings carry a string value, every other sensor
    reports an integer.
    """

    key: str = ""
    value: int | str | None = None
    unit: str | None = None
    timestamp: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SensorValue:
        """Build a typed reading from a raw sensor value item.

        Raises:
            KeyError: If the item has no key
            ValueError: If the value does not match the sensor's type
        """
        key = str(data["key"])
        raw = data.get("value")
        if raw is None:
            value: int | str | None = None
        elif key == SENSOR_AIR_QUALITY_LEVEL:
            value = str(raw)
        else:
            value = int(raw)
        return cls(
            key=key,
            value=value,
            unit=data.get("unit"),
            timestamp=data.get("timestamp"),
        )


class Energy(SpexorModel):
    """Power supply and battery state."""

    state_of_charge: SensorValue = Field(
        default_factory=SensorValue, alias="stateOfCharge"
    )
    energy_mode: EnergyMode | None = Field(
        default=EnergyMode.ENERGY_SAVING_ALWAYS_ON, alias="energyMode"
    )
    powered: bool = Field(default=False, alias="isPowered")

    @field_validator("energy_mode", mode="before")
    @classmethod
    def _parse_energy_mode(cls, v: Any) -> EnergyMode | None:
        return _lenient_enum(EnergyMode, v)


class Firmware(SpexorModel):
    """Installed and available firmware."""

    current_version: str = Field(default="", alias="currentVersion")
    state: FirmwareState | None = FirmwareState.UP_TO_DATE
    available_version: str = Field(default="", alias="availableVersion")

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, v: Any) -> FirmwareState | None:
        # the cloud sends " Scheduled" and " Installing" with a leading blank
        return _lenient_enum(FirmwareState, v)

    @property
    def update_available(self) -> bool:
        """Return True if a newer firmware can be installed."""
        return self.state == FirmwareState.UPDATE_AVAILABLE


class Profile(SpexorModel):
    """Installation profile of a device."""

    name: str = ""
    profile_type: str | None = Field(default=None, alias="profileType")


class Connection(SpexorModel):
    """Cloud connection state of a device."""

    last_connected: str | None = Field(default=None, alias="lastConnected")
    online_status: str | None = Field(default=None, alias="onlineStatus")

    @property
    def online(self) -> bool:
        """Return True if the device is connected to the cloud."""
        return (self.online_status or "").lower() == "online"


class ObservationStatus(SpexorModel):
    """Activation state of one observation type."""

    observation_type: str = Field(alias="observationType")
    sensor_mode: SensorMode | None = Field(default=None, alias="sensorMode")

    @field_validator("sensor_mode", mode="before")
    @classmethod
    def _parse_sensor_mode(cls, v: Any) -> SensorMode | None:
        return _lenient_enum(SensorMode, v)

    @property
    def active(self) -> bool:
        """Return True if the observation is on or turning on."""
        return self.sensor_mode in (SensorMode.ACTIVATED, SensorMode.IN_ACTIVATION)


class Status(SpexorModel):
    """Aggregated device status."""

    connection: Connection = Field(default_factory=Connection)
    energy: Energy = Field(default_factory=Energy)
    firmware: Firmware = Field(default_factory=Firmware)
    observation: list[ObservationStatus] = Field(default_factory=list)


class Spexor(SpexorModel):
    """A device as listed by the cloud."""

    id: str
    name: str = ""
    profile: Profile = Field(default_factory=Profile)


class SpexorInfo(Spexor):
    """A device with its full status."""

    status: Status = Field(default_factory=Status)


class ObservationRequest(SpexorModel):
    """Request body item to change an observation."""

    observation_type: str = Field(alias="observationType")
    sensor_mode: SensorMode = Field(alias="sensorMode")

    def to_api(self) -> dict[str, Any]:
        """Serialize using the cloud's field names."""
        return self.model_dump(mode="json", by_alias=True)


class ObservationChangeStatus(SpexorModel):
    """Result of an observation change request."""

    observation_type: str = Field(default="", alias="observationType")
    status_code: StatusCode | None = Field(default=None, alias="statusCode")
    message: str | None = None

    @field_validator("status_code", mode="before")
    @classmethod
    def _parse_status_code(cls, v: Any) -> StatusCode | None:
        return _lenient_enum(StatusCode, v)

    @property
    def success(self) -> bool:
        """Return True if the change was accepted."""
        return self.status_code == StatusCode.SUCCESS

    @classmethod
    def failure(cls, observation_type: str, message: str) -> ObservationChangeStatus:
        """Build a failed status for a request that never got an answer."""
        return cls(
            observation_type=observation_type,
            status_code=StatusCode.FAILURE,
            message=message,
        )
