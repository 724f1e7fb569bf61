"""Sensor platform for Bosch spexor."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE, EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    ATTR_AVAILABLE_VERSION,
    ATTR_ENERGY_MODE,
    ATTR_FIRMWARE_STATE,
    ATTR_TIMESTAMP,
    DOMAIN,
    SENSOR_ACOUSTIC,
    SENSOR_AIR_QUALITY,
    SENSOR_AIR_QUALITY_LEVEL,
    SENSOR_GAS,
    SENSOR_HUMIDITY,
    SENSOR_LIGHT,
    SENSOR_PRESSURE,
    SENSOR_TEMPERATURE,
)
from .coordinator import SpexorDataUpdateCoordinator
from .entity import SpexorEntity

_LOGGER = logging.getLogger(__name__)

# Device class and icon per sensor key; units come from the cloud
SENSOR_DEVICE_CLASSES: dict[str, SensorDeviceClass | None] = {
    SENSOR_AIR_QUALITY: SensorDeviceClass.AQI,
    SENSOR_AIR_QUALITY_LEVEL: None,
    SENSOR_TEMPERATURE: SensorDeviceClass.TEMPERATURE,
    SENSOR_HUMIDITY: SensorDeviceClass.HUMIDITY,
    SENSOR_PRESSURE: SensorDeviceClass.PRESSURE,
    SENSOR_GAS: None,
    SENSOR_LIGHT: SensorDeviceClass.ILLUMINANCE,
    SENSOR_ACOUSTIC: SensorDeviceClass.SOUND_PRESSURE,
}

SENSOR_ICONS: dict[str, str] = {
    SENSOR_AIR_QUALITY_LEVEL: "mdi:air-filter",
    SENSOR_GAS: "mdi:molecule",
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up spexor sensors from a config entry."""
    coordinator: SpexorDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]

    sensors: list[SensorEntity] = []
    for spexor_id, spexor in (coordinator.data or {}).items():
        sensors.append(SpexorBatterySensor(coordinator, spexor_id))
        sensors.append(SpexorFirmwareSensor(coordinator, spexor_id))
        for key in spexor.sensor_values:
            sensors.append(SpexorValueSensor(coordinator, spexor_id, key))

    _LOGGER.debug("Adding %d spexor sensors", len(sensors))
    async_add_entities(sensors)


class SpexorValueSensor(SpexorEntity, SensorEntity):
    """Sensor for one value measured by the device."""

    def __init__(
        self,
        coordinator: SpexorDataUpdateCoordinator,
        spexor_id: str,
        sensor_key: str,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, spexor_id, sensor_key.lower())
        self.sensor_key = sensor_key
        self._attr_name = sensor_key
        self._attr_device_class = SENSOR_DEVICE_CLASSES.get(sensor_key)
        self._attr_icon = SENSOR_ICONS.get(sensor_key)
        if sensor_key != SENSOR_AIR_QUALITY_LEVEL:
            self._attr_state_class = SensorStateClass.MEASUREMENT
        value = coordinator.data[spexor_id].sensor_values[sensor_key]
        self._attr_native_unit_of_measurement = value.unit

    @property
    def native_value(self) -> int | str | None:
        """Return the state of the sensor."""
        data = self.spexor_data
        if data is None or self.sensor_key not in data.sensor_values:
            return None
        return data.sensor_values[self.sensor_key].value

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional attributes."""
        data = self.spexor_data
        if data is None or self.sensor_key not in data.sensor_values:
            return {}
        return {ATTR_TIMESTAMP: data.sensor_values[self.sensor_key].timestamp}


class SpexorBatterySensor(SpexorEntity, SensorEntity):
    """Sensor for the battery state of charge."""

    _attr_name = "Battery"
    _attr_device_class = SensorDeviceClass.BATTERY
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = PERCENTAGE

    def __init__(self, coordinator: SpexorDataUpdateCoordinator, spexor_id: str) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, spexor_id, "battery")

    @property
    def native_value(self) -> int | None:
        """Return the state of the sensor."""
        data = self.spexor_data
        if data is None:
            return None
        value = data.info.status.energy.state_of_charge.value
        return value if isinstance(value, int) else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional attributes."""
        data = self.spexor_data
        if data is None:
            return {}
        mode = data.info.status.energy.energy_mode
        return {ATTR_ENERGY_MODE: mode.value if mode else None}


class SpexorFirmwareSensor(SpexorEntity, SensorEntity):
    """Sensor for the installed firmware version."""

    _attr_name = "Firmware"
    _attr_icon = "mdi:chip"
    _attr_entity_category = EntityCategory.DIAGNOSTIC

    def __init__(self, coordinator: SpexorDataUpdateCoordinator, spexor_id: str) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, spexor_id, "firmware")

    @property
    def native_value(self) -> str | None:
        """Return the state of the sensor."""
        data = self.spexor_data
        if data is None:
            return None
        return data.info.status.firmware.current_version or None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional attributes."""
        data = self.spexor_data
        if data is None:
            return {}
        firmware = data.info.status.firmware
        return {
            ATTR_AVAILABLE_VERSION: firmware.available_version or None,
            ATTR_FIRMWARE_STATE: firmware.state.value if firmware.state else None,
        }
