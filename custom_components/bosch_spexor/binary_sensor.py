"""Binary sensor platform for Bosch spexor."""

from __future__ import annotations

from typing import Any

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import ATTR_AVAILABLE_VERSION, ATTR_LAST_CONNECTED, DOMAIN
from .coordinator import SpexorDataUpdateCoordinator
from .entity import SpexorEntity


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up spexor binary sensors from a config entry."""
    coordinator: SpexorDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]

    entities: list[BinarySensorEntity] = []
    for spexor_id in coordinator.data or {}:
        entities.extend(
            [
                SpexorPoweredBinarySensor(coordinator, spexor_id),
                SpexorOnlineBinarySensor(coordinator, spexor_id),
                SpexorFirmwareUpdateBinarySensor(coordinator, spexor_id),
            ]
        )

    async_add_entities(entities)


class SpexorPoweredBinarySensor(SpexorEntity, BinarySensorEntity):
    """On when the device runs on external power."""

    _attr_name = "Powered"
    _attr_device_class = BinarySensorDeviceClass.PLUG

    def __init__(self, coordinator: SpexorDataUpdateCoordinator, spexor_id: str) -> None:
        super().__init__(coordinator, spexor_id, "powered")

    @property
    def is_on(self) -> bool | None:
        data = self.spexor_data
        return data.info.status.energy.powered if data else None


class SpexorOnlineBinarySensor(SpexorEntity, BinarySensorEntity):
    """On when the device is connected to the cloud."""

    _attr_name = "Online"
    _attr_device_class = BinarySensorDeviceClass.CONNECTIVITY
    _attr_entity_category = EntityCategory.DIAGNOSTIC

    def __init__(self, coordinator: SpexorDataUpdateCoordinator, spexor_id: str) -> None:
        super().__init__(coordinator, spexor_id, "online")

    @property
    def is_on(self) -> bool | None:
        data = self.spexor_data
        return data.info.status.connection.online if data else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        data = self.spexor_data
        if data is None:
            return {}
        return {ATTR_LAST_CONNECTED: data.info.status.connection.last_connected}


class SpexorFirmwareUpdateBinarySensor(SpexorEntity, BinarySensorEntity):
    """On when newer firmware is available."""

    _attr_name = "Firmware update"
    _attr_device_class = BinarySensorDeviceClass.UPDATE
    _attr_entity_category = EntityCategory.DIAGNOSTIC

    def __init__(self, coordinator: SpexorDataUpdateCoordinator, spexor_id: str) -> None:
        super().__init__(coordinator, spexor_id, "firmware_update")

    @property
    def is_on(self) -> bool | None:
        data = self.spexor_data
        return data.info.status.firmware.update_available if data else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        data = self.spexor_data
        if data is None:
            return {}
        return {ATTR_AVAILABLE_VERSION: data.info.status.firmware.available_version or None}
