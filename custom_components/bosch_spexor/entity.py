"""Base entity for Bosch spexor."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import SpexorData, SpexorDataUpdateCoordinator


class SpexorEntity(CoordinatorEntity[SpexorDataUpdateCoordinator]):
    """Entity bound to one spexor device."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: SpexorDataUpdateCoordinator,
        spexor_id: str,
        key: str,
    ) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self.spexor_id = spexor_id
        self._attr_unique_id = f"{spexor_id}_{key}"
        info = coordinator.data[spexor_id].info
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, spexor_id)},
            manufacturer=MANUFACTURER,
            model="spexor",
            name=info.name or f"spexor {spexor_id}",
            sw_version=info.status.firmware.current_version or None,
        )

    @property
    def spexor_data(self) -> SpexorData | None:
        """Return the latest data of this device."""
        if not self.coordinator.data:
            return None
        return self.coordinator.data.get(self.spexor_id)

    @property
    def available(self) -> bool:
        """Return True if the device was part of the last refresh."""
        return super().available and self.spexor_data is not None
