"""Switch platform for Bosch spexor observations."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import ATTR_SENSOR_MODE, DOMAIN
from .coordinator import SpexorDataUpdateCoordinator
from .entity import SpexorEntity
from .models import ObservationStatus

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up one switch per observation reported by each device."""
    coordinator: SpexorDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]

    switches = [
        SpexorObservationSwitch(coordinator, spexor_id, observation.observation_type)
        for spexor_id, spexor in (coordinator.data or {}).items()
        for observation in spexor.info.status.observation
    ]

    async_add_entities(switches)


class SpexorObservationSwitch(SpexorEntity, SwitchEntity):
    """Switch to activate or deactivate an observation."""

    _attr_icon = "mdi:shield-home"

    def __init__(
        self,
        coordinator: SpexorDataUpdateCoordinator,
        spexor_id: str,
        observation_type: str,
    ) -> None:
        """Initialize the switch."""
        super().__init__(coordinator, spexor_id, f"observation_{observation_type.lower()}")
        self.observation_type = observation_type
        self._attr_name = f"{observation_type} observation"

    @property
    def _observation(self) -> ObservationStatus | None:
        data = self.spexor_data
        if data is None:
            return None
        for observation in data.info.status.observation:
            if observation.observation_type == self.observation_type:
                return observation
        return None

    @property
    def is_on(self) -> bool | None:
        """Return True if the observation is active."""
        observation = self._observation
        return observation.active if observation else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional attributes."""
        observation = self._observation
        if observation is None or observation.sensor_mode is None:
            return {}
        return {ATTR_SENSOR_MODE: observation.sensor_mode.value}

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Activate the observation."""
        await self._async_set_observation(True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Deactivate the observation."""
        await self._async_set_observation(False)

    async def _async_set_observation(self, enable: bool) -> None:
        status = await self.coordinator.client.async_set_observation(
            self.spexor_id, self.observation_type, enable
        )
        if not status.success:
            raise HomeAssistantError(
                f"Failed to {'activate' if enable else 'deactivate'} "
                f"{self.observation_type} observation: {status.message}"
            )
        _LOGGER.info(
            "%s observation of spexor %s %s",
            self.observation_type,
            self.spexor_id,
            "activated" if enable else "deactivated",
        )
        await self.coordinator.async_request_refresh()
