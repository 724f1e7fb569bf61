"""DataUpdateCoordinator for Bosch spexor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .api import SpexorAPIClient
from .const import CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL, DOMAIN, SENSOR_KEYS
from .models import SensorValue, SpexorInfo

_LOGGER = logging.getLogger(__name__)


@dataclass
class SpexorData:
    """Everything known about one device after a refresh."""

    info: SpexorInfo
    sensor_values: dict[str, SensorValue] = field(default_factory=dict)


class SpexorDataUpdateCoordinator(DataUpdateCoordinator[dict[str, SpexorData]]):
    """Coordinator polling all spexor devices of the account."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        client: SpexorAPIClient,
    ) -> None:
        """Initialize the coordinator."""
        scan_interval = entry.options.get(
            CONF_SCAN_INTERVAL, entry.data.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
        )
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=timedelta(seconds=scan_interval),
        )
        self.entry = entry
        self.client = client

    async def _async_update_data(self) -> dict[str, SpexorData]:
        """Fetch the device list, details and sensor values."""
        if not self.client.auth.is_authorized:
            _LOGGER.debug("spexor not authorized yet, skipping update")
            return {}

        try:
            spexors = await self.client.async_get_spexors()
            data: dict[str, SpexorData] = {}
            for spexor in spexors:
                info = await self.client.async_get_spexor(spexor.id)
                if info is None:
                    _LOGGER.warning("No details for spexor %s, leaving it out", spexor.id)
                    continue
                sensor_values = await self.client.async_get_sensor_values(spexor.id, SENSOR_KEYS)
                data[spexor.id] = SpexorData(info=info, sensor_values=sensor_values)
        except Exception as err:
            _LOGGER.error("Error updating spexor data: %s", err)
            raise UpdateFailed(f"Error updating data: {err}") from err

        _LOGGER.debug("Fetched data for %d spexor devices", len(data))
        return data
