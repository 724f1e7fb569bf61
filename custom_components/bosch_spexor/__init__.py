"""The Bosch spexor integration."""

from __future__ import annotations

import logging
from pathlib import Path

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.storage import Store

from .api import SpexorAPIClient
from .auth import SpexorAuthorizationService
from .auth_view import async_setup_auth_view
from .const import (
    AUTH_VIEW_PATH,
    CONF_CLIENT_ID,
    DEFAULT_CLIENT_ID,
    DOMAIN,
    STATUS_PAGE_FILE,
    STORAGE_KEY,
    STORAGE_VERSION,
)
from .coordinator import SpexorDataUpdateCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.BINARY_SENSOR, Platform.SENSOR, Platform.SWITCH]

VIEW_REGISTERED = f"{DOMAIN}_view_registered"


def _read_status_page() -> str:
    return (Path(__file__).parent / STATUS_PAGE_FILE).read_text(encoding="utf-8")


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Bosch spexor from a config entry."""
    _LOGGER.debug("Setting up Bosch spexor integration")

    session = async_get_clientsession(hass)
    store: Store = Store(hass, STORAGE_VERSION, f"{STORAGE_KEY}.{entry.entry_id}")
    auth = SpexorAuthorizationService(
        hass,
        session,
        store,
        entry.data.get(CONF_CLIENT_ID, DEFAULT_CLIENT_ID),
    )
    await auth.async_initialize()

    client = SpexorAPIClient(session, auth)
    coordinator = SpexorDataUpdateCoordinator(hass, entry, client)
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "auth": auth,
        "client": client,
        "coordinator": coordinator,
    }

    if not hass.data.get(VIEW_REGISTERED):
        status_page = await hass.async_add_executor_job(_read_status_page)
        await async_setup_auth_view(hass, status_page)
        hass.data[VIEW_REGISTERED] = True

    if not auth.is_authorized:
        _LOGGER.warning(
            "Bosch spexor is not authorized yet, open %s to authorize this installation",
            AUTH_VIEW_PATH,
        )

    @callback
    def _async_authorized() -> None:
        # platforms only add entities for devices known at setup
        _LOGGER.info("Bosch spexor authorized, reloading to add its devices")
        hass.config_entries.async_schedule_reload(entry.entry_id)

    entry.async_on_unload(auth.add_authorized_listener(_async_authorized))

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.debug("Unloading Bosch spexor integration")

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        entry_data = hass.data[DOMAIN].pop(entry.entry_id)
        await entry_data["auth"].async_shutdown()

    return unload_ok


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload config entry."""
    await hass.config_entries.async_reload(entry.entry_id)
