"""Status endpoint for the spexor device code authorization."""

from __future__ import annotations

import logging
from typing import Any

from aiohttp import web
from homeassistant.components.http import HomeAssistantView
from homeassistant.core import HomeAssistant

from .auth import AuthProcessingStatus, SpexorAuthorizationService
from .const import AUTH_VIEW_PATH, DOMAIN

_LOGGER = logging.getLogger(__name__)


class SpexorAuthView(HomeAssistantView):
    """Report and drive the authorization state.

    ``?status`` answers with JSON and accepts ``action=authorize`` or
    ``action=reset``; without it the HTML status page is served.
    """

    url = AUTH_VIEW_PATH
    name = f"api:{DOMAIN}:auth"
    requires_auth = False

    def __init__(self, hass: HomeAssistant, status_page: str) -> None:
        """Initialize the view."""
        self.hass = hass
        self.status_page = status_page

    def _get_auth_service(self) -> SpexorAuthorizationService | None:
        """Return the auth service of the configured entry, if any."""
        for entry_data in self.hass.data.get(DOMAIN, {}).values():
            if isinstance(entry_data, dict) and "auth" in entry_data:
                return entry_data["auth"]
        return None

    async def get(self, request: web.Request) -> web.Response:
        """Handle a status page or status query request."""
        if "status" not in request.query:
            return web.Response(
                text=self.status_page,
                content_type="text/html",
                charset="utf-8",
            )

        auth_service = self._get_auth_service()
        action = request.query.get("action", "").lower()
        if auth_service is not None:
            if action == "authorize":
                await auth_service.async_authorize()
            elif action == "reset":
                await auth_service.async_reset()

        current_status = self._determine_current_status(auth_service)
        if current_status.is_error:
            _LOGGER.error(
                "requested state of spexor authorization returned with an error: %s",
                current_status.error_message,
            )

        return web.json_response(status_to_json(current_status), status=200)

    def _determine_current_status(
        self, auth_service: SpexorAuthorizationService | None
    ) -> AuthProcessingStatus:
        if auth_service is None:
            result = AuthProcessingStatus()
            result.bridge_not_configured()
            _LOGGER.error("spexor authorization service is not available")
            return result
        return auth_service.get_status()


def status_to_json(status: AuthProcessingStatus) -> dict[str, Any]:
    """Build the status answer, leaving out unset values."""
    values = {
        "status": status.state.name,
        "userCode": status.user_code,
        "deviceCode": status.device_code,
        "verificationUri": status.verification_uri,
        "message": status.error_message,
    }
    return {key: value for key, value in values.items() if value is not None}


async def async_setup_auth_view(hass: HomeAssistant, status_page: str) -> None:
    """Register the status view."""
    hass.http.register_view(SpexorAuthView(hass, status_page))
    _LOGGER.info("spexor authorization page registered at %s", AUTH_VIEW_PATH)
