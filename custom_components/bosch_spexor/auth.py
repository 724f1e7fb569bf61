"""OAuth2 device code authorization for the spexor cloud."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from collections.abc import Callable
from enum import Enum
from typing import Any

import aiohttp
from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import (
    DEFAULT_POLL_INTERVAL,
    GRANT_TYPE_DEVICE_CODE,
    GRANT_TYPE_REFRESH_TOKEN,
    OAUTH2_DEVICE_CODE_URL,
    OAUTH2_SCOPES,
    OAUTH2_TOKEN_URL,
    REQUEST_TIMEOUT,
    SLOW_DOWN_INCREMENT,
    TOKEN_EXPIRY_MARGIN,
)

_LOGGER = logging.getLogger(__name__)

TOKEN_REQUEST_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ValueError)


class AuthorizationState(Enum):
    """States of the device code flow."""

    UNINITIALIZED = "uninitialized"
    AWAITING_USER_ACCEPTANCE = "awaiting_user_acceptance"
    AUTHORIZED = "authorized"
    EXPIRED = "expired"
    ERROR = "error"
    BRIDGE_NOT_CONFIGURED = "bridge_not_configured"


@dataclass
class AuthProcessingStatus:
    """Snapshot of the authorization process shown on the status page."""

    state: AuthorizationState = AuthorizationState.UNINITIALIZED
    user_code: str | None = None
    device_code: str | None = None
    verification_uri: str | None = None
    error_message: str | None = None

    @property
    def is_error(self) -> bool:
        """Return True if the process cannot continue without intervention."""
        return self.state in (
            AuthorizationState.ERROR,
            AuthorizationState.BRIDGE_NOT_CONFIGURED,
        )

    def bridge_not_configured(self) -> None:
        """Mark the status as missing its integration entry."""
        self.state = AuthorizationState.BRIDGE_NOT_CONFIGURED
        self.error_message = "spexor integration is not configured"


class SpexorAuthError(Exception):
    """Exception raised when no valid token is available."""

    pass


class SpexorAuthorizationService:
    """Run the device code flow and hand out access tokens.

    Tokens are persisted in a Home Assistant store so a restart does not
    require a new authorization.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        session: aiohttp.ClientSession,
        store: Store,
        client_id: str,
    ) -> None:
        """Initialize the authorization service."""
        self.hass = hass
        self._session = session
        self._store = store
        self._client_id = client_id
        self._token: dict[str, Any] | None = None
        self._status = AuthProcessingStatus()
        self._poll_interval = DEFAULT_POLL_INTERVAL
        self._device_code_expires_at = 0.0
        self._poll_task: asyncio.Task | None = None
        self._lock = asyncio.Lock()
        self._authorize_lock = asyncio.Lock()
        self._authorized_listeners: list[Callable[[], None]] = []

    @property
    def is_authorized(self) -> bool:
        """Return True if a token is available."""
        return self._status.state == AuthorizationState.AUTHORIZED

    def get_status(self) -> AuthProcessingStatus:
        """Return a copy of the current processing status."""
        return AuthProcessingStatus(
            state=self._status.state,
            user_code=self._status.user_code,
            device_code=self._status.device_code,
            verification_uri=self._status.verification_uri,
            error_message=self._status.error_message,
        )

    def add_authorized_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call listener whenever the device code flow grants a token.

        Returns:
            A function removing the listener again
        """
        self._authorized_listeners.append(listener)

        def _remove() -> None:
            if listener in self._authorized_listeners:
                self._authorized_listeners.remove(listener)

        return _remove

    async def async_initialize(self) -> None:
        """Restore a previously stored token."""
        stored = await self._store.async_load()
        if stored and stored.get("access_token"):
            self._token = stored
            self._status = AuthProcessingStatus(state=AuthorizationState.AUTHORIZED)
            _LOGGER.info("Restored stored spexor authorization")
        else:
            _LOGGER.debug("No stored spexor authorization found")

    async def async_authorize(self) -> None:
        """Start the device code flow unless already authorized or pending.

        Concurrent calls are serialized so only one device code is requested.
        """
        async with self._authorize_lock:
            await self._async_request_device_code()

    async def _async_request_device_code(self) -> None:
        if self._status.state in (
            AuthorizationState.AUTHORIZED,
            AuthorizationState.AWAITING_USER_ACCEPTANCE,
        ):
            _LOGGER.debug("Authorization requested in state %s", self._status.state.name)
            return

        try:
            data = await self._async_post(
                OAUTH2_DEVICE_CODE_URL,
                {"client_id": self._client_id, "scope": " ".join(OAUTH2_SCOPES)},
            )
        except TOKEN_REQUEST_ERRORS as err:
            self._set_error(f"device code request failed: {err}")
            return

        if "device_code" not in data or "user_code" not in data:
            self._set_error(
                data.get("error_description")
                or data.get("error")
                or "invalid device code response"
            )
            return

        try:
            self._poll_interval = int(data.get("interval", DEFAULT_POLL_INTERVAL))
            self._device_code_expires_at = time.time() + int(data.get("expires_in", 900))
        except (TypeError, ValueError) as err:
            self._set_error(f"invalid device code response: {err}")
            return

        self._status = AuthProcessingStatus(
            state=AuthorizationState.AWAITING_USER_ACCEPTANCE,
            user_code=data["user_code"],
            device_code=data["device_code"],
            verification_uri=data.get("verification_uri_complete") or data.get("verification_uri"),
        )
        _LOGGER.info(
            "Waiting for user to enter code %s at %s",
            self._status.user_code,
            self._status.verification_uri,
        )
        self._poll_task = self.hass.async_create_background_task(
            self._async_poll_loop(), "bosch_spexor device code polling"
        )

    async def async_reset(self) -> None:
        """Forget the token and any pending authorization."""
        self._cancel_polling()
        self._token = None
        self._status = AuthProcessingStatus()
        await self._store.async_remove()
        _LOGGER.info("spexor authorization reset")

    async def async_shutdown(self) -> None:
        """Stop background polling."""
        self._cancel_polling()

    async def _async_poll_loop(self) -> None:
        """Poll the token endpoint until the flow finishes."""
        while self._status.state == AuthorizationState.AWAITING_USER_ACCEPTANCE:
            await asyncio.sleep(self._poll_interval)
            if await self.async_poll_token():
                break

    async def async_poll_token(self) -> bool:
        """Ask for the token once.

        Returns:
            True when the flow is finished, successfully or not
        """
        device_code = self._status.device_code
        if self._status.state != AuthorizationState.AWAITING_USER_ACCEPTANCE or not device_code:
            return True

        if time.time() >= self._device_code_expires_at:
            self._set_expired("device code expired before the user accepted")
            return True

        try:
            data = await self._async_post(
                OAUTH2_TOKEN_URL,
                {
                    "grant_type": GRANT_TYPE_DEVICE_CODE,
                    "client_id": self._client_id,
                    "device_code": device_code,
                },
            )
        except TOKEN_REQUEST_ERRORS as err:
            _LOGGER.warning("Token request failed, retrying: %s", err)
            return False

        error = data.get("error")
        if error == "authorization_pending":
            return False
        if error == "slow_down":
            self._poll_interval += SLOW_DOWN_INCREMENT
            _LOGGER.debug("Slowing down token polling to %ss", self._poll_interval)
            return False
        if error == "expired_token":
            self._set_expired(data.get("error_description") or "device code expired")
            return True
        if error or "access_token" not in data:
            self._set_error(data.get("error_description") or error or "invalid token response")
            return True

        await self._async_store_token(data)
        self._status = AuthProcessingStatus(state=AuthorizationState.AUTHORIZED)
        _LOGGER.info("spexor authorization granted")
        for listener in list(self._authorized_listeners):
            listener()
        return True

    async def async_get_access_token(self) -> str:
        """Return a valid access token, refreshing it if needed.

        Raises:
            SpexorAuthError: If the service is not authorized
        """
        async with self._lock:
            if not self.is_authorized or not self._token:
                raise SpexorAuthError("spexor is not authorized")

            if self._token.get("expires_at", 0) - TOKEN_EXPIRY_MARGIN <= time.time():
                await self._async_refresh_token()

            return self._token["access_token"]

    async def async_new_request_headers(self) -> dict[str, str] | None:
        """Return authorization headers, or None when not authorized."""
        try:
            token = await self.async_get_access_token()
        except SpexorAuthError as err:
            _LOGGER.debug("Cannot build request: %s", err)
            return None
        return {"Authorization": f"Bearer {token}"}

    async def _async_refresh_token(self) -> None:
        """Exchange the refresh token for a new access token.

        A rejected refresh expires the authorization. A transport failure
        keeps the current token so the next request retries the refresh.
        """
        if self._token is None:
            raise SpexorAuthError("no token to refresh")
        refresh_token = self._token.get("refresh_token")
        if not refresh_token:
            self._set_expired("access token expired and no refresh token available")
            raise SpexorAuthError("access token expired")

        try:
            data = await self._async_post(
                OAUTH2_TOKEN_URL,
                {
                    "grant_type": GRANT_TYPE_REFRESH_TOKEN,
                    "client_id": self._client_id,
                    "refresh_token": refresh_token,
                },
            )
        except TOKEN_REQUEST_ERRORS as err:
            _LOGGER.warning("Token refresh failed, keeping current token: %s", err)
            raise SpexorAuthError(f"token refresh failed: {err}") from err

        if "access_token" not in data:
            self._set_expired(data.get("error_description") or "token refresh rejected")
            raise SpexorAuthError("token refresh rejected")

        data.setdefault("refresh_token", refresh_token)
        await self._async_store_token(data)
        _LOGGER.debug("Refreshed spexor access token")

    async def _async_store_token(self, data: dict[str, Any]) -> None:
        self._token = {
            "access_token": data["access_token"],
            "refresh_token": data.get("refresh_token"),
            "expires_at": time.time() + int(data.get("expires_in", 3600)),
        }
        await self._store.async_save(self._token)

    async def _async_post(self, url: str, form: dict[str, str]) -> dict[str, Any]:
        """POST a form and return the decoded JSON answer.

        OAuth errors come back as 400 with a JSON body, so the status code
        is not checked here.

        Raises:
            ValueError: If the body is not a JSON object
        """
        async with self._session.post(
            url,
            data=form,
            headers={"Accept": "application/json"},
            timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT),
        ) as response:
            _LOGGER.debug("POST %s returned %s", url, response.status)
            data = await response.json(content_type=None)
        if not isinstance(data, dict):
            raise ValueError(f"unexpected answer from {url}")
        return data

    def _cancel_polling(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
        self._poll_task = None

    def _set_error(self, message: str) -> None:
        _LOGGER.error("spexor authorization failed: %s", message)
        self._status = AuthProcessingStatus(
            state=AuthorizationState.ERROR, error_message=message
        )

    def _set_expired(self, message: str) -> None:
        _LOGGER.warning("spexor authorization expired: %s", message)
        self._token = None
        self._status = AuthProcessingStatus(
            state=AuthorizationState.EXPIRED, error_message=message
        )
