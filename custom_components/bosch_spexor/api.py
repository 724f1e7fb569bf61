"""spexor cloud API client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from .auth import SpexorAuthorizationService
from .const import (
    API_BASE,
    ENDPOINT_OBSERVATION,
    ENDPOINT_SENSOR_VALUE,
    ENDPOINT_SPEXOR,
    ENDPOINT_SPEXORS,
    REQUEST_TIMEOUT,
)
from .models import (
    ObservationChangeStatus,
    ObservationRequest,
    SensorMode,
    SensorValue,
    Spexor,
    SpexorInfo,
)

_LOGGER = logging.getLogger(__name__)

REQUEST_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ValueError)


class SpexorAPIError(Exception):
    """Exception raised for spexor API errors."""

    pass


class SpexorAPIClient:
    """Client for the spexor public API.

    Read operations never raise: a missing authorization or a failed request
    is logged and reported as an empty result, matching what the entities
    can display.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        auth: SpexorAuthorizationService,
        base_url: str = API_BASE,
    ) -> None:
        """Initialize the API client."""
        self._session = session
        self.auth = auth
        self.base_url = base_url.rstrip("/")

    async def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> Any:
        """Send an authenticated request and return the decoded JSON body.

        Raises:
            SpexorAPIError: If not authorized or the cloud answers with an error
        """
        headers = await self.auth.async_new_request_headers()
        if headers is None:
            raise SpexorAPIError("spexor is not authorized")
        headers["Accept"] = "application/json"

        url = f"{self.base_url}{endpoint}"
        async with self._session.request(
            method,
            url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT),
            **kwargs,
        ) as response:
            body = await response.text()
            _LOGGER.debug("received %s for %s %s with content %s", response.status, method, url, body)
            if response.status == 401:
                raise SpexorAPIError("Unauthorized")
            response.raise_for_status()
            return await response.json(content_type=None)

    async def async_get_spexors(self) -> list[Spexor]:
        """Return all devices of the authorized account."""
        try:
            data = await self._request("GET", ENDPOINT_SPEXORS)
            return [Spexor.model_validate(item) for item in data]
        except SpexorAPIError as err:
            _LOGGER.debug("failed to get '%s': %s", ENDPOINT_SPEXORS, err)
        except (*REQUEST_ERRORS, TypeError) as err:
            _LOGGER.warning("failed to get '%s': %s", ENDPOINT_SPEXORS, err)
        return []

    async def async_get_spexor(self, spexor_id: str) -> SpexorInfo | None:
        """Return the detail record of one device."""
        endpoint = ENDPOINT_SPEXOR.format(spexor_id=spexor_id)
        try:
            data = await self._request("GET", endpoint)
            return SpexorInfo.model_validate(data)
        except SpexorAPIError as err:
            _LOGGER.debug("failed to get '%s': %s", endpoint, err)
        except REQUEST_ERRORS as err:
            _LOGGER.warning("failed to get '%s': %s", endpoint, err)
        return None

    async def async_get_sensor_values(
        self,
        spexor_id: str,
        sensors: list[str],
    ) -> dict[str, SensorValue]:
        """Return the latest readings of the given sensors.

        Args:
            spexor_id: Device ID
            sensors: Sensor keys, e.g. ["Temperature", "AirQualityLevel"]

        Returns:
            Readings by sensor key; items the cloud sent malformed are skipped
        """
        values: dict[str, SensorValue] = {}
        endpoint = ENDPOINT_SENSOR_VALUE.format(spexor_id=spexor_id, keys=",".join(sensors))
        try:
            data = await self._request("GET", endpoint)
        except SpexorAPIError as err:
            _LOGGER.debug("failed to get '%s': %s", endpoint, err)
            return values
        except REQUEST_ERRORS as err:
            _LOGGER.warning("failed to get '%s': %s", endpoint, err)
            return values

        for item in data or []:
            try:
                value = SensorValue.from_api(item)
            except (KeyError, TypeError, ValueError) as err:
                _LOGGER.warning("could not add key '%s' to provided values: %s", _item_key(item), err)
                continue
            values[value.key] = value
        return values

    async def async_set_observation(
        self,
        spexor_id: str,
        observation_type: str,
        enable: bool,
    ) -> ObservationChangeStatus:
        """Activate or deactivate an observation.

        Returns:
            The cloud's status for this observation type, or a failure status
            when the request could not be completed
        """
        endpoint = ENDPOINT_OBSERVATION.format(spexor_id=spexor_id)
        observation_request = ObservationRequest(
            observation_type=observation_type,
            sensor_mode=SensorMode.ACTIVATED if enable else SensorMode.DEACTIVATED,
        )
        error_message = "unknown error"
        try:
            data = await self._request("PATCH", endpoint, json=[observation_request.to_api()])
            for item in data or []:
                status = ObservationChangeStatus.model_validate(item)
                if status.observation_type == observation_type:
                    return status
        except SpexorAPIError as err:
            _LOGGER.debug("failed to patch '%s': %s", endpoint, err)
        except ValidationError as err:
            _LOGGER.warning(
                "unexpected answer changing observation '%s' to %s: %s",
                observation_type,
                observation_request.sensor_mode.value,
                err,
            )
            error_message = str(err)
        except REQUEST_ERRORS as err:
            _LOGGER.warning("failed to patch '%s': %s", endpoint, err)
            error_message = str(err) or error_message

        return ObservationChangeStatus.failure(observation_type, error_message)


def _item_key(item: Any) -> Any:
    return item.get("key") if isinstance(item, dict) else item
