"""Pytest configuration and fixtures for Bosch spexor tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from homeassistant.core import HomeAssistant


@pytest.fixture
def mock_hass() -> Generator[HomeAssistant, None, None]:
    """Create a mock Home Assistant instance for testing.

    Background tasks are closed instead of scheduled so no polling loop
    outlives a test.
    """
    hass = MagicMock(spec=HomeAssistant)
    hass.data = {}
    hass.http = MagicMock()
    hass.async_add_executor_job = AsyncMock()
    hass.async_create_background_task = MagicMock(
        side_effect=lambda coro, name, *args, **kwargs: coro.close()
    )

    yield hass


@pytest.fixture
def mock_store() -> MagicMock:
    """Create a mock token store that starts empty."""
    store = MagicMock()
    store.async_load = AsyncMock(return_value=None)
    store.async_save = AsyncMock()
    store.async_remove = AsyncMock()
    return store


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Return a factory for mocked aiohttp responses usable with ``async with``."""

    def _make(body: Any, status: int = 200) -> MagicMock:
        response = MagicMock()
        response.status = status
        response.text = AsyncMock(return_value=json.dumps(body))
        response.json = AsyncMock(return_value=body)
        if status >= 400:
            response.raise_for_status = MagicMock(
                side_effect=aiohttp.ClientResponseError(
                    request_info=MagicMock(),
                    history=(),
                    status=status,
                    message="error",
                )
            )
        else:
            response.raise_for_status = MagicMock()

        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        context.__aexit__ = AsyncMock(return_value=False)
        return context

    return _make


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp client session."""
    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def mock_auth() -> MagicMock:
    """Create an authorized mock authorization service."""
    auth = MagicMock()
    auth.is_authorized = True
    auth.async_new_request_headers = AsyncMock(
        side_effect=lambda: {"Authorization": "Bearer test_token_123"}
    )
    return auth


@pytest.fixture
def sample_spexors() -> list[dict[str, Any]]:
    """Device list as returned by the cloud."""
    return [
        {
            "id": "spx-1",
            "name": "Living Room",
            "profile": {"name": "Home", "profileType": "House"},
        },
        {
            "id": "spx-2",
            "name": "Garage",
            "profile": {"name": "Garage", "profileType": "Garage"},
            "someNewField": True,
        },
    ]


@pytest.fixture
def sample_spexor_info() -> dict[str, Any]:
    """Device detail as returned by the cloud."""
    return {
        "id": "spx-1",
        "name": "Living Room",
        "profile": {"name": "Home", "profileType": "House"},
        "status": {
            "connection": {
                "lastConnected": "2025-01-15T07:00:00Z",
                "onlineStatus": "Online",
            },
            "energy": {
                "stateOfCharge": {"key": "StateOfCharge", "value": 87, "unit": "%"},
                "energyMode": "EnergySavingOff",
                "isPowered": True,
            },
            "firmware": {
                "currentVersion": "1.2.3",
                "availableVersion": "1.3.0",
                "state": "UpdateAvailable",
            },
            "observation": [
                {"observationType": "Burglary", "sensorMode": "Activated"},
                {"observationType": "Fire", "sensorMode": "Deactivated"},
            ],
        },
    }


@pytest.fixture
def sample_sensor_values() -> list[dict[str, Any]]:
    """Sensor values as returned by the cloud."""
    return [
        {"key": "Temperature", "value": 21, "unit": "°C", "timestamp": "2025-01-15T07:00:00Z"},
        {"key": "Humidity", "value": "45", "unit": "%"},
        {"key": "AirQualityLevel", "value": "Good"},
    ]
