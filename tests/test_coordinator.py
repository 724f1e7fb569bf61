"""Tests for the spexor data update coordinator."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from homeassistant.helpers.update_coordinator import UpdateFailed

from custom_components.bosch_spexor.const import SENSOR_KEYS
from custom_components.bosch_spexor.coordinator import SpexorDataUpdateCoordinator
from custom_components.bosch_spexor.models import SensorValue, Spexor, SpexorInfo


@pytest.fixture
def mock_client(
    sample_spexors: list[dict[str, Any]],
    sample_spexor_info: dict[str, Any],
) -> MagicMock:
    """API client returning two devices, the second without details."""
    client = MagicMock()
    client.auth.is_authorized = True
    client.async_get_spexors = AsyncMock(
        return_value=[Spexor.model_validate(item) for item in sample_spexors]
    )
    client.async_get_spexor = AsyncMock(
        side_effect=lambda spexor_id: (
            SpexorInfo.model_validate(sample_spexor_info) if spexor_id == "spx-1" else None
        )
    )
    client.async_get_sensor_values = AsyncMock(
        return_value={"Temperature": SensorValue(key="Temperature", value=21, unit="°C")}
    )
    return client


@pytest.fixture
def coordinator(mock_client: MagicMock) -> SpexorDataUpdateCoordinator:
    """Coordinator with only the parts the update logic touches."""
    coordinator = SpexorDataUpdateCoordinator.__new__(SpexorDataUpdateCoordinator)
    coordinator.client = mock_client
    return coordinator


class TestUpdateData:
    """Tests for polling the cloud."""

    async def test_collects_devices(
        self,
        coordinator: SpexorDataUpdateCoordinator,
        mock_client: MagicMock,
    ) -> None:
        """Test that details and sensor values are gathered per device."""
        data = await coordinator._async_update_data()

        assert list(data) == ["spx-1"]
        assert data["spx-1"].info.name == "Living Room"
        assert data["spx-1"].sensor_values["Temperature"].value == 21
        mock_client.async_get_sensor_values.assert_awaited_once_with("spx-1", SENSOR_KEYS)

    async def test_not_authorized(
        self,
        coordinator: SpexorDataUpdateCoordinator,
        mock_client: MagicMock,
    ) -> None:
        """Test that nothing is fetched before authorization."""
        mock_client.auth.is_authorized = False

        assert await coordinator._async_update_data() == {}
        mock_client.async_get_spexors.assert_not_called()

    async def test_unexpected_error(
        self,
        coordinator: SpexorDataUpdateCoordinator,
        mock_client: MagicMock,
    ) -> None:
        """Test that unexpected errors become UpdateFailed."""
        mock_client.async_get_spexors = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(UpdateFailed):
            await coordinator._async_update_data()
