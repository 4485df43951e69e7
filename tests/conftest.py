"""Shared fixtures for the OpenHardwareMonitor tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from openhardwaremonitor import AdapterController

from tests.common import group, leaf


@pytest.fixture
def sensor_tree() -> dict:
    """A small tree with one computer, a CPU and a fan controller."""
    return group(
        "Sensor",
        group(
            "DESKTOP",
            group(
                "Intel Core i7",
                group(
                    "Temperatures",
                    leaf("CPU Core #1", "45.0 °C", "30.0 °C", "70.0 °C"),
                    leaf("CPU Package", "48.0 °C", "31.0 °C", "72.0 °C"),
                ),
                group(
                    "Load",
                    leaf("CPU Core #1", "12.5 %", "0.0 %", "100.0 %"),
                ),
            ),
            group(
                "Nuvoton NCT6791D",
                group(
                    "Fans",
                    leaf("Fan #1", "1200 RPM", "800 RPM", "1500 RPM"),
                    leaf("Fan #2", None),
                ),
            ),
        ),
    )


@pytest.fixture
def manager() -> MagicMock:
    """A mocked host add-on manager."""
    return MagicMock()


@pytest.fixture
def adapter(manager: MagicMock) -> AdapterController:
    """An adapter without a configured endpoint."""
    return AdapterController(manager, name="OpenHardwareMonitor")


@pytest.fixture
def switch_description() -> dict:
    """A manually paired on/off switch."""
    return {
        "name": "example-plug",
        "type": "onOffSwitch",
        "description": "Example Plugin Device",
        "properties": {
            "on": {
                "name": "on",
                "type": "boolean",
                "value": False,
            },
        },
    }
