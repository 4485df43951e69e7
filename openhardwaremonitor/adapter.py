"""Adapter bridging OpenHardwareMonitor sensors and a host add-on manager."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from .const import DEFAULT_ADAPTER_NAME, DEFAULT_DEVICE_DEPTH, PairingState
from .device import DeviceModel, PropertyModel
from .exceptions import (
    ConfigurationError,
    DeviceNotFoundError,
    DuplicateDeviceError,
    OpenHardwareMonitorError,
    ValidationError,
)
from .models import DeviceDescription
from .openhardwaremonitor import OpenHardwareMonitor
from .parser import SensorTreeParser

_LOGGER = logging.getLogger(__name__)


class AddonManager(Protocol):
    """Interface of the host device-management framework."""

    def add_adapter(self, adapter: AdapterController) -> None:
        """Register an adapter."""

    def handle_device_added(self, device: DeviceModel) -> None:
        """Handle a device entering the registry."""

    def handle_device_removed(self, device: DeviceModel) -> None:
        """Handle a device leaving the registry."""

    def property_changed(self, prop: PropertyModel) -> None:
        """Handle a property whose value changed."""


class AdapterController:
    """Owns the device registry and drives discovery and pairing."""

    def __init__(
        self,
        manager: AddonManager,
        name: str = DEFAULT_ADAPTER_NAME,
        api_url: str | None = None,
        websession: aiohttp.ClientSession | None = None,
        device_depth: int = DEFAULT_DEVICE_DEPTH,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the adapter and register it with the manager.

        Args:
            manager: Host framework receiving device and property notifications
            name: Display name of the adapter
            api_url: Address of the OpenHardwareMonitor web server
            websession: Optional aiohttp ClientSession used for fetching
            device_depth: Number of leading tree path segments that identify a device
            logger: Optional logger for diagnostics
        """
        self.manager = manager
        self.name = name
        self.api_url = api_url
        self._websession = websession
        self._logger = logger or _LOGGER
        self.parser = SensorTreeParser(device_depth, logger=self._logger)
        self.devices: dict[str, DeviceModel] = {}

        self._client: OpenHardwareMonitor | None = None
        self._client_api_url: str | None = None
        self._discovery_task: asyncio.Task[list[DeviceModel]] | None = None
        self._pair_device_id: str | None = None
        self._pair_device_description: DeviceDescription | Mapping[str, Any] | None = None
        self._unpair_device_id: str | None = None

        manager.add_adapter(self)

    def __repr__(self) -> str:
        return f"AdapterController({self.name!r}, devices={len(self.devices)})"

    @property
    def state(self) -> PairingState:
        """Return the current pairing state."""
        if self._pair_device_id is not None:
            return PairingState.PAIRING_OFFERED
        if self._unpair_device_id is not None:
            return PairingState.UNPAIRING_OFFERED
        return PairingState.IDLE

    async def close(self) -> None:
        """Close the connection to the monitoring endpoint."""
        if self._discovery_task is not None and not self._discovery_task.done():
            self._discovery_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._discovery_task
        if self._client is not None:
            await self._client.close_connection()
            self._client = None

    async def __aenter__(self) -> AdapterController:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def clear_state(self) -> None:
        """Remove every device and drop staged offers."""
        self._pair_device_id = None
        self._pair_device_description = None
        self._unpair_device_id = None
        for device_id in list(self.devices):
            self.remove_device(device_id)

    def handle_device_added(self, device: DeviceModel) -> None:
        """Register a device and notify the manager."""
        self.devices[device.id] = device
        self.manager.handle_device_added(device)

    def handle_device_removed(self, device: DeviceModel) -> None:
        """Unregister a device and notify the manager."""
        del self.devices[device.id]
        self.manager.handle_device_removed(device)

    def add_device(
        self,
        device_id: str,
        description: DeviceDescription | Mapping[str, Any],
    ) -> DeviceModel:
        """Add a device to the registry.

        Raises:
            DuplicateDeviceError: if a device with this id already exists
        """
        if device_id in self.devices:
            raise DuplicateDeviceError(f"Device: {device_id} already exists.")
        if not isinstance(description, DeviceDescription):
            description = DeviceDescription.from_dict(description)
        device = DeviceModel(device_id, description, observer=self.manager)
        self.handle_device_added(device)
        self._logger.debug("Added device %s (%d properties)", device_id, len(device.properties))
        return device

    def remove_device(self, device_id: str) -> DeviceModel:
        """Remove a device from the registry.

        Raises:
            DeviceNotFoundError: if no device with this id exists
        """
        device = self.devices.get(device_id)
        if device is None:
            raise DeviceNotFoundError(f"Device: {device_id} not found.")
        self.handle_device_removed(device)
        self._logger.debug("Removed device %s", device_id)
        return device

    def pair_device(
        self,
        device_id: str,
        description: DeviceDescription | Mapping[str, Any],
    ) -> None:
        """Stage a device to be added by the next pairing."""
        self._pair_device_id = device_id
        self._pair_device_description = description
        self._logger.debug("%s: pairing offered for %s", self.name, device_id)

    def unpair_device(self, device_id: str) -> None:
        """Stage a device to be removed by the next removal."""
        self._unpair_device_id = device_id
        self._logger.debug("%s: unpairing offered for %s", self.name, device_id)

    async def start_pairing(self, timeout_seconds: float) -> DeviceModel | None:
        """Pair the staged device, if any.

        Returns the paired device, or None when nothing was paired.
        """
        self._logger.info("%s: pairing started", self.name)
        if self._pair_device_id is None:
            return None

        device_id = self._pair_device_id
        description = self._pair_device_description
        self._pair_device_id = None
        self._pair_device_description = None

        try:
            device = self.add_device(device_id, description)
        except OpenHardwareMonitorError as err:
            self._logger.error("%s: pairing %s failed: %s", self.name, device_id, err)
            return None
        self._logger.info("%s: device %s was paired", self.name, device_id)

        if self.api_url:
            await self._rediscover(timeout_seconds)
        return device

    async def _rediscover(self, timeout_seconds: float) -> None:
        """Run a discovery pass, waiting at most timeout_seconds for it."""
        try:
            await asyncio.wait_for(asyncio.shield(self._start_discovery()), timeout_seconds)
        except asyncio.TimeoutError:
            self._logger.warning(
                "%s: discovery did not finish within %s seconds", self.name, timeout_seconds
            )
        except OpenHardwareMonitorError as err:
            self._logger.error("%s: discovery after pairing failed: %s", self.name, err)

    def cancel_pairing(self) -> None:
        """Cancel pairing; staged offers are kept."""
        self._logger.info("%s: pairing cancelled", self.name)

    def remove_thing(self, device: DeviceModel) -> DeviceModel | None:
        """Remove a device if an unpairing for it was staged."""
        self._logger.info("%s: removeThing(%s) started", self.name, device.id)
        if self._unpair_device_id != device.id:
            self._logger.debug("%s: no unpairing offered for %s", self.name, device.id)
            return None

        self._unpair_device_id = None
        try:
            removed = self.remove_device(device.id)
        except DeviceNotFoundError as err:
            self._logger.error("%s: unpairing %s failed: %s", self.name, device.id, err)
            return None
        self._logger.info("%s: device %s was unpaired", self.name, device.id)
        return removed

    def cancel_remove_thing(self, device: DeviceModel) -> None:
        """Log a cancelled removal; staged offers are kept."""
        self._logger.info("%s: cancelRemoveThing(%s)", self.name, device.id)

    def _get_client(self) -> OpenHardwareMonitor:
        """Return the client for the configured API url."""
        if not self.api_url:
            raise ConfigurationError("Missing OpenHardwareMonitor API url")
        if self._client is None or self._client_api_url != self.api_url:
            self._client = OpenHardwareMonitor(self.api_url, self._websession)
            self._client_api_url = self.api_url
        return self._client

    def _start_discovery(self) -> asyncio.Task[list[DeviceModel]]:
        """Return the running discovery task, starting one if needed."""
        if self._discovery_task is None or self._discovery_task.done():
            self._discovery_task = asyncio.ensure_future(self._discover())
        return self._discovery_task

    async def discover_sensors(self) -> list[DeviceModel]:
        """Fetch the sensor tree and add every device not yet registered.

        Concurrent calls share one discovery pass.

        Raises:
            ConfigurationError: if no API url is configured
        """
        self._get_client()
        return await self._start_discovery()

    async def _discover(self) -> list[DeviceModel]:
        """Fetch one snapshot and add the devices it describes."""
        tree = await self._get_client().fetch_tree()
        added = []
        for description in self.parser.parse_devices(tree):
            try:
                added.append(self.add_device(description.device_id, description))
            except DuplicateDeviceError as err:
                self._logger.debug("Skipping discovered device: %s", err)
            except ValidationError as err:
                self._logger.warning(
                    "Skipping discovered device %s: %s", description.device_id, err
                )
        self._logger.debug("Discovery added %d devices", len(added))
        return added

    async def update_sensors(self) -> list[DeviceModel]:
        """Refresh readings of registered devices and add new ones.

        Returns the devices that were added.
        """
        tree = await self._get_client().fetch_tree()
        added = []
        for description in self.parser.parse_devices(tree):
            device = self.devices.get(description.device_id)
            if device is None:
                try:
                    added.append(self.add_device(description.device_id, description))
                except ValidationError as err:
                    self._logger.warning(
                        "Skipping discovered device %s: %s", description.device_id, err
                    )
                continue
            for name, prop_description in description.properties.items():
                prop = device.get_property(name)
                if prop is None:
                    self._logger.debug("Ignoring new reading %s on %s", name, device.id)
                    continue
                prop.minimum = prop_description.minimum
                prop.maximum = prop_description.maximum
                try:
                    prop.update_cached_value(prop_description.value)
                except ValidationError as err:
                    self._logger.warning("Ignoring reading on %s: %s", device.id, err)
        return added


def load_adapter(
    manager: AddonManager,
    manifest: Mapping[str, Any],
    websession: aiohttp.ClientSession | None = None,
) -> AdapterController:
    """Create an adapter from an add-on manifest."""
    config = manifest.get("config") or {}
    return AdapterController(
        manager,
        name=manifest.get("name", DEFAULT_ADAPTER_NAME),
        api_url=config.get("url"),
        websession=websession,
    )
