"""Python library for OpenHardwareMonitor sensor adapters."""

from .adapter import AdapterController, AddonManager, load_adapter
from .const import PairingState, PropertyType
from .device import DeviceModel, PropertyModel, PropertyObserver
from .exceptions import (
    ConfigurationError,
    DeviceNotFoundError,
    DuplicateDeviceError,
    OpenHardwareMonitorConnectionError,
    OpenHardwareMonitorError,
    ParseError,
    ValidationError,
)
from .models import DeviceDescription, PropertyDescription
from .openhardwaremonitor import OpenHardwareMonitor
from .parser import SensorTreeParser, parse_reading

__all__ = [
    "AdapterController",
    "AddonManager",
    "ConfigurationError",
    "DeviceDescription",
    "DeviceModel",
    "DeviceNotFoundError",
    "DuplicateDeviceError",
    "OpenHardwareMonitor",
    "OpenHardwareMonitorConnectionError",
    "OpenHardwareMonitorError",
    "PairingState",
    "ParseError",
    "PropertyDescription",
    "PropertyModel",
    "PropertyObserver",
    "PropertyType",
    "SensorTreeParser",
    "ValidationError",
    "load_adapter",
    "parse_reading",
]
