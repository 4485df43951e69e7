"""Exceptions for the OpenHardwareMonitor library."""


class OpenHardwareMonitorError(Exception):
    """Base exception for the OpenHardwareMonitor library."""


class OpenHardwareMonitorConnectionError(OpenHardwareMonitorError):
    """Raised when the monitoring endpoint cannot be reached."""


class ConfigurationError(OpenHardwareMonitorError):
    """Raised when the adapter is missing required configuration."""


class DuplicateDeviceError(OpenHardwareMonitorError):
    """Raised when adding a device whose id is already registered."""


class DeviceNotFoundError(OpenHardwareMonitorError):
    """Raised when a device id is not registered."""


class ValidationError(OpenHardwareMonitorError):
    """Raised when a property value fails its type or range check."""


class ParseError(OpenHardwareMonitorError):
    """Raised when a sensor tree document is structurally unusable."""
