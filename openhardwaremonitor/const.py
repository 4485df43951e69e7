"""Constants for the OpenHardwareMonitor library."""

from enum import Enum

# API endpoints
ENDPOINT_DATA = "/data.json"

# Sensor tree field names
OHM_CHILDREN = "Children"
OHM_VALUE = "Value"
OHM_MIN = "Min"
OHM_MAX = "Max"
OHM_NAME = "Text"

DEFAULT_ADAPTER_NAME = "OpenHardwareMonitor"
DEFAULT_DEVICE_TYPE = "multiLevelSensor"

# Root, computer and hardware node identify a device
DEFAULT_DEVICE_DEPTH = 3

DEVICE_ID_PREFIX = "ohm"
PROPERTY_PATH_SEPARATOR = "/"


class PropertyType(str, Enum):
    """Value types a property can hold."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"


class PairingState(str, Enum):
    """Pairing state of an adapter."""

    IDLE = "idle"
    PAIRING_OFFERED = "pairing_offered"
    UNPAIRING_OFFERED = "unpairing_offered"
