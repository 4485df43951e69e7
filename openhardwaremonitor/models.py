"""Data models for OpenHardwareMonitor library."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .const import DEFAULT_DEVICE_TYPE, PropertyType
from .exceptions import ValidationError


@dataclass
class PropertyDescription:
    """Describes a single property of a device."""

    name: str
    type: PropertyType
    value: bool | float | str | None = None
    unit: str | None = None
    description: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    read_only: bool = False
    path: tuple[str, ...] = ()  # Location of the reading in the sensor tree

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> PropertyDescription:
        """Build a property description from a plain mapping."""
        try:
            prop_type = PropertyType(data.get("type", PropertyType.STRING))
        except ValueError as err:
            raise ValidationError(f"Property {name}: unknown type {data.get('type')!r}") from err
        return cls(
            name=data.get("name", name),
            type=prop_type,
            value=data.get("value"),
            unit=data.get("unit"),
            description=data.get("description"),
            minimum=data.get("minimum", data.get("min")),
            maximum=data.get("maximum", data.get("max")),
            read_only=bool(data.get("readOnly", data.get("read_only", False))),
        )


@dataclass
class DeviceDescription:
    """Describes a device and the properties it exposes."""

    name: str
    type: str = DEFAULT_DEVICE_TYPE
    description: str | None = None
    properties: dict[str, PropertyDescription] = field(default_factory=dict)
    device_id: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DeviceDescription:
        """Build a device description from the host framework's dict shape."""
        if "name" not in data:
            raise ValidationError("Device description is missing a name")
        properties = {
            name: PropertyDescription.from_dict(name, prop)
            for name, prop in (data.get("properties") or {}).items()
        }
        return cls(
            name=data["name"],
            type=data.get("type", DEFAULT_DEVICE_TYPE),
            description=data.get("description"),
            properties=properties,
            device_id=data.get("id"),
        )
