"""Device and property models exposed to the host framework."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Protocol

from .const import PropertyType
from .exceptions import ValidationError
from .models import DeviceDescription, PropertyDescription

_LOGGER = logging.getLogger(__name__)


class PropertyObserver(Protocol):
    """Receives property change notifications."""

    def property_changed(self, prop: PropertyModel) -> None:
        """Handle a property whose value changed."""


class PropertyModel:
    """A named, typed value cached on behalf of a device."""

    def __init__(self, device: DeviceModel, description: PropertyDescription) -> None:
        """Initialize the property from its description."""
        self.device = device
        self.name = description.name
        self.type = description.type
        self.unit = description.unit
        self.description = description.description
        self.minimum = description.minimum
        self.maximum = description.maximum
        self.read_only = description.read_only
        self.path = description.path
        self.check_value(description.value)
        self._value = description.value

    def __repr__(self) -> str:
        return f"PropertyModel({self.device.id!r}, {self.name!r}, {self._value!r})"

    def get_value(self) -> Any:
        """Return the cached value."""
        return self._value

    def validate(self, value: Any) -> None:
        """Raise ValidationError if value cannot be written to this property."""
        if self.read_only:
            raise ValidationError(f"Property {self.name} is read-only")
        self.check_value(value)

    def check_value(self, value: Any) -> None:
        """Raise ValidationError if value does not fit the type and range."""
        if self.type == PropertyType.BOOLEAN:
            if not isinstance(value, bool):
                raise ValidationError(f"Property {self.name}: expected boolean, got {value!r}")
        elif self.type == PropertyType.NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"Property {self.name}: expected number, got {value!r}")
            if not math.isfinite(value):
                raise ValidationError(f"Property {self.name}: {value} is not a finite number")
            if self.minimum is not None and value < self.minimum:
                raise ValidationError(
                    f"Property {self.name}: {value} is below minimum {self.minimum}"
                )
            if self.maximum is not None and value > self.maximum:
                raise ValidationError(
                    f"Property {self.name}: {value} is above maximum {self.maximum}"
                )
        elif not isinstance(value, str):
            raise ValidationError(f"Property {self.name}: expected string, got {value!r}")

    async def set_value(self, value: Any) -> Any:
        """Set a new value and return the value accepted by the device.

        The accepted value may differ from the requested one.
        """
        self.validate(value)
        updated_value = await self.device.transform_value(self, value)
        self._value = updated_value
        self.device.notify_property_changed(self)
        return updated_value

    def update_cached_value(self, value: Any) -> bool:
        """Store a fresh reading, notifying only when it changed.

        Raises:
            ValidationError: if the reading does not fit the type and range
        """
        self.check_value(value)
        if value == self._value:
            return False
        self._value = value
        self.device.notify_property_changed(self)
        return True

    def as_dict(self) -> dict[str, Any]:
        """Return the property in description form."""
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "value": self._value,
        }
        if self.unit is not None:
            data["unit"] = self.unit
        if self.description is not None:
            data["description"] = self.description
        if self.minimum is not None:
            data["minimum"] = self.minimum
        if self.maximum is not None:
            data["maximum"] = self.maximum
        if self.read_only:
            data["readOnly"] = True
        return data


class DeviceModel:
    """An addressable device holding an ordered set of properties."""

    def __init__(
        self,
        device_id: str,
        description: DeviceDescription,
        observer: PropertyObserver | None = None,
    ) -> None:
        """Initialize the device and announce the initial property values."""
        self._id = device_id
        self.name = description.name
        self.type = description.type
        self.description = description.description
        self._observer = observer
        self._properties: dict[str, PropertyModel] = {}
        for name, prop_description in description.properties.items():
            if prop_description.name != name:
                prop_description = replace(prop_description, name=name)
            self._properties[name] = PropertyModel(self, prop_description)
        for prop in self._properties.values():
            self.notify_property_changed(prop)

    def __repr__(self) -> str:
        return f"DeviceModel({self._id!r}, {self.name!r})"

    @property
    def id(self) -> str:
        """Return the device id."""
        return self._id

    @property
    def properties(self) -> Mapping[str, PropertyModel]:
        """Return a read-only view of the properties."""
        return MappingProxyType(self._properties)

    def get_property(self, name: str) -> PropertyModel | None:
        """Return the property with the given name."""
        return self._properties.get(name)

    async def transform_value(self, prop: PropertyModel, value: Any) -> Any:
        """Return the value the device accepts for a requested value."""
        return value

    def notify_property_changed(self, prop: PropertyModel) -> None:
        """Forward a property change to the observer."""
        _LOGGER.debug("Property %s of %s changed to %s", prop.name, self._id, prop.get_value())
        if self._observer is not None:
            self._observer.property_changed(prop)

    def as_dict(self) -> dict[str, Any]:
        """Return the device in description form."""
        return {
            "id": self._id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "properties": {name: prop.as_dict() for name, prop in self._properties.items()},
        }
