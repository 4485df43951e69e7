"""Sensor tree parsing for OpenHardwareMonitor data."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from .const import (
    DEFAULT_DEVICE_DEPTH,
    DEFAULT_DEVICE_TYPE,
    DEVICE_ID_PREFIX,
    OHM_CHILDREN,
    OHM_MAX,
    OHM_MIN,
    OHM_NAME,
    OHM_VALUE,
    PROPERTY_PATH_SEPARATOR,
    PropertyType,
)
from .exceptions import ParseError
from .models import DeviceDescription, PropertyDescription

_LOGGER = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def parse_reading(text: str) -> tuple[float | str, str | None]:
    """Split a reading such as '45.0 °C' into its value and unit.

    Numbers are returned as int when integral, float otherwise. A reading
    that is not numeric is returned unchanged without a unit.
    """
    text = text.strip()
    number, _, unit = text.partition(" ")
    value = _to_number(number)
    if value is None:
        return text, None
    return value, unit.strip() or None


def _to_number(text: str) -> float | None:
    """Convert a reading to a finite number, or None if it is not one."""
    if text.count(",") == 1 and "." not in text:
        text = text.replace(",", ".")
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    if value.is_integer():
        return int(value)
    return value


def _slugify(text: str) -> str:
    """Lowercase text and replace non-alphanumeric runs with dashes."""
    return _SLUG_RE.sub("-", text.lower()).strip("-")


class SensorTreeParser:
    """Turn an OpenHardwareMonitor sensor tree into device descriptions."""

    def __init__(
        self,
        device_depth: int = DEFAULT_DEVICE_DEPTH,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            device_depth: Number of leading path segments that identify a device
            logger: Optional logger for diagnostics
        """
        if device_depth < 1:
            raise ValueError("device_depth must be at least 1")
        self.device_depth = device_depth
        self._logger = logger or _LOGGER

    def parse_devices(self, tree: Any) -> list[DeviceDescription]:
        """Parse a tree and group its readings into devices."""
        return self.group(self.parse(tree))

    def parse(self, tree: Any) -> list[PropertyDescription]:
        """Parse a tree into a flat list of property descriptions."""
        if not isinstance(tree, Mapping):
            raise ParseError(f"Sensor tree must be an object, got {type(tree).__name__}")
        label = str(tree.get(OHM_NAME) or "")
        return self._parse_node(tree, (label,) if label else (), [])

    def _parse_node(
        self,
        node: Mapping[str, Any],
        path: tuple[str, ...],
        results: list[PropertyDescription],
    ) -> list[PropertyDescription]:
        """Append the readings below node to results and return them."""
        children = node.get(OHM_CHILDREN)
        if children is not None:
            if not isinstance(children, list):
                self._logger.warning(
                    "Skipping group %s: children are not a list",
                    PROPERTY_PATH_SEPARATOR.join(path),
                )
                return results
            taken = {
                str(child[OHM_NAME])
                for child in children
                if isinstance(child, Mapping) and child.get(OHM_NAME)
            }
            used: set[str] = set()
            for child in children:
                if not isinstance(child, Mapping):
                    self._logger.warning(
                        "Skipping malformed node below %s: %r",
                        PROPERTY_PATH_SEPARATOR.join(path),
                        child,
                    )
                    continue
                label = child.get(OHM_NAME)
                if not label:
                    if child.get(OHM_CHILDREN) is not None:
                        self._logger.warning(
                            "Skipping group without label below %s",
                            PROPERTY_PATH_SEPARATOR.join(path),
                        )
                        continue
                    label = ""
                else:
                    label = self._unique_label(str(label), taken, used)
                results = self._parse_node(child, (*path, label), results)
            return results

        raw_value = node.get(OHM_VALUE)
        if raw_value is None or raw_value == "":
            # Sensor currently reporting no reading
            return results
        if not path or not path[-1]:
            self._logger.warning("Skipping reading without label: %r", raw_value)
            return results

        if isinstance(raw_value, str):
            value, unit = parse_reading(raw_value)
        else:
            value, unit = raw_value, None
        prop_type = (
            PropertyType.NUMBER
            if isinstance(value, (int, float)) and not isinstance(value, bool)
            else PropertyType.STRING
        )
        results.append(
            PropertyDescription(
                name=path[-1],
                type=prop_type,
                value=value,
                unit=unit,
                description=PROPERTY_PATH_SEPARATOR.join(path),
                minimum=self._parse_limit(node.get(OHM_MIN)),
                maximum=self._parse_limit(node.get(OHM_MAX)),
                read_only=True,
                path=path,
            )
        )
        return results

    @staticmethod
    def _unique_label(label: str, taken: set[str], used: set[str]) -> str:
        """Return label, numbered when a sibling already uses it."""
        candidate = label
        number = 2
        while candidate in used or (candidate != label and candidate in taken):
            candidate = f"{label} #{number}"
            number += 1
        used.add(candidate)
        return candidate

    @staticmethod
    def _parse_limit(raw: Any) -> float | None:
        """Parse a Min or Max field into a number."""
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return raw
        if not isinstance(raw, str) or not raw:
            return None
        value, _ = parse_reading(raw)
        return value if isinstance(value, (int, float)) else None

    def device_prefix(self, path: tuple[str, ...]) -> tuple[str, ...]:
        """Return the part of a reading path that identifies its device."""
        return path[: min(self.device_depth, len(path) - 1)]

    def group(self, properties: list[PropertyDescription]) -> list[DeviceDescription]:
        """Group readings that share a device prefix into device descriptions."""
        devices: dict[str, DeviceDescription] = {}
        prefix_ids: dict[tuple[str, ...], str] = {}
        for prop in properties:
            prefix = self.device_prefix(prop.path)
            device_id = prefix_ids.get(prefix)
            if device_id is None:
                device_id = self._unique_device_id(self.device_id(prefix), devices)
                prefix_ids[prefix] = device_id
            device = devices.get(device_id)
            if device is None:
                device = devices[device_id] = DeviceDescription(
                    name=prefix[-1] if prefix else device_id,
                    type=DEFAULT_DEVICE_TYPE,
                    description=PROPERTY_PATH_SEPARATOR.join(prefix),
                    device_id=device_id,
                )
            name = PROPERTY_PATH_SEPARATOR.join(prop.path[len(prefix) :])
            if name in device.properties:
                self._logger.warning("Duplicate reading %s on %s skipped", name, device_id)
                continue
            device.properties[name] = prop
        return list(devices.values())

    @staticmethod
    def _unique_device_id(device_id: str, devices: Mapping[str, DeviceDescription]) -> str:
        """Suffix device_id when another prefix already slugified to it."""
        candidate = device_id
        number = 2
        while candidate in devices:
            candidate = f"{device_id}-{number}"
            number += 1
        return candidate

    @staticmethod
    def device_id(prefix: tuple[str, ...]) -> str:
        """Build a stable device id from a device path prefix."""
        parts = [slug for slug in (_slugify(segment) for segment in prefix) if slug]
        return "-".join([DEVICE_ID_PREFIX, *parts])
