"""Helpers for building sensor trees in tests."""

from __future__ import annotations

from typing import Any


def leaf(text: str, value: str | None, min_: str | None = None, max_: str | None = None) -> dict:
    """Build a sensor tree leaf the way OpenHardwareMonitor serves it."""
    node: dict[str, Any] = {"id": 0, "Text": text, "ImageURL": ""}
    if value is not None:
        node["Value"] = value
    if min_ is not None:
        node["Min"] = min_
    if max_ is not None:
        node["Max"] = max_
    return node


def group(text: str, *children: dict) -> dict:
    """Build a sensor tree group node."""
    return {"id": 0, "Text": text, "Children": list(children), "Min": "", "Value": "", "Max": ""}
