"""Client for the OpenHardwareMonitor web server."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from .const import ENDPOINT_DATA
from .exceptions import OpenHardwareMonitorConnectionError, ParseError

_LOGGER = logging.getLogger(__name__)


class OpenHardwareMonitor:
    """Fetches sensor tree snapshots from an OpenHardwareMonitor endpoint."""

    def __init__(
        self,
        host: str,
        websession: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the OpenHardwareMonitor connection.

        Args:
            host: Hostname, IP address or full URL of the OpenHardwareMonitor web server
            websession: Optional aiohttp ClientSession. If not provided, one will be created.
        """
        if not host.startswith("http"):
            host = f"http://{host}"
        host = host.rstrip("/")
        if not host.endswith(".json"):
            host = f"{host}{ENDPOINT_DATA}"
        self.url = host
        self._websession = websession
        self._own_session = websession is None

    async def close_connection(self) -> None:
        """Close the connection and clean up resources."""
        if self._own_session and self._websession:
            await self._websession.close()
            self._websession = None

    async def _ensure_session(self) -> None:
        """Ensure a websession exists."""
        if self._websession is None:
            self._websession = aiohttp.ClientSession()
            self._own_session = True

    async def __aenter__(self) -> OpenHardwareMonitor:
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close_connection()

    async def fetch_tree(self) -> dict[str, Any]:
        """Fetch one sensor tree snapshot."""
        await self._ensure_session()
        assert self._websession is not None
        try:
            async with self._websession.get(self.url) as response:
                response.raise_for_status()
                tree = await response.json(content_type=None)
        except aiohttp.ClientResponseError as err:
            raise OpenHardwareMonitorConnectionError(
                f"Unexpected response from {self.url}: {err.status}"
            ) from err
        except aiohttp.ClientError as err:
            raise OpenHardwareMonitorConnectionError(
                f"Failed to connect to {self.url}: {err}"
            ) from err
        except ValueError as err:
            raise ParseError(f"Failed to decode sensor data: {err}") from err
        _LOGGER.debug("Sensor data: %s", tree)
        if not isinstance(tree, dict):
            raise ParseError(f"Sensor data must be an object, got {type(tree).__name__}")
        return tree
