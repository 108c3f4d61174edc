from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Iterable

from ..core.constants import DEFAULT_FAILING_DEVICE_IDS, DEFAULT_LINK_DELAY_SECONDS
from ..core.exceptions import DeviceConnectionError
from .model import Device


class DeviceLink(ABC):
    """Transport used to reach a device (network handshake, vendor SDK, ...)."""

    @abstractmethod
    async def open(self, device: Device) -> None:
        """Establish a connection or raise DeviceConnectionError."""
        raise NotImplementedError


class SimulatedDeviceLink(DeviceLink):
    """Link that waits a fixed delay and fails for a known set of devices."""

    def __init__(
        self,
        *,
        delay: float = DEFAULT_LINK_DELAY_SECONDS,
        failing_ids: Iterable[str] = DEFAULT_FAILING_DEVICE_IDS,
    ):
        self._delay = float(delay)
        self._failing_ids = frozenset(failing_ids)

    async def open(self, device: Device) -> None:
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        if device.device_id in self._failing_ids:
            raise DeviceConnectionError("Connection timeout")
