from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_bool, require_non_empty, require_port
from ..core.enums import DeviceType
from ..core.exceptions import DeviceConnectionError, DeviceNotFoundError, ValidationError
from .link import DeviceLink
from .model import CONFIGURABLE_FIELDS, Device

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Owns the known devices and their connectivity state.

    Calls are expected to be serialized by the caller; the registry itself holds no locks.
    """

    def __init__(
        self,
        devices: Iterable[Device],
        link: DeviceLink,
        *,
        connect_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._devices: dict[str, Device] = {}
        for device in devices:
            if device.device_id in self._devices:
                raise ValidationError(f"Duplicate device id {device.device_id!r}")
            self._devices[device.device_id] = device
        self._link = link
        self._connect_timeout = connect_timeout
        self._clock = clock

    def list_devices(self) -> list[Device]:
        return list(self._devices.values())

    def get(self, device_id: str) -> Optional[Device]:
        return self._devices.get(device_id)

    def require(self, device_id: str) -> Device:
        device = self._devices.get(device_id)
        if device is None:
            raise DeviceNotFoundError(f"Device {device_id!r} not found")
        return device

    async def connect(self, device_id: str) -> bool:
        device = self.require(device_id)
        try:
            await self._open(device)
        except Exception as exc:
            device.is_active = False
            logger.warning("connect failed device=%s error=%s", device_id, exc)
            raise DeviceConnectionError(f"Failed to connect to device {device_id}: {exc}") from exc

        device.is_active = True
        device.last_sync = self._clock()
        logger.info("connected device=%s", device_id)
        return True

    async def disconnect(self, device_id: str) -> bool:
        device = self.require(device_id)
        device.is_active = False
        logger.info("disconnected device=%s", device_id)
        return True

    async def configure(self, device_id: str, fields: Mapping[str, Any]) -> bool:
        device = self.require(device_id)
        changes = self._validate_changes(fields)
        for name, value in changes.items():
            setattr(device, name, value)
        device.last_sync = self._clock()
        logger.info("configured device=%s fields=%s", device_id, sorted(changes))
        return True

    async def test_connection(self, device_id: str) -> bool:
        """Health check: same link attempt as connect(), but never raises or mutates state."""
        device = self.get(device_id)
        if device is None:
            return False
        try:
            await self._open(device)
        except Exception as exc:
            logger.info("connection test failed device=%s error=%s", device_id, exc)
            return False
        return True

    def mark_synced(self, device_id: str) -> None:
        self.require(device_id).last_sync = self._clock()

    async def _open(self, device: Device) -> None:
        if self._connect_timeout is None:
            await self._link.open(device)
            return
        try:
            await asyncio.wait_for(self._link.open(device), timeout=self._connect_timeout)
        except asyncio.TimeoutError:
            raise DeviceConnectionError(f"Connection timeout after {self._connect_timeout:g}s") from None

    @staticmethod
    def _validate_changes(fields: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - CONFIGURABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unsupported device fields: {', '.join(sorted(unknown))}")

        changes: dict[str, Any] = {}
        for name, value in fields.items():
            if name == "device_type":
                try:
                    changes[name] = DeviceType(value)
                except ValueError:
                    raise ValidationError(f"Unknown device type {value!r}") from None
            elif name == "port":
                changes[name] = require_port(value)
            elif name == "is_active":
                changes[name] = require_bool(value, name)
            else:
                changes[name] = require_non_empty(value, name)
        return changes
