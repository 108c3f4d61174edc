from __future__ import annotations

from datetime import datetime

from ..core.enums import DeviceType
from .model import Device


def default_devices(now: datetime) -> list[Device]:
    """Devices installed on campus; the staff room scanner starts offline."""
    return [
        Device(
            device_id="device-001",
            name="Main Gate Scanner",
            location="Main Entrance",
            device_type=DeviceType.FINGERPRINT,
            is_active=True,
            last_sync=now,
            ip_address="192.168.1.100",
            port=8080,
        ),
        Device(
            device_id="device-002",
            name="Library Scanner",
            location="Library",
            device_type=DeviceType.FACE,
            is_active=True,
            last_sync=now,
            ip_address="192.168.1.101",
            port=8080,
        ),
        Device(
            device_id="device-003",
            name="Staff Room Scanner",
            location="Staff Room",
            device_type=DeviceType.CARD,
            is_active=False,
            last_sync=now,
            ip_address="192.168.1.102",
            port=8080,
        ),
    ]
