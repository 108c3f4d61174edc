from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import DeviceType


@dataclass
class Device:
    """A registered biometric capture endpoint.

    Mutable on purpose: the registry updates connectivity state in place.
    """

    device_id: str
    name: str
    location: str
    device_type: DeviceType
    is_active: bool
    last_sync: datetime
    ip_address: str
    port: int

    def to_dict(self) -> dict:
        return {
            "id": self.device_id,
            "name": self.name,
            "location": self.location,
            "device_type": self.device_type.value,
            "is_active": self.is_active,
            "last_sync": self.last_sync.isoformat(),
            "ip_address": self.ip_address,
            "port": self.port,
        }


# Fields a caller may change through DeviceRegistry.configure().
CONFIGURABLE_FIELDS = frozenset({"name", "location", "device_type", "is_active", "ip_address", "port"})
