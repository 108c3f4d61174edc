from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class SyncResult:
    """Outcome of reconciling one device's events against the ledger."""

    success: bool
    records_processed: int
    records_added: int
    records_updated: int
    errors: tuple[str, ...] = ()
    device_id: Optional[str] = None
    device_name: Optional[str] = None
    synced_at: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def failed(
        cls,
        error: str,
        *,
        device_id: Optional[str] = None,
        device_name: Optional[str] = None,
        synced_at: Optional[datetime] = None,
    ) -> "SyncResult":
        return cls(
            success=False,
            records_processed=0,
            records_added=0,
            records_updated=0,
            errors=(error,),
            device_id=device_id,
            device_name=device_name,
            synced_at=synced_at,
        )

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "device_id": self.device_id,
            "device_name": self.device_name,
            "records_processed": self.records_processed,
            "records_added": self.records_added,
            "records_updated": self.records_updated,
            "errors": list(self.errors),
            "synced_at": self.synced_at.isoformat() if self.synced_at else None,
        }


@dataclass(frozen=True)
class DailySyncSummary:
    date: date
    total_records: int
    successful_records: int
    failed_records: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "total_records": self.total_records,
            "successful_records": self.successful_records,
            "failed_records": self.failed_records,
        }
