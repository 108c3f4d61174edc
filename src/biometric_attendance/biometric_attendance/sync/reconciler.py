from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional

from ..attendance.model import RawEvent
from ..attendance.repository import LedgerRepository
from ..common.datetime_utils import now_utc, split_timestamp
from ..core.constants import BIOMETRIC_REMARK
from ..core.enums import EventOutcome, LedgerStatus, SubjectKind
from ..core.exceptions import DeviceUnavailableError, ValidationError
from ..devices.feed import EventFeed
from ..devices.registry import DeviceRegistry
from .history import SyncHistory
from .model import SyncResult

logger = logging.getLogger(__name__)


class SyncReconciler:
    """Turns device events into ledger writes, one row per subject per day.

    Events are applied in feed order. A subject seen by two devices on the same day is
    written twice; the later write wins.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        feed: EventFeed,
        ledger: LedgerRepository,
        *,
        history: Optional[SyncHistory] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._registry = registry
        self._feed = feed
        self._ledger = ledger
        self._history = history
        self._clock = clock
        self._in_flight: set[str] = set()
        self._in_flight_lock = threading.Lock()

    async def sync_one(self, device_id: str) -> SyncResult:
        device = self._registry.require(device_id)
        if not device.is_active:
            raise DeviceUnavailableError(f"Device {device_id!r} is not active")

        with self._exclusive(device_id):
            try:
                events = list(await self._feed.fetch(device))
            except Exception as exc:
                logger.warning("event fetch failed device=%s error=%s", device_id, exc)
                result = SyncResult.failed(
                    f"Sync failed: {exc}",
                    device_id=device.device_id,
                    device_name=device.name,
                    synced_at=self._clock(),
                )
                self._remember(result)
                return result

            added = 0
            updated = 0
            errors: list[str] = []
            for event in events:
                try:
                    created = await self._reconcile_event(event)
                except Exception as exc:
                    logger.warning("event skipped device=%s record=%s error=%s", device_id, event.record_id, exc)
                    errors.append(f"Failed to process record {event.record_id}: {exc}")
                    continue
                if created:
                    added += 1
                else:
                    updated += 1

            self._registry.mark_synced(device_id)
            result = SyncResult(
                success=True,
                records_processed=len(events),
                records_added=added,
                records_updated=updated,
                errors=tuple(errors),
                device_id=device.device_id,
                device_name=device.name,
                synced_at=device.last_sync,
            )

        logger.info(
            "synced device=%s processed=%d added=%d updated=%d errors=%d",
            device_id,
            result.records_processed,
            added,
            updated,
            len(errors),
        )
        self._remember(result)
        return result

    async def sync_all(self) -> list[SyncResult]:
        """Sync every active device in registry order; never raises."""
        results: list[SyncResult] = []
        for device in [d for d in self._registry.list_devices() if d.is_active]:
            try:
                results.append(await self.sync_one(device.device_id))
            except Exception as exc:
                logger.warning("device sync aborted device=%s error=%s", device.device_id, exc)
                result = SyncResult.failed(
                    f"Device {device.name}: {exc}",
                    device_id=device.device_id,
                    device_name=device.name,
                    synced_at=self._clock(),
                )
                self._remember(result)
                results.append(result)
        return results

    async def _reconcile_event(self, event: RawEvent) -> bool:
        outcome = EventOutcome(event.outcome)
        if outcome == EventOutcome.FAILED:
            raise ValidationError("capture was rejected by the device")

        kind = SubjectKind(event.subject_kind)
        attendance_date, check_in_time = split_timestamp(event.timestamp)
        # Duplicate captures go through the same upsert: the row for the day is rewritten, never doubled.
        return await asyncio.to_thread(
            self._ledger.upsert,
            kind=kind,
            subject_id=event.subject_id,
            attendance_date=attendance_date,
            status=LedgerStatus.PRESENT,
            check_in_time=check_in_time,
            remarks=BIOMETRIC_REMARK,
        )

    @contextmanager
    def _exclusive(self, device_id: str) -> Iterator[None]:
        with self._in_flight_lock:
            if device_id in self._in_flight:
                raise DeviceUnavailableError(f"Device {device_id!r} is already syncing")
            self._in_flight.add(device_id)
        try:
            yield
        finally:
            with self._in_flight_lock:
                self._in_flight.discard(device_id)

    def _remember(self, result: SyncResult) -> None:
        if self._history is not None:
            self._history.record(result)
