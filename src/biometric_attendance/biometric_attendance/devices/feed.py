from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Callable, Protocol, Sequence

from ..attendance.model import RawEvent
from ..common.datetime_utils import now_utc
from ..core.enums import EventOutcome, SubjectKind
from .model import Device


class EventFeed(Protocol):
    async def fetch(self, device: Device) -> Sequence[RawEvent]:
        """Pull the events currently stored on the device."""
        raise NotImplementedError


# (record id, subject id, subject kind, UTC check-in time)
_SIMULATED_CAPTURES = (
    ("record-001", "student-001", SubjectKind.STUDENT, time(8, 30)),
    ("record-002", "student-002", SubjectKind.STUDENT, time(8, 32)),
    ("record-003", "teacher-001", SubjectKind.TEACHER, time(8, 0)),
)


class SimulatedEventFeed:
    """Returns the same morning captures for every device, dated today (UTC)."""

    def __init__(self, *, clock: Callable[[], datetime] = now_utc):
        self._clock = clock

    async def fetch(self, device: Device) -> Sequence[RawEvent]:
        today = self._clock().astimezone(timezone.utc).date()
        return [
            RawEvent(
                record_id=record_id,
                device_id=device.device_id,
                subject_id=subject_id,
                subject_kind=kind,
                timestamp=datetime.combine(today, at, tzinfo=timezone.utc),
                outcome=EventOutcome.SUCCESS,
            )
            for record_id, subject_id, kind, at in _SIMULATED_CAPTURES
        ]
