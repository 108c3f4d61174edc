from __future__ import annotations

from enum import Enum


class DeviceType(str, Enum):
    """Capture modality of a biometric device."""

    FINGERPRINT = "fingerprint"
    FACE = "face"
    CARD = "card"
    IRIS = "iris"


class SubjectKind(str, Enum):
    """Who an attendance event belongs to; selects the ledger table."""

    STUDENT = "student"
    TEACHER = "teacher"


class EventOutcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    DUPLICATE = "duplicate"


class LedgerStatus(str, Enum):
    """Attendance status stored in the ledger tables."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"
    LEAVE = "leave"


class ErrorKind(str, Enum):
    """Tag carried by every domain error so callers branch without string matching."""

    NOT_FOUND = "not_found"
    DEVICE_UNAVAILABLE = "device_unavailable"
    CONNECTION_FAILURE = "connection_failure"
    PERSISTENCE_FAILURE = "persistence_failure"
    VALIDATION = "validation"
