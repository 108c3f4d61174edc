from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = ErrorKind.VALIDATION


class DeviceNotFoundError(DomainError):
    """Raised when a device id is not in the registry."""

    kind = ErrorKind.NOT_FOUND


class DeviceUnavailableError(DomainError):
    """Raised when a known device is inactive or already syncing."""

    kind = ErrorKind.DEVICE_UNAVAILABLE


class DeviceConnectionError(DomainError):
    """Raised when the link to a device cannot be established."""

    kind = ErrorKind.CONNECTION_FAILURE


class PersistenceError(DomainError):
    """Raised when the attendance ledger cannot be read or written."""

    kind = ErrorKind.PERSISTENCE_FAILURE
