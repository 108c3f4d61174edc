"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LINK_DELAY_SECONDS = 1.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_SYNC_HISTORY_LIMIT = 100
DEFAULT_FAILING_DEVICE_IDS = ("device-003",)

BIOMETRIC_REMARK = "Biometric attendance"
BIOMETRIC_REMARK_MARKER = "biometric"
