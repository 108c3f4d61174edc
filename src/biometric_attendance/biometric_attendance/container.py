from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_ledger_repository import MySQLLedgerRepository
from .attendance.repository import LedgerRepository
from .common.datetime_utils import now_utc
from .core.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_FAILING_DEVICE_IDS,
    DEFAULT_LINK_DELAY_SECONDS,
    DEFAULT_SYNC_HISTORY_LIMIT,
)
from .database.connection import DatabaseConnection, DBConfig
from .devices.defaults import default_devices
from .devices.feed import EventFeed, SimulatedEventFeed
from .devices.link import DeviceLink, SimulatedDeviceLink
from .devices.registry import DeviceRegistry
from .stats.service import BiometricStatsService
from .sync.history import SyncHistory
from .sync.reconciler import SyncReconciler


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    ledger_repo: LedgerRepository

    device_registry: DeviceRegistry
    sync_history: SyncHistory
    sync_reconciler: SyncReconciler
    stats_service: BiometricStatsService


def build_services(
    *,
    ledger_repo: LedgerRepository,
    link: Optional[DeviceLink] = None,
    feed: Optional[EventFeed] = None,
    settings: Mapping[str, Any] | None = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services around an existing ledger repository (used directly by tests)."""
    settings = settings or {}

    link = link or SimulatedDeviceLink(
        delay=float(settings.get("LINK_DELAY_SECONDS", DEFAULT_LINK_DELAY_SECONDS)),
        failing_ids=settings.get("FAILING_DEVICE_IDS", DEFAULT_FAILING_DEVICE_IDS),
    )
    feed = feed or SimulatedEventFeed()

    timeout = settings.get("CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS)
    device_registry = DeviceRegistry(
        default_devices(now_utc()),
        link,
        connect_timeout=float(timeout) if timeout else None,
    )
    sync_history = SyncHistory(limit=int(settings.get("SYNC_HISTORY_LIMIT", DEFAULT_SYNC_HISTORY_LIMIT)))
    sync_reconciler = SyncReconciler(device_registry, feed, ledger_repo, history=sync_history)
    stats_service = BiometricStatsService(ledger_repo)

    return Container(
        conn=conn,
        ledger_repo=ledger_repo,
        device_registry=device_registry,
        sync_history=sync_history,
        sync_reconciler=sync_reconciler,
        stats_service=stats_service,
    )


def build_container(*, db_config: dict, settings: Mapping[str, Any] | None = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    return build_services(ledger_repo=MySQLLedgerRepository(conn), settings=settings, conn=conn)
