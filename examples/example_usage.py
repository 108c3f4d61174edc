"""Example: drive a full sync through the service layer (no Flask)."""

import asyncio
import importlib

from config import get_settings_module

from src.biometric_attendance.biometric_attendance.common.datetime_utils import now_utc
from src.biometric_attendance.biometric_attendance.container import build_container


async def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings={"LINK_DELAY_SECONDS": 0})

    for result in await container.sync_reconciler.sync_all():
        print(result.to_dict())

    stats = await container.stats_service.compute_daily_stats(now_utc().date())
    print(stats.to_dict())


if __name__ == "__main__":
    asyncio.run(main())
