from __future__ import annotations

from flask import Flask, jsonify

from ..common.api import date_arg, today_utc, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    stats = container.stats_service

    @app.route("/api/biometric/stats", methods=["GET"], endpoint="daily_stats")
    @token_required
    async def daily_stats():
        day = date_arg("date", today_utc())
        result = await stats.compute_daily_stats(day)
        return jsonify({"success": True, "stats": result.to_dict()})
