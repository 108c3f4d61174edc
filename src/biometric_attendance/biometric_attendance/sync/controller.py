from __future__ import annotations

import csv
import io

from flask import Flask, jsonify

from ..common.api import date_arg, int_arg, today_utc, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    registry = container.device_registry
    reconciler = container.sync_reconciler
    history = container.sync_history

    @app.route("/api/biometric/devices/<device_id>/sync", methods=["POST"], endpoint="sync_device")
    @token_required
    async def sync_device(device_id: str):
        result = await reconciler.sync_one(device_id)
        return jsonify({"success": result.success, "result": result.to_dict()})

    @app.route("/api/biometric/sync", methods=["POST"], endpoint="sync_all_devices")
    @token_required
    async def sync_all_devices():
        results = await reconciler.sync_all()
        return jsonify({"success": True, "results": [r.to_dict() for r in results]})

    @app.route("/api/biometric/sync/history", methods=["GET"], endpoint="sync_history")
    @token_required
    async def sync_history():
        limit = int_arg("limit", minimum=0)
        return jsonify({"success": True, "results": [r.to_dict() for r in history.recent(limit)]})

    @app.route("/api/biometric/devices/<device_id>/summary", methods=["GET"], endpoint="device_summary")
    @token_required
    async def device_summary(device_id: str):
        registry.require(device_id)
        day = date_arg("date", today_utc())
        return jsonify({"success": True, "summary": history.device_summary(device_id, day).to_dict()})

    @app.route("/api/biometric/devices/<device_id>/export", methods=["GET"], endpoint="export_device")
    @token_required
    async def export_device(device_id: str):
        device = registry.require(device_id)
        start, end = date_arg("start"), date_arg("end")
        return jsonify({"success": True, "export": history.build_export(device, start, end)})

    @app.route("/api/biometric/devices/<device_id>/export.csv", methods=["GET"], endpoint="export_device_csv")
    @token_required
    async def export_device_csv(device_id: str):
        device = registry.require(device_id)
        start, end = date_arg("start"), date_arg("end")
        rows = history.daily_summary(device.device_id, start, end)

        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["date", "total_records", "successful_records", "failed_records"],
        )
        writer.writeheader()
        for r in rows:
            writer.writerow(r.to_dict())

        filename = f"biometric_{device.device_id}_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
