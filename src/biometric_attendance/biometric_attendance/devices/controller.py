from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.api import token_required
from ..core.exceptions import DeviceNotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    registry = container.device_registry

    @app.route("/api/biometric/devices", methods=["GET"], endpoint="list_devices")
    @token_required
    async def list_devices():
        return jsonify({"success": True, "devices": [d.to_dict() for d in registry.list_devices()]})

    @app.route("/api/biometric/devices/<device_id>", methods=["GET"], endpoint="device_status")
    @token_required
    async def device_status(device_id: str):
        device = registry.get(device_id)
        if device is None:
            raise DeviceNotFoundError(f"Device {device_id!r} not found")
        return jsonify({"success": True, "device": device.to_dict()})

    @app.route("/api/biometric/devices/<device_id>/connect", methods=["POST"], endpoint="connect_device")
    @token_required
    async def connect_device(device_id: str):
        await registry.connect(device_id)
        return jsonify({"success": True, "device": registry.require(device_id).to_dict()})

    @app.route("/api/biometric/devices/<device_id>/disconnect", methods=["POST"], endpoint="disconnect_device")
    @token_required
    async def disconnect_device(device_id: str):
        await registry.disconnect(device_id)
        return jsonify({"success": True, "device": registry.require(device_id).to_dict()})

    @app.route("/api/biometric/devices/<device_id>", methods=["PATCH"], endpoint="configure_device")
    @token_required
    async def configure_device(device_id: str):
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            raise ValidationError("Request body must be a non-empty JSON object")
        await registry.configure(device_id, data)
        return jsonify({"success": True, "device": registry.require(device_id).to_dict()})

    @app.route("/api/biometric/devices/<device_id>/test", methods=["POST"], endpoint="test_device")
    @token_required
    async def test_device(device_id: str):
        connected = await registry.test_connection(device_id)
        return jsonify({"success": True, "connected": connected})
