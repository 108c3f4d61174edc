from __future__ import annotations

import asyncio

from flask import Flask, jsonify

from ..common.api import date_arg, today_utc, token_required
from ..core.enums import SubjectKind
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger_repo

    @app.route("/api/biometric/attendance/<kind>/<subject_id>", methods=["GET"], endpoint="subject_attendance")
    @token_required
    async def subject_attendance(kind: str, subject_id: str):
        """Ledger row of one student or teacher for a day (null when nothing was recorded)."""
        try:
            subject_kind = SubjectKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown subject kind {kind!r}") from None
        day = date_arg("date", today_utc())

        row = await asyncio.to_thread(ledger.get_for_subject_and_date, subject_kind, subject_id, day)
        return jsonify({"success": True, "attendance": row.to_dict() if row else None})
