from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..common.serializers import attendance_to_dict, history_row_to_dict
from ..common.validators import optional_enum, require_date, require_datetime, require_positive_int
from ..container import Container
from ..core.enums import AttendanceStatus
from ..users.identity import current_actor
from .model import AttendanceUpdate


def register(app: Flask, container: Container) -> None:
    def _target_user(data: dict, actor_id: int) -> int:
        # Staff check in for themselves; an admin may name someone else.
        if data.get("userId") is None:
            return actor_id
        return require_positive_int(data.get("userId"), "userId")

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def attendance_check_in():
        actor = current_actor()
        data = json_body()
        record = container.attendance_engine.record_check_in(
            actor,
            user_id=_target_user(data, actor.user_id),
            shift_id=require_positive_int(data.get("shiftId"), "shiftId"),
        )
        return jsonify({"attendance": attendance_to_dict(record)})

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def attendance_check_out():
        actor = current_actor()
        data = json_body()
        record = container.attendance_engine.record_check_out(
            actor,
            user_id=_target_user(data, actor.user_id),
            shift_id=require_positive_int(data.get("shiftId"), "shiftId"),
        )
        return jsonify({"attendance": attendance_to_dict(record)})

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    def attendance_update(attendance_id: int):
        actor = current_actor()
        data = json_body()
        update = AttendanceUpdate(
            check_in=require_datetime(data["checkIn"], "checkIn") if data.get("checkIn") else None,
            check_out=require_datetime(data["checkOut"], "checkOut") if data.get("checkOut") else None,
            status=optional_enum(data.get("status"), AttendanceStatus, "status"),
            remarks=str(data["remarks"]) if data.get("remarks") is not None else None,
        )
        record = container.attendance_engine.admin_update(actor, attendance_id=attendance_id, update=update)
        return jsonify({"attendance": attendance_to_dict(record)})

    @app.route("/api/attendance/user/<int:user_id>", methods=["GET"], endpoint="attendance_history")
    def attendance_history(user_id: int):
        actor = current_actor()
        start_s = request.args.get("startDate")
        end_s = request.args.get("endDate")
        start = end = None
        if start_s and end_s:
            start = require_date(start_s, "startDate")
            end = require_date(end_s, "endDate")

        rows = container.attendance_engine.history_for_user(
            actor,
            user_id=user_id,
            start=start,
            end=end,
            status=optional_enum(request.args.get("status"), AttendanceStatus, "status"),
        )
        return jsonify({"attendance": [history_row_to_dict(r) for r in rows]})
