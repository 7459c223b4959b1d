from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import json_body
from ..common.serializers import assignment_to_dict, shift_to_dict, summary_to_dict
from ..common.validators import optional_enum, require_date, require_enum, require_hhmm, require_positive_int
from ..container import Container
from ..core.constants import DEFAULT_SHIFT_CAPACITY
from ..core.enums import ShiftType
from ..users.identity import current_actor
from ..users.permissions import require_admin
from .service import NewShift, ShiftChanges


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts", methods=["GET"], endpoint="shifts_list")
    def shifts_list():
        require_admin(current_actor())

        day_s = request.args.get("date")
        start_s = request.args.get("startDate")
        end_s = request.args.get("endDate")
        start = end = None
        if day_s:
            start = end = require_date(day_s, "date")
        if start_s and end_s:
            start = require_date(start_s, "startDate")
            end = require_date(end_s, "endDate")
        shift_type = optional_enum(request.args.get("type"), ShiftType, "type")

        summaries = container.shift_service.list_shifts(start=start, end=end, shift_type=shift_type)
        return jsonify({"shifts": [summary_to_dict(s) for s in summaries]})

    @app.route("/api/shifts", methods=["POST"], endpoint="shifts_create")
    def shifts_create():
        actor = current_actor()
        data = json_body()
        new = NewShift(
            shift_date=require_date(data.get("date"), "date"),
            shift_type=require_enum(data.get("type"), ShiftType, "type"),
            start_time=require_hhmm(data.get("startTime"), "startTime"),
            end_time=require_hhmm(data.get("endTime"), "endTime"),
            capacity=require_positive_int(data.get("capacity", DEFAULT_SHIFT_CAPACITY), "capacity"),
        )
        shift = container.shift_service.create_shift(actor, new)
        out = shift_to_dict(shift)
        out.update({"assignedCount": 0, "availableSlots": shift.capacity, "isFull": False})
        return jsonify({"shift": out}), 201

    @app.route("/api/shifts/<int:shift_id>", methods=["GET"], endpoint="shifts_get")
    def shifts_get(shift_id: int):
        current_actor()
        summary = container.shift_service.get_shift(shift_id)
        out = summary_to_dict(summary)
        out["assignments"] = [assignment_to_dict(a) for a in container.assignment_manager.list_for_shift(shift_id)]
        return jsonify({"shift": out})

    @app.route("/api/shifts/<int:shift_id>", methods=["PUT"], endpoint="shifts_update")
    def shifts_update(shift_id: int):
        actor = current_actor()
        data = json_body()
        changes = ShiftChanges(
            shift_date=require_date(data["date"], "date") if data.get("date") else None,
            shift_type=optional_enum(data.get("type"), ShiftType, "type"),
            start_time=require_hhmm(data["startTime"], "startTime") if data.get("startTime") else None,
            end_time=require_hhmm(data["endTime"], "endTime") if data.get("endTime") else None,
            capacity=require_positive_int(data["capacity"], "capacity") if data.get("capacity") is not None else None,
        )
        summary = container.shift_service.update_shift(actor, shift_id, changes)
        return jsonify({"shift": summary_to_dict(summary)})

    @app.route("/api/shifts/<int:shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    def shifts_delete(shift_id: int):
        container.shift_service.delete_shift(current_actor(), shift_id)
        return jsonify({"success": True})

    @app.route("/api/dashboard/today", methods=["GET"], endpoint="dashboard_today")
    def dashboard_today():
        require_admin(current_actor())
        overview = container.shift_service.day_overview(now_local().date())
        return jsonify(
            {
                "date": overview.work_date.isoformat(),
                "shifts": [summary_to_dict(s) for s in overview.shifts],
                "stats": {
                    "totalShifts": len(overview.shifts),
                    "totalAssignments": overview.total_assignments,
                    "totalCapacity": overview.total_capacity,
                    "availableSlots": overview.available_slots,
                    "attendance": overview.attendance,
                },
            }
        )
