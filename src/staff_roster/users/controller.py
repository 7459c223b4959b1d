from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..common.serializers import staff_to_dict
from ..common.validators import optional_bool, optional_enum, require_enum
from ..container import Container
from ..core.enums import Department, ShiftType, StaffRole
from .identity import current_actor
from .service import NewStaff, StaffChanges, StaffFilter


def _optional_text(data: dict, key: str):
    value = data.get(key)
    return str(value).strip() if value is not None else None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/staff", methods=["GET"], endpoint="staff_list")
    def staff_list():
        actor = current_actor()
        filters = StaffFilter(
            name=request.args.get("name"),
            staff_role=optional_enum(request.args.get("staffRole"), StaffRole, "staffRole"),
            department=optional_enum(request.args.get("department"), Department, "department"),
            shift_preference=optional_enum(request.args.get("shiftPreference"), ShiftType, "shiftPreference"),
            is_active=optional_bool(request.args.get("active"), "active"),
        )
        staff = container.staff_service.list_staff(actor, filters)
        return jsonify({"staff": [staff_to_dict(u) for u in staff]})

    @app.route("/api/staff", methods=["POST"], endpoint="staff_create")
    def staff_create():
        actor = current_actor()
        data = json_body()
        new = NewStaff(
            full_name=data.get("name"),
            email=data.get("email"),
            staff_role=require_enum(data.get("staffRole"), StaffRole, "staffRole"),
            department=require_enum(data.get("department"), Department, "department"),
            shift_preference=optional_enum(data.get("shiftPreference"), ShiftType, "shiftPreference"),
            contact_number=_optional_text(data, "contactNumber"),
        )
        user = container.staff_service.create_staff(actor, new)
        return jsonify({"staff": staff_to_dict(user)}), 201

    @app.route("/api/staff/<int:user_id>", methods=["GET"], endpoint="staff_get")
    def staff_get(user_id: int):
        user = container.staff_service.get_staff(current_actor(), user_id)
        return jsonify({"staff": staff_to_dict(user)})

    @app.route("/api/staff/<int:user_id>", methods=["PUT"], endpoint="staff_update")
    def staff_update(user_id: int):
        actor = current_actor()
        data = json_body()
        changes = StaffChanges(
            full_name=data.get("name"),
            email=data.get("email"),
            staff_role=optional_enum(data.get("staffRole"), StaffRole, "staffRole"),
            department=optional_enum(data.get("department"), Department, "department"),
            shift_preference=optional_enum(data.get("shiftPreference"), ShiftType, "shiftPreference"),
            contact_number=_optional_text(data, "contactNumber"),
            is_active=optional_bool(data.get("isActive"), "isActive"),
        )
        user = container.staff_service.update_staff(actor, user_id, changes)
        return jsonify({"staff": staff_to_dict(user)})

    @app.route("/api/staff/<int:user_id>", methods=["DELETE"], endpoint="staff_delete")
    def staff_delete(user_id: int):
        container.staff_service.delete_staff(current_actor(), user_id)
        return jsonify({"success": True})
