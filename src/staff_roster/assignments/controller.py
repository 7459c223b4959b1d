from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..common.serializers import assignment_to_dict
from ..common.validators import require_positive_int
from ..container import Container
from ..users.identity import current_actor


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts/<int:shift_id>/assign", methods=["POST"], endpoint="shift_assign")
    def shift_assign(shift_id: int):
        actor = current_actor()
        user_id = require_positive_int(json_body().get("userId"), "userId")
        assignment = container.assignment_manager.assign(actor, shift_id=shift_id, user_id=user_id)
        return jsonify({"assignment": assignment_to_dict(assignment)}), 201

    @app.route("/api/shifts/<int:shift_id>/assign", methods=["DELETE"], endpoint="shift_unassign")
    def shift_unassign(shift_id: int):
        actor = current_actor()
        user_id = require_positive_int(json_body().get("userId"), "userId")
        container.assignment_manager.unassign(actor, shift_id=shift_id, user_id=user_id)
        return jsonify({"success": True})
