from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.serializers import conflict_to_dict
from ..common.validators import require_date, require_positive_int
from ..container import Container
from ..users.identity import current_actor
from ..users.permissions import require_admin


def register(app: Flask, container: Container) -> None:
    @app.route("/api/conflicts", methods=["GET"], endpoint="conflicts_list")
    def conflicts_list():
        require_admin(current_actor())

        date_s = request.args.get("date")
        start = require_date(date_s, "date") if date_s else now_local().date()
        days_s = request.args.get("days")
        days = require_positive_int(days_s, "days") if days_s else container.conflict_scan_days

        conflicts = container.conflict_detector.find_conflicts_for_range(start, days)
        return jsonify({"conflicts": [conflict_to_dict(c) for c in conflicts], "count": len(conflicts)})
