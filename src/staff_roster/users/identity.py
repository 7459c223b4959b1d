from __future__ import annotations

from flask import abort, request

from ..core.enums import Role
from .model import Actor

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"


def current_actor() -> Actor:
    """Build the Actor from identity headers set by the upstream auth proxy.

    Anonymous requests never reach the services.
    """

    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    role = (request.headers.get(USER_ROLE_HEADER) or "").strip().upper()
    if not user_id.isdigit() or role not in {r.value for r in Role}:
        abort(401, description="Unauthorized")
    return Actor(user_id=int(user_id), role=Role(role))
