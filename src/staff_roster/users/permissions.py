from __future__ import annotations

from ..core.exceptions import ForbiddenError
from .model import Actor


def require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise ForbiddenError("Forbidden - admin access required")


def require_self_or_admin(actor: Actor, user_id: int) -> None:
    if not actor.is_admin and actor.user_id != int(user_id):
        raise ForbiddenError("Forbidden - you can only act on your own records")
