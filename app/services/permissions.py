from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.workspace import WorkspaceMember

FULL_ACCESS_ROLES = {"owner", "admin"}


def has_permission(db: Session, user: User, capability: str, workspace_id: int | None) -> bool:
    if workspace_id is None:
        return False

    member = db.execute(
        select(WorkspaceMember)
        .where(WorkspaceMember.workspace_id == workspace_id)
        .where(WorkspaceMember.user_id == user.id)
    ).scalar_one_or_none()
    if not member:
        return False

    if member.role in FULL_ACCESS_ROLES:
        return True
    return bool((member.permissions or {}).get(capability))
