from __future__ import annotations

from datetime import datetime

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.publication import Publication
from app.models.scheduled_post import ScheduledPost
from app.models.user import User
from app.models.user_calendar_event import UserCalendarEvent
from app.services import cache
from app.services.errors import ForbiddenError, NotFoundError
from app.services.event_resolver import EventRef, PublicationRef, ScheduledPostRef, UserEventRef
from app.services.permissions import has_permission
from app.services.timezones import as_utc, ensure_utc
from app.utils.constants import MANAGE_CONTENT


def load_publication(db: Session, workspace_id: int, publication_id: int, for_update: bool = False) -> Publication:
    q = (
        select(Publication)
        .where(Publication.id == publication_id)
        .where(Publication.workspace_id == workspace_id)
    )
    if for_update:
        q = q.with_for_update()
    pub = db.execute(q).scalar_one_or_none()
    if not pub:
        raise NotFoundError("Publication not found")
    return pub


def load_scheduled_post(db: Session, workspace_id: int, post_id: int, for_update: bool = False) -> ScheduledPost:
    q = (
        select(ScheduledPost)
        .join(Publication, ScheduledPost.publication_id == Publication.id)
        .where(ScheduledPost.id == post_id)
        .where(Publication.workspace_id == workspace_id)
    )
    if for_update:
        q = q.with_for_update(of=ScheduledPost)
    post = db.execute(q).scalar_one_or_none()
    if not post:
        raise NotFoundError("Scheduled post not found")
    return post


def load_user_event(db: Session, workspace_id: int, event_id: int, user: User, for_update: bool = False) -> UserCalendarEvent:
    q = (
        select(UserCalendarEvent)
        .where(UserCalendarEvent.id == event_id)
        .where(UserCalendarEvent.workspace_id == workspace_id)
    )
    if for_update:
        q = q.with_for_update()
    event = db.execute(q).scalar_one_or_none()
    if not event:
        raise NotFoundError("Event not found")
    # public events are visible to the workspace but only their owner may change them
    if event.user_id != user.id:
        raise ForbiddenError("You can only modify your own events")
    return event


def load_target(db: Session, ref: EventRef, workspace_id: int, user: User, for_update: bool = False):
    """Reload the row behind a ref, scoped to the workspace (and owner for user events)."""
    if isinstance(ref, PublicationRef):
        return load_publication(db, workspace_id, ref.resource_id, for_update)
    if isinstance(ref, ScheduledPostRef):
        return load_scheduled_post(db, workspace_id, ref.resource_id, for_update)
    return load_user_event(db, workspace_id, ref.resource_id, user, for_update)


def move_user_event(event: UserCalendarEvent, new_start: datetime) -> None:
    """Move start to `new_start`, keeping end - start constant when the event has an end."""
    old_start = as_utc(event.start_date)
    old_end = as_utc(event.end_date)
    duration = old_end - old_start if old_end is not None else None

    event.start_date = new_start
    event.end_date = new_start + duration if duration is not None else None


def apply_move(target, new_date: datetime) -> None:
    if isinstance(target, UserCalendarEvent):
        move_user_event(target, new_date)
    else:
        target.scheduled_at = new_date


def require_manage_content(db: Session, user: User, workspace_id: int) -> None:
    if not has_permission(db, user, MANAGE_CONTENT, workspace_id):
        raise ForbiddenError("Unauthorized")


def reschedule(db: Session, user: User, workspace_id: int, ref: EventRef, new_date) -> Publication | ScheduledPost | UserCalendarEvent:
    """Move one calendar entry to `new_date` (UTC) and invalidate the workspace list cache."""
    new_date = ensure_utc(new_date, "scheduled_at")

    target = load_target(db, ref, workspace_id, user)
    if not isinstance(ref, UserEventRef):
        require_manage_content(db, user, workspace_id)

    apply_move(target, new_date)
    db.commit()
    db.refresh(target)

    logger.info(f"Rescheduled {ref.composite_id} to {new_date.isoformat()} (ws={workspace_id}, user={user.id})")

    cache.bump_publications_version(db, workspace_id)
    return target
