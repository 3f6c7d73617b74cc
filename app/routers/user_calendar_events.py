from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user_calendar_event import UserCalendarEvent
from app.schemas.user_calendar_event import UserEventCreate, UserEventUpdate
from app.services import cache
from app.services.authz import Caller, get_caller
from app.services.calendar_events import project_user_event
from app.services.errors import ValidationError
from app.services.reschedule import load_user_event
from app.services.timezones import as_utc, ensure_utc, to_utc

router = APIRouter(prefix="/calendar/user-events", tags=["calendar"])


def _normalize(value: str | None, tz: str | None, field: str):
    if value is None:
        return None
    return ensure_utc(to_utc(value, tz), field)


def _check_range(event: UserCalendarEvent) -> None:
    start = as_utc(event.start_date)
    if event.end_date is not None and as_utc(event.end_date) < start:
        raise ValidationError("end_date must be after or equal to start_date")
    if event.remind_at is not None and as_utc(event.remind_at) >= start:
        raise ValidationError("remind_at must be before start_date")


@router.get("")
def list_user_events(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)):
    events = db.execute(
        select(UserCalendarEvent)
        .where(UserCalendarEvent.workspace_id == caller.workspace_id)
        .where(or_(UserCalendarEvent.is_public.is_(True), UserCalendarEvent.user_id == caller.user.id))
        .order_by(UserCalendarEvent.start_date)
    ).scalars().all()
    return {"success": True, "data": [project_user_event(e).model_dump() for e in events]}


@router.post("", status_code=201)
def create_user_event(
    payload: UserEventCreate,
    x_user_timezone: str | None = Header(default=None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    event = UserCalendarEvent(
        user_id=caller.user.id,
        workspace_id=caller.workspace_id,
        title=payload.title.strip(),
        description=payload.description,
        start_date=_normalize(payload.start_date, x_user_timezone, "start_date"),
        end_date=_normalize(payload.end_date, x_user_timezone, "end_date"),
        remind_at=_normalize(payload.remind_at, x_user_timezone, "remind_at"),
        color=payload.color,
        is_public=payload.is_public,
    )
    _check_range(event)

    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info(f"User event {event.id} created by user {caller.user.id}")

    cache.bump_publications_version(db, caller.workspace_id)
    return {"success": True, "message": "Event created successfully", "data": project_user_event(event).model_dump()}


@router.put("/{event_id}")
def update_user_event(
    event_id: int,
    payload: UserEventUpdate,
    x_user_timezone: str | None = Header(default=None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    event = load_user_event(db, caller.workspace_id, event_id, caller.user)
    data = payload.model_dump(exclude_unset=True)

    for key in ("start_date", "end_date", "remind_at"):
        if key in data:
            data[key] = _normalize(data[key], x_user_timezone, key)
    if "start_date" in data and data["start_date"] is None:
        raise ValidationError("start_date cannot be empty")

    for key, value in data.items():
        setattr(event, key, value)
    _check_range(event)

    db.commit()
    db.refresh(event)
    cache.bump_publications_version(db, caller.workspace_id)
    return {"success": True, "message": "Event updated successfully", "data": project_user_event(event).model_dump()}


@router.delete("/{event_id}")
def delete_user_event(event_id: int, caller: Caller = Depends(get_caller), db: Session = Depends(get_db)):
    event = load_user_event(db, caller.workspace_id, event_id, caller.user)
    db.delete(event)
    db.commit()
    logger.info(f"User event {event_id} deleted by user {caller.user.id}")

    cache.bump_publications_version(db, caller.workspace_id)
    return {"success": True, "message": "Event deleted successfully"}
