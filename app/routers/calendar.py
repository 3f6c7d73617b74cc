from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user_calendar_event import UserCalendarEvent
from app.schemas.calendar import BulkUpdateRequest, RescheduleRequest
from app.services import bulk_operations, calendar_events
from app.services.authz import Caller, get_caller
from app.services.calendar_events import CalendarFilters
from app.services.event_resolver import UserEventRef, resolve_path_id
from app.services.reschedule import require_manage_content, reschedule
from app.services.timezones import isoformat_utc, to_utc

router = APIRouter(prefix="/calendar", tags=["calendar"])


def _split(values: list[str]) -> list[str]:
    # accept both ?platforms=a&platforms=b and ?platforms=a,b
    out: list[str] = []
    for v in values:
        out.extend(x.strip() for x in v.split(",") if x.strip())
    return out


def _serialize(target) -> dict:
    if isinstance(target, UserCalendarEvent):
        return {
            "id": target.id,
            "title": target.title,
            "start_date": isoformat_utc(target.start_date),
            "end_date": isoformat_utc(target.end_date),
            "is_public": target.is_public,
        }
    return {
        "id": target.id,
        "status": target.status,
        "scheduled_at": isoformat_utc(target.scheduled_at),
    }


@router.get("/events")
def list_events(
    start: str | None = None,
    end: str | None = None,
    platforms: list[str] = Query(default=[]),
    campaigns: list[str] = Query(default=[]),
    statuses: list[str] = Query(default=[]),
    include_posts: bool = False,
    x_user_timezone: str | None = Header(default=None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    filters = CalendarFilters(
        platforms=_split(platforms),
        campaigns=[int(c) for c in _split(campaigns) if c.isdigit()],
        statuses=_split(statuses),
    )

    events = calendar_events.get_events(
        db,
        caller.user,
        caller.workspace_id,
        start=to_utc(start, x_user_timezone),
        end=to_utc(end, x_user_timezone),
        filters=filters,
        include_posts=include_posts,
    )
    return {"success": True, "data": [e.model_dump() for e in events]}


@router.patch("/events/{event_id}")
def update_event(
    event_id: str,
    payload: RescheduleRequest,
    x_user_timezone: str | None = Header(default=None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    ref = resolve_path_id(event_id, payload.type)
    new_date = to_utc(payload.scheduled_at, x_user_timezone)

    target = reschedule(db, caller.user, caller.workspace_id, ref, new_date)

    label = "Event" if isinstance(ref, UserEventRef) else ref.entity_type.replace("_", " ").capitalize()
    return {"success": True, "message": f"{label} rescheduled successfully.", "data": _serialize(target)}


@router.post("/bulk-update")
def bulk_update(
    payload: BulkUpdateRequest,
    x_user_timezone: str | None = Header(default=None),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    require_manage_content(db, caller.user, caller.workspace_id)

    result = bulk_operations.bulk_update(
        db,
        caller.user,
        caller.workspace_id,
        payload.event_ids,
        payload.operation,
        new_date=to_utc(payload.new_date, x_user_timezone),
    )
    return {"success": True, "data": result.to_dict()}


@router.post("/bulk-undo")
def bulk_undo(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)):
    require_manage_content(db, caller.user, caller.workspace_id)

    result = bulk_operations.undo_last(db, caller.user, caller.workspace_id)
    return {"success": True, "data": result.to_dict()}
