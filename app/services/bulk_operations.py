"""
Bulk move/delete of calendar entries with a single-level, time-boxed undo.

Each id is processed and committed on its own: one stale or concurrently removed
entry is recorded as a failure and the rest of the batch still goes through.
The pre-mutation fields of every successful id are kept in BulkOperationHistory
so the latest operation of a (user, workspace) can be reversed for a few minutes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.bulk_operation_history import BulkOperationHistory
from app.models.user import User
from app.models.user_calendar_event import UserCalendarEvent
from app.services import cache
from app.services.errors import CalendarError, NotFoundError, UndoExpiredError, ValidationError
from app.services.event_resolver import EventRef, resolve
from app.services.reschedule import apply_move, load_target
from app.services.timezones import as_utc, ensure_utc, isoformat_utc
from app.services.tokens import utcnow
from app.utils.constants import BULK_OPERATIONS


@dataclass
class BulkOperationResult:
    successful: list[str] = field(default_factory=list)
    failed: list[dict[str, str]] = field(default_factory=list)
    total: int = 0

    def add_success(self, event_id: str) -> None:
        self.successful.append(event_id)

    def add_failure(self, event_id: str, error: str) -> None:
        self.failed.append({"id": event_id, "error": error})

    @property
    def successful_count(self) -> int:
        return len(self.successful)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "successful": self.successful,
            "failed": self.failed,
            "total": self.total,
            "successful_count": self.successful_count,
            "failed_count": self.failed_count,
        }


def _error_text(e: Exception) -> str:
    return e.message if isinstance(e, CalendarError) else str(e)


def snapshot(ref: EventRef, target, event_id: str | None = None) -> dict[str, Any]:
    # keep the id as the caller sent it so undo results line up with the original request
    state: dict[str, Any] = {
        "id": event_id or ref.composite_id,
        "type": ref.entity_type,
        "resource_id": ref.resource_id,
    }
    if isinstance(target, UserCalendarEvent):
        state["start_date"] = isoformat_utc(target.start_date)
        state["end_date"] = isoformat_utc(target.end_date)
    else:
        state["scheduled_at"] = isoformat_utc(target.scheduled_at)
    return state


def _parse_snapshot_dt(value: str | None) -> datetime | None:
    if value is None:
        return None
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def restore(target, state: dict[str, Any]) -> None:
    """Write snapshot fields back verbatim."""
    if isinstance(target, UserCalendarEvent):
        target.start_date = _parse_snapshot_dt(state["start_date"])
        target.end_date = _parse_snapshot_dt(state.get("end_date"))
    else:
        target.scheduled_at = _parse_snapshot_dt(state.get("scheduled_at"))


def bulk_update(
    db: Session,
    user: User,
    workspace_id: int,
    event_ids: list[str],
    operation: str,
    new_date=None,
) -> BulkOperationResult:
    if operation not in BULK_OPERATIONS:
        raise ValidationError(f"Unsupported operation: {operation}")
    if operation == "move":
        new_date = ensure_utc(new_date, "new_date")

    result = BulkOperationResult(total=len(event_ids))
    snapshots: list[dict[str, Any]] = []
    handled: set[str] = set()

    for event_id in event_ids:
        try:
            ref = resolve(event_id)
            if ref.composite_id in handled:
                # repeated or aliased id; only the first pre-mutation snapshot is valid for undo
                result.add_success(event_id)
                continue

            target = load_target(db, ref, workspace_id, user, for_update=True)
            state = snapshot(ref, target, event_id)

            if operation == "move":
                apply_move(target, new_date)
            else:
                db.delete(target)
            db.commit()
        except Exception as e:
            db.rollback()
            result.add_failure(event_id, _error_text(e))
            logger.error(f"Bulk {operation}: failed for {event_id}: {_error_text(e)}")
            continue

        handled.add(ref.composite_id)
        snapshots.append(state)
        result.add_success(event_id)

    if result.successful:
        db.add(
            BulkOperationHistory(
                user_id=user.id,
                workspace_id=workspace_id,
                operation_type=operation,
                event_ids=list(event_ids),
                previous_state=snapshots,
                new_state={"operation": operation, "new_date": isoformat_utc(new_date) if operation == "move" else None},
                successful_count=result.successful_count,
                failed_count=result.failed_count,
                error_details=result.failed,
            )
        )
        db.commit()
        cache.bump_publications_version(db, workspace_id)

    logger.info(
        f"Bulk {operation} completed: total={result.total} ok={result.successful_count} "
        f"failed={result.failed_count} ws={workspace_id} user={user.id}"
    )
    return result


def latest_operation(db: Session, user: User, workspace_id: int) -> BulkOperationHistory | None:
    return db.execute(
        select(BulkOperationHistory)
        .where(BulkOperationHistory.user_id == user.id)
        .where(BulkOperationHistory.workspace_id == workspace_id)
        .order_by(BulkOperationHistory.created_at.desc(), BulkOperationHistory.id.desc())
        .limit(1)
    ).scalar_one_or_none()


def undo_last(db: Session, user: User, workspace_id: int) -> BulkOperationResult:
    """
    Reverse the caller's latest bulk operation in this workspace.

    Only allowed within the undo window after the operation. Entries removed by a
    bulk delete cannot be reloaded and come back as failures.
    """
    op = latest_operation(db, user, workspace_id)
    if not op:
        raise NotFoundError("No operation to undo")

    window = timedelta(seconds=get_settings().bulk_undo_window_seconds)
    if as_utc(op.created_at) < utcnow() - window:
        logger.warning(f"Undo rejected: operation {op.id} is older than {window} (user={user.id})")
        raise UndoExpiredError("Operation too old to undo")

    operation_type = op.operation_type
    states = list(op.previous_state or [])
    result = BulkOperationResult(total=len(states))

    for state in states:
        event_id = state.get("id", "")
        try:
            ref = resolve(event_id)
            target = load_target(db, ref, workspace_id, user, for_update=True)
            restore(target, state)
            db.commit()
        except Exception as e:
            db.rollback()
            result.add_failure(event_id, _error_text(e))
            logger.error(f"Bulk undo: failed for {event_id}: {_error_text(e)}")
            continue

        result.add_success(event_id)

    db.delete(op)
    db.commit()
    cache.bump_publications_version(db, workspace_id)

    logger.info(
        f"Bulk {operation_type} undone: ok={result.successful_count} failed={result.failed_count} "
        f"ws={workspace_id} user={user.id}"
    )
    return result
