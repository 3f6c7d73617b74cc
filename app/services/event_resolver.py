"""
Composite calendar ids.

The calendar mixes three tables in one timeline, so every event id carries its
entity type: "pub_42", "post_7", "user_event_3". A resolved ref only says what
the client asked for; callers must still load the row scoped to the workspace.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from app.services.errors import InvalidTypeError


@dataclass(frozen=True)
class PublicationRef:
    resource_id: int

    entity_type: ClassVar[str] = "publication"
    prefix: ClassVar[str] = "pub"

    @property
    def composite_id(self) -> str:
        return f"{self.prefix}_{self.resource_id}"


@dataclass(frozen=True)
class ScheduledPostRef:
    resource_id: int

    entity_type: ClassVar[str] = "scheduled_post"
    prefix: ClassVar[str] = "post"

    @property
    def composite_id(self) -> str:
        return f"{self.prefix}_{self.resource_id}"


@dataclass(frozen=True)
class UserEventRef:
    resource_id: int

    entity_type: ClassVar[str] = "user_event"
    prefix: ClassVar[str] = "user_event"

    @property
    def composite_id(self) -> str:
        return f"{self.prefix}_{self.resource_id}"


EventRef = Union[PublicationRef, ScheduledPostRef, UserEventRef]

# leading token of a composite id -> ref class
_PREFIXES: dict[str, type] = {
    "pub": PublicationRef,
    "publication": PublicationRef,
    "post": ScheduledPostRef,
    "scheduled_post": ScheduledPostRef,
    "user": UserEventRef,
    "user_event": UserEventRef,
}

# `type` values accepted by PATCH /calendar/events/{id}
_TYPES: dict[str, type] = {
    "publication": PublicationRef,
    "post": ScheduledPostRef,
    "scheduled_post": ScheduledPostRef,
    "user_event": UserEventRef,
}


def _parse_resource_id(raw: str, composite_id: str) -> int:
    if not raw.isdigit() or int(raw) <= 0:
        raise InvalidTypeError(f"Invalid event id: {composite_id}")
    return int(raw)


def resolve(composite_id: str) -> EventRef:
    """Map "pub_42" / "post_7" / "user_event_3" to its typed ref."""
    cid = (composite_id or "").strip()
    head, sep, tail = cid.rpartition("_")
    if not sep or not head:
        raise InvalidTypeError(f"Invalid event id: {composite_id}")

    ref_cls = _PREFIXES.get(head)
    if ref_cls is None:
        raise InvalidTypeError(f"Invalid event type: {head}")

    return ref_cls(_parse_resource_id(tail, cid))


def ref_for(entity_type: str | None, resource_id: int | str) -> EventRef:
    """Build a ref from an explicit `type` plus a bare id (PATCH body form)."""
    ref_cls = _TYPES.get((entity_type or "publication").strip().lower())
    if ref_cls is None:
        raise InvalidTypeError("Invalid type")
    return ref_cls(_parse_resource_id(str(resource_id).strip(), str(resource_id)))


def resolve_path_id(event_id: str, entity_type: str | None = None) -> EventRef:
    """Path ids may be composite ("pub_4") or bare ("4") with the type in the body."""
    if str(event_id).strip().isdigit():
        return ref_for(entity_type, event_id)
    return resolve(event_id)
