from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field


class EventOwner(BaseModel):
    id: int
    name: str
    avatar: Optional[str] = None


class CalendarEvent(BaseModel):
    id: str  # composite id, e.g. "pub_42"
    resourceId: int
    type: Literal["publication", "scheduled_post", "user_event"]
    title: str
    start: Optional[str]
    end: Optional[str] = None
    status: str
    color: Optional[str] = None
    platform: Optional[str] = None
    campaign: Optional[str] = None
    owner: Optional[EventOwner] = None
    extendedProps: dict[str, Any] = Field(default_factory=dict)


class RescheduleRequest(BaseModel):
    scheduled_at: str = Field(min_length=1)
    type: Optional[Literal["publication", "post", "scheduled_post", "user_event"]] = None


class BulkUpdateRequest(BaseModel):
    event_ids: List[str] = Field(min_length=1)
    operation: Literal["move", "delete"]
    new_date: Optional[str] = None

