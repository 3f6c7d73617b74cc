"""
Unified calendar timeline.

Publications, scheduled posts and user calendar events live in separate tables;
this module loads a window of each and projects them onto one CalendarEvent shape.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger
from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Session, selectinload

from app.models.campaign import campaign_publication
from app.models.publication import Publication
from app.models.scheduled_post import ScheduledPost
from app.models.user import User
from app.models.user_calendar_event import UserCalendarEvent
from app.schemas.calendar import CalendarEvent, EventOwner
from app.services.event_resolver import PublicationRef, ScheduledPostRef, UserEventRef
from app.services.timezones import current_month_window, isoformat_utc
from app.utils.constants import DEFAULT_EVENT_COLOR, STATUS_COLORS


@dataclass
class CalendarFilters:
    platforms: list[str] = field(default_factory=list)
    campaigns: list[int] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)


def status_color(status: str | None) -> str:
    return STATUS_COLORS.get(status or "", STATUS_COLORS["draft"])


def _owner(user: User | None) -> EventOwner | None:
    if user is None:
        return None
    return EventOwner(id=user.id, name=user.name, avatar=user.photo_url)


def _window(start, end) -> tuple[datetime, datetime]:
    # unparseable bounds arrive as raw strings; fall back to the current month
    if isinstance(start, datetime) and isinstance(end, datetime):
        return start, end
    return current_month_window()


def _platforms_match(platforms: list[str], wanted: set[str]) -> bool:
    return not wanted or bool(wanted.intersection(platforms))


def load_publications(db: Session, workspace_id: int, start: datetime, end: datetime, filters: CalendarFilters) -> list[Publication]:
    q = (
        select(Publication)
        .where(Publication.workspace_id == workspace_id)
        .where(Publication.scheduled_at.isnot(None))
        .where(Publication.scheduled_at >= start)
        .where(Publication.scheduled_at <= end)
        .options(
            selectinload(Publication.owner),
            selectinload(Publication.media_files),
            selectinload(Publication.campaigns),
            selectinload(Publication.post_logs),
        )
        .order_by(Publication.scheduled_at)
    )

    if filters.statuses:
        q = q.where(Publication.status.in_(filters.statuses))

    if filters.campaigns:
        q = q.where(
            exists()
            .where(campaign_publication.c.publication_id == Publication.id)
            .where(campaign_publication.c.campaign_id.in_(filters.campaigns))
        )

    pubs = db.execute(q).scalars().all()

    # platforms come from post logs (many per publication), so this can't be a plain WHERE
    wanted = set(filters.platforms)
    return [p for p in pubs if _platforms_match(p.platforms, wanted)]


def project_publication(pub: Publication) -> CalendarEvent:
    platforms = pub.platforms
    campaigns = list(pub.campaigns)
    first_media = pub.media_files[0] if pub.media_files else None

    return CalendarEvent(
        id=PublicationRef(pub.id).composite_id,
        resourceId=pub.id,
        type="publication",
        title=pub.title,
        start=isoformat_utc(pub.scheduled_at),
        status=pub.status,
        color=status_color(pub.status),
        # first of each set is for display only
        platform=platforms[0] if platforms else None,
        campaign=campaigns[0].name if campaigns else None,
        owner=_owner(pub.owner),
        extendedProps={
            "slug": pub.slug,
            "thumbnail": first_media.thumbnail if first_media else None,
            "platforms": platforms,
            "campaign_ids": [c.id for c in campaigns],
        },
    )


def load_scheduled_posts(db: Session, workspace_id: int, start: datetime, end: datetime, filters: CalendarFilters) -> list[ScheduledPost]:
    q = (
        select(ScheduledPost)
        .join(Publication, ScheduledPost.publication_id == Publication.id)
        .where(Publication.workspace_id == workspace_id)
        .where(ScheduledPost.scheduled_at.isnot(None))
        .where(ScheduledPost.scheduled_at >= start)
        .where(ScheduledPost.scheduled_at <= end)
        .options(
            selectinload(ScheduledPost.social_account),
            selectinload(ScheduledPost.publication).selectinload(Publication.owner),
        )
        .order_by(ScheduledPost.scheduled_at)
    )
    if filters.statuses:
        q = q.where(ScheduledPost.status.in_(filters.statuses))
    if filters.campaigns:
        q = q.where(
            exists()
            .where(campaign_publication.c.publication_id == ScheduledPost.publication_id)
            .where(campaign_publication.c.campaign_id.in_(filters.campaigns))
        )

    posts = db.execute(q).scalars().all()
    wanted = set(filters.platforms)
    return [p for p in posts if _platforms_match([p.social_account.platform], wanted)]


def project_scheduled_post(post: ScheduledPost) -> CalendarEvent:
    account = post.social_account
    return CalendarEvent(
        id=ScheduledPostRef(post.id).composite_id,
        resourceId=post.id,
        type="scheduled_post",
        title=f"({account.platform}) {account.account_name or ''}".strip(),
        start=isoformat_utc(post.scheduled_at),
        status=post.status,
        color=status_color(post.status),
        platform=account.platform,
        owner=_owner(post.publication.owner if post.publication else None),
        extendedProps={
            "publication_id": post.publication_id,
            "platform": account.platform,
        },
    )


def load_user_events(db: Session, workspace_id: int, user_id: int, start: datetime, end: datetime) -> list[UserCalendarEvent]:
    q = (
        select(UserCalendarEvent)
        .where(UserCalendarEvent.workspace_id == workspace_id)
        .where(or_(UserCalendarEvent.is_public.is_(True), UserCalendarEvent.user_id == user_id))
        .where(UserCalendarEvent.start_date >= start)
        .where(UserCalendarEvent.start_date <= end)
        .options(selectinload(UserCalendarEvent.user))
        .order_by(UserCalendarEvent.start_date)
    )
    return db.execute(q).scalars().all()


def project_user_event(event: UserCalendarEvent) -> CalendarEvent:
    return CalendarEvent(
        id=UserEventRef(event.id).composite_id,
        resourceId=event.id,
        type="user_event",
        title=event.title,
        start=isoformat_utc(event.start_date),
        end=isoformat_utc(event.end_date),
        status="event",
        color=event.color or DEFAULT_EVENT_COLOR,
        owner=_owner(event.user),
        extendedProps={
            "description": event.description,
            "is_public": event.is_public,
            "remind_at": isoformat_utc(event.remind_at),
        },
    )


def get_events(
    db: Session,
    user: User,
    workspace_id: int,
    start=None,
    end=None,
    filters: CalendarFilters | None = None,
    include_posts: bool = False,
) -> list[CalendarEvent]:
    filters = filters or CalendarFilters()
    start, end = _window(start, end)

    events = [project_publication(p) for p in load_publications(db, workspace_id, start, end, filters)]
    if include_posts:
        events += [project_scheduled_post(p) for p in load_scheduled_posts(db, workspace_id, start, end, filters)]
    events += [project_user_event(e) for e in load_user_events(db, workspace_id, user.id, start, end)]

    logger.debug(f"Calendar window {start.isoformat()}..{end.isoformat()} ws={workspace_id}: {len(events)} events")
    return events
