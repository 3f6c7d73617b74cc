"""
Pessimistic editing locks for publications.

The row in `publication_locks` is the lock. `publication_id` is unique, so two
requests racing to create a lock on the same publication cannot both insert;
the loser retries against the row that won. Expiry is checked lazily on read,
nothing sweeps stale rows.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.models.publication import Publication
from app.models.publication_lock import PublicationLock
from app.models.user import User
from app.services.errors import ConflictError
from app.services.reschedule import load_publication
from app.services.timezones import as_utc, isoformat_utc
from app.services.tokens import utcnow


def is_expired(lock: PublicationLock) -> bool:
    return as_utc(lock.expires_at) <= utcnow()


def lock_info(lock: PublicationLock) -> dict[str, Any]:
    return {
        "publication_id": lock.publication_id,
        "user_id": lock.user_id,
        "user_name": lock.user.name if lock.user else None,
        "avatar": lock.user.photo_url if lock.user else None,
        "expires_at": isoformat_utc(lock.expires_at),
        "ip_address": lock.ip_address,
        "user_agent": lock.user_agent,
    }


def _get_lock_row(db: Session, publication_id: int) -> PublicationLock | None:
    return db.execute(
        select(PublicationLock)
        .where(PublicationLock.publication_id == publication_id)
        .options(selectinload(PublicationLock.user))
    ).scalar_one_or_none()


def _try_acquire(db: Session, publication_id: int, user: User, force: bool, ip: str | None, user_agent: str | None) -> PublicationLock:
    now = utcnow()
    expires_at = now + timedelta(seconds=get_settings().publication_lock_ttl_seconds)

    lock = _get_lock_row(db, publication_id)

    if lock is None:
        lock = PublicationLock(publication_id=publication_id, user_id=user.id)
        db.add(lock)
    elif lock.user_id != user.id and not is_expired(lock):
        if not force:
            raise ConflictError("Publication is being edited by another user", details=lock_info(lock))
        logger.warning(
            f"Lock takeover on publication {publication_id}: user {user.id} replaced user {lock.user_id}"
        )

    lock.user_id = user.id
    lock.expires_at = expires_at
    lock.ip_address = ip
    lock.user_agent = (user_agent or "")[:255] or None

    # unique(publication_id) decides concurrent inserts here
    db.commit()
    db.refresh(lock)
    return lock


def acquire(
    db: Session,
    user: User,
    workspace_id: int,
    publication_id: int,
    force: bool = False,
    ip: str | None = None,
    user_agent: str | None = None,
) -> PublicationLock:
    """
    Take or refresh the editing lock on a publication.

    Succeeds when there is no lock, the lock expired, the caller already holds it
    (heartbeat), or `force` is set (explicit takeover). Otherwise raises ConflictError
    carrying the current holder and leaves the lock untouched.
    """
    load_publication(db, workspace_id, publication_id)

    try:
        lock = _try_acquire(db, publication_id, user, force, ip, user_agent)
    except IntegrityError:
        # someone inserted the row between our read and our insert; go again as an update
        db.rollback()
        lock = _try_acquire(db, publication_id, user, force, ip, user_agent)

    logger.info(f"Publication {publication_id} locked by user {user.id} until {isoformat_utc(lock.expires_at)}")
    return lock


def release(db: Session, user: User, workspace_id: int, publication_id: int) -> bool:
    """Drop the lock if the caller holds it. Returns whether a row was removed."""
    load_publication(db, workspace_id, publication_id)

    lock = _get_lock_row(db, publication_id)
    if not lock or lock.user_id != user.id:
        return False

    db.delete(lock)
    db.commit()
    logger.info(f"Publication {publication_id} unlocked by user {user.id}")
    return True


def current_lock(db: Session, workspace_id: int, publication_id: int) -> PublicationLock | None:
    load_publication(db, workspace_id, publication_id)

    lock = _get_lock_row(db, publication_id)
    if not lock or is_expired(lock):
        return None
    return lock


def active_locks(db: Session, workspace_id: int) -> list[PublicationLock]:
    locks = db.execute(
        select(PublicationLock)
        .join(Publication, PublicationLock.publication_id == Publication.id)
        .where(Publication.workspace_id == workspace_id)
        .where(PublicationLock.expires_at > utcnow())
        .options(selectinload(PublicationLock.user))
        .order_by(PublicationLock.publication_id)
    ).scalars().all()
    return list(locks)
