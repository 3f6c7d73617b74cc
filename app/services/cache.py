"""
Workspace cache kept in the relational store.

Only integer values are needed: list views key their cached pages on
`publications:{workspace_id}:version`, so bumping the counter invalidates them.
"""
from __future__ import annotations

import time
from datetime import timedelta

from loguru import logger
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.cache_entry import CacheEntry
from app.services.timezones import as_utc
from app.services.tokens import utcnow


def publications_version_key(workspace_id: int) -> str:
    return f"publications:{workspace_id}:version"


def _is_live(entry: CacheEntry) -> bool:
    return entry.expires_at is None or as_utc(entry.expires_at) > utcnow()


def get(db: Session, key: str) -> int | None:
    entry = db.get(CacheEntry, key)
    if not entry or not _is_live(entry):
        return None
    return entry.value


def put(db: Session, key: str, value: int, ttl: timedelta | None = None) -> None:
    expires_at = utcnow() + ttl if ttl else None
    entry = db.get(CacheEntry, key)
    if entry:
        entry.value = value
        entry.expires_at = expires_at
    else:
        db.add(CacheEntry(key=key, value=value, expires_at=expires_at))
    db.commit()


def increment(db: Session, key: str) -> int:
    """Atomic +1 in SQL. Raises KeyError when the key is missing or expired."""
    now = utcnow()
    res = db.execute(
        update(CacheEntry)
        .where(CacheEntry.key == key)
        .where(or_(CacheEntry.expires_at.is_(None), CacheEntry.expires_at > now))
        .values(value=CacheEntry.value + 1)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        raise KeyError(key)
    db.commit()
    return db.execute(select(CacheEntry.value).where(CacheEntry.key == key)).scalar_one()


def bump_publications_version(db: Session, workspace_id: int) -> int:
    key = publications_version_key(workspace_id)
    try:
        return increment(db, key)
    except KeyError:
        value = int(time.time())
        try:
            put(db, key, value, ttl=timedelta(days=get_settings().cache_version_ttl_days))
        except IntegrityError:
            # another request initialized it first; its value is just as good
            db.rollback()
            return get(db, key) or value
        logger.debug(f"Initialized cache version {key}={value}")
        return value
