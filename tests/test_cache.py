"""Tests for the relational cache version counter."""

import time
from datetime import timedelta

from app.models import CacheEntry
from app.services import cache
from app.services.tokens import utcnow


class TestVersionCounter:
    def test_key_format(self):
        assert cache.publications_version_key(7) == "publications:7:version"

    def test_first_bump_seeds_with_timestamp(self, db, workspace):
        before = int(time.time())

        value = cache.bump_publications_version(db, workspace.id)

        assert before <= value <= int(time.time())
        assert cache.get(db, cache.publications_version_key(workspace.id)) == value

    def test_seed_carries_ttl(self, db, workspace):
        cache.bump_publications_version(db, workspace.id)
        entry = db.get(CacheEntry, cache.publications_version_key(workspace.id))
        assert entry.expires_at is not None

    def test_subsequent_bumps_increment(self, db, workspace):
        first = cache.bump_publications_version(db, workspace.id)
        assert cache.bump_publications_version(db, workspace.id) == first + 1
        assert cache.bump_publications_version(db, workspace.id) == first + 2

    def test_expired_counter_is_reseeded(self, db, workspace):
        key = cache.publications_version_key(workspace.id)
        cache.put(db, key, 3, ttl=timedelta(days=1))
        entry = db.get(CacheEntry, key)
        entry.expires_at = utcnow() - timedelta(seconds=1)
        db.commit()

        assert cache.get(db, key) is None
        value = cache.bump_publications_version(db, workspace.id)

        assert value > 3
        assert cache.get(db, key) == value

    def test_workspaces_are_independent(self, db, workspace, other_workspace):
        cache.put(db, cache.publications_version_key(workspace.id), 1)

        cache.bump_publications_version(db, workspace.id)

        assert cache.get(db, cache.publications_version_key(workspace.id)) == 2
        assert cache.get(db, cache.publications_version_key(other_workspace.id)) is None
