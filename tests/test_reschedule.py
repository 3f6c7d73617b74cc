"""Tests for moving single calendar entries (service and PATCH /calendar/events/{id})."""

from datetime import datetime, timedelta, timezone

import pytest

from app.services import cache
from app.services.errors import ForbiddenError, NotFoundError, ValidationError
from app.services.event_resolver import PublicationRef, ScheduledPostRef, UserEventRef
from app.services.reschedule import move_user_event, reschedule
from app.services.timezones import as_utc

UTC = timezone.utc


class TestMoveUserEvent:
    def test_duration_is_preserved(self, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC), datetime(2025, 6, 12, 10, 30, tzinfo=UTC))

        move_user_event(event, datetime(2025, 6, 20, 14, tzinfo=UTC))

        assert as_utc(event.start_date) == datetime(2025, 6, 20, 14, tzinfo=UTC)
        assert as_utc(event.end_date) == datetime(2025, 6, 20, 15, 30, tzinfo=UTC)

    def test_open_ended_event_stays_open_ended(self, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC))

        move_user_event(event, datetime(2025, 6, 20, 14, tzinfo=UTC))

        assert as_utc(event.start_date) == datetime(2025, 6, 20, 14, tzinfo=UTC)
        assert event.end_date is None

    def test_multi_day_event(self, make_user_event):
        event = make_user_event(datetime(2025, 6, 1, tzinfo=UTC), datetime(2025, 6, 4, 12, tzinfo=UTC))

        move_user_event(event, datetime(2025, 6, 28, tzinfo=UTC))

        assert as_utc(event.end_date) - as_utc(event.start_date) == timedelta(days=3, hours=12)


class TestReschedule:
    def test_publication(self, db, user, workspace, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC))
        new_date = datetime(2025, 6, 18, 8, tzinfo=UTC)

        reschedule(db, user, workspace.id, PublicationRef(pub.id), new_date)

        db.refresh(pub)
        assert as_utc(pub.scheduled_at) == new_date

    def test_scheduled_post(self, db, user, workspace, make_publication, make_scheduled_post):
        post = make_scheduled_post(make_publication(None), datetime(2025, 6, 10, tzinfo=UTC))
        new_date = datetime(2025, 6, 11, 12, tzinfo=UTC)

        reschedule(db, user, workspace.id, ScheduledPostRef(post.id), new_date)

        db.refresh(post)
        assert as_utc(post.scheduled_at) == new_date

    def test_user_event_keeps_duration(self, db, user, workspace, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC), datetime(2025, 6, 12, 11, tzinfo=UTC))

        reschedule(db, user, workspace.id, UserEventRef(event.id), datetime(2025, 6, 13, 16, tzinfo=UTC))

        db.refresh(event)
        assert as_utc(event.start_date) == datetime(2025, 6, 13, 16, tzinfo=UTC)
        assert as_utc(event.end_date) == datetime(2025, 6, 13, 18, tzinfo=UTC)

    def test_bumps_workspace_cache_version(self, db, user, workspace, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC))
        key = cache.publications_version_key(workspace.id)
        cache.put(db, key, 10)

        reschedule(db, user, workspace.id, PublicationRef(pub.id), datetime(2025, 6, 11, tzinfo=UTC))

        assert cache.get(db, key) == 11

    def test_other_workspace_is_not_found(self, db, user, workspace, other_workspace, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC), ws=other_workspace)

        with pytest.raises(NotFoundError):
            reschedule(db, user, workspace.id, PublicationRef(pub.id), datetime(2025, 6, 11, tzinfo=UTC))

        db.refresh(pub)
        assert as_utc(pub.scheduled_at) == datetime(2025, 6, 10, tzinfo=UTC)

    def test_unparsed_date_is_rejected(self, db, user, workspace, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC))

        with pytest.raises(ValidationError):
            reschedule(db, user, workspace.id, PublicationRef(pub.id), "tomorrow-ish")

    def test_publication_requires_manage_content(self, db, viewer, workspace, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC))

        with pytest.raises(ForbiddenError):
            reschedule(db, viewer, workspace.id, PublicationRef(pub.id), datetime(2025, 6, 11, tzinfo=UTC))

    def test_viewer_can_move_own_user_event(self, db, viewer, workspace, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC), owner=viewer)

        reschedule(db, viewer, workspace.id, UserEventRef(event.id), datetime(2025, 6, 14, 9, tzinfo=UTC))

        db.refresh(event)
        assert as_utc(event.start_date) == datetime(2025, 6, 14, 9, tzinfo=UTC)

    def test_cannot_move_someone_elses_public_event(self, db, user, teammate, workspace, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC), owner=teammate, is_public=True)

        with pytest.raises(ForbiddenError):
            reschedule(db, user, workspace.id, UserEventRef(event.id), datetime(2025, 6, 14, 9, tzinfo=UTC))


class TestRescheduleEndpoint:
    def test_composite_id_with_client_timezone(self, client, db, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC))

        res = client.patch(
            f"/calendar/events/pub_{pub.id}",
            json={"scheduled_at": "2025-06-15T12:00:00"},
            headers={"X-User-Timezone": "Europe/Madrid"},
        )

        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["message"] == "Publication rescheduled successfully."
        assert body["data"]["scheduled_at"] == "2025-06-15T10:00:00Z"

    def test_bare_id_with_type(self, client, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC), datetime(2025, 6, 12, 10, tzinfo=UTC))

        res = client.patch(
            f"/calendar/events/{event.id}",
            json={"scheduled_at": "2025-06-20T09:00:00Z", "type": "user_event"},
        )

        assert res.status_code == 200
        assert res.json()["message"] == "Event rescheduled successfully."
        assert res.json()["data"]["start_date"] == "2025-06-20T09:00:00Z"
        assert res.json()["data"]["end_date"] == "2025-06-20T10:00:00Z"

    def test_unknown_prefix(self, client):
        res = client.patch("/calendar/events/campaign_3", json={"scheduled_at": "2025-06-20T09:00:00Z"})
        assert res.status_code == 400

    def test_missing_row(self, client):
        res = client.patch("/calendar/events/pub_999", json={"scheduled_at": "2025-06-20T09:00:00Z"})
        assert res.status_code == 404
        assert res.json()["detail"] == "Publication not found"

    def test_unparsed_date(self, client, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC))
        res = client.patch(f"/calendar/events/pub_{pub.id}", json={"scheduled_at": "soon"})
        assert res.status_code == 422

    def test_viewer_is_forbidden(self, client_for, viewer, make_publication):
        pub = make_publication(datetime(2025, 6, 10, tzinfo=UTC))
        res = client_for(viewer).patch(f"/calendar/events/pub_{pub.id}", json={"scheduled_at": "2025-06-20T09:00:00Z"})
        assert res.status_code == 403
        assert res.json()["detail"] == "Unauthorized"
