"""Tests for the personal calendar events endpoints."""

from datetime import datetime, timezone

from app.models import UserCalendarEvent
from app.services import cache
from app.services.timezones import as_utc

UTC = timezone.utc


class TestUserEventsApi:
    def test_create_in_client_timezone(self, client, db, workspace):
        res = client.post(
            "/calendar/user-events",
            json={
                "title": "  Quarterly review  ",
                "start_date": "2025-06-12T09:00:00",
                "end_date": "2025-06-12T10:00:00",
                "remind_at": "2025-06-12T08:45:00",
                "is_public": True,
            },
            headers={"X-User-Timezone": "Europe/Madrid"},
        )

        assert res.status_code == 201
        data = res.json()["data"]
        assert data["title"] == "Quarterly review"
        assert data["start"] == "2025-06-12T07:00:00Z"
        assert data["end"] == "2025-06-12T08:00:00Z"
        assert data["extendedProps"]["remind_at"] == "2025-06-12T06:45:00Z"
        assert data["extendedProps"]["is_public"] is True
        assert cache.get(db, cache.publications_version_key(workspace.id)) is not None

    def test_end_before_start(self, client):
        res = client.post(
            "/calendar/user-events",
            json={"title": "Backwards", "start_date": "2025-06-12T10:00:00Z", "end_date": "2025-06-12T09:00:00Z"},
        )
        assert res.status_code == 422
        assert res.json()["detail"] == "end_date must be after or equal to start_date"

    def test_reminder_after_start(self, client):
        res = client.post(
            "/calendar/user-events",
            json={"title": "Late", "start_date": "2025-06-12T10:00:00Z", "remind_at": "2025-06-12T10:05:00Z"},
        )
        assert res.status_code == 422

    def test_unparsed_start(self, client):
        res = client.post("/calendar/user-events", json={"title": "Whenever", "start_date": "someday"})
        assert res.status_code == 422

    def test_list_shows_own_and_public(self, client, user, teammate, make_user_event):
        mine = make_user_event(datetime(2025, 6, 12, tzinfo=UTC), title="Mine")
        public = make_user_event(datetime(2025, 6, 13, tzinfo=UTC), owner=teammate, is_public=True, title="Public")
        make_user_event(datetime(2025, 6, 14, tzinfo=UTC), owner=teammate, title="Private")

        res = client.get("/calendar/user-events")

        assert [e["resourceId"] for e in res.json()["data"]] == [mine.id, public.id]

    def test_update(self, client, db, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC))

        res = client.put(f"/calendar/user-events/{event.id}", json={"title": "Renamed", "end_date": "2025-06-12T11:00:00Z"})

        assert res.status_code == 200
        db.refresh(event)
        assert event.title == "Renamed"
        assert as_utc(event.end_date) == datetime(2025, 6, 12, 11, tzinfo=UTC)

    def test_start_cannot_be_cleared(self, client, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC))
        res = client.put(f"/calendar/user-events/{event.id}", json={"start_date": None})
        assert res.status_code == 422

    def test_teammate_cannot_edit_public_event(self, client_for, teammate, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC), is_public=True)

        res = client_for(teammate).put(f"/calendar/user-events/{event.id}", json={"title": "Mine now"})

        assert res.status_code == 403

    def test_delete(self, client, db, make_user_event):
        event = make_user_event(datetime(2025, 6, 12, 9, tzinfo=UTC))
        event_id = event.id

        res = client.delete(f"/calendar/user-events/{event_id}")

        assert res.status_code == 200
        assert db.get(UserCalendarEvent, event_id) is None

    def test_delete_missing(self, client):
        assert client.delete("/calendar/user-events/999").status_code == 404
