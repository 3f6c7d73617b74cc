"""Shared fixtures for the calendar backend test suite."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import (
    Campaign,
    MediaFile,
    Publication,
    ScheduledPost,
    Session,
    SocialAccount,
    SocialPostLog,
    User,
    UserCalendarEvent,
    Workspace,
    WorkspaceMember,
)
from app.services.sessions import COOKIE_NAME, hash_session_token, new_session_token, session_expiry


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------
@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()


# ---------------------------------------------------------------------------
# Tenants and people
# ---------------------------------------------------------------------------
@pytest.fixture
def workspace(db):
    ws = Workspace(name="Acme")
    db.add(ws)
    db.commit()
    return ws


@pytest.fixture
def other_workspace(db):
    ws = Workspace(name="Globex")
    db.add(ws)
    db.commit()
    return ws


def _make_user(db, workspace, name, role="member", permissions=None):
    user = User(name=name, email=f"{name.lower()}@example.com", current_workspace_id=workspace.id)
    db.add(user)
    db.commit()
    db.add(WorkspaceMember(workspace_id=workspace.id, user_id=user.id, role=role, permissions=permissions))
    db.commit()
    return user


@pytest.fixture
def user(db, workspace):
    """Editor with manage-content in `workspace`."""
    return _make_user(db, workspace, "Alice", permissions={"manage-content": True})


@pytest.fixture
def teammate(db, workspace):
    return _make_user(db, workspace, "Bob", permissions={"manage-content": True})


@pytest.fixture
def viewer(db, workspace):
    return _make_user(db, workspace, "Victor", role="viewer", permissions={"manage-content": False})


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture
def client_for(db):
    """Build a TestClient authenticated as the given user."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    clients = []

    def _make(u: User) -> TestClient:
        token = new_session_token()
        db.add(Session(user_id=u.id, session_token=hash_session_token(token), expires_at=session_expiry()))
        db.commit()

        c = TestClient(app)
        c.cookies.set(COOKIE_NAME, token)
        clients.append(c)
        return c

    yield _make

    for c in clients:
        c.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for, user):
    return client_for(user)


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------
@pytest.fixture
def make_publication(db, workspace, user):
    def _make(
        scheduled_at=None,
        title="Launch post",
        status="scheduled",
        platforms=(),
        campaigns=(),
        ws=None,
        owner=None,
        thumbnail=None,
    ):
        pub = Publication(
            workspace_id=(ws or workspace).id,
            user_id=(owner or user).id,
            title=title,
            slug=title.lower().replace(" ", "-"),
            status=status,
            scheduled_at=scheduled_at,
        )
        for p in platforms:
            pub.post_logs.append(SocialPostLog(platform=p, status="published"))
        for c in campaigns:
            pub.campaigns.append(c)
        if thumbnail:
            pub.media_files.append(
                MediaFile(user_id=(owner or user).id, file_name="cover.jpg", file_path=thumbnail, file_type="image")
            )
        db.add(pub)
        db.commit()
        return pub

    return _make


@pytest.fixture
def make_campaign(db, workspace):
    def _make(name="Summer", ws=None):
        c = Campaign(workspace_id=(ws or workspace).id, name=name, status="active")
        db.add(c)
        db.commit()
        return c

    return _make


@pytest.fixture
def make_scheduled_post(db, workspace, user):
    def _make(publication, scheduled_at, platform="instagram", ws=None):
        account = SocialAccount(
            user_id=user.id, workspace_id=(ws or workspace).id, platform=platform, account_name="@acme"
        )
        db.add(account)
        db.commit()
        post = ScheduledPost(
            publication_id=publication.id,
            social_account_id=account.id,
            scheduled_at=scheduled_at,
            status="pending",
        )
        db.add(post)
        db.commit()
        return post

    return _make


@pytest.fixture
def make_user_event(db, workspace, user):
    def _make(start_date, end_date=None, owner=None, is_public=False, title="Team sync", ws=None):
        event = UserCalendarEvent(
            user_id=(owner or user).id,
            workspace_id=(ws or workspace).id,
            title=title,
            start_date=start_date,
            end_date=end_date,
            is_public=is_public,
        )
        db.add(event)
        db.commit()
        return event

    return _make
