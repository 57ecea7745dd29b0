"""
Pytest configuration and fixtures
"""
import os
import tempfile
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment variables before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("BACKEND_URL", "http://testserver")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")
os.environ["MEDIA_DIR"] = tempfile.mkdtemp(prefix="reel-media-")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["STORAGE_BACKEND"] = "local"

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base, build_engine, get_db
from core.lifecycle import Actor, Role
from main import app
from models.profile import Profile
from models.session import Session as SessionModel
from models.user import User
from schemas.project_schema import ProjectCreate
from crud import project_crud, version_crud


@pytest.fixture()
def test_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(test_engine):
    """Create a database session for each test"""
    TestingSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, future=True)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@dataclass
class Member:
    actor: Actor
    token: str

    @property
    def id(self):
        return self.actor.id

    @property
    def headers(self):
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture()
def make_member(db_session):
    """Create a user with a profile of ``role`` and a live bearer session."""

    def _make(role: Role, with_profile: bool = True) -> Member:
        user = User(email=f"{uuid.uuid4().hex[:10]}@example.com", name=role.value.title())
        db_session.add(user)
        db_session.flush()
        if with_profile:
            db_session.add(Profile(id=user.id, role=role))
        token = uuid.uuid4().hex
        db_session.add(
            SessionModel(
                user_id=user.id,
                token=token,
                expires_at=datetime.now(timezone.utc) + timedelta(days=1),
            )
        )
        db_session.commit()
        return Member(actor=Actor(id=user.id, role=role), token=token)

    return _make


@pytest.fixture()
def creator(make_member):
    return make_member(Role.CREATOR)


@pytest.fixture()
def editor(make_member):
    return make_member(Role.EDITOR)


@pytest.fixture()
def other_editor(make_member):
    return make_member(Role.EDITOR)


def _complete_payload(**overrides) -> ProjectCreate:
    fields = {
        "title": "Summer launch reel",
        "description": "Fast-paced teaser for the summer collection",
        "raw_footage_url": "https://cdn.example.com/raw/summer.mp4",
        "editing_instructions": "Cut to the beat, add captions, 30 seconds max",
        "reel_type": "instagram",
        "pricing_tier": "pro",
    }
    fields.update(overrides)
    return ProjectCreate(**fields)


@pytest.fixture()
def project_payload():
    """Factory for a draft payload that passes submission checks."""
    return _complete_payload


@pytest.fixture()
def draft(db_session, creator):
    return project_crud.create_project(db_session, creator.actor, _complete_payload())


@pytest.fixture()
def submitted(db_session, creator, draft):
    return project_crud.submit_project(db_session, draft.id, creator.actor)


@pytest.fixture()
def claimed(db_session, editor, submitted):
    return project_crud.claim_project(db_session, submitted.id, editor.actor)


@pytest.fixture()
def revised(db_session, editor, claimed):
    """A claimed project with one delivered version, awaiting review."""
    version_crud.append_version(db_session, claimed.id, editor.actor, "https://cdn.example.com/edits/v1.mp4")
    return project_crud.get_project(db_session, claimed.id)
