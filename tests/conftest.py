# tests/conftest.py

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from taskboard import ids
from taskboard.database import create_db_engine, get_db
from taskboard.main import app
from taskboard.models import Project, User, Workspace
from taskboard.routers.auth import get_current_owner_id
from taskboard.services.tasks import TasksService


@pytest.fixture()
def engine():
    """Fresh in-memory database per test, foreign keys enforced."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def seed_owner(db, email: str) -> SimpleNamespace:
    """Insert a user with one workspace and one project; return their string ids."""
    user_key, workspace_key, project_key = ids.generate(), ids.generate(), ids.generate()
    db.add(User(id=user_key, email=email, hashed_password="not-used"))
    db.flush()
    db.add(Workspace(id=workspace_key, name=f"{email} workspace", owner_id=user_key))
    db.flush()
    db.add(Project(id=project_key, name=f"{email} project", workspace_id=workspace_key))
    db.commit()
    return SimpleNamespace(
        id=ids.decode(user_key),
        workspace_id=ids.decode(workspace_key),
        project_id=ids.decode(project_key),
    )


@pytest.fixture()
def owner(db) -> SimpleNamespace:
    return seed_owner(db, "alice@example.com")


@pytest.fixture()
def other_owner(db) -> SimpleNamespace:
    return seed_owner(db, "bob@example.com")


@pytest.fixture()
def service(db) -> TasksService:
    return TasksService(db)


@pytest.fixture()
def client(session_factory, owner):
    """TestClient signed in as ``owner``.

    Switch callers with ``client.sign_in_as(other)``.
    """

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_owner_id] = lambda: owner.id

    test_client = TestClient(app)

    def sign_in_as(who):
        app.dependency_overrides[get_current_owner_id] = lambda: who.id

    def sign_out():
        app.dependency_overrides.pop(get_current_owner_id, None)

    test_client.sign_in_as = sign_in_as
    test_client.sign_out = sign_out
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()
