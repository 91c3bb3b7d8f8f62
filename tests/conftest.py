import os

# Keep the module-level engine off Postgres while tests import the app
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.config import get_db, init_db
from database.models import Base
from core.lifecycle import LifecycleEngine, TransitionPolicy
from schemas.seeding import Influencer
from auth.roles import OperatorRole
from auth.dependencies import create_access_token


NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def engine(clock):
    return LifecycleEngine(clock=clock)


@pytest.fixture
def permissive_engine(clock):
    return LifecycleEngine(policy=TransitionPolicy.PERMISSIVE, clock=clock)


def make_influencer(**overrides) -> Influencer:
    data = {"handle": "@glowwithmia", "name": "Mia Santos", "email": "mia@example.com", "country": "US"}
    data.update(overrides)
    return Influencer(**data)


@pytest.fixture
def influencer():
    return make_influencer()


# ============================================================================
# DATABASE
# ============================================================================

@pytest.fixture
def db_engine():
    db_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=db_engine)
    yield db_engine
    Base.metadata.drop_all(bind=db_engine)


@pytest.fixture
def db(db_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# API
# ============================================================================

@pytest.fixture
def client(db_engine):
    from server import app

    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(role: OperatorRole = OperatorRole.MANAGER, email: str = "ops@agency.test") -> dict:
    token = create_access_token(email, name="Ops", role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def manager_headers():
    return auth_headers(OperatorRole.MANAGER)


@pytest.fixture
def admin_headers():
    return auth_headers(OperatorRole.ADMIN, email="admin@agency.test")


@pytest.fixture
def viewer_headers():
    return auth_headers(OperatorRole.VIEWER, email="viewer@agency.test")
