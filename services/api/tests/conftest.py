import os

# Must be set before the app (and its settings singleton) is imported
os.environ["AI_MODE"] = "mock"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pantrypal.main import app
from pantrypal.db import Base, get_db
from pantrypal.models import UserProfile
from pantrypal.agents.mocks import mock_plan_day, mock_recommendations_json

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool  # in-memory DB shared across sessions
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Test client with DB override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def profile(db_session):
    p = UserProfile(pantry_text="salt\nolive oil\nrice", utensils_text="pan\npot")
    db_session.add(p)
    db_session.commit()
    db_session.refresh(p)
    return p


@pytest.fixture
def options(client, profile):
    """Three stored options from one mock recommendation set."""
    session = client.post("/api/sessions", json={"extra_ingredients_text": "chicken"}).json()
    rec_set = client.post("/api/recommendations", json={"session_id": session["id"]}).json()
    return rec_set["options"]


def fake_ai(*responses):
    """Stand-in for the AI client returning each response text in turn."""
    fake = MagicMock()
    fake.mode = "gemini"
    fake.complete.side_effect = list(responses)
    return fake


# --- Canned provider payloads ---

def valid_recommendations_text() -> str:
    return mock_recommendations_json()


def valid_plan_text(days: int) -> str:
    return json.dumps({
        "days": [mock_plan_day(i + 1) for i in range(days)],
        "reuseStrategy": {"sharedIngredients": ["spinach"], "leftoversStrategy": "Double the rice."},
    })


def valid_day_text(title: str = "Replacement Curry") -> str:
    return json.dumps(mock_plan_day(1, title=title))
