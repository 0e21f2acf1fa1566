import os

# Settings are read at import time, so they must be in place before bloodbridge is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FIREBASE_PROJECT_ID"] = "bloodbridge-test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["DAILY_SLOTS"] = "09:00,10:00,11:00"
os.environ["LOCATION_SCHEMA"] = "district"
os.environ["APPOINTMENT_BOOKING_REQUIRED"] = "true"
os.environ.pop("REDIS_URL", None)

import pytest  # noqa: E402
from fastapi import Request  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bloodbridge.auth import get_token_claims  # noqa: E402
from bloodbridge.database import Base, get_db  # noqa: E402
from bloodbridge.domain.feed.subscription import FeedHub, get_feed_hub  # noqa: E402
from bloodbridge.main import app  # noqa: E402

TEST_SLOTS = ["09:00", "10:00", "11:00"]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def hub():
    return FeedHub(limit=50)


@pytest.fixture
def client(session_factory, hub):
    """
    TestClient with the store, feed hub and Firebase verification overridden.
    The signed-in user is taken from the X-Test-User header (default "user-1").
    """

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    async def override_token_claims(request: Request) -> dict:
        uid = request.headers.get("X-Test-User", "user-1")
        return {"sub": uid, "phone_number": "+919848022338", "name": None}

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_claims] = override_token_claims
    app.dependency_overrides[get_feed_hub] = lambda: hub
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def receiver_form():
    return {
        "type": "receiver",
        "name": "Ravi Kumar",
        "gender": "Male",
        "bloodGroup": "O+",
        "phone": "9990001111",
        "location": {"state": "Telangana", "district": "Hyderabad", "hospital": "NIMS"},
        "urgency": "urgent",
        "purpose": "Surgery",
        "patientDetails": "Age 54, admitted in ward 3",
    }


@pytest.fixture
def donor_form():
    return {
        "type": "donor",
        "name": "Sita Devi",
        "gender": "Female",
        "bloodGroup": "B+",
        "phone": "+91 98480 22338",
        "location": {"state": "Telangana", "district": "Rangareddy"},
        "availableToDonate": True,
        "appointmentDate": "2030-05-01",
        "appointmentTime": "10:00",
    }
