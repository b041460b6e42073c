import os

# Must be in place before isopod_orders builds its settings and engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ACCESS_KEY"] = "test-access-key"
os.environ["SESSION_SECRET"] = "test-session-secret"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from isopod_orders.application.service import OrderService
from isopod_orders.domain.models import Base
from isopod_orders.infrastructure import db as db_module
from isopod_orders.main import app

ACCESS_KEY = "test-access-key"


class StepClock:
    """Returns a time one minute later on every call."""

    def __init__(self, start: datetime):
        self.current = start - timedelta(minutes=1)

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=1)
        return self.current


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(db_module.engine)
    Base.metadata.create_all(db_module.engine)
    yield


@pytest.fixture
def session():
    db = db_module.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clock():
    return StepClock(datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def service(session, clock):
    return OrderService(session, clock=clock)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {ACCESS_KEY}"}


@pytest.fixture
def make_payload():
    def _make(**overrides):
        payload = {
            "customer_name": "Asha Rao",
            "phone": "987-654-3210",
            "email": "asha@example.com",
            "social_media_handle": "@asha.terrariums",
            "address": "12 Fern Lane, Pune 411001",
            "items": [{"name": "Isopod Culture", "quantity": 3, "price": 250}],
            "courier_service": "DTDC",
            "courier_receipt": "",
            "sent_date": "",
            "shipping_charges": 50,
            "status": "pending",
            "notes": "",
        }
        payload.update(overrides)
        return payload
    return _make
