import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.api import models  # noqa: F401
from src.api.db import get_db
from src.api.main import app
from src.api.models.base import Base
from src.api.services.auth_service import ensure_admin

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"
PASSWORD = "P@ssw0rd123"


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def signup(client, email, name="Test User"):
    resp = client.post("/auth/signup", json={"name": name, "email": email, "password": PASSWORD})
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client, email, password=PASSWORD):
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


@pytest.fixture
def admin_token(client, session_factory):
    with session_factory() as db:
        ensure_admin(db, email=ADMIN_EMAIL, password=ADMIN_PASSWORD)
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def make_rider(client):
    def _make(email="rider@example.com", name="Riya Rider"):
        user = signup(client, email, name)
        return user, login(client, email)

    return _make


@pytest.fixture
def make_driver(client, admin_token):
    def _make(email="driver@example.com", name="Dev Driver", vehicle_number="CG04AB1234"):
        user = signup(client, email, name)
        resp = client.post(
            f"/auth/onboardDriver/{user['id']}",
            json={"license_number": "DL-12345", "vehicle_number": vehicle_number, "vehicle_type": "Sedan"},
            headers=bearer(admin_token),
        )
        assert resp.status_code == 201, resp.text
        return user, login(client, email)

    return _make


@pytest.fixture
def rider(make_rider):
    return make_rider()


@pytest.fixture
def driver(make_driver):
    return make_driver()


def request_ride(client, rider_token, pickup="NIT Raipur", destination="Railway Station"):
    resp = client.post(
        "/rider/requestRide",
        json={"pickup_location": pickup, "destination": destination, "vehicle_type": "Sedan"},
        headers=bearer(rider_token),
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def accepted_ride(client, rider_token, driver_token):
    ride_request = request_ride(client, rider_token)
    resp = client.post(f"/driver/acceptRide/{ride_request['id']}", headers=bearer(driver_token))
    assert resp.status_code == 200, resp.text
    return resp.json()


def completed_ride(client, rider_token, driver_token):
    ride = accepted_ride(client, rider_token, driver_token)
    assert client.post(f"/driver/startRide/{ride['id']}", headers=bearer(driver_token)).status_code == 200
    resp = client.post(f"/driver/endRide/{ride['id']}", headers=bearer(driver_token))
    assert resp.status_code == 200, resp.text
    return resp.json()
