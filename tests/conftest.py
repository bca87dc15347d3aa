# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database per test, seeded rows, and a
TestClient wired to that database.
Environment is pinned before anything from parkwatch is imported.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_KEY"] = ""
os.environ["LOG_LEVEL"] = "INFO"

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from parkwatch.database import create_tables, get_db
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.staff import Staff
from parkwatch.models.user import User
from parkwatch.models.vehicle import Vehicle
from parkwatch.services.auth_service import hash_password
from parkwatch.services.session_store import InMemorySessionStore, get_session_store

PASSWORD = "correct-horse"
T0 = datetime(2026, 3, 6, 9, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


def make_lot(db, name="North Garage", total_spaces=10):
    lot = ParkingLot(lot_name=name, address="1 Main St", total_spaces=total_spaces)
    db.add(lot)
    db.commit()
    return lot


def make_user(db, phone="5550001", user_type="resident", name="Ana Resident", role="user"):
    user = User(
        name=name,
        phone=phone,
        password_hash=hash_password(PASSWORD),
        role=role,
        user_type=user_type,
        unit_number="12B" if user_type == "resident" else None,
        host_information="Visiting Unit 12B" if user_type == "visitor" else None,
        created_at=T0,
    )
    db.add(user)
    db.commit()
    return user


def make_vehicle(db, user, lot, province="ON", plate="ABC123", parking_until=None):
    vehicle = Vehicle(
        user_id=user.id,
        province=province,
        license_plate=plate,
        current_lot_id=lot.id if lot else None,
        parking_until=parking_until if parking_until is not None else T0 + timedelta(hours=4),
    )
    db.add(vehicle)
    db.commit()
    return vehicle


@pytest.fixture
def lot(db):
    return make_lot(db)


@pytest.fixture
def resident(db):
    return make_user(db)


@pytest.fixture
def visitor(db):
    return make_user(db, phone="5550002", user_type="visitor", name="Ben Visitor")


@pytest.fixture
def staff(db, lot):
    user = make_user(db, phone="5550009", name="Sam Staff", role="admin")
    member = Staff(staff_id="S-100", user_id=user.id, lot_id=lot.id)
    db.add(member)
    db.commit()
    return member


@pytest.fixture
def client(engine):
    from fastapi.testclient import TestClient
    from parkwatch.main import app

    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    store = InMemorySessionStore(ttl_minutes=30)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
