from __future__ import annotations

import os

# Must be set before anything under app/ reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import get_db, get_session_factory
from app.main import app
from app.models import Appointment, AppointmentItem, Base, BusinessHours, Salon, SalonClosure

WEEKDAY_HOURS = {day: ("09:00", "17:00") for day in range(7)}


@pytest.fixture
def engine():
    # One shared in-memory database visible from every thread
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(db, session_factory):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_salon(db):
    def _make(
        slug: str = "glow",
        *,
        time_zone: str = "UTC",
        capacity: int | None = 1,
        hours: dict | None = None,
        closed_days: tuple[int, ...] = (),
        granularity: int | None = None,
        is_active: bool = True,
    ) -> Salon:
        salon = Salon(
            name=slug.replace("-", " ").title(),
            slug=slug,
            time_zone=time_zone,
            capacity=capacity,
            slot_granularity_minutes=granularity,
            is_active=is_active,
        )
        db.add(salon)
        db.flush()

        for day, (open_time, close_time) in (WEEKDAY_HOURS if hours is None else hours).items():
            db.add(BusinessHours(
                salon_id=salon.id,
                day_of_week=day,
                open_time=open_time,
                close_time=close_time,
                is_closed=day in closed_days,
            ))
        db.commit()
        return salon

    return _make


@pytest.fixture
def add_appointment(db):
    def _add(salon: Salon, starts_at: datetime, ends_at: datetime, status: str = "booked") -> Appointment:
        appointment = Appointment(salon_id=salon.id, starts_at=starts_at, ends_at=ends_at, status=status)
        appointment.items.append(AppointmentItem(
            service_name="Cut",
            price_cents=4500,
            duration_minutes=int((ends_at - starts_at).total_seconds() // 60),
            sort_order=0,
        ))
        db.add(appointment)
        db.commit()
        return appointment

    return _add


@pytest.fixture
def add_closure(db):
    def _add(salon: Salon, start_date, end_date, reason: str | None = None) -> SalonClosure:
        closure = SalonClosure(salon_id=salon.id, start_date=start_date, end_date=end_date, reason=reason)
        db.add(closure)
        db.commit()
        return closure

    return _add
