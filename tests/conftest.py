"""Shared fixtures: in-memory SQLite database, fixed clock, store and HTTP client."""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from dailymood.db import SessionLocal, engine, init_db
from dailymood.deps import get_clock
from dailymood.main import app
from dailymood.models import Base
from dailymood.schemas import MoodEntry, NewMoodEntry
from dailymood.store import EntryStore
from dailymood.utils import FixedClock

# a Wednesday
TODAY = date(2025, 6, 18)


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture()
def db_session():
    init_db(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def store(db_session, clock) -> EntryStore:
    return EntryStore(db_session, clock)


@pytest.fixture()
def client(db_session, clock):
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app, headers={"x-user-id": "user-1"}) as c:
        yield c
    app.dependency_overrides.clear()


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def new_entry(rating: int, day: date, user_id: str = "user-1", notes: str | None = None, exercised: bool = False) -> NewMoodEntry:
    return NewMoodEntry(user_id=user_id, mood_rating=rating, notes=notes, exercised=exercised, date=day)


def make_entry(rating: int, day: date, user_id: str = "user-1") -> MoodEntry:
    """Entry snapshot for the pure analytics functions; no database involved."""
    return MoodEntry(
        id=f"mood_test_{day.isoformat()}",
        user_id=user_id,
        mood_rating=rating,
        date=day,
        created_at=FixedClock(day).now(),
    )
