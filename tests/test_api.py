"""HTTP tests through FastAPI's TestClient."""

from __future__ import annotations

import pytest

from tests.conftest import TODAY, days_ago


def _save(client, rating, day=None, **extra):
    body = {"mood_rating": rating, **extra}
    if day is not None:
        body["date"] = day.isoformat()
    return client.post("/mood/entries", json=body)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# ---- entries ----


def test_save_defaults_to_today(client):
    resp = _save(client, 7, notes="  walked the dog  ")
    assert resp.status_code == 201
    body = resp.json()
    assert body["date"] == TODAY.isoformat()
    assert body["notes"] == "walked the dog"
    assert body["mood_label"] == "Great"
    assert body["user_id"] == "user-1"


@pytest.mark.parametrize("rating", [0, 11])
def test_save_rejects_out_of_range(client, rating):
    assert _save(client, rating).status_code == 422
    assert client.get("/mood/entries").json() == []


def test_save_rejects_long_notes(client):
    assert _save(client, 5, notes="x" * 501).status_code == 422


def test_save_twice_same_day_keeps_one(client):
    _save(client, 3, TODAY)
    _save(client, 9, TODAY)
    entries = client.get("/mood/entries").json()
    assert len(entries) == 1
    assert entries[0]["mood_rating"] == 9


def test_get_entry_for_date(client):
    _save(client, 6, days_ago(2))
    resp = client.get(f"/mood/entries/{days_ago(2).isoformat()}")
    assert resp.status_code == 200
    assert resp.json()["mood_rating"] == 6
    assert client.get(f"/mood/entries/{days_ago(3).isoformat()}").status_code == 404


def test_today_entry(client):
    assert client.get("/mood/entries/today").json() is None
    _save(client, 4)
    assert client.get("/mood/entries/today").json()["mood_rating"] == 4


def test_update_entry(client):
    saved = _save(client, 5, TODAY, notes="ok", exercised=False).json()
    resp = client.patch(f"/mood/entries/{saved['id']}", json={"exercised": True})
    assert resp.status_code == 200
    body = resp.json()
    assert body["exercised"] is True
    assert body["mood_rating"] == 5
    assert body["notes"] == "ok"
    assert body["created_at"] == saved["created_at"]


def test_update_missing_entry_404(client):
    assert client.patch("/mood/entries/mood_0_nothing", json={"mood_rating": 3}).status_code == 404


def test_update_rejects_bad_rating(client):
    saved = _save(client, 5).json()
    assert client.patch(f"/mood/entries/{saved['id']}", json={"mood_rating": 0}).status_code == 422


@pytest.mark.parametrize("body", [{"exercised": None}, {"mood_rating": None}])
def test_update_rejects_explicit_null(client, body):
    saved = _save(client, 5, exercised=True).json()
    resp = client.patch(f"/mood/entries/{saved['id']}", json=body)
    assert resp.status_code == 422
    entry = client.get(f"/mood/entries/{saved['date']}").json()
    assert entry["exercised"] is True
    assert entry["mood_rating"] == 5


def test_update_null_notes_clears_them(client):
    saved = _save(client, 5, notes="tired").json()
    resp = client.patch(f"/mood/entries/{saved['id']}", json={"notes": None})
    assert resp.status_code == 200
    assert resp.json()["notes"] is None


def test_update_other_users_entry_404(client):
    saved = _save(client, 5).json()
    resp = client.patch(
        f"/mood/entries/{saved['id']}",
        json={"mood_rating": 1},
        headers={"x-user-id": "someone-else"},
    )
    assert resp.status_code == 404


def test_entries_are_scoped_per_user(client):
    _save(client, 5)
    other = client.get("/mood/entries", headers={"x-user-id": "user-2"})
    assert other.json() == []


def test_recent_entries(client):
    for i in (4, 0, 2, 1, 3):
        _save(client, 5, days_ago(i))
    dates = [e["date"] for e in client.get("/mood/entries/recent", params={"limit": 3}).json()]
    assert dates == [days_ago(0).isoformat(), days_ago(1).isoformat(), days_ago(2).isoformat()]


def test_list_entries_range(client):
    for i in range(5):
        _save(client, i + 1, days_ago(i))
    resp = client.get("/mood/entries", params={"start": days_ago(3).isoformat(), "end": days_ago(2).isoformat()})
    assert [e["mood_rating"] for e in resp.json()] == [3, 4]


def test_list_entries_inverted_range(client):
    resp = client.get("/mood/entries", params={"start": TODAY.isoformat(), "end": days_ago(1).isoformat()})
    assert resp.status_code == 400


def test_calendar_month(client):
    _save(client, 8, TODAY)
    _save(client, 2, days_ago(30))  # May
    body = client.get("/mood/calendar").json()
    assert body["month"] == "2025-06"
    assert list(body["days"]) == [TODAY.isoformat()]

    may = client.get("/mood/calendar", params={"month": "2025-05"}).json()
    assert may["days"][days_ago(30).isoformat()]["mood_rating"] == 2


def test_calendar_bad_month(client):
    assert client.get("/mood/calendar", params={"month": "2025-13"}).status_code == 400
    assert client.get("/mood/calendar", params={"month": "June"}).status_code == 422


def test_missing_identity_401(client, monkeypatch):
    monkeypatch.delenv("MOCK_USER_ID", raising=False)
    resp = client.get("/mood/entries", headers={"x-user-id": ""})
    assert resp.status_code == 401


# ---- analytics ----


def test_analytics_summary(client):
    for i, rating in enumerate([8, 8, 8, 8, 8, 8, 9] + [5] * 7):
        _save(client, rating, days_ago(i))
    body = client.get("/analytics/summary").json()
    assert body["stats"]["trend"] == 3.1
    assert body["stats"]["total_entries"] == 14
    assert body["stats"]["streak_days"] == 14
    assert body["stats"]["highest"] == 9
    assert body["stats"]["lowest"] == 5
    assert [i["kind"] for i in body["insights"]] == ["improving", "consistent"]


def test_analytics_empty(client):
    assert client.get("/analytics/summary").json()["stats"]["total_entries"] == 0
    assert client.get("/analytics/daily").json() == []
    assert client.get("/analytics/weekly").json() == []
    assert client.get("/analytics/distribution").json() == []
    assert client.get("/analytics/streak").json() == {"streak_days": 0}


def test_analytics_streak_and_distribution(client):
    for n, rating in ((0, 5), (1, 5), (2, 8), (4, 8)):
        _save(client, rating, days_ago(n))
    assert client.get("/analytics/streak").json() == {"streak_days": 3}
    dist = client.get("/analytics/distribution").json()
    assert [(b["rating"], b["count"], b["percent"]) for b in dist] == [(5, 2, 50), (8, 2, 50)]


def test_analytics_daily_and_weekly(client):
    _save(client, 6, TODAY)
    _save(client, 2, days_ago(4))  # Saturday 2025-06-14
    daily = client.get("/analytics/daily").json()
    assert [(p["date"], p["mood"]) for p in daily] == [("2025-06-14", 2), ("2025-06-18", 6)]
    weekly = client.get("/analytics/weekly").json()
    assert [(p["week_start"], p["average_mood"]) for p in weekly] == [("2025-06-08", 2.0), ("2025-06-15", 6.0)]


def test_analytics_dashboard(client):
    for i in range(9):
        _save(client, 6, days_ago(i))
    board = client.get("/analytics/dashboard").json()
    assert board["today_entry"]["date"] == TODAY.isoformat()
    assert board["entry_count"] == 7
    assert board["streak_days"] == 9
    assert board["average_mood"] == 6.0
