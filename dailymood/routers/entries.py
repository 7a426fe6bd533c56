"""
Mood Entry API (one entry per day, per user)

- POST /entries
  Save the mood entry for a date (defaults to today, UTC). Replaces any existing entry for that date.

- PATCH /entries/{entry_id}
  Update rating / notes / exercised on an existing entry. Returns 404 if missing.

- GET /entries/{mood_date}
  Fetch the mood entry for a single date. Returns 404 if none.

- GET /entries/today
  Today's entry, or null.

- GET /entries/recent?limit=7
  Most recent entries, newest first.

- GET /entries?start=YYYY-MM-DD&end=YYYY-MM-DD
  All entries (insertion order), or an inclusive date range (newest first).

- GET /calendar?month=YYYY-MM
  Entries of one month keyed by date, for the calendar view.
"""
from calendar import monthrange
from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..deps import get_store, get_user_id, get_clock
from ..schemas import MoodEntryCreate, MoodEntryUpdate, MoodEntryOut, NewMoodEntry, CalendarOut
from ..store import EntryStore, InvalidEntryError, StorageWriteError
from ..utils import Clock

router = APIRouter(
    prefix="/mood",
    tags=["mood"],
    responses={404: {"description": "Not found"}},
)

logger = logging.getLogger(__name__)


def _out(entries) -> List[MoodEntryOut]:
    return [MoodEntryOut.from_entry(e) for e in entries]


# ---------- LIST ----------

@router.get(
    "/entries",
    response_model=List[MoodEntryOut],
    summary="List mood entries, optionally for an inclusive date range",
)
def list_entries(
    start: Optional[date] = Query(None, description="Inclusive start date (YYYY-MM-DD)."),
    end: Optional[date] = Query(None, description="Inclusive end date (YYYY-MM-DD)."),
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
):
    if start is None and end is None:
        return _out(store.get_entries(user_id))

    start = start or date.min
    end = end or date.max
    if end < start:
        raise HTTPException(status_code=400, detail="`end` must be on or after `start`.")
    return _out(store.get_entries_between(user_id, start, end))


@router.get(
    "/entries/recent",
    response_model=List[MoodEntryOut],
    summary="Most recent mood entries, newest first",
)
def recent_entries(
    limit: int = Query(7, ge=1, le=366),
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
):
    return _out(store.get_recent_entries(user_id, limit))


@router.get(
    "/entries/today",
    response_model=Optional[MoodEntryOut],
    summary="Today's mood entry, or null",
)
def today_entry(
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    entry = store.get_entry_by_date(user_id, clock.today())
    return MoodEntryOut.from_entry(entry) if entry else None


@router.get(
    "/entries/{mood_date}",
    response_model=MoodEntryOut,
    summary="Get the mood entry for a specific date",
)
def get_entry_for_date(
    mood_date: date = Path(..., description="The calendar date (YYYY-MM-DD) to fetch."),
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
):
    """Return the mood entry for `mood_date` or **404** if it doesn't exist."""
    entry = store.get_entry_by_date(user_id, mood_date)
    if not entry:
        raise HTTPException(status_code=404, detail="No mood entry for this date.")
    return MoodEntryOut.from_entry(entry)


# ---------- SAVE ----------

@router.post(
    "/entries",
    response_model=MoodEntryOut,
    status_code=201,
    summary="Save the mood entry for a date (one per day)",
)
def save_entry(
    payload: MoodEntryCreate,
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """
    Save a mood entry for `date` (today when omitted).

    - An existing entry for the same date is replaced.
    - Returns **503** if the entry could not be stored.
    """
    new_entry = NewMoodEntry(
        user_id=user_id,
        mood_rating=payload.mood_rating,
        notes=payload.notes,
        exercised=payload.exercised,
        date=payload.date or clock.today(),
    )
    try:
        entry = store.save_entry(new_entry)
    except InvalidEntryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageWriteError:
        raise HTTPException(status_code=503, detail="Could not save mood entry.")

    logger.info(f"Saved mood entry {entry.id} for user {user_id} on {entry.date}")
    return MoodEntryOut.from_entry(entry)


# ---------- UPDATE ----------

@router.patch(
    "/entries/{entry_id}",
    response_model=MoodEntryOut,
    summary="Update an existing mood entry",
)
def update_entry(
    entry_id: str = Path(..., description="Mood entry id"),
    payload: MoodEntryUpdate = ...,
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
):
    """Only the fields present in the body are changed; returns **404** if the entry doesn't exist."""
    try:
        entry = store.update_entry(entry_id, payload.model_dump(exclude_unset=True), user_id=user_id)
    except InvalidEntryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageWriteError:
        raise HTTPException(status_code=503, detail="Could not save mood entry.")

    if entry is None:
        raise HTTPException(status_code=404, detail="Mood entry not found.")
    return MoodEntryOut.from_entry(entry)


# ---------- CALENDAR ----------

@router.get(
    "/calendar",
    response_model=CalendarOut,
    summary="Entries for one month keyed by date",
)
def month_calendar(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM (defaults to the current month)."),
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    if month:
        year, mon = (int(p) for p in month.split("-"))
        if year < 1 or not 1 <= mon <= 12:
            raise HTTPException(status_code=400, detail="Invalid month.")
    else:
        today = clock.today()
        year, mon = today.year, today.month

    start = date(year, mon, 1)
    end = date(year, mon, monthrange(year, mon)[1])
    entries = store.get_entries_between(user_id, start, end)
    return CalendarOut(
        month=f"{year:04d}-{mon:02d}",
        days={e.date.isoformat(): MoodEntryOut.from_entry(e) for e in entries},
    )
