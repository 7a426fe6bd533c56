import logging
import secrets
import string
from datetime import date, timezone

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .schemas import MoodEntry, NewMoodEntry, MIN_RATING, MAX_RATING
from .utils import Clock

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("mood_rating", "notes", "exercised")

_ID_ALPHABET = string.ascii_lowercase + string.digits


class InvalidEntryError(ValueError):
    pass


class InvalidRatingError(InvalidEntryError):
    pass


class StorageWriteError(RuntimeError):
    pass


def validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRatingError(f"mood_rating must be an integer, got {rating!r}")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRatingError(f"mood_rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return rating


def validate_exercised(exercised) -> bool:
    if not isinstance(exercised, bool):
        raise InvalidEntryError(f"exercised must be true or false, got {exercised!r}")
    return exercised


def _snapshot(row: models.MoodEntry) -> MoodEntry:
    created_at = row.created_at
    # sqlite hands timestamps back without tzinfo; they were written as UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return MoodEntry(
        id=row.id,
        user_id=row.user_id,
        mood_rating=row.mood_rating,
        notes=row.notes,
        exercised=row.exercised,
        date=row.entry_date,
        created_at=created_at,
    )


class EntryStore:
    """
    Mood entries for one database, scoped per user.

    Reads never raise: a failing query is logged and treated as no data.
    Writes roll back and raise StorageWriteError so the caller can report it.
    """

    def __init__(self, db: Session, clock: Clock | None = None):
        self.db = db
        self.clock = clock or Clock()

    def new_id(self) -> str:
        millis = int(self.clock.now().timestamp() * 1000)
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
        return f"mood_{millis}_{suffix}"

    # ---------- reads ----------

    def _read(self, stmt) -> list[MoodEntry]:
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError:
            logger.exception("Error reading mood entries")
            self.db.rollback()
            return []
        return [_snapshot(r) for r in rows]

    def get_entries(self, user_id: str) -> list[MoodEntry]:
        q = (
            select(models.MoodEntry)
            .where(models.MoodEntry.user_id == user_id)
            .order_by(models.MoodEntry.seq)
        )
        return self._read(q)

    def get_entry_by_date(self, user_id: str, day: date) -> MoodEntry | None:
        return next((e for e in self.get_entries(user_id) if e.date == day), None)

    def get_recent_entries(self, user_id: str, limit: int = 7) -> list[MoodEntry]:
        entries = sorted(self.get_entries(user_id), key=lambda e: e.date, reverse=True)
        return entries[:max(limit, 0)]

    def get_entries_between(self, user_id: str, start: date, end: date) -> list[MoodEntry]:
        """Entries with start <= date <= end, newest first."""
        if end < start:
            raise ValueError("end must be on or after start")
        q = (
            select(models.MoodEntry)
            .where(
                models.MoodEntry.user_id == user_id,
                models.MoodEntry.entry_date >= start,
                models.MoodEntry.entry_date <= end,
            )
            .order_by(models.MoodEntry.entry_date.desc())
        )
        return self._read(q)

    # ---------- writes ----------

    def save_entry(self, entry: NewMoodEntry) -> MoodEntry:
        """Insert an entry, replacing any existing one for the same user and date."""
        validate_rating(entry.mood_rating)

        row = models.MoodEntry(
            id=self.new_id(),
            user_id=entry.user_id,
            mood_rating=entry.mood_rating,
            notes=entry.notes,
            exercised=entry.exercised,
            entry_date=entry.date,
            created_at=self.clock.now(),
        )
        try:
            self.db.execute(
                delete(models.MoodEntry).where(
                    models.MoodEntry.user_id == entry.user_id,
                    models.MoodEntry.entry_date == entry.date,
                )
            )
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving mood entry for user {entry.user_id} on {entry.date}: {e}")
            raise StorageWriteError("Could not save mood entry") from e
        return _snapshot(row)

    def update_entry(self, entry_id: str, changes: dict, user_id: str | None = None) -> MoodEntry | None:
        """
        Merge `changes` (mood_rating / notes / exercised) into an entry.

        Returns None when the id is unknown or, if `user_id` is given, owned by someone else.
        """
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        if "mood_rating" in changes:
            validate_rating(changes["mood_rating"])
        if "exercised" in changes:
            validate_exercised(changes["exercised"])

        try:
            row = self.db.execute(
                select(models.MoodEntry).where(models.MoodEntry.id == entry_id)
            ).scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception(f"Error reading mood entry {entry_id}")
            self.db.rollback()
            return None
        if row is None or (user_id is not None and row.user_id != user_id):
            return None

        for field, value in changes.items():
            setattr(row, field, value)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating mood entry {entry_id}: {e}")
            raise StorageWriteError("Could not update mood entry") from e
        return _snapshot(row)
