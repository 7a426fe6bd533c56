from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
import datetime as dt

MOOD_LABELS = {
    1: "Terrible", 2: "Very Bad", 3: "Bad", 4: "Poor", 5: "Okay",
    6: "Good", 7: "Great", 8: "Excellent", 9: "Amazing", 10: "Perfect",
}

MOOD_EMOJIS = {
    1: "😢", 2: "😞", 3: "😕", 4: "😐", 5: "😊",
    6: "😄", 7: "😁", 8: "😍", 9: "🤩", 10: "🥳",
}

MIN_RATING = 1
MAX_RATING = 10
NOTES_MAX_LENGTH = 500


def _clean_notes(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ---------- Mood entries ----------
class MoodEntry(BaseModel):
    """Snapshot of a stored entry; callers never see live ORM rows."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    mood_rating: int
    notes: Optional[str] = None
    exercised: bool = False
    date: dt.date
    created_at: dt.datetime


class NewMoodEntry(BaseModel):
    """Everything save_entry needs; id and created_at are assigned by the store."""

    user_id: str
    mood_rating: int
    notes: Optional[str] = None
    exercised: bool = False
    date: dt.date

    clean_notes = field_validator("notes")(_clean_notes)


class MoodEntryCreate(BaseModel):
    mood_rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)
    exercised: bool = False
    date: Optional[dt.date] = None  # defaults to today (UTC)

    clean_notes = field_validator("notes")(_clean_notes)


class MoodEntryUpdate(BaseModel):
    mood_rating: Optional[int] = Field(default=None, ge=MIN_RATING, le=MAX_RATING)
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)
    exercised: Optional[bool] = None

    clean_notes = field_validator("notes")(_clean_notes)

    @field_validator("mood_rating", "exercised")
    @classmethod
    def not_null(cls, value):
        # omitted fields keep their default without validation; an explicit null lands here
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class MoodEntryOut(MoodEntry):
    mood_label: str

    @classmethod
    def from_entry(cls, entry: MoodEntry) -> "MoodEntryOut":
        return cls(**entry.model_dump(), mood_label=MOOD_LABELS.get(entry.mood_rating, ""))


class CalendarOut(BaseModel):
    month: str
    days: dict[str, MoodEntryOut]


# ---------- Analytics ----------
class DailyPoint(BaseModel):
    date: dt.date
    label: str
    mood: int


class WeeklyPoint(BaseModel):
    week_start: dt.date
    label: str
    average_mood: float


class SummaryStats(BaseModel):
    average: float = 0
    highest: int = 0
    lowest: int = 0
    trend: float = 0
    total_entries: int = 0
    streak_days: int = 0


class Insight(BaseModel):
    kind: str
    message: str


class SummaryOut(BaseModel):
    stats: SummaryStats
    insights: List[Insight]


class DistributionBucket(BaseModel):
    rating: int
    count: int
    percent: int
    label: str
    emoji: str


class StreakOut(BaseModel):
    streak_days: int


class DashboardOut(BaseModel):
    today_entry: Optional[MoodEntry] = None
    recent_entries: List[MoodEntry]
    streak_days: int
    average_mood: float
    entry_count: int
