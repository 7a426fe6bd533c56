"""
Derived mood statistics.

Every function here is pure: it takes a list of entries (and "today" where
the result depends on the calendar) and returns view models. Empty input
gives neutral results. Dates are UTC calendar dates and weeks start on
Sunday (see utils.WEEK_START).
"""
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Iterable, List, Optional

from .schemas import (
    MoodEntry, DailyPoint, WeeklyPoint, SummaryStats, DistributionBucket,
    DashboardOut, Insight, MOOD_LABELS, MOOD_EMOJIS,
)
from .utils import start_of_week, short_label, round_half_up

STREAK_LOOKBACK_DAYS = 30
WEEKLY_BUCKETS = 8
TREND_WINDOW = 7


def _mean(ratings: List[int]) -> float:
    return sum(ratings) / len(ratings) if ratings else 0.0


def newest_first(entries: Iterable[MoodEntry]) -> List[MoodEntry]:
    return sorted(entries, key=lambda e: e.date, reverse=True)


def daily_series(entries: Iterable[MoodEntry], today: date, window_days: int = 30) -> List[DailyPoint]:
    by_date = {e.date: e for e in entries}
    points = []
    for offset in range(window_days - 1, -1, -1):
        day = today - timedelta(days=offset)
        entry = by_date.get(day)
        if entry is None:
            continue
        points.append(DailyPoint(date=day, label=short_label(day), mood=entry.mood_rating))
    return points


def weekly_series(entries: Iterable[MoodEntry]) -> List[WeeklyPoint]:
    weeks = defaultdict(list)
    for e in entries:
        weeks[start_of_week(e.date)].append(e.mood_rating)

    points = [
        WeeklyPoint(week_start=start, label=short_label(start), average_mood=round_half_up(_mean(ratings)))
        for start, ratings in sorted(weeks.items())
    ]
    return points[-WEEKLY_BUCKETS:]


def streak(entries: Iterable[MoodEntry], today: date) -> int:
    """Consecutive days with an entry, counting back from today."""
    days = {e.date for e in entries}
    count = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        if today - timedelta(days=offset) not in days:
            break
        count += 1
    return count


def trend(entries: Iterable[MoodEntry]) -> float:
    """Mean of the 7 most recent entries minus the mean of the 7 before them."""
    ratings = [e.mood_rating for e in newest_first(entries)]
    recent = ratings[:TREND_WINDOW]
    previous = ratings[TREND_WINDOW:TREND_WINDOW * 2]
    return round_half_up(_mean(recent) - _mean(previous))


def summary_stats(entries: Iterable[MoodEntry], today: date) -> SummaryStats:
    entries = newest_first(entries)
    if not entries:
        return SummaryStats()

    ratings = [e.mood_rating for e in entries]
    return SummaryStats(
        average=round_half_up(_mean(ratings)),
        highest=max(ratings),
        lowest=min(ratings),
        trend=trend(entries),
        total_entries=len(entries),
        streak_days=streak(entries, today),
    )


def mood_distribution(entries: Iterable[MoodEntry]) -> List[DistributionBucket]:
    counts = Counter(e.mood_rating for e in entries)
    total = sum(counts.values())
    return [
        DistributionBucket(
            rating=rating,
            count=counts[rating],
            percent=int(round_half_up(counts[rating] / total * 100, places=0)),
            label=MOOD_LABELS[rating],
            emoji=MOOD_EMOJIS[rating],
        )
        for rating in sorted(counts)
        if counts[rating] > 0
    ]


def dashboard(recent_entries: Iterable[MoodEntry], today: date, today_entry: Optional[MoodEntry] = None) -> DashboardOut:
    """Landing page view: today's entry, the 7 newest entries and their average, current streak."""
    ordered = newest_first(recent_entries)
    recent = ordered[:TREND_WINDOW]
    if today_entry is None:
        today_entry = next((e for e in recent if e.date == today), None)
    return DashboardOut(
        today_entry=today_entry,
        recent_entries=recent,
        streak_days=streak(ordered, today),
        average_mood=round_half_up(_mean([e.mood_rating for e in recent])),
        entry_count=len(recent),
    )


def insights(stats: SummaryStats) -> List[Insight]:
    out = []
    if stats.average >= 8:
        out.append(Insight(
            kind="great_average",
            message=f"Your average mood is {stats.average}/10. You're doing great! Keep up whatever you're doing.",
        ))
    if stats.trend > 1:
        out.append(Insight(
            kind="improving",
            message=f"Your mood has improved by {stats.trend} points over the last week. Great progress!",
        ))
    if stats.trend < -1:
        out.append(Insight(
            kind="declining",
            message=(
                f"Your mood has declined by {abs(stats.trend)} points recently. "
                "Consider self-care activities or talking to someone."
            ),
        ))
    if stats.streak_days >= 7:
        out.append(Insight(
            kind="consistent",
            message=(
                f"You've been tracking for {stats.streak_days} days straight. "
                "Consistency is key to understanding your patterns!"
            ),
        ))
    if stats.total_entries > 0 and stats.average < 5:
        out.append(Insight(
            kind="self_care",
            message=(
                f"Your average mood is {stats.average}/10. Remember to prioritize self-care "
                "and consider reaching out for support if needed."
            ),
        ))
    return out
