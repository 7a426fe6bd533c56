from typing import List

from fastapi import APIRouter, Depends, Query

from .. import analytics
from ..deps import get_store, get_user_id, get_clock
from ..schemas import DailyPoint, WeeklyPoint, SummaryOut, StreakOut, DistributionBucket, DashboardOut
from ..store import EntryStore
from ..utils import Clock

router = APIRouter(prefix="/analytics", tags=["analytics"])

# the history and analytics pages work over this many recent entries
HISTORY_LIMIT = 100


def _history(store: EntryStore, user_id: str):
    return store.get_recent_entries(user_id, HISTORY_LIMIT)


@router.get("/daily", response_model=List[DailyPoint])
def daily(
    window_days: int = Query(30, ge=1, le=366),
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return analytics.daily_series(_history(store, user_id), clock.today(), window_days)


@router.get("/weekly", response_model=List[WeeklyPoint])
def weekly(
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
):
    """Average mood per week (weeks start on Sunday), last 8 weeks."""
    return analytics.weekly_series(_history(store, user_id))


@router.get("/summary", response_model=SummaryOut)
def summary(
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    stats = analytics.summary_stats(_history(store, user_id), clock.today())
    return SummaryOut(stats=stats, insights=analytics.insights(stats))


@router.get("/streak", response_model=StreakOut)
def streak(
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return StreakOut(streak_days=analytics.streak(_history(store, user_id), clock.today()))


@router.get("/distribution", response_model=List[DistributionBucket])
def distribution(
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
):
    return analytics.mood_distribution(_history(store, user_id))


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    user_id: str = Depends(get_user_id),
    store: EntryStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    today = clock.today()
    return analytics.dashboard(
        store.get_recent_entries(user_id, analytics.STREAK_LOOKBACK_DAYS),
        today,
        today_entry=store.get_entry_by_date(user_id, today),
    )
