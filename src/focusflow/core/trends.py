"""Rolling completion trends."""

from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from .aggregation import round_half_up, window_days
from .tasks import UTC, Task, local_date


@dataclass(frozen=True)
class DailyCompletion:
    date: date
    completed: int

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "completed": self.completed}


@dataclass(frozen=True)
class TrendSummary:
    total_completed: int
    avg_daily: float
    best_day: DailyCompletion | None

    def to_dict(self) -> dict:
        return {
            "totalCompleted": self.total_completed,
            "avgDaily": self.avg_daily,
            "bestDay": self.best_day.to_dict() if self.best_day else None,
        }


def daily_completions(
    tasks: list[Task],
    now: datetime,
    days: int = 30,
    tz: tzinfo = UTC,
) -> list[DailyCompletion]:
    """Completion counts for the trailing window, oldest first."""
    window = window_days(days, now, tz)
    counts = {d: 0 for d in window}
    for t in tasks:
        if t.completed_at is None:
            continue
        d = local_date(t.completed_at, tz)
        if d in counts:
            counts[d] += 1
    return [DailyCompletion(date=d, completed=counts[d]) for d in window]


def summarize(daily: list[DailyCompletion]) -> TrendSummary:
    """
    Total, one-decimal daily average, and best day over a completion window.

    The earliest day wins ties, so an all-zero window reports its first day.
    An empty window has no best day.
    """
    total = sum(d.completed for d in daily)
    if not daily:
        return TrendSummary(total_completed=0, avg_daily=0.0, best_day=None)

    best = daily[0]
    for d in daily[1:]:
        if d.completed > best.completed:
            best = d

    return TrendSummary(
        total_completed=total,
        avg_daily=round_half_up(total / len(daily), 1),
        best_day=best,
    )


def completion_trend(
    tasks: list[Task],
    now: datetime,
    days: int = 30,
    tz: tzinfo = UTC,
) -> dict:
    daily = daily_completions(tasks, now, days, tz)
    return {
        "dailyData": [d.to_dict() for d in daily],
        "summary": summarize(daily).to_dict(),
    }
