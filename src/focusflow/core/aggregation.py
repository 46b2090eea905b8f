"""Pure aggregation of tasks and sessions into histograms - no I/O dependencies."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from .errors import require_positive
from .tasks import UTC, Status, Task, TimerSession, focus_sessions, local_date, to_local


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values (2.5 -> 3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


@dataclass(frozen=True)
class DailyBucket:
    """Focus minutes and completions for one calendar day."""

    date: date
    focus_minutes: int = 0
    tasks_completed: int = 0

    def to_dict(self) -> dict:
        return {
            "day": self.date.strftime("%a"),
            "date": self.date.isoformat(),
            "focusMinutes": self.focus_minutes,
            "tasksCompleted": self.tasks_completed,
        }


@dataclass(frozen=True)
class ProductiveHour:
    hour: int
    minutes: int

    @property
    def label(self) -> str:
        return f"{self.hour}:00 - {self.hour + 1}:00"

    def to_dict(self) -> dict:
        return {"hour": self.hour, "label": self.label, "minutes": self.minutes}


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    in_progress: int
    pending: int
    overdue: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "inProgress": self.in_progress,
            "pending": self.pending,
            "overdue": self.overdue,
        }


@dataclass(frozen=True)
class TodayStats:
    focus_sessions: int
    focus_minutes: int
    tasks_completed: int

    def to_dict(self) -> dict:
        return {
            "focusSessions": self.focus_sessions,
            "focusMinutes": self.focus_minutes,
            "tasksCompleted": self.tasks_completed,
        }


def window_days(days: int, now: datetime, tz: tzinfo = UTC) -> list[date]:
    """The trailing `days` calendar days ending today, oldest first."""
    require_positive("days", days)
    today = local_date(now, tz)
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def daily_buckets(
    tasks: list[Task],
    sessions: list[TimerSession],
    days: int,
    now: datetime,
    tz: tzinfo = UTC,
) -> list[DailyBucket]:
    """
    One bucket per day of the trailing window, oldest first.

    Focus minutes sum focus-session durations by completion day; completions
    count tasks by the day of completedAt.
    """
    window = window_days(days, now, tz)
    minutes = {d: 0 for d in window}
    completed = {d: 0 for d in window}

    for s in focus_sessions(sessions):
        d = local_date(s.completed_at, tz)
        if d in minutes:
            minutes[d] += s.duration

    for t in tasks:
        if t.completed_at is None:
            continue
        d = local_date(t.completed_at, tz)
        if d in completed:
            completed[d] += 1

    return [DailyBucket(date=d, focus_minutes=minutes[d], tasks_completed=completed[d]) for d in window]


def category_time(tasks: list[Task]) -> dict[str, int]:
    """Sum of actual minutes per category, skipping tasks with no time logged."""
    totals: dict[str, int] = {}
    for t in tasks:
        if t.actual_time > 0:
            totals[t.category] = totals.get(t.category, 0) + t.actual_time
    return totals


def category_distribution(tasks: list[Task]) -> dict[str, int]:
    """Task count per category, in first-seen order."""
    counts: dict[str, int] = {}
    for t in tasks:
        counts[t.category] = counts.get(t.category, 0) + 1
    return counts


def hourly_distribution(sessions: list[TimerSession], tz: tzinfo = UTC) -> list[int]:
    """Minutes of every session type keyed by local hour of completion."""
    hours = [0] * 24
    for s in sessions:
        hours[to_local(s.completed_at, tz).hour] += s.duration
    return hours


def productive_hours(hourly: list[int], top: int = 3) -> list[ProductiveHour]:
    """Busiest hours by minutes, ties broken by the earlier hour."""
    ranked = sorted(enumerate(hourly), key=lambda item: (-item[1], item[0]))
    return [ProductiveHour(hour=h, minutes=m) for h, m in ranked[:top]]


def task_stats(tasks: list[Task], now: datetime) -> TaskStats:
    return TaskStats(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.status == Status.COMPLETED),
        in_progress=sum(1 for t in tasks if t.status == Status.IN_PROGRESS),
        pending=sum(1 for t in tasks if t.status == Status.PENDING),
        overdue=sum(1 for t in tasks if t.is_overdue(now)),
    )


def today_stats(
    tasks: list[Task],
    sessions: list[TimerSession],
    now: datetime,
    tz: tzinfo = UTC,
) -> TodayStats:
    today = local_date(now, tz)
    todays = sessions_on(focus_sessions(sessions), today, tz)
    return TodayStats(
        focus_sessions=len(todays),
        focus_minutes=sum(s.duration for s in todays),
        tasks_completed=sum(1 for t in tasks if t.completed_on(today, tz)),
    )


def sessions_on(sessions: list[TimerSession], day: date, tz: tzinfo = UTC) -> list[TimerSession]:
    return [s for s in sessions if local_date(s.completed_at, tz) == day]


def session_totals(sessions: list[TimerSession]) -> dict:
    return {"sessions": len(sessions), "minutes": sum(s.duration for s in sessions)}


def time_distribution(tasks: list[Task], sessions: list[TimerSession], tz: tzinfo = UTC) -> dict:
    """Category totals, the 24-hour histogram, and the top three hours."""
    hourly = hourly_distribution(sessions, tz)
    return {
        "byCategory": [
            {"category": category, "minutes": minutes, "hours": round_half_up(minutes / 60, 1)}
            for category, minutes in category_time(tasks).items()
        ],
        "hourlyDistribution": [{"hour": h, "minutes": m} for h, m in enumerate(hourly)],
        "productiveHours": [p.to_dict() for p in productive_hours(hourly)],
    }
