"""Day-over-day focus streaks."""

from datetime import date, datetime, timedelta, tzinfo

from .tasks import UTC, TimerSession, focus_sessions, local_date


def active_days(timestamps: list[datetime], tz: tzinfo = UTC) -> set[date]:
    """Collapse timestamps into distinct calendar days in the reference zone."""
    return {local_date(ts, tz) for ts in timestamps}


def current_streak(timestamps: list[datetime], now: datetime, tz: tzinfo = UTC) -> int:
    """
    Consecutive days with activity, ending today.

    Walks back from today's calendar day and stops at the first missing day.
    A day with no activity today means a streak of 0, whatever came before.
    """
    days = active_days(timestamps, tz)
    day = local_date(now, tz)
    streak = 0
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(timestamps: list[datetime], tz: tzinfo = UTC) -> int:
    """Longest run of consecutive active days anywhere in the history."""
    days = sorted(active_days(timestamps, tz))
    best = 0
    run = 0
    previous = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day
    return best


def session_streak(sessions: list[TimerSession], now: datetime, tz: tzinfo = UTC) -> int:
    """Current streak over focus sessions only."""
    return current_streak([s.completed_at for s in focus_sessions(sessions)], now, tz)


def longest_session_streak(sessions: list[TimerSession], tz: tzinfo = UTC) -> int:
    return longest_streak([s.completed_at for s in focus_sessions(sessions)], tz)
