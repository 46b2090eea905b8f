"""Tests for daily buckets, histograms, and stats."""

from datetime import date, datetime, timedelta

import pytest

from focusflow.core.aggregation import (
    category_distribution,
    category_time,
    daily_buckets,
    hourly_distribution,
    productive_hours,
    round_half_up,
    task_stats,
    time_distribution,
    today_stats,
    window_days,
)
from focusflow.core.errors import ValidationError
from focusflow.core.tasks import UTC, SessionType, Status, Task, TimerSession, tasks_from_records


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 10, 0, tzinfo=UTC)


def focus(now, minutes=25, days_back=0, hour=None, kind=SessionType.FOCUS, id="s"):
    ts = now - timedelta(days=days_back)
    if hour is not None:
        ts = ts.replace(hour=hour)
    return TimerSession(id=id, type=kind, duration=minutes, completed_at=ts)


def done(now, days_back=0, category="other", actual=0, id="t"):
    return Task(
        id=id,
        title=id,
        status=Status.COMPLETED,
        completed_at=now - timedelta(days=days_back),
        category=category,
        actual_time=actual,
    )


class TestWindowDays:
    def test_oldest_first_ending_today(self, now):
        days = window_days(3, now)
        assert days == [date(2025, 1, 13), date(2025, 1, 14), date(2025, 1, 15)]

    @pytest.mark.parametrize("bad", [0, -1, 2.5, "7", True])
    def test_rejects_invalid_window(self, now, bad):
        with pytest.raises(ValidationError):
            window_days(bad, now)


class TestDailyBuckets:
    def test_buckets_sum_focus_minutes_and_completions(self, now):
        sessions = [
            focus(now, 25),
            focus(now, 50, days_back=1),
            focus(now, 5, kind=SessionType.SHORT_BREAK),
        ]
        tasks = [done(now, id="a"), done(now, id="b"), done(now, days_back=2, id="c")]
        buckets = daily_buckets(tasks, sessions, 7, now)

        assert len(buckets) == 7
        assert buckets[-1].date == date(2025, 1, 15)
        assert buckets[-1].focus_minutes == 25
        assert buckets[-1].tasks_completed == 2
        assert buckets[-2].focus_minutes == 50
        assert buckets[-3].tasks_completed == 1

    def test_sessions_outside_window_ignored(self, now):
        buckets = daily_buckets([], [focus(now, 25, days_back=10)], 7, now)
        assert sum(b.focus_minutes for b in buckets) == 0

    def test_conservation_of_focus_minutes(self, now):
        sessions = [focus(now, m, days_back=d, id=f"s{i}") for i, (m, d) in enumerate([(25, 0), (30, 1), (45, 3), (25, 6), (60, 7), (15, 12)])]
        buckets = daily_buckets([], sessions, 7, now)
        in_window = sum(s.duration for s in sessions if (now.date() - s.completed_at.date()).days < 7)
        assert sum(b.focus_minutes for b in buckets) == in_window == 125

    def test_empty_input_gives_zero_buckets(self, now):
        buckets = daily_buckets([], [], 7, now)
        assert all(b.focus_minutes == 0 and b.tasks_completed == 0 for b in buckets)

    def test_bucket_dict_shape(self, now):
        data = daily_buckets([], [], 1, now)[0].to_dict()
        assert data == {"day": "Wed", "date": "2025-01-15", "focusMinutes": 0, "tasksCompleted": 0}


class TestCategoryTotals:
    def test_category_time_skips_zero_actual(self, now):
        tasks = [
            done(now, category="work", actual=30, id="a"),
            done(now, category="work", actual=45, id="b"),
            done(now, category="health", actual=0, id="c"),
        ]
        assert category_time(tasks) == {"work": 75}

    def test_category_distribution_counts(self, now):
        tasks = [Task(id="a", title="a", category="work"), Task(id="b", title="b", category="work"), Task(id="c", title="c")]
        assert category_distribution(tasks) == {"work": 2, "other": 1}

    def test_category_distribution_ignores_non_text_category(self):
        tasks = tasks_from_records([{"id": "1", "category": ["work"]}, {"id": "2", "category": "work"}])
        assert category_distribution(tasks) == {"other": 1, "work": 1}


class TestHourly:
    def test_histogram_has_24_buckets(self, now):
        assert hourly_distribution([]) == [0] * 24

    def test_keys_by_local_hour_for_all_session_types(self, now):
        sessions = [
            focus(now, 25, hour=9),
            focus(now, 5, hour=9, kind=SessionType.SHORT_BREAK),
            focus(now, 50, hour=14),
        ]
        hours = hourly_distribution(sessions)
        assert hours[9] == 30
        assert hours[14] == 50

    def test_productive_hours_ranked_with_hour_tiebreak(self):
        hourly = [0] * 24
        hourly[15] = 50
        hourly[9] = 50
        hourly[11] = 25
        hourly[8] = 25
        top = productive_hours(hourly)
        assert [(p.hour, p.minutes) for p in top] == [(9, 50), (15, 50), (8, 25)]
        assert top[0].label == "9:00 - 10:00"

    def test_productive_hours_with_no_data(self):
        top = productive_hours([0] * 24)
        assert [p.hour for p in top] == [0, 1, 2]


class TestStats:
    def test_task_stats(self, now):
        tasks = [
            Task(id="a", title="a"),
            Task(id="b", title="b", status=Status.IN_PROGRESS, due_date=now - timedelta(days=1)),
            done(now, id="c"),
        ]
        stats = task_stats(tasks, now)
        assert stats.to_dict() == {"total": 3, "completed": 1, "inProgress": 1, "pending": 1, "overdue": 1}

    def test_task_stats_with_naive_now(self, now):
        tasks = [Task(id="a", title="a", due_date=now - timedelta(days=1)), Task(id="b", title="b", due_date=now + timedelta(days=1))]
        assert task_stats(tasks, now.replace(tzinfo=None)).overdue == 1

    def test_today_stats(self, now):
        sessions = [focus(now, 25), focus(now, 25, days_back=1), focus(now, 5, kind=SessionType.SHORT_BREAK)]
        tasks = [done(now, id="a"), done(now, days_back=1, id="b")]
        stats = today_stats(tasks, sessions, now)
        assert stats.focus_sessions == 1
        assert stats.focus_minutes == 25
        assert stats.tasks_completed == 1


class TestTimeDistribution:
    def test_response_shape(self, now):
        tasks = [done(now, category="work", actual=90)]
        data = time_distribution(tasks, [focus(now, 25, hour=9)])
        assert data["byCategory"] == [{"category": "work", "minutes": 90, "hours": 1.5}]
        assert len(data["hourlyDistribution"]) == 24
        assert data["productiveHours"][0] == {"hour": 9, "label": "9:00 - 10:00", "minutes": 25}


class TestRoundHalfUp:
    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.25, 1) == 0.3
        assert round_half_up(0.2, 1) == 0.2
