"""Tests for daily plan assembly and recommendations."""

import random
from datetime import datetime, timedelta

import pytest

from focusflow.core.phrases import PHRASES, Pool, greeting_pool, pick_unique
from focusflow.core.planner import (
    QUICK_TASK_PLACEHOLDERS,
    focus_blocks,
    focus_suggestion,
    greeting,
    motivation,
    plan_day,
    recommend_tasks,
    suggested_session_length,
    tips,
)
from focusflow.core.scoring import rank_tasks
from focusflow.core.tasks import UTC, Priority, Status, Task


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 10, 0, tzinfo=UTC)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def tasks(now):
    return [
        Task(id="h1", title="Ship release", priority=Priority.HIGH, due_date=now + timedelta(hours=3)),
        Task(id="h2", title="Fix outage", priority=Priority.HIGH, due_date=now - timedelta(days=1)),
        Task(id="h3", title="Write RFC", priority=Priority.HIGH),
        Task(id="m1", title="Review PR", priority=Priority.MEDIUM, estimated_time=20),
        Task(id="l1", title="Water plants", priority=Priority.LOW),
        Task(id="done", title="Done", priority=Priority.HIGH, status=Status.COMPLETED, completed_at=now),
    ]


class TestGreeting:
    @pytest.mark.parametrize(
        "hour,pool",
        [(0, Pool.MORNING), (11, Pool.MORNING), (12, Pool.AFTERNOON), (16, Pool.AFTERNOON),
         (17, Pool.EVENING), (20, Pool.EVENING), (21, Pool.LATE_NIGHT), (23, Pool.LATE_NIGHT)],
    )
    def test_bands(self, hour, pool):
        assert greeting_pool(hour) == pool

    def test_greeting_comes_from_band_pool(self, rng):
        evening = datetime(2025, 1, 15, 19, 30, tzinfo=UTC)
        assert greeting(evening, rng) in PHRASES[Pool.EVENING]


class TestFocusBlocks:
    def test_always_three_blocks(self):
        blocks = focus_blocks([])
        assert [b.type for b in blocks] == ["Deep Work", "Focused Work", "Quick Tasks"]
        assert blocks[0].tasks == ()
        assert blocks[2].tasks == QUICK_TASK_PLACEHOLDERS

    def test_blocks_take_top_two_by_rank(self, tasks, now):
        ranked = rank_tasks([t for t in tasks if not t.is_completed], now)
        blocks = focus_blocks(ranked)
        assert blocks[0].tasks == ("Fix outage", "Ship release")
        assert blocks[1].tasks == ("Review PR",)


class TestPlanDay:
    def test_summary_counts_open_tasks(self, tasks, now, rng):
        plan = plan_day(tasks, now, rng)
        assert plan.summary.total_pending == 5
        assert plan.summary.high_priority == 3
        assert plan.summary.due_today == 1

    def test_recommended_order_is_top_five_ranked(self, tasks, now, rng):
        plan = plan_day(tasks, now, rng)
        scores = [s.priority_score for s in plan.recommended_order]
        assert len(plan.recommended_order) == 5
        assert scores == sorted(scores, reverse=True)
        assert all(not s.task.is_completed for s in plan.recommended_order)
        assert plan.recommended_order[0].reason == "Overdue - needs immediate attention"

    def test_top_priorities_are_first_three_titles(self, tasks, now, rng):
        plan = plan_day(tasks, now, rng)
        assert plan.top_priorities == [s.task.title for s in plan.recommended_order[:3]]

    def test_empty_task_list(self, now, rng):
        plan = plan_day([], now, rng)
        assert plan.recommended_order == []
        assert len(plan.focus_blocks) == 3
        assert plan.summary.total_pending == 0

    def test_text_drawn_from_pools(self, tasks, now, rng):
        plan = plan_day(tasks, now, rng)
        assert plan.greeting in PHRASES[Pool.MORNING]
        assert plan.quote in PHRASES[Pool.QUOTE]
        assert plan.tip in PHRASES[Pool.TIP]

    def test_same_seed_same_plan(self, tasks, now):
        first = plan_day(tasks, now, random.Random(7)).to_dict()
        second = plan_day(tasks, now, random.Random(7)).to_dict()
        assert first == second

    def test_dict_shape(self, tasks, now, rng):
        data = plan_day(tasks, now, rng).to_dict()
        assert set(data) == {"greeting", "quote", "summary", "topPriorities", "recommendedOrder", "focusBlocks", "tip"}
        entry = data["recommendedOrder"][0]
        assert entry["id"] == "h2"
        assert entry["priority"] == "high"
        assert "priorityScore" in entry and "reason" in entry


class TestRecommendations:
    def test_next_task_and_quick_wins(self, tasks, now):
        data = recommend_tasks(tasks, now)
        assert data["nextTask"]["id"] == "h2"
        assert len(data["topTasks"]) == 5
        assert [t["id"] for t in data["quickWins"]] == ["m1"]

    def test_no_open_tasks(self, now):
        data = recommend_tasks([], now)
        assert data == {"nextTask": None, "topTasks": [], "quickWins": []}


class TestFocusSuggestion:
    @pytest.mark.parametrize(
        "estimate,length",
        [(None, 25), (15, 15), (25, 25), (40, 25), (50, 25), (60, 50), (180, 50)],
    )
    def test_session_length(self, estimate, length):
        assert suggested_session_length(Task(id="a", title="a", estimated_time=estimate)) == length

    def test_no_task_uses_default(self):
        assert suggested_session_length(None) == 25

    def test_recommends_highest_ranked(self, tasks, now):
        data = focus_suggestion(tasks, now)
        assert data["recommendedTask"]["id"] == "h2"
        assert data["sessionLength"] == 25
        assert data["tips"] == list(PHRASES[Pool.FOCUS_TIP])

    def test_nothing_open(self, now):
        assert focus_suggestion([], now)["recommendedTask"] is None


class TestMotivation:
    def done_today(self, now, count):
        return [
            Task(id=str(i), title="t", status=Status.COMPLETED, completed_at=now - timedelta(minutes=i))
            for i in range(count)
        ]

    @pytest.mark.parametrize("count,emoji", [(0, "🚀"), (1, "👍"), (3, "💪"), (5, "🔥")])
    def test_scaled_by_completions_today(self, now, rng, count, emoji):
        data = motivation(self.done_today(now, count), 4, now, rng)
        assert data["emoji"] == emoji
        assert data["tasksCompletedToday"] == count
        assert data["streak"] == 4
        assert data["quote"] in PHRASES[Pool.QUOTE]

    def test_yesterday_does_not_count(self, now, rng):
        tasks = [Task(id="a", title="a", status=Status.COMPLETED, completed_at=now - timedelta(days=1))]
        assert motivation(tasks, 0, now, rng)["tasksCompletedToday"] == 0


class TestTips:
    def test_unique_tips_from_pool(self, rng):
        data = tips(rng)
        assert 1 <= len(data["tips"]) <= 3
        assert len(set(data["tips"])) == len(data["tips"])
        assert all(t in PHRASES[Pool.TIP] for t in data["tips"])
        assert data["quote"] in PHRASES[Pool.QUOTE]

    def test_pick_unique_drops_repeats(self):
        drawn = pick_unique(Pool.FOCUS_TIP, random.Random(1), 20)
        assert len(drawn) == len(set(drawn)) <= len(PHRASES[Pool.FOCUS_TIP])
