"""Pure daily plan assembly - no I/O dependencies."""

import random
from dataclasses import dataclass
from datetime import datetime, tzinfo

from .phrases import PHRASES, Pool, greeting_pool, pick, pick_unique
from .scoring import ScoredTask, rank_tasks
from .tasks import (
    UTC,
    Priority,
    Task,
    filter_by_priority,
    filter_due_on,
    filter_open,
    local_date,
    to_local,
)

QUICK_TASK_PLACEHOLDERS = ("Clear inbox", "Quick responses", "Small tasks")


@dataclass(frozen=True)
class FocusBlock:
    """A fixed time slot with the tasks suggested for it."""

    time: str
    type: str
    tasks: tuple[str, ...]
    description: str

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "type": self.type,
            "tasks": list(self.tasks),
            "description": self.description,
        }


@dataclass(frozen=True)
class PlanSummary:
    total_pending: int
    high_priority: int
    due_today: int

    def to_dict(self) -> dict:
        return {
            "totalPending": self.total_pending,
            "highPriority": self.high_priority,
            "dueToday": self.due_today,
        }


@dataclass(frozen=True)
class DailyPlan:
    """Assembled plan ready for formatting or serialization."""

    greeting: str
    quote: str
    summary: PlanSummary
    recommended_order: list[ScoredTask]
    focus_blocks: list[FocusBlock]
    tip: str

    @property
    def top_priorities(self) -> list[str]:
        return [s.task.title for s in self.recommended_order[:3]]

    def to_dict(self) -> dict:
        return {
            "greeting": self.greeting,
            "quote": self.quote,
            "summary": self.summary.to_dict(),
            "topPriorities": self.top_priorities,
            "recommendedOrder": [recommendation_dict(s) for s in self.recommended_order],
            "focusBlocks": [b.to_dict() for b in self.focus_blocks],
            "tip": self.tip,
        }


def recommendation_dict(scored: ScoredTask) -> dict:
    """The compact shape used for recommended-order entries."""
    t = scored.task
    return {
        "id": t.id,
        "title": t.title,
        "priority": t.priority.value if t.priority else None,
        "estimatedTime": t.estimated_time,
        "priorityScore": scored.priority_score,
        "reason": scored.reason,
    }


def greeting(now: datetime, rng: random.Random, tz: tzinfo = UTC) -> str:
    """Randomized greeting from the pool for the local hour."""
    return pick(greeting_pool(to_local(now, tz).hour), rng)


def focus_blocks(ranked: list[ScoredTask]) -> list[FocusBlock]:
    """
    Three fixed blocks, always emitted.

    Deep work takes up to two high-priority tasks, focused work up to two
    medium-priority ones, in ranked order. Quick tasks holds placeholders.
    """
    high = [s.task.title for s in ranked if s.task.priority == Priority.HIGH][:2]
    medium = [s.task.title for s in ranked if s.task.priority == Priority.MEDIUM][:2]
    return [
        FocusBlock(
            time="9:00 AM - 11:00 AM",
            type="Deep Work",
            tasks=tuple(high),
            description="Best time for challenging tasks - your energy is highest",
        ),
        FocusBlock(
            time="2:00 PM - 4:00 PM",
            type="Focused Work",
            tasks=tuple(medium),
            description="Good time for important but less demanding tasks",
        ),
        FocusBlock(
            time="4:00 PM - 5:00 PM",
            type="Quick Tasks",
            tasks=QUICK_TASK_PLACEHOLDERS,
            description="End the day with easy wins",
        ),
    ]


def plan_day(
    tasks: list[Task],
    now: datetime,
    rng: random.Random | None = None,
    tz: tzinfo = UTC,
    top: int = 5,
) -> DailyPlan:
    """
    Assemble the daily plan from the current task snapshot.

    Pure apart from the randomized greeting, quote, and tip drawn from `rng`.
    """
    rng = rng or random.Random()
    now = to_local(now, tz)
    open_tasks = filter_open(tasks)
    ranked = rank_tasks(open_tasks, now, tz, with_reasons=True)

    return DailyPlan(
        greeting=greeting(now, rng, tz),
        quote=pick(Pool.QUOTE, rng),
        summary=PlanSummary(
            total_pending=len(open_tasks),
            high_priority=len(filter_by_priority(open_tasks, Priority.HIGH)),
            due_today=len(filter_due_on(open_tasks, local_date(now, tz), tz)),
        ),
        recommended_order=ranked[:top],
        focus_blocks=focus_blocks(ranked),
        tip=pick(Pool.TIP, rng),
    )


def recommend_tasks(tasks: list[Task], now: datetime, tz: tzinfo = UTC) -> dict:
    """Next task, top five, and up to three quick wins among open tasks."""
    ranked = rank_tasks(filter_open(tasks), now, tz, with_reasons=True)
    quick = [s for s in ranked if s.task.estimated_time and s.task.estimated_time <= 30]
    return {
        "nextTask": ranked[0].to_dict() if ranked else None,
        "topTasks": [s.to_dict() for s in ranked[:5]],
        "quickWins": [s.to_dict() for s in quick[:3]],
    }


def suggested_session_length(task: Task | None, default: int = 25) -> int:
    """Match short tasks, stretch to 50 for big ones."""
    if task is None or not task.estimated_time:
        return default
    if task.estimated_time <= default:
        return task.estimated_time
    if task.estimated_time > 50:
        return 50
    return default


def focus_suggestion(tasks: list[Task], now: datetime, tz: tzinfo = UTC, default_length: int = 25) -> dict:
    ranked = rank_tasks(filter_open(tasks), now, tz)
    best = ranked[0].task if ranked else None
    recommended = None
    if best is not None:
        recommended = {
            "id": best.id,
            "title": best.title,
            "estimatedTime": best.estimated_time,
            "reason": "Highest priority based on deadline and importance",
        }
    return {
        "recommendedTask": recommended,
        "sessionLength": suggested_session_length(best, default_length),
        "tips": list(PHRASES[Pool.FOCUS_TIP]),
    }


def motivation(
    tasks: list[Task],
    streak: int,
    now: datetime,
    rng: random.Random | None = None,
    tz: tzinfo = UTC,
) -> dict:
    """Encouragement scaled by how many tasks were completed today."""
    rng = rng or random.Random()
    today = local_date(now, tz)
    done = sum(1 for t in tasks if t.completed_on(today, tz))

    if done >= 5:
        message, emoji = "You're on fire today! Amazing productivity!", "🔥"
    elif done >= 3:
        message, emoji = "Great progress! Keep up the momentum!", "💪"
    elif done >= 1:
        message, emoji = "Good start! Every task counts!", "👍"
    else:
        message, emoji = "Ready to start? Let's make today productive!", "🚀"

    return {
        "message": message,
        "emoji": emoji,
        "quote": pick(Pool.QUOTE, rng),
        "streak": streak,
        "tasksCompletedToday": done,
    }


def tips(rng: random.Random | None = None, count: int = 3) -> dict:
    rng = rng or random.Random()
    return {"tips": pick_unique(Pool.TIP, rng, count), "quote": pick(Pool.QUOTE, rng)}
