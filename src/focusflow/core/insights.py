"""Rule-based suggestions, insights, and the productivity score - no I/O."""

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from .aggregation import round_half_up
from .tasks import (
    UTC,
    Priority,
    Task,
    align,
    filter_by_priority,
    filter_due_on,
    filter_open,
    local_date,
    to_local,
)


@dataclass(frozen=True)
class Suggestion:
    """An actionable nudge about specific tasks."""

    type: str
    icon: str
    title: str
    message: str
    action_label: str | None = None
    task_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = {
            "type": self.type,
            "icon": self.icon,
            "title": self.title,
            "message": self.message,
        }
        if self.action_label:
            data["actionLabel"] = self.action_label
        if self.task_ids:
            data["taskIds"] = list(self.task_ids)
        return data


@dataclass(frozen=True)
class Insight:
    """An observation about aggregate productivity."""

    type: str
    icon: str
    title: str
    message: str

    def to_dict(self) -> dict:
        return {"type": self.type, "icon": self.icon, "title": self.title, "message": self.message}


@dataclass(frozen=True)
class ProductivitySummary:
    """Aggregates the insight rules read."""

    streak: int = 0
    focus_minutes: int = 0
    tasks_completed: int = 0


def task_suggestions(tasks: list[Task], now: datetime, tz: tzinfo = UTC) -> list[Suggestion]:
    """
    Evaluate every suggestion rule; all that apply fire, in display order.

    1. overdue  2. quick wins  3. unstarted high priority  4. due today
    5. three or more completions in the last hour
    """
    now = to_local(now, tz)
    suggestions = []
    open_tasks = filter_open(tasks)

    overdue = [t for t in open_tasks if t.is_overdue(now)]
    if overdue:
        suggestions.append(
            Suggestion(
                type="warning",
                icon="⚠️",
                title="Overdue Tasks Alert",
                message=f"You have {len(overdue)} overdue task(s). Consider rescheduling or prioritizing them.",
                action_label="View overdue tasks",
                task_ids=tuple(t.id for t in overdue),
            )
        )

    quick_wins = [t for t in open_tasks if t.is_quick_win()]
    if quick_wins:
        suggestions.append(
            Suggestion(
                type="tip",
                icon="⚡",
                title="Quick Wins Available",
                message=f"{len(quick_wins)} task(s) can be completed in 30 minutes or less. Great for building momentum!",
                action_label="Start a quick task",
                task_ids=tuple(t.id for t in quick_wins),
            )
        )

    waiting = [t for t in filter_by_priority(open_tasks, Priority.HIGH) if t.is_pending]
    if waiting:
        suggestions.append(
            Suggestion(
                type="priority",
                icon="🔥",
                title="High Priority Tasks Waiting",
                message=f"{len(waiting)} high-priority task(s) haven't been started yet.",
                action_label="Focus on priorities",
                task_ids=tuple(t.id for t in waiting),
            )
        )

    due_today = filter_due_on(tasks, local_date(now, tz), tz)
    if due_today:
        suggestions.append(
            Suggestion(
                type="info",
                icon="📅",
                title="Due Today",
                message=f"{len(due_today)} task(s) are due today. Stay focused!",
                action_label="View today's tasks",
                task_ids=tuple(t.id for t in due_today),
            )
        )

    hour_ago = now - timedelta(hours=1)
    recent = [
        t for t in tasks if t.completed_at is not None and hour_ago < align(t.completed_at, now) <= now
    ]
    if len(recent) >= 3:
        suggestions.append(
            Suggestion(
                type="success",
                icon="🎉",
                title="Great Progress!",
                message=f"You've completed {len(recent)} tasks recently. Consider taking a short break!",
                action_label="Start break timer",
            )
        )

    return suggestions


def completion_rate(tasks: list[Task]) -> float:
    """Percent of tasks completed, 0 when there are none."""
    if not tasks:
        return 0.0
    return sum(1 for t in tasks if t.is_completed) / len(tasks) * 100


def productivity_insights(summary: ProductivitySummary, tasks: list[Task]) -> list[Insight]:
    """Streak, focus-time, and completion-rate insights."""
    insights = []

    if summary.streak >= 7:
        insights.append(
            Insight(
                type="achievement",
                icon="🔥",
                title="Amazing Streak!",
                message=f"You're on a {summary.streak}-day streak! Keep it going!",
            )
        )
    elif summary.streak >= 3:
        insights.append(
            Insight(
                type="progress",
                icon="📈",
                title="Building Momentum",
                message=f"{summary.streak} days in a row! You're building great habits.",
            )
        )

    if summary.focus_minutes >= 120:
        hours = int(round_half_up(summary.focus_minutes / 60))
        insights.append(
            Insight(
                type="success",
                icon="🎯",
                title="Deep Focus Achieved",
                message=f"{hours} hours of focused work this week!",
            )
        )

    rate = completion_rate(tasks)
    if rate >= 80:
        insights.append(
            Insight(
                type="success",
                icon="⭐",
                title="High Achiever!",
                message=f"{int(round_half_up(rate))}% task completion rate. Outstanding!",
            )
        )
    elif rate >= 50:
        insights.append(
            Insight(
                type="info",
                icon="💪",
                title="Good Progress",
                message=f"{int(round_half_up(rate))}% completion rate. Keep pushing!",
            )
        )

    return insights


def productivity_score(focus_minutes: int, tasks_completed: int, streak: int) -> int:
    """
    Base 50, plus up to 20 for focus hours (2 per hour), up to 20 for
    completions (2 each), up to 10 for streak days. Clamped to 0-100.
    """
    score = 50.0
    score += min(20.0, focus_minutes / 60 * 2)
    score += min(20, tasks_completed * 2)
    score += min(10, streak)
    return int(max(0, min(100, round_half_up(score))))
