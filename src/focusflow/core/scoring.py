"""Pure priority scoring - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime, tzinfo

from .tasks import UTC, Priority, Task, local_date, to_local

TIER_POINTS = {Priority.HIGH: 30, Priority.MEDIUM: 20, Priority.LOW: 10}
UNKNOWN_TIER_POINTS = 15
WORK_CATEGORY_BONUS = 5


@dataclass(frozen=True)
class ScoredTask:
    """A task decorated with its priority score and the reason behind it."""

    task: Task
    priority_score: int
    reason: str = ""

    def to_dict(self) -> dict:
        data = self.task.to_dict()
        data["priorityScore"] = self.priority_score
        if self.reason:
            data["reason"] = self.reason
        return data


def tier_points(task: Task) -> int:
    return TIER_POINTS.get(task.priority, UNKNOWN_TIER_POINTS)


def urgency_points(task: Task, now: datetime) -> int:
    """
    Points for due-date proximity.

    Bands use fractional days until due: overdue 40, under 1 day 35,
    under 3 days 25, under 7 days 15, later 5. No due date scores 0.
    """
    days = task.days_until_due(now)
    if days is None:
        return 0
    if days < 0:
        return 40
    if days < 1:
        return 35
    if days < 3:
        return 25
    if days < 7:
        return 15
    return 5


def shape_points(task: Task) -> int:
    """Quick wins get 10, very long tasks get 5 so they don't starve."""
    if not task.estimated_time:
        return 0
    if task.estimated_time <= 30:
        return 10
    if task.estimated_time >= 120:
        return 5
    return 0


def priority_score(task: Task, now: datetime, tz: tzinfo = UTC) -> int:
    """Score a task 0-100. Total over any well-formed Task."""
    score = tier_points(task) + urgency_points(task, to_local(now, tz)) + shape_points(task)
    if task.category == "work":
        score += WORK_CATEGORY_BONUS
    return min(100, score)


def priority_reason(task: Task, now: datetime, tz: tzinfo = UTC) -> str:
    """
    Human-readable reason for a task's rank.

    Due-date proximity wins over tier: overdue, due today, tomorrow, within
    3 calendar days. Then high priority, then quick win.
    """
    if task.due_date is not None:
        now = to_local(now, tz)
        if task.days_until_due(now) < 0:
            return "Overdue - needs immediate attention"
        days = (local_date(task.due_date, tz) - local_date(now, tz)).days
        if days == 0:
            return "Due today"
        if days == 1:
            return "Due tomorrow"
        if days <= 3:
            return f"Due in {days} days"
    if task.priority == Priority.HIGH:
        return "High priority task"
    if task.estimated_time and task.estimated_time <= 30:
        return "Quick win - build momentum"
    return "Scheduled task"


def score_tasks(
    tasks: list[Task],
    now: datetime,
    tz: tzinfo = UTC,
    with_reasons: bool = False,
) -> list[ScoredTask]:
    """Score every task, keeping input order."""
    return [
        ScoredTask(
            task=t,
            priority_score=priority_score(t, now, tz),
            reason=priority_reason(t, now, tz) if with_reasons else "",
        )
        for t in tasks
    ]


def rank_tasks(
    tasks: list[Task],
    now: datetime,
    tz: tzinfo = UTC,
    with_reasons: bool = False,
) -> list[ScoredTask]:
    """
    Score and sort tasks by score, highest first.

    sorted() is stable, so equal scores keep their original relative order.
    """
    scored = score_tasks(tasks, now, tz, with_reasons)
    return sorted(scored, key=lambda s: -s.priority_score)
