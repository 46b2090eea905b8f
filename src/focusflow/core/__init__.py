"""Functional core - pure business logic with no I/O."""

from .tasks import Task, TimerSession, Priority, Status, SessionType, local_date
from .scoring import ScoredTask, priority_score, priority_reason, rank_tasks
from .streaks import current_streak, longest_streak
from .aggregation import DailyBucket, daily_buckets, hourly_distribution, productive_hours
from .trends import daily_completions, summarize
from .insights import Insight, Suggestion, task_suggestions, productivity_insights, productivity_score
from .planner import DailyPlan, FocusBlock, plan_day
from .pomodoro import PomodoroSettings, PomodoroTimer
from .enrichment import Enriched, Fallback, enrich
from .errors import ValidationError, EnrichmentError

__all__ = [
    # Tasks
    "Task",
    "TimerSession",
    "Priority",
    "Status",
    "SessionType",
    "local_date",
    # Scoring
    "ScoredTask",
    "priority_score",
    "priority_reason",
    "rank_tasks",
    # Streaks
    "current_streak",
    "longest_streak",
    # Aggregation
    "DailyBucket",
    "daily_buckets",
    "hourly_distribution",
    "productive_hours",
    # Trends
    "daily_completions",
    "summarize",
    # Insights
    "Insight",
    "Suggestion",
    "task_suggestions",
    "productivity_insights",
    "productivity_score",
    # Planner
    "DailyPlan",
    "FocusBlock",
    "plan_day",
    # Pomodoro
    "PomodoroSettings",
    "PomodoroTimer",
    # Enrichment
    "Enriched",
    "Fallback",
    "enrich",
    # Errors
    "ValidationError",
    "EnrichmentError",
]
