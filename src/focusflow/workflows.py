"""Request boundary shared by the CLI and any API layer.

Each build_* function takes a point-in-time snapshot of one user's tasks and
sessions, runs the pure core over it, and returns a response dict. The
smart_* variants additionally try the optional chat service and fall back to
the rule-based result.
"""

import json
import logging
import random
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from .adapters.chat_api import ChatCompletionsService
from .config import Config
from .core import aggregation, classifier, insights, planner, streaks, trends
from .core.enrichment import enrich, require_keys, tagged
from .core.errors import require_positive
from .core.pomodoro import PomodoroSettings, PomodoroTimer
from .core.scoring import rank_tasks
from .core.tasks import (
    SessionType,
    Task,
    TimerSession,
    align,
    filter_open,
    focus_sessions,
    local_date,
    to_local,
)
from .ports import LLMService, TaskRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """One user's tasks and sessions at a single instant."""

    tasks: list[Task]
    sessions: list[TimerSession]
    now: datetime


def take_snapshot(repo: TaskRepository, config: Config, now: datetime | None = None) -> Snapshot:
    """Read the repository once; `now` defaults to the current time in the configured zone."""
    tz = config.tz
    now = to_local(now, tz) if now else datetime.now(tz)
    return Snapshot(tasks=repo.fetch_tasks(), sessions=repo.fetch_sessions(), now=now)


def get_llm(config: Config) -> LLMService | None:
    """Chat service from config, or None when no API key is set."""
    if not config.llm_api_key:
        return None
    return ChatCompletionsService(
        api_key=config.llm_api_key,
        base_url=config.llm_base_url,
        model=config.llm_model,
        timeout=config.llm_timeout,
    )


# ============== Rule-based views ==============


def build_scored_tasks(snapshot: Snapshot, config: Config) -> list[dict]:
    """Every task decorated with priorityScore, highest first."""
    return [s.to_dict() for s in rank_tasks(snapshot.tasks, snapshot.now, config.tz)]


def weekly_summary(snapshot: Snapshot, config: Config) -> insights.ProductivitySummary:
    """Aggregates over the trailing week that feed insights and the score."""
    tz = config.tz
    week = aggregation.daily_buckets(
        snapshot.tasks, snapshot.sessions, config.week_days, snapshot.now, tz
    )
    return insights.ProductivitySummary(
        streak=streaks.session_streak(snapshot.sessions, snapshot.now, tz),
        focus_minutes=sum(b.focus_minutes for b in week),
        tasks_completed=sum(b.tasks_completed for b in week),
    )


def build_dashboard(snapshot: Snapshot, config: Config) -> dict:
    tz = config.tz
    week = aggregation.daily_buckets(
        snapshot.tasks, snapshot.sessions, config.week_days, snapshot.now, tz
    )
    summary = weekly_summary(snapshot, config)
    return {
        "taskStats": aggregation.task_stats(snapshot.tasks, snapshot.now).to_dict(),
        "todayStats": aggregation.today_stats(snapshot.tasks, snapshot.sessions, snapshot.now, tz).to_dict(),
        "weeklyData": [b.to_dict() for b in week],
        "productivityScore": insights.productivity_score(
            summary.focus_minutes, summary.tasks_completed, summary.streak
        ),
        "categoryDistribution": [
            {"name": name, "value": value}
            for name, value in aggregation.category_distribution(snapshot.tasks).items()
        ],
        "streak": summary.streak,
        "longestStreak": streaks.longest_session_streak(snapshot.sessions, tz),
    }


def build_insights(snapshot: Snapshot, config: Config) -> list[dict]:
    summary = weekly_summary(snapshot, config)
    return [i.to_dict() for i in insights.productivity_insights(summary, snapshot.tasks)]


def build_suggestions(snapshot: Snapshot, config: Config) -> list[dict]:
    return [s.to_dict() for s in insights.task_suggestions(snapshot.tasks, snapshot.now, config.tz)]


def build_daily_plan(snapshot: Snapshot, config: Config, rng: random.Random | None = None) -> dict:
    return planner.plan_day(snapshot.tasks, snapshot.now, rng, config.tz).to_dict()


def build_trends(snapshot: Snapshot, config: Config, days: int | None = None) -> dict:
    days = config.trend_days if days is None else days
    require_positive("days", days)
    return trends.completion_trend(snapshot.tasks, snapshot.now, days, config.tz)


def build_time_distribution(snapshot: Snapshot, config: Config) -> dict:
    return aggregation.time_distribution(snapshot.tasks, snapshot.sessions, config.tz)


def build_recommendations(snapshot: Snapshot, config: Config) -> dict:
    return planner.recommend_tasks(snapshot.tasks, snapshot.now, config.tz)


def build_focus_suggestion(snapshot: Snapshot, config: Config) -> dict:
    return planner.focus_suggestion(snapshot.tasks, snapshot.now, config.tz, config.focus_duration)


def build_motivation(snapshot: Snapshot, config: Config, rng: random.Random | None = None) -> dict:
    streak = streaks.session_streak(snapshot.sessions, snapshot.now, config.tz)
    return planner.motivation(snapshot.tasks, streak, snapshot.now, rng, config.tz)


def build_tips(count: int = 3, rng: random.Random | None = None) -> dict:
    require_positive("count", count)
    return planner.tips(rng, count)


def build_timer_stats(snapshot: Snapshot, config: Config) -> dict:
    """Today, trailing-week, and all-time focus totals plus the current streak."""
    tz = config.tz
    focus = focus_sessions(snapshot.sessions)
    today = local_date(snapshot.now, tz)
    week_start = snapshot.now - timedelta(days=config.week_days)
    this_week = [s for s in focus if align(s.completed_at, week_start) >= week_start]
    return {
        "today": aggregation.session_totals(aggregation.sessions_on(focus, today, tz)),
        "week": aggregation.session_totals(this_week),
        "total": aggregation.session_totals(focus),
        "streak": streaks.session_streak(snapshot.sessions, snapshot.now, tz),
    }


# ============== Prompt Compilation ==============


def _task_line(t: Task) -> str:
    due = t.due_date.date().isoformat() if t.due_date else "No date"
    priority = t.priority.value if t.priority else "unknown"
    return f"- {t.title} (Priority: {priority}, Due: {due})"


def compile_suggestions_prompt(snapshot: Snapshot, summary: insights.ProductivitySummary, score: int) -> str:
    pending = [
        {
            "title": t.title,
            "priority": t.priority.value if t.priority else None,
            "dueDate": t.due_date.isoformat() if t.due_date else None,
            "category": t.category,
        }
        for t in filter_open(snapshot.tasks)[:8]
    ]
    return f"""Analyze these pending tasks and productivity data to provide smart suggestions:

Tasks: {json.dumps(pending)}
Productivity Score: {score}
Current Streak: {summary.streak} days
Tasks Completed This Week: {summary.tasks_completed}

Provide 3-4 actionable suggestions in JSON format:
{{
  "suggestions": [
    {{
      "type": "priority|warning|tip|motivation",
      "icon": "emoji",
      "title": "Short title",
      "message": "Helpful suggestion message",
      "actionLabel": "Action button text"
    }}
  ],
  "nextBestAction": "What should the user do right now",
  "focusRecommendation": "Recommended focus session length and task"
}}

Only respond with valid JSON."""


def compile_plan_prompt(snapshot: Snapshot, completed_today: int, focus_minutes: int) -> str:
    task_list = "\n".join(_task_line(t) for t in filter_open(snapshot.tasks)[:10])
    return f"""Create a personalized daily productivity plan based on:

Current time: {snapshot.now.strftime("%A %H:%M")}

Pending Tasks:
{task_list or "No pending tasks"}

Progress Today:
- Tasks completed: {completed_today}
- Focus time: {focus_minutes} minutes

Generate a motivating and practical daily plan in JSON format:
{{
  "greeting": "Personalized greeting based on time of day",
  "quote": "Brief inspiring message",
  "topPriorities": ["Priority 1", "Priority 2", "Priority 3"],
  "focusBlocks": [
    {{"time": "9:00 AM - 11:00 AM", "type": "Deep Work", "tasks": ["Task"], "description": "Why"}}
  ],
  "tip": "One actionable productivity tip"
}}

Only respond with valid JSON."""


def compile_insights_prompt(dashboard: dict) -> str:
    return f"""Analyze this productivity data and generate personalized insights:

Weekly Stats:
{json.dumps(dashboard["weeklyData"], indent=2)}

Overall Stats:
- Productivity score: {dashboard["productivityScore"]}
- Current streak: {dashboard["streak"]} days
- Total focus time this week: {sum(d["focusMinutes"] for d in dashboard["weeklyData"])} minutes

Task Distribution:
{json.dumps(dashboard["categoryDistribution"], indent=2)}

Generate 3-4 personalized insights in JSON format:
{{
  "insights": [
    {{
      "type": "achievement|improvement|pattern|suggestion",
      "icon": "emoji",
      "title": "Insight title",
      "message": "Detailed insight message"
    }}
  ],
  "overallAssessment": "Brief overall productivity assessment",
  "weeklyGoal": "Suggested goal for next week"
}}

Only respond with valid JSON."""


def compile_task_analysis_prompt(title: str, description: str) -> str:
    return f"""Analyze this task and provide helpful insights in JSON format:
Task: "{title}"
Description: "{description or 'No description'}"

Respond with a JSON object containing:
{{
  "suggestedCategory": "work|personal|learning|health|finance|other",
  "suggestedTags": ["tag1", "tag2", "tag3"],
  "estimatedTime": minutes as number,
  "priority": "low|medium|high"
}}

Only respond with valid JSON."""


def compile_parse_prompt(text: str, now: datetime) -> str:
    return f"""Parse this natural language input into a structured task:

Input: "{text}"

Extract task details and respond with JSON:
{{
  "title": "Clear task title",
  "description": "Optional description if mentioned",
  "priority": "low|medium|high",
  "category": "work|personal|learning|health|finance|other",
  "dueDate": "YYYY-MM-DD or null if not mentioned",
  "estimatedTime": minutes as number or 30 as default,
  "tags": ["relevant", "tags"]
}}

Today's date is {now.date().isoformat()}.
If "tomorrow" is mentioned, use tomorrow's date.
If "next week" is mentioned, use a date 7 days from now.

Only respond with valid JSON."""


# ============== Enriched views ==============


def smart_suggestions(snapshot: Snapshot, config: Config, llm: LLMService | None = None) -> dict:
    """Suggestions from the chat service, or the rule set when it fails."""
    rules = build_suggestions(snapshot, config)
    summary = weekly_summary(snapshot, config)
    score = insights.productivity_score(summary.focus_minutes, summary.tasks_completed, summary.streak)
    fallback = {
        "suggestions": rules,
        "nextBestAction": rules[0]["message"] if rules else "Start with your highest priority task",
        "focusRecommendation": f"{config.focus_duration}-minute focus session recommended",
    }
    result = enrich(
        fallback,
        compile_suggestions_prompt(snapshot, summary, score),
        llm,
        require_keys("suggestions"),
    )
    return tagged(result)


def smart_daily_plan(
    snapshot: Snapshot,
    config: Config,
    llm: LLMService | None = None,
    rng: random.Random | None = None,
) -> dict:
    """Daily plan from the chat service, or the rule-based plan when it fails."""
    tz = config.tz
    today = aggregation.today_stats(snapshot.tasks, snapshot.sessions, snapshot.now, tz)
    fallback = build_daily_plan(snapshot, config, rng)
    result = enrich(
        fallback,
        compile_plan_prompt(snapshot, today.tasks_completed, today.focus_minutes),
        llm,
        require_keys("greeting", "topPriorities"),
    )
    payload = tagged(result)
    payload["stats"] = {
        "pendingTasks": len(filter_open(snapshot.tasks)),
        "completedToday": today.tasks_completed,
        "focusMinutes": today.focus_minutes,
    }
    return payload


def smart_insights(snapshot: Snapshot, config: Config, llm: LLMService | None = None) -> dict:
    dashboard = build_dashboard(snapshot, config)
    fallback = {"insights": build_insights(snapshot, config)}
    result = enrich(fallback, compile_insights_prompt(dashboard), llm, require_keys("insights"))
    return tagged(result)


def analyze_task(title: str, description: str = "", llm: LLMService | None = None) -> dict:
    fallback = classifier.analyze_task(title, description)
    result = enrich(
        fallback,
        compile_task_analysis_prompt(title, description),
        llm,
        require_keys("suggestedCategory"),
    )
    return tagged(result)


def parse_task(text: str, now: datetime, llm: LLMService | None = None) -> dict:
    """Structured task from free text; raises ValidationError on blank input."""
    fallback = classifier.parse_task_fallback(text)
    result = enrich(fallback, compile_parse_prompt(text.strip(), now), llm, require_keys("title"))
    payload = tagged(result)
    payload["originalInput"] = text
    return payload


def pomodoro_settings(config: Config) -> PomodoroSettings:
    return PomodoroSettings(
        focus_duration=config.focus_duration,
        short_break=config.short_break,
        long_break=config.long_break,
        sessions_before_long_break=config.sessions_before_long_break,
    )


def run_interval(
    repo: TaskRepository,
    config: Config,
    timer: PomodoroTimer,
    task: Task | None = None,
    sleep: Callable[[float], None] | None = None,
    on_tick: Callable[[PomodoroTimer], None] | None = None,
) -> TimerSession | None:
    """
    Count the timer's current interval down to zero, one tick per second.

    A finished focus interval is appended to `repo` and returned; breaks
    return None. Stops early if the timer is paused from `on_tick`.
    """
    tz = config.tz
    sleep = sleep or time.sleep
    timer.start(task)
    while timer.running:
        sleep(1)
        session = timer.tick(datetime.now(tz))
        if on_tick is not None:
            on_tick(timer)
        if session is not None:
            repo.add_session(session)
            logger.info(f"Recorded {session.duration}-minute focus session")
            return session
    return None


def record_focus_session(
    repo: TaskRepository,
    duration: int,
    now: datetime,
    task_id: str | None = None,
    notes: str = "",
) -> TimerSession:
    """Store a completed focus interval; used when the timer runs outside this process."""
    require_positive("duration", duration)
    session = TimerSession(
        id=str(uuid.uuid4()),
        type=SessionType.FOCUS,
        duration=duration,
        completed_at=now,
        task_id=task_id,
        notes=notes,
    )
    repo.add_session(session)
    logger.info(f"Recorded {duration}-minute focus session")
    return session
