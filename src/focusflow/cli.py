"""Focusflow CLI - task ranking, planning, and productivity analytics."""

import json
import logging
import sys
from datetime import datetime

import click

from .adapters.json_snapshot import JsonSnapshotRepository, SnapshotError
from .config import load_config
from .core.errors import ValidationError
from .core.pomodoro import PomodoroTimer
from .core.tasks import SessionType, parse_timestamp
from .workflows import (
    Snapshot,
    analyze_task,
    build_daily_plan,
    build_dashboard,
    build_focus_suggestion,
    build_insights,
    build_motivation,
    build_recommendations,
    build_scored_tasks,
    build_suggestions,
    build_time_distribution,
    build_timer_stats,
    build_tips,
    build_trends,
    get_llm,
    parse_task,
    pomodoro_settings,
    record_focus_session,
    run_interval,
    smart_daily_plan,
    smart_insights,
    smart_suggestions,
    take_snapshot,
)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _load(ctx: click.Context, now: str | None) -> Snapshot:
    """Read the snapshot file named on the command line or in config."""
    config = ctx.obj["config"]
    repo = JsonSnapshotRepository(ctx.obj["snapshot"] or config.snapshot_file, config.tz)
    as_of = None
    if now:
        as_of = parse_timestamp(now, config.tz)
        if as_of is None:
            raise ValidationError(f"Invalid --now timestamp: {now}")
    return take_snapshot(repo, config, as_of)


def _run(fn):
    """Turn domain errors into a one-line message and exit status 1."""
    try:
        return fn()
    except (SnapshotError, ValidationError) as e:
        _fail(str(e))


now_option = click.option("--now", default=None, help="Evaluate as of this ISO timestamp")
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")
enrich_option = click.option("--enrich", is_flag=True, help="Try the configured chat service first")


@click.group()
@click.version_option(package_name="focusflow")
@click.option("--snapshot", type=click.Path(dir_okay=False), default=None,
              help="JSON snapshot file (defaults to SNAPSHOT_FILE in focusflow.conf)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, snapshot: str | None, debug: bool):
    """Focusflow - Task ranking and productivity analytics."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config()
    ctx.obj["snapshot"] = snapshot


@main.command()
@now_option
@json_option
@click.pass_context
def score(ctx, now: str | None, as_json: bool):
    """Rank all tasks by priority score."""
    snap = _run(lambda: _load(ctx, now))
    scored = _run(lambda: build_scored_tasks(snap, ctx.obj["config"]))

    if as_json:
        _echo_json(scored)
        return

    if not scored:
        click.echo("No tasks.")
        return

    for t in scored:
        click.echo(f"[{t['priorityScore']:3}] {t['title']} ({t['status']})")


@main.command()
@now_option
@json_option
@enrich_option
@click.pass_context
def plan(ctx, now: str | None, as_json: bool, enrich: bool):
    """Show today's plan: greeting, recommended order, and focus blocks."""
    config = ctx.obj["config"]
    snap = _run(lambda: _load(ctx, now))
    if enrich:
        data = _run(lambda: smart_daily_plan(snap, config, get_llm(config)))
    else:
        data = _run(lambda: build_daily_plan(snap, config))

    if as_json:
        _echo_json(data)
        return

    click.echo(data.get("greeting", ""))
    if data.get("quote"):
        click.echo(f"\n> {data['quote']}")

    if "recommendedOrder" in data:
        click.echo("\nRecommended order:")
        for i, item in enumerate(data["recommendedOrder"], 1):
            click.echo(f"  {i}. {item.get('title', '')} - {item.get('reason', '')}")
        if not data["recommendedOrder"]:
            click.echo("  Nothing pending.")

    for block in data.get("focusBlocks", []):
        tasks = ", ".join(block.get("tasks", [])) or "(open)"
        click.echo(f"\n{block.get('time', '')}  {block.get('type', '')}: {tasks}")

    if data.get("tip"):
        click.echo(f"\nTip: {data['tip']}")


@main.command()
@now_option
@json_option
@enrich_option
@click.pass_context
def suggestions(ctx, now: str | None, as_json: bool, enrich: bool):
    """Rule-based suggestions about overdue, quick, and urgent tasks."""
    config = ctx.obj["config"]
    snap = _run(lambda: _load(ctx, now))
    if enrich:
        data = _run(lambda: smart_suggestions(snap, config, get_llm(config)))
        items = data.get("suggestions", [])
    else:
        data = _run(lambda: build_suggestions(snap, config))
        items = data

    if as_json:
        _echo_json(data)
        return

    if not items:
        click.echo("No suggestions right now.")
        return

    for s in items:
        click.echo(f"{s.get('icon', '')} {s.get('title', '')}: {s.get('message', '')}")


@main.command()
@now_option
@json_option
@enrich_option
@click.pass_context
def insights(ctx, now: str | None, as_json: bool, enrich: bool):
    """Insights about streaks, focus time, and completion rate."""
    config = ctx.obj["config"]
    snap = _run(lambda: _load(ctx, now))
    if enrich:
        data = _run(lambda: smart_insights(snap, config, get_llm(config)))
        items = data.get("insights", [])
    else:
        data = _run(lambda: build_insights(snap, config))
        items = data

    if as_json:
        _echo_json(data)
        return

    if not items:
        click.echo("No insights yet. Complete some focus sessions!")
        return

    for i in items:
        click.echo(f"{i.get('icon', '')} {i.get('title', '')}: {i.get('message', '')}")


@main.command()
@now_option
@json_option
@click.pass_context
def dashboard(ctx, now: str | None, as_json: bool):
    """Task stats, weekly focus, productivity score, and streaks."""
    snap = _run(lambda: _load(ctx, now))
    data = _run(lambda: build_dashboard(snap, ctx.obj["config"]))

    if as_json:
        _echo_json(data)
        return

    stats = data["taskStats"]
    today = data["todayStats"]
    click.echo(f"Productivity score: {data['productivityScore']}/100")
    click.echo(f"Streak: {data['streak']} days (best {data['longestStreak']})")
    click.echo(
        f"Tasks: {stats['total']} total, {stats['completed']} done, "
        f"{stats['inProgress']} in progress, {stats['pending']} pending, {stats['overdue']} overdue"
    )
    click.echo(
        f"Today: {today['focusSessions']} focus sessions, {today['focusMinutes']} min, "
        f"{today['tasksCompleted']} tasks completed"
    )
    click.echo("\nThis week:")
    for d in data["weeklyData"]:
        click.echo(f"  {d['day']} {d['date']}  {d['focusMinutes']:4} min  {d['tasksCompleted']} done")


@main.command()
@click.option("--days", default=None, type=int, help="Window size in days (default from config)")
@now_option
@json_option
@click.pass_context
def trends(ctx, days: int | None, now: str | None, as_json: bool):
    """Daily completions over a trailing window."""
    snap = _run(lambda: _load(ctx, now))
    data = _run(lambda: build_trends(snap, ctx.obj["config"], days))

    if as_json:
        _echo_json(data)
        return

    summary = data["summary"]
    click.echo(f"Completed: {summary['totalCompleted']} (avg {summary['avgDaily']}/day)")
    if summary["bestDay"]:
        best = summary["bestDay"]
        click.echo(f"Best day: {best['date']} ({best['completed']})")


@main.command("time-distribution")
@json_option
@click.pass_context
def time_distribution(ctx, as_json: bool):
    """Time by category and by hour of day."""
    snap = _run(lambda: _load(ctx, None))
    data = _run(lambda: build_time_distribution(snap, ctx.obj["config"]))

    if as_json:
        _echo_json(data)
        return

    click.echo("By category:")
    for c in data["byCategory"]:
        click.echo(f"  {c['category']:12} {c['hours']}h")
    if not data["byCategory"]:
        click.echo("  No time logged.")
    click.echo("\nMost productive hours:")
    for h in data["productiveHours"]:
        click.echo(f"  {h['label']:14} {h['minutes']} min")


@main.command()
@now_option
@json_option
@click.pass_context
def recommend(ctx, now: str | None, as_json: bool):
    """Next task, top five, and quick wins."""
    snap = _run(lambda: _load(ctx, now))
    data = _run(lambda: build_recommendations(snap, ctx.obj["config"]))

    if as_json:
        _echo_json(data)
        return

    if data["nextTask"] is None:
        click.echo("Nothing pending.")
        return

    click.echo(f"Next: {data['nextTask']['title']} - {data['nextTask']['reason']}")
    for t in data["quickWins"]:
        click.echo(f"  quick win: {t['title']} ({t['estimatedTime']} min)")


@main.command()
@now_option
@json_option
@click.pass_context
def focus(ctx, now: str | None, as_json: bool):
    """Suggest what to work on in the next focus session."""
    snap = _run(lambda: _load(ctx, now))
    data = _run(lambda: build_focus_suggestion(snap, ctx.obj["config"]))

    if as_json:
        _echo_json(data)
        return

    task = data["recommendedTask"]
    if task:
        click.echo(f"Work on: {task['title']}")
    click.echo(f"Session length: {data['sessionLength']} min")
    for tip in data["tips"]:
        click.echo(f"  - {tip}")


@main.command("timer-stats")
@now_option
@json_option
@click.pass_context
def timer_stats(ctx, now: str | None, as_json: bool):
    """Focus session totals for today, this week, and all time."""
    snap = _run(lambda: _load(ctx, now))
    data = _run(lambda: build_timer_stats(snap, ctx.obj["config"]))

    if as_json:
        _echo_json(data)
        return

    for label in ("today", "week", "total"):
        click.echo(f"{label.capitalize():6} {data[label]['sessions']} sessions, {data[label]['minutes']} min")
    click.echo(f"Streak: {data['streak']} days")


@main.command()
@click.argument("title")
@click.option("--description", "-d", default="", help="Task description")
@enrich_option
@click.pass_context
def analyze(ctx, title: str, description: str, enrich: bool):
    """Suggest category, tags, and an estimate for a new task."""
    llm = get_llm(ctx.obj["config"]) if enrich else None
    _echo_json(analyze_task(title, description, llm))


@main.command("parse")
@click.argument("text")
@enrich_option
@click.pass_context
def parse(ctx, text: str, enrich: bool):
    """Turn a free-text description into a structured task."""
    config = ctx.obj["config"]
    llm = get_llm(config) if enrich else None
    _echo_json(_run(lambda: parse_task(text, datetime.now(config.tz), llm)))


@main.command("record-session")
@click.option("--duration", default=None, type=int, help="Minutes (default FOCUS_DURATION)")
@click.option("--task-id", default=None, help="Linked task id")
@click.option("--notes", default="", help="Session notes")
@click.pass_context
def record_session(ctx, duration: int | None, task_id: str | None, notes: str):
    """Append a completed focus session to the snapshot file."""
    config = ctx.obj["config"]
    minutes = config.focus_duration if duration is None else duration

    def record():
        repo = JsonSnapshotRepository(ctx.obj["snapshot"] or config.snapshot_file, config.tz)
        return record_focus_session(repo, minutes, datetime.now(config.tz), task_id, notes)

    session = _run(record)
    click.echo(f"✓ Recorded {session.duration}-minute focus session")


@main.command()
@now_option
@json_option
@click.pass_context
def motivate(ctx, now: str | None, as_json: bool):
    """Encouragement based on today's completions and the current streak."""
    snap = _run(lambda: _load(ctx, now))
    data = _run(lambda: build_motivation(snap, ctx.obj["config"]))

    if as_json:
        _echo_json(data)
        return

    click.echo(f"{data['emoji']} {data['message']}")
    click.echo(f"Streak: {data['streak']} days, {data['tasksCompletedToday']} done today")
    click.echo(f"\n> {data['quote']}")


@main.command("tips")
@click.option("--count", default=3, type=int, help="How many tips to draw")
@json_option
def tips_command(count: int, as_json: bool):
    """A few productivity tips and a quote."""
    data = _run(lambda: build_tips(count))

    if as_json:
        _echo_json(data)
        return

    for tip in data["tips"]:
        click.echo(f"- {tip}")
    click.echo(f"\n> {data['quote']}")


@main.command()
@click.option("--mode", type=click.Choice([m.value for m in SessionType]), default=SessionType.FOCUS.value,
              help="Interval to run")
@click.option("--task-id", default=None, help="Task to work on")
@click.pass_context
def timer(ctx, mode: str, task_id: str | None):
    """Run one Pomodoro interval in the terminal."""
    config = ctx.obj["config"]

    def start():
        repo = JsonSnapshotRepository(ctx.obj["snapshot"] or config.snapshot_file, config.tz)
        task = None
        if task_id:
            task = next((t for t in repo.fetch_tasks() if t.id == task_id), None)
            if task is None:
                raise ValidationError(f"No task with id {task_id}")
        pomodoro = PomodoroTimer(pomodoro_settings(config))
        pomodoro.select(SessionType(mode))
        label = f" on {task.title}" if task else ""
        click.echo(f"Started {pomodoro.settings.minutes_for(pomodoro.mode)}-minute {mode}{label}. Ctrl+C to stop.")
        return run_interval(repo, config, pomodoro, task, on_tick=_show_time_left)

    try:
        session = _run(start)
    except KeyboardInterrupt:
        click.echo("\nStopped. No session recorded.")
        return

    click.echo("")
    if session is not None:
        click.echo(f"✓ Recorded {session.duration}-minute focus session")
    else:
        click.echo("Break over. Back to focus!")


def _show_time_left(pomodoro: PomodoroTimer) -> None:
    click.echo(f"\r{pomodoro.format_time_left()}", nl=False)


if __name__ == "__main__":
    main()
