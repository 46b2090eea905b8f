"""Pure task and session domain logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Status(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class SessionType(Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


def to_local(ts: datetime, tz: tzinfo = UTC) -> datetime:
    """Convert a timestamp into the reference zone (naive means already local)."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=tz)
    return ts.astimezone(tz)


def align(ts: datetime, ref: datetime) -> datetime:
    """Give a naive `ts` the zone of an aware `ref` so the two can be compared."""
    if ts.tzinfo is None and ref.tzinfo is not None:
        return ts.replace(tzinfo=ref.tzinfo)
    return ts


def local_date(ts: datetime, tz: tzinfo = UTC) -> date:
    """Calendar day of a timestamp in the reference zone."""
    return to_local(ts, tz).date()


def parse_timestamp(value, tz: tzinfo = UTC) -> datetime | None:
    """
    Parse an ISO timestamp or bare date into an aware datetime.

    Bare dates mean midnight at the start of that day in the reference zone.
    Returns None for anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_local(value, tz)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)
    if not isinstance(value, str):
        return None
    text = value.strip()
    # fromisoformat before 3.11 rejects the Z suffix
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return datetime.combine(date.fromisoformat(text), time.min, tzinfo=tz)
        return to_local(datetime.fromisoformat(text), tz)
    except ValueError:
        return None


def _parse_enum(enum_cls, value, default):
    if value is None or value == "":
        return default
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _parse_minutes(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        minutes = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return minutes if minutes >= 0 else None


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _items(value) -> list | tuple:
    return value if isinstance(value, (list, tuple)) else ()


@dataclass(frozen=True)
class Subtask:
    id: str
    title: str
    completed: bool = False


@dataclass(frozen=True)
class Task:
    """
    A task as supplied by the persistence layer.

    `priority` is None when the source carried a value that is not a known tier.
    """

    id: str
    title: str
    description: str = ""
    priority: Priority | None = Priority.MEDIUM
    status: Status = Status.PENDING
    category: str = "other"
    due_date: datetime | None = None
    estimated_time: int | None = None
    actual_time: int = 0
    tags: frozenset[str] = field(default_factory=frozenset)
    completed_at: datetime | None = None
    subtasks: tuple[Subtask, ...] = ()
    created_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == Status.COMPLETED

    @property
    def is_pending(self) -> bool:
        return self.status == Status.PENDING

    def is_overdue(self, now: datetime) -> bool:
        """Past due and not yet completed."""
        days = self.days_until_due(now)
        return not self.is_completed and days is not None and days < 0

    def is_due_on(self, day: date, tz: tzinfo = UTC) -> bool:
        return self.due_date is not None and local_date(self.due_date, tz) == day

    def is_quick_win(self, limit: int = 30) -> bool:
        """Pending with a known estimate of `limit` minutes or less."""
        return self.is_pending and bool(self.estimated_time) and self.estimated_time <= limit

    def days_until_due(self, now: datetime) -> float | None:
        """
        Fractional days until due (negative if overdue).

        A naive side is read in the zone of the other side.
        """
        if self.due_date is None:
            return None
        due = align(self.due_date, now)
        return (due - align(now, due)) / timedelta(days=1)

    def completed_on(self, day: date, tz: tzinfo = UTC) -> bool:
        return self.completed_at is not None and local_date(self.completed_at, tz) == day

    @classmethod
    def from_dict(cls, data: dict, tz: tzinfo = UTC) -> "Task":
        """Create a Task from a loose camelCase record, defaulting anything missing."""
        status = _parse_enum(Status, data.get("status"), Status.PENDING) or Status.PENDING
        completed_at = parse_timestamp(data.get("completedAt"), tz)
        if status != Status.COMPLETED:
            completed_at = None
        subtasks = tuple(
            Subtask(
                id=str(s.get("id", "")),
                title=_text(s.get("title")),
                completed=bool(s.get("completed", False)),
            )
            for s in _items(data.get("subtasks"))
            if isinstance(s, dict)
        )
        return cls(
            id=str(data.get("id", "")),
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            priority=_parse_enum(Priority, data.get("priority"), Priority.MEDIUM),
            status=status,
            category=_text(data.get("category")) or "other",
            due_date=parse_timestamp(data.get("dueDate"), tz),
            estimated_time=_parse_minutes(data.get("estimatedTime")),
            actual_time=_parse_minutes(data.get("actualTime")) or 0,
            tags=frozenset(t for t in _items(data.get("tags")) if isinstance(t, str)),
            completed_at=completed_at,
            subtasks=subtasks,
            created_at=parse_timestamp(data.get("createdAt"), tz),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value if self.priority else None,
            "status": self.status.value,
            "category": self.category,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "estimatedTime": self.estimated_time,
            "actualTime": self.actual_time,
            "tags": sorted(self.tags),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "subtasks": [
                {"id": s.id, "title": s.title, "completed": s.completed} for s in self.subtasks
            ],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def complete(self, at: datetime) -> "Task":
        """Return a completed copy; completedAt is only ever set on that transition."""
        if self.is_completed:
            return self
        return replace(self, status=Status.COMPLETED, completed_at=at)


@dataclass(frozen=True)
class TimerSession:
    """A completed Pomodoro interval."""

    id: str
    type: SessionType
    duration: int
    completed_at: datetime
    task_id: str | None = None
    notes: str = ""

    @property
    def is_focus(self) -> bool:
        return self.type == SessionType.FOCUS

    @classmethod
    def from_dict(cls, data: dict, tz: tzinfo = UTC) -> "TimerSession | None":
        """Create a session from a record; None if it has no usable completion time."""
        completed_at = parse_timestamp(data.get("completedAt"), tz)
        if completed_at is None:
            return None
        duration = _parse_minutes(data.get("duration"))
        return cls(
            id=str(data.get("id", "")),
            type=_parse_enum(SessionType, data.get("type"), SessionType.FOCUS) or SessionType.FOCUS,
            duration=25 if duration is None else duration,
            completed_at=completed_at,
            task_id=str(data["taskId"]) if data.get("taskId") else None,
            notes=_text(data.get("notes")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "duration": self.duration,
            "completedAt": self.completed_at.isoformat(),
            "taskId": self.task_id,
            "notes": self.notes,
        }


def filter_open(tasks: list[Task]) -> list[Task]:
    """Tasks that are not completed, in original order."""
    return [t for t in tasks if not t.is_completed]


def filter_overdue(tasks: list[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if t.is_overdue(now)]


def filter_due_on(tasks: list[Task], day: date, tz: tzinfo = UTC) -> list[Task]:
    """Open tasks due on a calendar day."""
    return [t for t in tasks if not t.is_completed and t.is_due_on(day, tz)]


def filter_by_priority(tasks: list[Task], priority: Priority) -> list[Task]:
    return [t for t in tasks if t.priority == priority]


def focus_sessions(sessions: list[TimerSession]) -> list[TimerSession]:
    return [s for s in sessions if s.is_focus]


def tasks_from_records(records: list[dict], tz: tzinfo = UTC) -> list[Task]:
    """Build tasks from raw records, skipping anything that is not a mapping."""
    return [Task.from_dict(r, tz) for r in records if isinstance(r, dict)]


def sessions_from_records(records: list[dict], tz: tzinfo = UTC) -> list[TimerSession]:
    """Build sessions from raw records, skipping ones with no completion time."""
    sessions = []
    for r in records:
        if not isinstance(r, dict):
            continue
        session = TimerSession.from_dict(r, tz)
        if session is not None:
            sessions.append(session)
    return sessions
