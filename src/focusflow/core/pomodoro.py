"""Pomodoro interval state machine.

focus -> shortBreak after each completed focus interval, except every Nth
(default 4th) which goes to longBreak. Any break completes back to focus.
Only a completed focus interval produces a TimerSession.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from .errors import require_positive
from .tasks import SessionType, Task, TimerSession


@dataclass(frozen=True)
class PomodoroSettings:
    """Interval lengths in minutes."""

    focus_duration: int = 25
    short_break: int = 5
    long_break: int = 15
    sessions_before_long_break: int = 4

    def __post_init__(self):
        require_positive("focus_duration", self.focus_duration)
        require_positive("short_break", self.short_break)
        require_positive("long_break", self.long_break)
        require_positive("sessions_before_long_break", self.sessions_before_long_break)

    def minutes_for(self, mode: SessionType) -> int:
        return {
            SessionType.FOCUS: self.focus_duration,
            SessionType.SHORT_BREAK: self.short_break,
            SessionType.LONG_BREAK: self.long_break,
        }[mode]

    def to_dict(self) -> dict:
        return {
            "focusDuration": self.focus_duration,
            "shortBreak": self.short_break,
            "longBreak": self.long_break,
            "sessionsBeforeLongBreak": self.sessions_before_long_break,
        }


def next_mode(mode: SessionType, focus_completed: int, every: int = 4) -> SessionType:
    """
    Mode that follows a completed interval.

    `focus_completed` counts focus intervals including the one just finished.
    """
    if mode != SessionType.FOCUS:
        return SessionType.FOCUS
    if focus_completed % every == 0:
        return SessionType.LONG_BREAK
    return SessionType.SHORT_BREAK


class PomodoroTimer:
    """
    A single countdown driven by explicit ticks.

    There is only ever one armed interval: start() while running is a no-op,
    and switching modes disarms the current countdown first. The countdown
    stops on pause(), reset(), or when time_left reaches zero.
    """

    def __init__(self, settings: PomodoroSettings | None = None):
        self.settings = settings or PomodoroSettings()
        self.mode = SessionType.FOCUS
        self.sessions_completed = 0
        self.time_left = self._full_interval(self.mode)
        self.running = False
        self.task: Task | None = None

    def _full_interval(self, mode: SessionType) -> int:
        return self.settings.minutes_for(mode) * 60

    def _switch(self, mode: SessionType) -> None:
        self.running = False
        self.mode = mode
        self.time_left = self._full_interval(mode)

    def select(self, mode: SessionType) -> None:
        """Manually switch mode; disarms any running countdown."""
        self._switch(mode)

    def start(self, task: Task | None = None) -> None:
        if task is not None:
            self.task = task
        if self.time_left <= 0:
            self.time_left = self._full_interval(self.mode)
        self.running = True

    def pause(self) -> None:
        self.running = False

    def reset(self) -> None:
        """Stop and refill the current mode's interval."""
        self._switch(self.mode)

    def skip(self) -> None:
        """Jump to the other side of the cycle without recording a session."""
        if self.mode == SessionType.FOCUS:
            self._switch(SessionType.SHORT_BREAK)
        else:
            self._switch(SessionType.FOCUS)

    def tick(self, now: datetime, seconds: int = 1) -> TimerSession | None:
        """Advance the countdown; returns a session if a focus interval finished."""
        if not self.running:
            return None
        self.time_left = max(0, self.time_left - seconds)
        if self.time_left == 0:
            return self.complete(now)
        return None

    def complete(self, now: datetime) -> TimerSession | None:
        """Finish the current interval and move to the next mode."""
        session = None
        finished = self.mode
        if finished == SessionType.FOCUS:
            self.sessions_completed += 1
            session = TimerSession(
                id=str(uuid.uuid4()),
                type=SessionType.FOCUS,
                duration=self.settings.focus_duration,
                completed_at=now,
                task_id=self.task.id if self.task else None,
                notes=f"Worked on: {self.task.title}" if self.task else "",
            )
        self._switch(
            next_mode(finished, self.sessions_completed, self.settings.sessions_before_long_break)
        )
        return session

    def progress(self) -> float:
        """Percent of the current interval elapsed."""
        full = self._full_interval(self.mode)
        return (full - self.time_left) / full * 100

    def format_time_left(self) -> str:
        minutes, seconds = divmod(self.time_left, 60)
        return f"{minutes:02d}:{seconds:02d}"
