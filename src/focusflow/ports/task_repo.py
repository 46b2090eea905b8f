"""Task and session repository interface."""

from typing import Protocol

from focusflow.core.tasks import Task, TimerSession


class TaskRepository(Protocol):
    """Interface for reading one user's tasks and sessions from any backend.

    Each call must return a consistent point-in-time snapshot.
    """

    def fetch_tasks(self) -> list[Task]:
        """Fetch all tasks."""
        ...

    def fetch_sessions(self) -> list[TimerSession]:
        """Fetch all completed timer sessions."""
        ...

    def add_session(self, session: TimerSession) -> None:
        """Record a completed timer session."""
        ...
