"""In-memory repository adapter."""

from focusflow.core.tasks import Task, TimerSession


class InMemoryRepository:
    """
    In-memory task and session storage.

    Implements TaskRepository protocol. Reads hand back copies of the
    current lists so later writes don't change a snapshot already taken.
    """

    def __init__(self, tasks: list[Task] | None = None, sessions: list[TimerSession] | None = None):
        self._tasks = list(tasks or [])
        self._sessions = list(sessions or [])

    def fetch_tasks(self) -> list[Task]:
        return list(self._tasks)

    def fetch_sessions(self) -> list[TimerSession]:
        return list(self._sessions)

    def add_session(self, session: TimerSession) -> None:
        self._sessions.append(session)

    def add_task(self, task: Task) -> None:
        self._tasks.append(task)
