"""File-based snapshot adapter."""

import json
import logging
from datetime import tzinfo
from pathlib import Path

from focusflow.core.tasks import UTC, Task, TimerSession, sessions_from_records, tasks_from_records

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when the snapshot file can't be read or written."""

    pass


class JsonSnapshotRepository:
    """
    JSON file storage.

    Implements TaskRepository protocol. The file holds one user's data as
    {"tasks": [...], "sessions": [...]} with camelCase records.
    """

    def __init__(self, path: Path | str, tz: tzinfo = UTC):
        self.path = Path(path).expanduser()
        self.tz = tz

    def _load(self) -> dict:
        if not self.path.exists():
            raise SnapshotError(f"Snapshot file not found: {self.path}")
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Snapshot file is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot file must contain a JSON object")
        return data

    def fetch_tasks(self) -> list[Task]:
        """Fetch all tasks. Malformed records are defaulted, not rejected."""
        records = self._load().get("tasks") or []
        tasks = tasks_from_records(records, self.tz)
        logger.debug(f"Loaded {len(tasks)} tasks from {self.path}")
        return tasks

    def fetch_sessions(self) -> list[TimerSession]:
        records = self._load().get("sessions") or []
        sessions = sessions_from_records(records, self.tz)
        skipped = len(records) - len(sessions)
        if skipped:
            logger.warning(f"Skipped {skipped} session(s) without a usable completedAt")
        return sessions

    def add_session(self, session: TimerSession) -> None:
        """
        Append a session record, creating the file if needed.

        The new snapshot goes to a sibling temp file that then replaces the
        original, so a failed write leaves the previous contents intact.
        """
        data = self._load() if self.path.exists() else {"tasks": [], "sessions": []}
        data.setdefault("sessions", []).append(session.to_dict())
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2))
            tmp.replace(self.path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise SnapshotError(f"Could not write snapshot: {e}")
