"""Adapters - I/O implementations of ports."""

from .memory_store import InMemoryRepository
from .json_snapshot import JsonSnapshotRepository, SnapshotError
from .chat_api import ChatCompletionsService

__all__ = [
    "InMemoryRepository",
    "JsonSnapshotRepository",
    "SnapshotError",
    "ChatCompletionsService",
]
