"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .llm_service import LLMService

__all__ = [
    "TaskRepository",
    "LLMService",
]
