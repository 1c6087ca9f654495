"""In-memory ``TaskRepository`` implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from ..schemas.domain import Task, TaskStatus

logger = logging.getLogger(__name__)


class InMemoryTaskRepository:
    """Dict-backed task registry guarded by a single ``asyncio.Lock``.

    Tasks are copied on the way in and on the way out so callers can never
    mutate the registry behind its back.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self._lock = asyncio.Lock()

    async def create(self, task: Task) -> None:
        async with self._lock:
            if task.id in self._tasks:
                raise ValueError(f"task already registered: {task.id}")
            self._tasks[task.id] = task.model_copy(deep=True)
            logger.debug("Registered task %s (%d in flight)", task.id, len(self._tasks))

    async def get(self, task_id: str) -> Optional[Task]:
        async with self._lock:
            task = self._tasks.get(task_id)
            return task.model_copy(deep=True) if task is not None else None

    async def update(self, task: Task) -> None:
        async with self._lock:
            if task.id not in self._tasks:
                logger.debug("Ignoring update for unknown task %s", task.id)
                return
            self._tasks[task.id] = task.model_copy(deep=True)

    async def delete(self, task_id: str) -> None:
        async with self._lock:
            if self._tasks.pop(task_id, None) is not None:
                logger.debug("Deregistered task %s (%d in flight)", task_id, len(self._tasks))

    async def list(self, status: Optional[TaskStatus] = None) -> list[Task]:
        async with self._lock:
            return [
                task.model_copy(deep=True)
                for task in self._tasks.values()
                if status is None or task.status == status
            ]
