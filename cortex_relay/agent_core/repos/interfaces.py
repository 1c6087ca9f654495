from __future__ import annotations

"""Repository interface contracts.

The sequencer depends on this Protocol instead of a concrete task table.

Contract guidelines
-------------------

- All methods are async.
- Implementations must be safe to call concurrently from several websocket
  sessions; each individual call is atomic.
- Returned tasks are snapshots. Changing one does nothing until it is written
  back with ``update``.
- ``list`` returns tasks in registration order (oldest first). The legacy
  outcome routing relies on this order.
- Methods are idempotent where reasonable (deleting an unknown task is a
  no-op).
"""

from typing import Optional, Protocol

from ..schemas.domain import Task, TaskStatus


class TaskRepository(Protocol):
    """Registry of in-flight tasks keyed by task id."""

    async def create(self, task: Task) -> None:
        """
        Register a new task.

        Args:
            task: The task to store. Its id must not be registered yet.

        Raises:
            ValueError: If a task with the same id already exists.
        """
        ...

    async def get(self, task_id: str) -> Optional[Task]:
        """
        Retrieve a task by its ID.

        Args:
            task_id: The task identifier.

        Returns:
            The Task if registered, else None.
        """
        ...

    async def update(self, task: Task) -> None:
        """
        Replace the stored state of a registered task.

        Args:
            task: The new task state. Unknown ids are ignored.
        """
        ...

    async def delete(self, task_id: str) -> None:
        """
        Deregister a task.

        Args:
            task_id: The task identifier.
        """
        ...

    async def list(self, status: Optional[TaskStatus] = None) -> list[Task]:
        """
        List registered tasks, optionally filtered by status.

        Args:
            status: Only return tasks in this status.

        Returns:
            Tasks in registration order.
        """
        ...
