"""Task registry interface and the in-memory implementation.

The repository layer is the storage boundary for the task sequencer.

Responsibilities
----------------

- Provide a small async repository interface (Protocol) that the sequencer
  can depend on.
- Hold the in-flight tasks of the process: one entry per submitted goal,
  removed again when the task completes, fails, is cancelled or expires.

Design notes
------------

The sequencer is written against the interface so it can be used with:

- the lock-guarded in-memory registry provided in ``repos.memory``,
- in-test fakes,
- a shared store if the relay ever runs as several processes.
"""

from .interfaces import TaskRepository
from .memory import InMemoryTaskRepository

__all__ = [
    "InMemoryTaskRepository",
    "TaskRepository",
]
