from __future__ import annotations

"""Task sequencer.

``TaskSequencer`` owns the lifecycle of every in-flight plan.

Execution model
---------------

- ``submit`` plans a goal, registers a ``Task`` and issues command #0.
- The executor runs the command and reports a ``StepOutcome``.
- ``report_outcome`` records the outcome, advances the cursor by one and
  either issues the next command or finishes the task.

The sequencer never blocks the submitter: it returns as soon as the first
command is sent, and every later step is driven by an inbound outcome.

State machine
-------------

``pending -> executing -> completed | failed``

A task is removed from the repository as soon as it reaches a terminal
status, so later outcomes can never revive it.

Concurrency
-----------

All read-modify-write cycles on the repository run under one ``asyncio.Lock``.
Sending envelopes and the settle delay between steps happen outside the lock
so a slow page on one connection does not stall the others.
"""

import asyncio
import itertools
import logging
import time
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from ...core.monitoring import log_task_finished, log_task_submitted
from ..schemas.domain import (
    CommandAction,
    FailureReason,
    PageContext,
    StepOutcome,
    Task,
    TaskStatus,
)
from ..schemas.messages import (
    CommandSequencePayload,
    Envelope,
    ErrorCode,
    MessageType,
    TaskCompletePayload,
    TaskFailedPayload,
    error_envelope,
)
from .models import MessageChannel, SequencerDeps, SequencerPolicy

logger = logging.getLogger(__name__)

_task_counter = itertools.count(1)

GOAL_NOT_UNDERSTOOD = "Could not understand the goal"


def generate_task_id() -> str:
    """Return a process-unique id such as ``task_1760900000_7``.

    The counter keeps ids unique for goals submitted within the same second.
    """
    return f"task_{int(time.time())}_{next(_task_counter)}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Next(str, Enum):
    issue = "issue"
    complete = "complete"
    fail = "fail"


class TaskSequencer:
    """Drive plans one command at a time against a remote executor."""

    def __init__(
        self,
        *,
        deps: SequencerDeps,
        policy: Optional[SequencerPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize the TaskSequencer.

        Args:
            deps: Task repository and planner.
            policy: Timing/failure policy. Defaults to ``SequencerPolicy()``.
            sleep: Awaitable used for the settle delay between steps.
            clock: Source of "now" for timestamps and expiry.
        """
        self._deps = deps
        self._policy = policy or SequencerPolicy()
        self._sleep = sleep
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def policy(self) -> SequencerPolicy:
        return self._policy

    async def submit(
        self,
        goal: str,
        *,
        channel: MessageChannel,
        context: Optional[PageContext] = None,
        owner_id: Optional[str] = None,
    ) -> Optional[Task]:
        """Plan ``goal`` and start executing it.

        A goal that yields no command is answered with a ``GOAL_PARSE_ERROR``
        and no task is created. Otherwise the new task is registered, moved to
        ``executing`` and its first command is sent. Plans with more than one
        command are announced with ``COMMAND_SEQUENCE`` first.

        Returns:
            The registered task, or None when the goal could not be planned.
        """
        logger.info(f"Processing goal: {goal}")
        result = await self._deps.planner.plan(goal, context)
        if not result.commands:
            logger.info(f"No commands planned for goal: {goal}")
            await channel.send(error_envelope(GOAL_NOT_UNDERSTOOD, ErrorCode.goal_parse_error))
            return None

        now = self._clock()
        task = Task(
            id=generate_task_id(),
            goal=goal,
            commands=result.commands,
            owner_id=owner_id,
            planner_source=result.source,
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(seconds=self._policy.task_ttl) if self._policy.task_ttl else None,
        )

        async with self._lock:
            await self._deps.tasks.create(task)
            task.status = TaskStatus.executing
            await self._deps.tasks.update(task)

        logger.info(f"Task {task.id} started with {task.total} command(s) from {result.source.value} planner")
        log_task_submitted(task.id, goal, task.total, result.source.value)

        if task.total > 1:
            await channel.send(Envelope.of(MessageType.command_sequence, self._sequence_payload(task)))
        await channel.send(Envelope.of(MessageType.command, task.commands[0]))
        return task

    async def report_outcome(self, outcome: StepOutcome, *, channel: MessageChannel) -> Optional[Task]:
        """Record an executor outcome and move the owning task forward.

        Success and failure advance the cursor the same way. Only when
        ``max_consecutive_failures`` is set does a run of failures end the task
        as ``failed``.

        Returns:
            The task after the update, or None when no task matched.
        """
        async with self._lock:
            task = await self._locate(outcome)
            if task is None:
                return None

            now = self._clock()
            if self._is_expired(task, now):
                await self._finish_failed(task, FailureReason.expired, now)
                step = None
            else:
                task.outcomes.append(outcome)
                task.cursor += 1
                task.consecutive_failures = 0 if outcome.success else task.consecutive_failures + 1
                task.updated_at = now
                if not outcome.success:
                    logger.warning(f"Task {task.id} step {task.cursor - 1} failed: {outcome.error or 'no details'}")
                step = self._decide(task)
                if step is _Next.issue:
                    await self._deps.tasks.update(task)
                elif step is _Next.complete:
                    task.status = TaskStatus.completed
                    await self._deps.tasks.delete(task.id)
                else:
                    await self._finish_failed(task, FailureReason.step_failure, now)

        if step is _Next.issue:
            await self._issue_next(task, channel)
        elif step is _Next.complete:
            logger.info(f"Task {task.id} completed after {len(task.outcomes)} step(s)")
            log_task_finished(task.id, task.status.value, len(task.outcomes))
            await channel.send(Envelope.of(MessageType.task_complete, TaskCompletePayload(message=self._summary(task))))
        else:
            await channel.send(self.failure_envelope(task))
        return task

    async def cancel(self, task_id: str, *, reason: FailureReason = FailureReason.cancelled) -> Optional[Task]:
        """Fail and deregister a live task.

        Returns:
            The cancelled task, or None if no such task is registered.
        """
        async with self._lock:
            task = await self._deps.tasks.get(task_id)
            if task is None:
                logger.info(f"Cancel requested for unknown task {task_id}")
                return None
            await self._finish_failed(task, reason, self._clock())
        return task

    async def reap_expired(self) -> List[Task]:
        """Fail and deregister every task whose deadline has passed."""
        reaped: List[Task] = []
        async with self._lock:
            now = self._clock()
            for task in await self._deps.tasks.list():
                if self._is_expired(task, now):
                    await self._finish_failed(task, FailureReason.expired, now)
                    reaped.append(task)
        if reaped:
            logger.info(f"Reaped {len(reaped)} expired task(s)")
        return reaped

    async def list_tasks(self) -> List[Task]:
        return await self._deps.tasks.list()

    async def get_task(self, task_id: str) -> Optional[Task]:
        return await self._deps.tasks.get(task_id)

    def failure_envelope(self, task: Task) -> Envelope:
        reason = task.failure_reason.value if task.failure_reason else FailureReason.step_failure.value
        return Envelope.of(
            MessageType.task_failed,
            TaskFailedPayload(task_id=task.id, message=f"Task failed ({reason}): {task.goal}", reason=reason),
        )

    async def _locate(self, outcome: StepOutcome) -> Optional[Task]:
        """Find the task an outcome belongs to.

        An explicit ``taskId`` is matched exactly. Without one, and when
        legacy routing is on, the first ``executing`` task wins, then the first
        ``pending`` one (which is promoted to ``executing``).
        """
        tasks = self._deps.tasks
        if outcome.task_id:
            task = await tasks.get(outcome.task_id)
            if task is None:
                logger.info(f"Dropping outcome for unknown task {outcome.task_id}")
            return task

        if not self._policy.legacy_outcome_routing:
            logger.warning("Dropping outcome without taskId (legacy routing disabled)")
            return None

        executing = await tasks.list(TaskStatus.executing)
        if executing:
            return executing[0]
        for task in await tasks.list():
            if task.status in (TaskStatus.pending, TaskStatus.executing):
                if task.status is TaskStatus.pending:
                    task.status = TaskStatus.executing
                return task

        logger.info(f"No active task found for command completion (step={outcome.step}, action={outcome.action})")
        return None

    def _decide(self, task: Task) -> _Next:
        limit = self._policy.max_consecutive_failures
        if limit is not None and task.consecutive_failures >= limit:
            return _Next.fail
        if task.cursor < task.total:
            return _Next.issue
        return _Next.complete

    async def _issue_next(self, task: Task, channel: MessageChannel) -> None:
        await channel.send(Envelope.of(MessageType.command_sequence_update, self._sequence_payload(task)))

        previous = task.commands[task.cursor - 1]
        if previous.action == CommandAction.navigate.value:
            delay = self._policy.settle_delay_after_navigate
        else:
            delay = self._policy.settle_delay
        if delay > 0:
            await self._sleep(delay)

        # cancel, the reaper or another outcome may have run during the settle delay
        async with self._lock:
            current = await self._deps.tasks.get(task.id)
        if current is None or current.status != TaskStatus.executing or current.cursor != task.cursor:
            logger.info(f"Task {task.id} changed during settle delay; not issuing step {task.cursor}")
            return

        await channel.send(Envelope.of(MessageType.command, task.commands[task.cursor]))

    async def _finish_failed(self, task: Task, reason: FailureReason, now: datetime) -> None:
        task.status = TaskStatus.failed
        task.failure_reason = reason
        task.updated_at = now
        await self._deps.tasks.delete(task.id)
        logger.info(f"Task {task.id} failed: {reason.value}")
        log_task_finished(task.id, task.status.value, len(task.outcomes), reason.value)

    @staticmethod
    def _is_expired(task: Task, now: datetime) -> bool:
        return task.expires_at is not None and now >= task.expires_at

    @staticmethod
    def _sequence_payload(task: Task) -> CommandSequencePayload:
        return CommandSequencePayload(
            commands=task.commands,
            task_id=task.id,
            total=task.total,
            current=min(task.cursor, task.total - 1),
        )

    @staticmethod
    def _summary(task: Task) -> str:
        if task.total > 1:
            return f"Successfully completed multi-step task: {task.goal}"
        return f"Successfully completed task: {task.goal}"
