"""Queue actions — run a list of actions with a concurrency cap.

WHY
───
Sequencing asynchronous steps ("download, then unpack, then import") and
fanning out a bounded number of them at once are the same problem with a
different cap.  :class:`ParallelQueueAction` solves it once;
:class:`SerialQueueAction` is the cap-of-one case.

ARCHITECTURE
────────────
::

    ParallelQueueAction(concurrency, *actions)
      ├── .run(token)            ─ launch in list order, ≤ concurrency in flight
      ├── .progress              ─ weighted mean over all actions
      ├── .running_actions()     ─ in-flight actions, list order
      └── .state                 ─ IDLE → RUNNING → COMPLETED | CANCELLED | FAILED

    run(token)
      │
      ├─ internal source linked to token
      ├─ while cursor < len and not cancelled: start actions up to the cap
      ├─ await FIRST_COMPLETED
      │     ├─ True        → add weight to done progress
      │     ├─ False       → cancel internal source (stop launching)
      │     └─ exception   → cancel internal source; ErrorPolicy decides
      └─ return not cancelled

Queues are actions themselves, so they nest.

Cancellation is cooperative: a cancelled token stops new launches, and
actions already running finish unless they observe the token themselves
(as :class:`~ufkit.execution.actions.DelayAction` does).

Example::

    queue = ParallelQueueAction(2, DelayAction(0.1), DelayAction(0.2), DelayAction(0.1))
    completed = await queue.run(source.token)
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ufkit.core.errors import ActionFailedError, ActionStateError
from ufkit.core.logging import get_logger
from ufkit.core.protocols import CancellationToken, Queueable
from ufkit.execution.actions import QueueableAction, get_progress, get_progress_weight
from ufkit.execution.cancellation import NONE_TOKEN, CancellationTokenSource

logger = get_logger(__name__)


class ErrorPolicy(str, Enum):
    """What a queue does when one of its actions raises."""

    WAIT = "wait"              # stop launching, await running actions, then raise
    FAIL_FAST = "fail_fast"    # raise at once, cancel running actions


class QueueState(str, Enum):
    """Lifecycle of a queue run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ParallelQueueAction(QueueableAction):
    """Runs actions with at most *concurrency* of them in flight.

    Parameters
    ----------
    concurrency : int
        Maximum number of actions running at the same time (>= 1).
    *actions : Queueable
        Actions to run, started in this order.
    error_policy : ErrorPolicy
        Behaviour when an action raises (default :attr:`ErrorPolicy.WAIT`).
    """

    def __init__(
        self,
        concurrency: int,
        *actions: Queueable,
        error_policy: ErrorPolicy = ErrorPolicy.WAIT,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self._concurrency = concurrency
        self._actions: list[Queueable] = list(actions)
        self._error_policy = ErrorPolicy(error_policy)
        self._active: dict[asyncio.Task[bool], int] = {}
        self._index = 0
        self._done_weight = 0.0
        self._state = QueueState.IDLE

    # ── Building ─────────────────────────────────────────────────────

    def add(self, action: Queueable) -> ParallelQueueAction:
        """Append *action*; returns ``self`` for chaining.

        Raises:
            ActionStateError: The queue is running.
        """
        if self._state is QueueState.RUNNING:
            raise ActionStateError("Cannot add actions to a running queue")
        self._actions.append(action)
        return self

    # ── Execution ────────────────────────────────────────────────────

    async def run(self, token: CancellationToken = NONE_TOKEN) -> bool:
        """Run all actions.

        A finished queue may be run again; it then starts over with the
        first action.

        Args:
            token: Cancelling it stops the queue from starting more actions.

        Returns:
            True if every action returned True; False if an action returned
            False or the token was cancelled.

        Raises:
            ActionFailedError: One or more actions raised.
            ActionStateError: The queue is already running.
        """
        if self._state is QueueState.RUNNING:
            raise ActionStateError("Queue is already running")
        self._state = QueueState.RUNNING
        self._index = 0
        self._done_weight = 0.0
        source = CancellationTokenSource(token)
        errors: list[BaseException] = []

        logger.debug(
            "queue.start",
            actions=len(self._actions),
            concurrency=self._concurrency,
            error_policy=self._error_policy.value,
        )
        try:
            await self._run_actions(source, errors)
            completed = not source.is_cancellation_requested
        except asyncio.CancelledError:
            self._state = QueueState.CANCELLED
            logger.debug("queue.interrupted", running=len(self._active))
            raise
        except BaseException:
            self._state = QueueState.FAILED
            raise
        finally:
            source.unlink()
            self._cancel_active()

        if errors:
            self._state = QueueState.FAILED
            logger.warning("queue.failed", errors=len(errors))
            raise ActionFailedError(errors)

        self._state = QueueState.COMPLETED if completed else QueueState.CANCELLED
        logger.debug("queue.finished", state=self._state.value, started=self._index)
        return completed

    async def _run_actions(
        self, source: CancellationTokenSource, errors: list[BaseException]
    ) -> None:
        while (
            not source.is_cancellation_requested and self._index < len(self._actions)
        ) or self._active:
            self._start_actions(source)
            done, _ = await asyncio.wait(
                self._active, return_when=asyncio.FIRST_COMPLETED
            )
            for task in sorted(done, key=self._active.__getitem__):
                index = self._active.pop(task)
                self._finish_action(index, task, source, errors)
            if errors and self._error_policy is ErrorPolicy.FAIL_FAST:
                raise ActionFailedError(errors)

    def _start_actions(self, source: CancellationTokenSource) -> None:
        """Start actions until the cap is reached, the list is exhausted or
        cancellation is requested."""
        while (
            not source.is_cancellation_requested
            and self._index < len(self._actions)
            and len(self._active) < self._concurrency
        ):
            action = self._actions[self._index]
            task = asyncio.create_task(
                action.run(source.token), name=f"queue-action-{self._index}"
            )
            self._active[task] = self._index
            logger.debug("queue.action_started", index=self._index, running=len(self._active))
            self._index += 1

    def _finish_action(
        self,
        index: int,
        task: asyncio.Task[bool],
        source: CancellationTokenSource,
        errors: list[BaseException],
    ) -> None:
        action = self._actions[index]
        if task.cancelled():
            source.cancel()
            return
        error = task.exception()
        if error is not None:
            errors.append(error)
            source.cancel()
            logger.warning(
                "queue.action_failed",
                index=index,
                action=repr(action),
                error=f"{type(error).__name__}: {error}",
            )
            return
        if task.result():
            self._done_weight += get_progress_weight(action)
        else:
            source.cancel()

    def _cancel_active(self) -> None:
        for task in self._active:
            task.cancel()
        self._active.clear()

    # ── Inspection ───────────────────────────────────────────────────

    @property
    def actions(self) -> list[Queueable]:
        """Copy of the action list."""
        return list(self._actions)

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def error_policy(self) -> ErrorPolicy:
        return self._error_policy

    @property
    def state(self) -> QueueState:
        return self._state

    @property
    def running(self) -> bool:
        """True while at least one action is in flight."""
        return len(self._active) > 0

    @property
    def running_count(self) -> int:
        return len(self._active)

    def running_actions(self) -> list[Queueable]:
        """In-flight actions in list order."""
        return [self._actions[index] for index in sorted(self._active.values())]

    @property
    def progress(self) -> float:
        """Weighted progress over all actions, including in-flight ones."""
        total = sum(get_progress_weight(action) for action in self._actions)
        if total <= 0:
            return 1.0 if self._state is QueueState.COMPLETED else 0.0
        running = sum(
            get_progress_weight(action) * get_progress(action)
            for action in self.running_actions()
        )
        return (running + self._done_weight) / total

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(actions={len(self._actions)}, "
            f"concurrency={self._concurrency}, state={self._state.value})"
        )


class SerialQueueAction(ParallelQueueAction):
    """Runs actions one after another (a queue with concurrency 1)."""

    def __init__(
        self,
        *actions: Queueable,
        error_policy: ErrorPolicy = ErrorPolicy.WAIT,
    ) -> None:
        super().__init__(1, *actions, error_policy=error_policy)

    @property
    def current_action(self) -> Queueable | None:
        """The running action, or None when idle or finished."""
        running = self.running_actions()
        return running[0] if running else None


__all__ = [
    "ErrorPolicy",
    "ParallelQueueAction",
    "QueueState",
    "SerialQueueAction",
]
