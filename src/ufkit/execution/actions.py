"""Queueable actions.

An action is one unit of asynchronous work: ``await action.run(token)``
returns ``True`` when the work completed and ``False`` when it failed or
was cancelled, and ``action.progress`` reports how far along it is.

    QueueableAction (ABC)
      ├── CallbackAction       ─ calls a function
      ├── DelayAction          ─ waits a fixed time, stops early on cancel
      └── ParallelQueueAction  ─ runs child actions (see execution.queue)
            └── SerialQueueAction

``progress_weight`` tells a containing queue how much an action counts
towards the queue's overall progress.
"""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ufkit.core.protocols import CancellationToken
from ufkit.execution.cancellation import NONE_TOKEN


def _no_unregister() -> None:
    return None


def get_progress(action: object, default: float = 0.0) -> float:
    """``action.progress`` when the attribute exists, else *default*."""
    return getattr(action, "progress", default)


def get_progress_weight(action: object, default: float = 1.0) -> float:
    """``action.progress_weight`` when the attribute exists, else *default*."""
    return getattr(action, "progress_weight", default)


class QueueableAction(ABC):
    """Base class for actions.

    Subclasses implement :meth:`run` and usually override :attr:`progress`.
    """

    @property
    def progress(self) -> float:
        return 0.0

    @property
    def progress_weight(self) -> float:
        return 1.0

    @abstractmethod
    async def run(self, token: CancellationToken = NONE_TOKEN) -> bool:
        """Run the action.

        Args:
            token: Checked by the action to find out if it should stop.

        Returns:
            True if the action completed; False if it failed or was cancelled.
        """
        ...


class CallbackAction(QueueableAction):
    """Calls a zero-argument callback when run.

    The token is ignored: the callback is assumed to return quickly.  If the
    callback returns an awaitable it is awaited.  Exceptions raised by the
    callback propagate out of :meth:`run`.
    """

    def __init__(self, callback: Callable[[], Any]):
        self._callback = callback
        self._progress = 0.0

    @property
    def progress(self) -> float:
        return self._progress

    async def run(self, token: CancellationToken = NONE_TOKEN) -> bool:
        self._progress = 0.0
        result = self._callback()
        if inspect.isawaitable(result):
            await result
        self._progress = 1.0
        return True

    def __repr__(self) -> str:
        name = getattr(self._callback, "__qualname__", repr(self._callback))
        return f"CallbackAction({name})"


class DelayAction(QueueableAction):
    """Waits *delay* seconds.

    Progress jumps from 0 to 1 when the wait finishes; there are no
    intermediate values.  If the token is cancelled during the wait,
    :meth:`run` returns ``False`` right away and progress stays 0.
    """

    poll_interval = 0.05

    def __init__(self, delay: float):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self._progress = 0.0

    @property
    def progress(self) -> float:
        return self._progress

    async def run(self, token: CancellationToken = NONE_TOKEN) -> bool:
        self._progress = 0.0
        if token.is_cancellation_requested:
            return False
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.delay
        cancelled = loop.create_future()

        def _on_cancel() -> None:
            if not cancelled.done():
                cancelled.set_result(None)

        register = getattr(token, "register", None)
        unregister = register(_on_cancel) if register is not None else _no_unregister
        try:
            while not cancelled.done():
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                # tokens without callbacks (or with polled parents) are re-checked
                await asyncio.wait({cancelled}, timeout=min(remaining, self.poll_interval))
                if token.is_cancellation_requested:
                    _on_cancel()
        finally:
            unregister()
            if not cancelled.done():
                cancelled.cancel()
        if not cancelled.cancelled():
            return False
        self._progress = 1.0
        return True

    def __repr__(self) -> str:
        return f"DelayAction({self.delay})"


__all__ = [
    "CallbackAction",
    "DelayAction",
    "QueueableAction",
    "get_progress",
    "get_progress_weight",
]
