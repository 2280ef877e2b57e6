"""ufkit.execution -- cooperative cancellation and queueable actions.

ARCHITECTURE
────────────
::

    CancellationTokenSource ── .token ──▶ CancellationToken
      └── linked sources follow their parent tokens

    QueueableAction (run(token) -> bool, progress, progress_weight)
      ├── CallbackAction
      ├── DelayAction
      └── ParallelQueueAction (concurrency cap, weighted progress)
            └── SerialQueueAction
"""

from ufkit.execution.actions import (
    CallbackAction,
    DelayAction,
    QueueableAction,
    get_progress,
    get_progress_weight,
)
from ufkit.execution.cancellation import (
    NONE_TOKEN,
    CancellationTokenSource,
    SourceToken,
    create_source,
)
from ufkit.execution.queue import (
    ErrorPolicy,
    ParallelQueueAction,
    QueueState,
    SerialQueueAction,
)

__all__ = [
    "CallbackAction",
    "CancellationTokenSource",
    "DelayAction",
    "ErrorPolicy",
    "NONE_TOKEN",
    "ParallelQueueAction",
    "QueueState",
    "QueueableAction",
    "SerialQueueAction",
    "SourceToken",
    "create_source",
    "get_progress",
    "get_progress_weight",
]
