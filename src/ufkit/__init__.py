"""ufkit -- application-framework primitives.

Two layers:

    ufkit.core        SQL access helpers, dialects, a SQLite backend,
                      the service container, errors, logging, settings
    ufkit.execution   cancellation tokens and queueable actions
                      (serial and bounded-parallel queues)

Most applications only need the names re-exported here.
"""

__version__ = "0.1.0"

from ufkit.core import (  # noqa: E402
    Database,
    ServiceContainer,
    UFError,
    UFSettings,
    configure_logging,
    get_logger,
)
from ufkit.core.adapters import SQLiteDatabase  # noqa: E402
from ufkit.execution import (  # noqa: E402
    CallbackAction,
    CancellationTokenSource,
    DelayAction,
    ParallelQueueAction,
    QueueableAction,
    SerialQueueAction,
)

__all__ = [
    "CallbackAction",
    "CancellationTokenSource",
    "Database",
    "DelayAction",
    "ParallelQueueAction",
    "QueueableAction",
    "SQLiteDatabase",
    "SerialQueueAction",
    "ServiceContainer",
    "UFError",
    "UFSettings",
    "__version__",
    "configure_logging",
    "get_logger",
]
