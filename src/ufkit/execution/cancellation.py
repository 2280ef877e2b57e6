"""Cooperative cancellation.

A :class:`CancellationTokenSource` owns a flag that can be raised once with
:meth:`~CancellationTokenSource.cancel`; its :attr:`~CancellationTokenSource.token`
is a read-only view handed to work that should stop when asked.  Nothing
is interrupted: work polls ``token.is_cancellation_requested`` or
registers a callback, and stops on its own.

Sources can be linked to parent tokens.  Cancelling a parent cancels every
source linked to it, recursively; cancelling a linked source never touches
its parents.

Any object with an ``is_cancellation_requested`` attribute can act as a
token.  Parents that also offer ``register`` push their cancellation into
the source; parents without it are polled whenever the source's flag is
read, and the source's own callbacks run at that point.

Example::

    outer = CancellationTokenSource()
    inner = CancellationTokenSource(outer.token)

    inner.cancel()
    outer.token.is_cancellation_requested   # False
    outer.cancel()                          # already-cancelled inner stays so

:data:`NONE_TOKEN` is never cancelled and is the default everywhere a token
is optional.  The design follows the .NET ``CancellationTokenSource``.
"""

from __future__ import annotations

from collections.abc import Callable

from ufkit.core.logging import get_logger
from ufkit.core.protocols import CancellationToken

logger = get_logger(__name__)


def _noop() -> None:
    return None


class _NeverCancelledToken:
    """Token that is never cancelled; ``register`` does nothing."""

    @property
    def is_cancellation_requested(self) -> bool:
        return False

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:  # noqa: ARG002
        return _noop

    def __repr__(self) -> str:
        return "CancellationToken.NONE"


NONE_TOKEN: CancellationToken = _NeverCancelledToken()


class SourceToken:
    """Read-only view on a :class:`CancellationTokenSource`."""

    __slots__ = ("_source",)

    def __init__(self, source: CancellationTokenSource):
        self._source = source

    @property
    def is_cancellation_requested(self) -> bool:
        return self._source.is_cancellation_requested

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Run *callback* once on cancellation; returns an unregister callable."""
        return self._source._register(callback)

    def __repr__(self) -> str:
        return f"SourceToken(cancelled={self.is_cancellation_requested})"


class CancellationTokenSource:
    """Owner of a one-way cancellation flag.

    Args:
        *parents: Tokens whose cancellation also cancels this source.
    """

    NONE: CancellationToken = NONE_TOKEN

    def __init__(self, *parents: CancellationToken):
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []
        self._token = SourceToken(self)
        self._parents = list(parents)
        self._unlink: list[Callable[[], None]] = []
        for parent in parents:
            register = getattr(parent, "register", None)
            if register is not None:
                self._unlink.append(register(self.cancel))

    @property
    def token(self) -> CancellationToken:
        """Token reporting this source's state."""
        return self._token

    @property
    def is_cancellation_requested(self) -> bool:
        if not self._cancelled and any(
            parent.is_cancellation_requested for parent in self._parents
        ):
            self.cancel()
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation. Calling it again has no effect."""
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        logger.debug("cancellation.requested", callbacks=len(callbacks))
        for callback in callbacks:
            callback()

    def unlink(self) -> None:
        """Stop following the parent tokens given to the constructor."""
        for unregister in self._unlink:
            unregister()
        self._unlink = []
        self._parents = []

    def _register(self, callback: Callable[[], None]) -> Callable[[], None]:
        if self.is_cancellation_requested:
            callback()
            return _noop
        self._callbacks.append(callback)

        def unregister() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unregister

    def __repr__(self) -> str:
        return f"CancellationTokenSource(cancelled={self._cancelled})"


def create_source(parent: CancellationToken | None = None) -> CancellationTokenSource:
    """New source, linked to *parent* when given."""
    if parent is None:
        return CancellationTokenSource()
    return CancellationTokenSource(parent)


__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "NONE_TOKEN",
    "SourceToken",
    "create_source",
]
