"""
Dependency-injection container.

:class:`ServiceContainer` maps service names to providers.  A provider
declares the names of the services it depends on; when a service is
requested those are resolved first and passed to the provider
positionally, in the declared order.

Appending ``()`` to a dependency name injects a zero-argument factory for
that service instead of an instance, so a consumer can create instances on
demand.

The container is an ordinary object: create one per application (or per
test) and pass it to whoever needs it.  It is not synchronized; use it
from a single thread or guard it externally.

Usage::

    container = ServiceContainer()
    container.register_singleton("settings", UFSettings)
    container.register_singleton("db", SQLiteDatabase.from_settings, ["settings"])
    container.register_factory("enemy", EnemyView)
    container.register_factory("game", Game, ["db", "enemy()"])

    game = container.get("game")        # Game(db, <factory for enemy>)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from ufkit.core.errors import ServiceNotFoundError
from ufkit.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

FACTORY_SUFFIX = "()"


class ProviderKind(str, Enum):
    """How a registered service produces its instance."""

    FACTORY = "factory"        # new instance per request
    SINGLETON = "singleton"    # created on first request, then reused
    STATIC = "static"          # registered instance


@dataclass
class ServiceEntry:
    """Registration record for one service."""

    kind: ProviderKind
    provider: Callable[..., Any] | None = None
    services: tuple[str, ...] = ()
    instance: Any = None
    created: bool = False
    factory: Callable[[], Any] | None = field(default=None, repr=False)


class ServiceContainer:
    """Name-to-provider registry with dependency injection."""

    def __init__(self) -> None:
        self._services: dict[str, ServiceEntry] = {}

    # ── Registration ─────────────────────────────────────────────────

    def register_factory(
        self,
        name: str,
        factory: Callable[..., Any],
        services: Sequence[str] = (),
    ) -> None:
        """Create a new instance with *factory* on every request.

        *factory* may be any callable, including a class.
        """
        self._register(name, ServiceEntry(ProviderKind.FACTORY, factory, tuple(services)))

    def register_singleton(
        self,
        name: str,
        factory: Callable[..., Any],
        services: Sequence[str] = (),
    ) -> None:
        """Create the instance with *factory* on first request and reuse it."""
        self._register(name, ServiceEntry(ProviderKind.SINGLETON, factory, tuple(services)))

    def register_static(self, name: str, instance: Any) -> None:
        """Return *instance* for every request."""
        self._register(
            name, ServiceEntry(ProviderKind.STATIC, instance=instance, created=True)
        )

    def _register(self, name: str, entry: ServiceEntry) -> None:
        if name in self._services:
            logger.debug("services.replaced", service=name, kind=entry.kind.value)
        self._services[name] = entry

    def unregister(self, name: str) -> None:
        """Remove a service; unknown names are ignored."""
        self._services.pop(name, None)

    def clear(self) -> None:
        """Remove all services."""
        self._services.clear()

    # ── Lookup ───────────────────────────────────────────────────────

    def has(self, name: str) -> bool:
        """True when a service is registered under *name*."""
        return name in self._services

    def names(self) -> list[str]:
        """Registered service names in registration order."""
        return list(self._services)

    def get(self, name: str) -> Any:
        """Instance for the service registered under *name*.

        Raises:
            ServiceNotFoundError: *name*, or one of its dependencies, is not
                registered.
        """
        entry = self._entry(name)
        if entry.kind is ProviderKind.FACTORY:
            return self._create(entry)
        if not entry.created:
            entry.instance = self._create(entry)
            entry.created = True
        return entry.instance

    def factory(self, name: str) -> Callable[[], Any]:
        """Zero-argument callable returning ``get(name)``.

        The same callable is returned for repeated calls.
        """
        entry = self._entry(name)
        if entry.factory is None:
            entry.factory = lambda: self.get(name)
        return entry.factory

    def call(self, function: Callable[..., T], services: Sequence[str]) -> T:
        """Call *function* with the resolved *services* as arguments.

        Classes are callables too, so this also constructs objects.
        """
        return function(*self.resolve(services))

    def resolve(self, services: Sequence[str]) -> list[Any]:
        """Instances (or factories, for ``name()``) for each name in order."""
        return [
            self.factory(service[: -len(FACTORY_SUFFIX)])
            if service.endswith(FACTORY_SUFFIX)
            else self.get(service)
            for service in services
        ]

    # ── Internals ────────────────────────────────────────────────────

    def _entry(self, name: str) -> ServiceEntry:
        try:
            return self._services[name]
        except KeyError:
            raise ServiceNotFoundError(name) from None

    def _create(self, entry: ServiceEntry) -> Any:
        assert entry.provider is not None
        return entry.provider(*self.resolve(entry.services))

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __len__(self) -> int:
        return len(self._services)


__all__ = [
    "FACTORY_SUFFIX",
    "ProviderKind",
    "ServiceContainer",
    "ServiceEntry",
]
