"""Tests for ServiceContainer — named providers with dependency injection."""

from __future__ import annotations

import pytest

from ufkit.core.errors import ServiceNotFoundError
from ufkit.core.services import ProviderKind, ServiceContainer


# ── Helpers ──────────────────────────────────────────────────────────────


class _Config:
    def __init__(self):
        self.url = "sqlite://"


class _Repo:
    def __init__(self, config: _Config):
        self.config = config


class _Game:
    def __init__(self, repo: _Repo, make_enemy):
        self.repo = repo
        self.make_enemy = make_enemy


class _Enemy:
    pass


@pytest.fixture
def container() -> ServiceContainer:
    c = ServiceContainer()
    c.register_singleton("config", _Config)
    c.register_factory("repo", _Repo, ["config"])
    c.register_factory("enemy", _Enemy)
    c.register_factory("game", _Game, ["repo", "enemy()"])
    return c


# ── Registration ─────────────────────────────────────────────────────────


class TestRegistration:
    def test_has_and_names(self, container):
        assert container.has("config")
        assert "repo" in container
        assert not container.has("missing")
        assert container.names() == ["config", "repo", "enemy", "game"]
        assert len(container) == 4

    def test_reregister_replaces(self, container):
        container.register_static("config", "static-config")
        assert container.get("config") == "static-config"
        assert len(container) == 4

    def test_unregister_and_clear(self, container):
        container.unregister("enemy")
        container.unregister("never-registered")
        assert not container.has("enemy")
        container.clear()
        assert len(container) == 0


# ── Resolution ───────────────────────────────────────────────────────────


class TestGet:
    def test_factory_creates_new_instance_each_time(self, container):
        assert container.get("repo") is not container.get("repo")

    def test_singleton_created_once(self, container):
        calls = []
        container.register_singleton("counter", lambda: calls.append(1) or object())
        first = container.get("counter")
        assert container.get("counter") is first
        assert calls == [1]

    def test_singleton_shared_through_dependencies(self, container):
        assert container.get("repo").config is container.get("config")

    def test_static_instance(self, container):
        instance = object()
        container.register_static("thing", instance)
        assert container.get("thing") is instance

    def test_static_none_is_valid(self, container):
        container.register_static("nothing", None)
        assert container.get("nothing") is None

    def test_factory_suffix_injects_callable(self, container):
        game = container.get("game")
        assert isinstance(game.repo, _Repo)
        enemy1, enemy2 = game.make_enemy(), game.make_enemy()
        assert isinstance(enemy1, _Enemy)
        assert enemy1 is not enemy2

    def test_unknown_service(self, container):
        with pytest.raises(ServiceNotFoundError, match="Can not find service: nope"):
            container.get("nope")

    def test_unknown_dependency(self, container):
        container.register_factory("broken", _Repo, ["nope"])
        with pytest.raises(ServiceNotFoundError) as exc_info:
            container.get("broken")
        assert exc_info.value.name == "nope"


class TestFactoryAndCall:
    def test_factory_is_cached(self, container):
        assert container.factory("enemy") is container.factory("enemy")

    def test_factory_unknown(self, container):
        with pytest.raises(ServiceNotFoundError):
            container.factory("nope")

    def test_call_resolves_arguments(self, container):
        result = container.call(lambda config, repo: (config, repo), ["config", "repo"])
        assert result[0] is container.get("config")
        assert isinstance(result[1], _Repo)

    def test_resolve_mixed(self, container):
        config, make_repo = container.resolve(["config", "repo()"])
        assert isinstance(config, _Config)
        assert isinstance(make_repo(), _Repo)


def test_provider_kinds():
    assert {k.value for k in ProviderKind} == {"factory", "singleton", "static"}
