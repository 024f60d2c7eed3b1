"""Tests for Registry registration, exact-scope lookup, deletion and scopes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from scopewire.exceptions import (
    ScopewireInvalidRegistrationError,
    ScopewireServiceNotFoundError,
)
from scopewire.lock_mode import LockMode
from scopewire.providers import Resolver
from scopewire.registry import Registry


@dataclass
class Config:
    value: str


@dataclass
class Database:
    config: Config


class TestRegisterAndResolve:
    @pytest.mark.parametrize(
        ("name", "scope"),
        [(None, None), ("primary", None), (None, "checkout"), ("primary", "checkout")],
    )
    def test_register_value_round_trip(
        self,
        registry: Registry,
        name: str | None,
        scope: str | None,
    ) -> None:
        config = Config("round-trip")
        registry.register_value(Config, config, name=name, scope=scope)

        assert registry.resolve(Config, name=name, scope=scope) is config

    def test_factory_receives_resolver(self, registry: Registry) -> None:
        registry.register_value(Config, Config("db"))
        registry.register(Database, lambda resolver: Database(resolver.resolve(Config)))

        database = registry.resolve(Database)

        assert database.config == Config("db")

    def test_factory_is_invoked_on_every_resolve(self, registry: Registry) -> None:
        calls: list[int] = []

        def make_config(_resolver: Resolver) -> Config:
            calls.append(1)
            return Config(str(len(calls)))

        registry.register(Config, make_config)

        first = registry.resolve(Config)
        second = registry.resolve(Config)

        assert first is not second
        assert (first.value, second.value) == ("1", "2")

    def test_factory_is_not_invoked_at_registration(self, registry: Registry) -> None:
        def explode(_resolver: Resolver) -> Config:
            raise AssertionError

        registry.register(Config, explode)

        assert registry.has_registration(Config)

    def test_shared_instance_through_closure(self, registry: Registry) -> None:
        shared = Config("shared")
        registry.register(Config, lambda _: shared)

        assert registry.resolve(Config) is registry.resolve(Config)

    def test_service_factory_object(self, registry: Registry) -> None:
        class ConfigFactory:
            def resolve(self, resolver: Resolver) -> Config:
                _ = resolver
                return Config("from factory object")

        registry.register(Config, ConfigFactory())

        assert registry.resolve(Config).value == "from factory object"

    def test_non_callable_factory_is_rejected(self, registry: Registry) -> None:
        with pytest.raises(ScopewireInvalidRegistrationError, match="must be callable"):
            registry.register(Config, Config("not a factory"))  # type: ignore[arg-type]

        assert not registry.has_registration(Config)

    def test_names_are_distinct(self, registry: Registry) -> None:
        registry.register_value(str, "default")
        registry.register_value(str, "special", name="special")

        assert registry.resolve(str) == "default"
        assert registry.resolve(str, name="special") == "special"

    def test_absent_name_is_the_empty_name(self, registry: Registry) -> None:
        registry.register_value(str, "default")

        assert registry.resolve(str, name="") == "default"
        assert registry.has_registration(str, name="")

    def test_registry_is_resolvable_only_when_registered(self, registry: Registry) -> None:
        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(Registry)


class TestOverwrite:
    def test_last_registration_wins(self, registry: Registry) -> None:
        registry.register_value(str, "First Value")
        registry.register_value(str, "Second Value")

        assert registry.resolve(str) == "Second Value"

    def test_overwrite_in_scope_leaves_global_alone(self, registry: Registry) -> None:
        registry.register_value(str, "global")
        registry.register_value(str, "first", scope="s")
        registry.register_value(str, "second", scope="s")

        assert registry.resolve(str, scope="s") == "second"
        assert registry.resolve(str) == "global"


class TestScopeIsolation:
    def test_scoped_registration_is_not_global(self, registry: Registry) -> None:
        registry.register_value(Config, Config("scoped"), scope="s")

        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(Config)

    def test_global_registration_is_not_scoped(self, registry: Registry) -> None:
        registry.register_value(Config, Config("global"))

        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(Config, scope="s")

    def test_named_scoped_registration_is_not_global(self, registry: Registry) -> None:
        registry.register_value(int, 99, name="specialNumber", scope="testScope")

        assert registry.resolve(int, name="specialNumber", scope="testScope") == 99
        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(int, name="specialNumber")

    def test_scopes_do_not_see_each_other(self, registry: Registry) -> None:
        registry.register_value(Config, Config("a"), scope="a")

        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(Config, scope="b")

    def test_has_registration_respects_scope(self, registry: Registry) -> None:
        registry.register_value(Config, Config("scoped"), scope="s")

        assert registry.has_registration(Config, scope="s")
        assert not registry.has_registration(Config)
        assert not registry.has_registration(Config, scope="other")


class TestNotFound:
    def test_descriptor_is_the_type_name(self, registry: Registry) -> None:
        with pytest.raises(ScopewireServiceNotFoundError) as exc_info:
            registry.resolve(Database, name="missing", scope="nowhere")

        assert exc_info.value.descriptor == "Database"
        assert "Database" in str(exc_info.value)
        assert exc_info.value.service_key is not None
        assert exc_info.value.service_key.scope == "nowhere"

    def test_wrong_type_from_factory_is_not_found(self, registry: Registry) -> None:
        registry.register(float, lambda _: "not a float")

        with pytest.raises(ScopewireServiceNotFoundError) as exc_info:
            registry.resolve(float)

        assert exc_info.value.descriptor == "float"

    def test_registration_under_other_type_is_not_found(self, registry: Registry) -> None:
        registry.register(int, lambda _: 42)

        with pytest.raises(ScopewireServiceNotFoundError) as exc_info:
            registry.resolve(float)

        assert exc_info.value.descriptor == "float"

    def test_subclass_instance_is_accepted(self, registry: Registry) -> None:
        class SpecialConfig(Config):
            pass

        registry.register(Config, lambda _: SpecialConfig("special"))

        assert isinstance(registry.resolve(Config), SpecialConfig)


class TestDelete:
    def test_delete_then_resolve_fails(self, registry: Registry) -> None:
        registry.register_value(Config, Config("gone"))
        registry.delete(Config)

        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(Config)

    def test_delete_scoped(self, registry: Registry) -> None:
        registry.register_value(Config, Config("gone"), scope="testScope")
        registry.delete(Config, scope="testScope")

        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(Config, scope="testScope")

    def test_delete_missing_is_noop(self, registry: Registry) -> None:
        registry.register_value(str, "kept")

        registry.delete(str, name="never-registered")
        registry.delete(Config)
        registry.delete(Config, scope="never-created")

        assert registry.resolve(str) == "kept"

    def test_delete_keeps_other_names(self, registry: Registry) -> None:
        registry.register_value(str, "default")
        registry.register_value(str, "special", name="special")

        registry.delete(str, name="special")

        assert registry.resolve(str) == "default"
        assert not registry.has_registration(str, name="special")

    def test_delete_prunes_empty_scope(self, registry: Registry) -> None:
        registry.register_value(Config, Config("a"), scope="a")
        registry.register_value(Config, Config("b"), scope="b")
        registry.register_value(str, "b", scope="b")

        registry.delete(Config, scope="a")
        registry.delete(Config, scope="b")

        assert registry.scopes() == ["b"]

        registry.delete(str, scope="b")

        assert registry.scopes() == []
        assert registry.registrations() == []


class TestClearScope:
    def test_clear_scope_removes_every_entry(self, registry: Registry) -> None:
        registry.register_value(Config, Config("scoped"), scope="s")
        registry.register_value(str, "named", name="n", scope="s")

        registry.clear_scope("s")

        assert not registry.has_registration(Config, scope="s")
        assert not registry.has_registration(str, name="n", scope="s")
        with pytest.raises(ScopewireServiceNotFoundError):
            registry.resolve(Config, scope="s")

    def test_clear_scope_keeps_other_scopes_and_global(self, registry: Registry) -> None:
        registry.register_value(Config, Config("s"), scope="s")
        registry.register_value(Config, Config("s/t"), scope="s/t")
        registry.register_value(Config, Config("global"))

        registry.clear_scope("s")

        assert registry.resolve(Config, scope="s/t") == Config("s/t")
        assert registry.resolve(Config) == Config("global")

    def test_clear_unknown_scope_is_noop(self, registry: Registry) -> None:
        registry.clear_scope("never-created")
        registry.clear_scope("never-created")

        assert registry.scopes() == []


class TestIntrospection:
    def test_registrations_lists_global_then_scoped(self, registry: Registry) -> None:
        registry.register_value(str, "b", name="b", scope="z")
        registry.register_value(Config, Config("global"))
        registry.register_value(str, "a", scope="a")

        described = [key.describe() for key in registry.registrations()]

        assert described == [
            "Config(name: default, scope: global)",
            "str(name: default, scope: a)",
            "str(name: b, scope: z)",
        ]

    def test_describe_registrations(self, registry: Registry) -> None:
        registry.register_value(Config, Config("global"))
        registry.register_value(Config, Config("named"), name="named")
        registry.register_value(str, "scoped", scope="root/parent")

        assert registry.describe_registrations().splitlines() == [
            "Global registrations:",
            "  Config",
            "    - default",
            "    - named",
            "Scoped registrations:",
            "  Scope: root/parent",
            "    str",
            "      - default",
        ]

    def test_describe_empty_registry(self, registry: Registry) -> None:
        assert registry.describe_registrations().splitlines() == [
            "Global registrations:",
            "  (none)",
            "Scoped registrations:",
            "  (none)",
        ]

    def test_log_registrations(
        self,
        registry: Registry,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        registry.register_value(Config, Config("global"))

        with caplog.at_level("INFO", logger="scopewire.registry"):
            registry.log_registrations(level=20)

        assert "Global registrations:" in caplog.text
        assert "Config" in caplog.text


class TestLockMode:
    def test_unlocked_registry_behaves_the_same(self, registry_unlocked: Registry) -> None:
        registry_unlocked.register_value(Config, Config("x"), scope="s")

        assert registry_unlocked.resolve(Config, scope="s") == Config("x")
        registry_unlocked.clear_scope("s")
        assert not registry_unlocked.has_registration(Config, scope="s")

    def test_unlocked_factory_can_reenter(self) -> None:
        registry = Registry(lock_mode=LockMode.NONE)
        registry.register_value(Config, Config("inner"))
        registry.register(Database, lambda resolver: Database(resolver.resolve(Config)))

        assert registry.resolve(Database).config.value == "inner"


def test_resolve_any_skips_type_check(registry: Registry) -> None:
    payload: dict[str, Any] = {"k": "v"}
    registry.register_value(Any, payload)

    assert registry.resolve(Any) is payload
