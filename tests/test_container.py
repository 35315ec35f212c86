"""
Service container: bindings, instances, aliases, autowiring and cycles.
"""

import abc
import gc
import random
import weakref
from typing import Annotated, Optional

import pytest

from orchestr.container import (
    BindingResolutionError,
    CircularDependencyError,
    Container,
    ContainerError,
    Inject,
    inspect_dependencies,
)


class Logger:
    pass


class Repository:
    def __init__(self, logger: Logger):
        self.logger = logger


class UserService:
    def __init__(self, repo: Repository, logger: Logger):
        self.repo = repo
        self.logger = logger


class Mailer:
    def __init__(self, dsn: Annotated[str, Inject("mail.dsn")], retries: int = 3):
        self.dsn = dsn
        self.retries = retries


class NeedsPrimitive:
    def __init__(self, name: str):
        self.name = name


class Cache:
    pass


class OptionalCache:
    def __init__(self, cache: Optional["UnbuildableCache"] = None):
        self.cache = cache


class UnbuildableCache(abc.ABC):
    @abc.abstractmethod
    def get(self, key):
        ...


class ChickenService:
    def __init__(self, egg: "EggService"):
        self.egg = egg


class EggService:
    def __init__(self, chicken: ChickenService):
        self.chicken = chicken


class Greeter:
    def handle(self, name):
        return f"hello {name}"

    def shout(self, name):
        return f"HELLO {name}"


# ============================================================================
# Bindings
# ============================================================================

class TestBindings:

    def test_singleton_returns_same_instance(self, container):
        container.singleton("db", lambda c: {"id": random.random()})
        first = container.make("db")
        second = container.make("db")
        assert first is second
        assert first["id"] == second["id"]

    def test_bind_returns_fresh_instances(self, container):
        container.bind("request", lambda c: object())
        assert container.make("request") is not container.make("request")

    def test_factory_receives_container(self, container):
        received = []
        container.bind("svc", lambda c: received.append(c) or "svc")
        container.make("svc")
        assert received == [container]

    def test_zero_argument_factory(self, container):
        container.bind("answer", lambda: 42)
        assert container.make("answer") == 42

    def test_bind_class_concrete(self, container):
        container.bind(Logger)
        assert isinstance(container.make(Logger), Logger)

    def test_bind_abstract_to_class(self, container):
        container.singleton("logger", Logger)
        assert container.make("logger") is container.make("logger")
        assert isinstance(container.make("logger"), Logger)

    def test_instance_identity(self, container):
        obj = object()
        assert container.instance("x", obj) is obj
        assert container.make("x") is obj

    def test_bind_if_keeps_existing(self, container):
        container.bind("svc", lambda: "first")
        container.bind_if("svc", lambda: "second")
        container.bind_if("other", lambda: "other")
        assert container.make("svc") == "first"
        assert container.make("other") == "other"

    def test_singleton_if(self, container):
        container.singleton_if("svc", lambda: object())
        container.singleton_if("svc", lambda: "ignored")
        assert container.make("svc") is container.make("svc")

    def test_rebinding_discards_cached_singleton(self, container):
        container.singleton("svc", lambda: "old")
        assert container.make("svc") == "old"
        container.singleton("svc", lambda: "new")
        assert container.make("svc") == "new"

    def test_string_without_concrete_is_invalid(self, container):
        with pytest.raises(ContainerError) as exc:
            container.bind("svc")
        assert exc.value.code == "INVALID_BINDING"

    def test_non_callable_concrete_is_invalid(self, container):
        with pytest.raises(ContainerError) as exc:
            container.bind("svc", 42)
        assert exc.value.code == "INVALID_BINDING"

    def test_factory_returns_resolver(self, container):
        container.singleton("svc", lambda: object())
        make_svc = container.factory("svc")
        assert make_svc() is container.make("svc")


# ============================================================================
# Aliases
# ============================================================================

class TestAliases:

    def test_alias_chain_resolves_transitively(self, container):
        container.singleton("real", lambda: object())
        container.alias("real", "a")
        container.alias("a", "b")
        assert container.make("b") is container.make("real")
        assert container.get_alias("b") == "real"
        assert container.is_alias("a")
        assert not container.is_alias("real")

    def test_class_alias(self, container):
        container.singleton("logger", lambda: Logger())
        container.alias("logger", Logger)
        assert container.make(Logger) is container.make("logger")

    def test_self_alias_rejected(self, container):
        with pytest.raises(ContainerError) as exc:
            container.alias("a", "a")
        assert exc.value.code == "INVALID_ALIAS"

    def test_alias_cycle_detected(self, container):
        container.alias("a", "b")
        container.alias("b", "a")
        with pytest.raises(CircularDependencyError) as exc:
            container.make("a")
        assert exc.value.kind == "alias"
        assert exc.value.code == "CIRCULAR_DEPENDENCY"

    def test_bound_follows_alias(self, container):
        container.bind("real", lambda: 1)
        container.alias("real", "alias")
        assert container.bound("alias")
        assert "alias" in container
        assert container.has("real")


# ============================================================================
# Autowiring
# ============================================================================

class TestAutowiring:

    def test_builds_unbound_class_graph(self, container):
        service = container.make(UserService)
        assert isinstance(service.repo, Repository)
        assert isinstance(service.repo.logger, Logger)

    def test_shared_dependency_injected(self, container):
        container.singleton(Logger)
        service = container.make(UserService)
        assert service.logger is service.repo.logger

    def test_annotated_inject_key(self, container):
        container.instance("mail.dsn", "smtp://localhost")
        mailer = container.make(Mailer)
        assert mailer.dsn == "smtp://localhost"
        assert mailer.retries == 3

    def test_parameters_override(self, container):
        mailer = container.make(Mailer, {"dsn": "smtp://override", "retries": 1})
        assert mailer.dsn == "smtp://override"
        assert mailer.retries == 1

    def test_unresolvable_primitive(self, container):
        with pytest.raises(BindingResolutionError) as exc:
            container.make(NeedsPrimitive)
        assert exc.value.parameter == "name"
        assert "Unresolvable dependency resolving [name]" in exc.value.message

    def test_optional_dependency_falls_back(self, container):
        assert container.make(OptionalCache).cache is None

    def test_abstract_class_not_instantiable(self, container):
        with pytest.raises(BindingResolutionError) as exc:
            container.make(UnbuildableCache)
        assert "is not instantiable" in exc.value.message

    def test_unbound_string(self, container):
        with pytest.raises(BindingResolutionError) as exc:
            container.make("mailer")
        assert exc.value.message == "Target [mailer] is not bound and cannot be built"
        assert exc.value.metadata["abstract"] == "mailer"

    def test_circular_construction_detected(self, container):
        with pytest.raises(CircularDependencyError) as exc:
            container.make(ChickenService)
        assert exc.value.chain == [ChickenService, EggService, ChickenService]

    def test_circular_factories_detected(self, container):
        container.bind("a", lambda c: c.make("b"))
        container.bind("b", lambda c: c.make("a"))
        with pytest.raises(CircularDependencyError):
            container.make("a")

    def test_build_ignores_binding(self, container):
        container.bind(Logger, lambda: "not a logger")
        assert isinstance(container.build(Logger), Logger)

    def test_inspect_dependencies(self):
        plan = inspect_dependencies(Mailer)
        assert [dep.name for dep in plan] == ["dsn", "retries"]
        assert plan[0].abstract == "mail.dsn"
        assert plan[1].abstract is None
        assert plan[1].default == 3

    def test_plan_cache_does_not_keep_classes_alive(self, container):
        from orchestr.container import resolver

        class Temporary:
            def __init__(self, logger: Logger):
                self.logger = logger

        assert isinstance(container.make(Temporary).logger, Logger)
        assert Temporary in resolver._plan_cache

        ref = weakref.ref(Temporary)
        del Temporary
        gc.collect()
        assert ref() is None


# ============================================================================
# Calling
# ============================================================================

class TestCall:

    def test_call_without_arguments(self, container):
        assert container.call(lambda: "called") == "called"

    def test_call_injects_and_fills_positionals(self, container):
        def handler(logger: Logger, name, greeting="hi"):
            return logger, name, greeting

        logger, name, greeting = container.call(handler, ["ada"])
        assert isinstance(logger, Logger)
        assert name == "ada"
        assert greeting == "hi"

    def test_call_with_named_parameters(self, container):
        def handler(name, greeting="hi"):
            return f"{greeting} {name}"

        assert container.call(handler, {"name": "ada", "greeting": "hey"}) == "hey ada"

    def test_call_string_reference(self, container):
        container.instance("greeter", Greeter())
        assert container.call("greeter", ["ada"]) == "hello ada"
        assert container.call("greeter@shout", ["ada"]) == "HELLO ada"


# ============================================================================
# Introspection & Cleanup
# ============================================================================

class TestIntrospection:

    def test_resolved_tracks_shared_resolution(self, container):
        container.singleton("shared", lambda: object())
        container.bind("transient", lambda: object())
        container.instance("inst", object())

        assert not container.resolved("shared")
        container.make("shared")
        container.make("transient")

        assert container.resolved("shared")
        assert container.resolved("inst")
        assert not container.resolved("transient")

    def test_is_shared(self, container):
        container.singleton("shared", lambda: 1)
        container.bind("transient", lambda: 1)
        container.instance("inst", 1)
        assert container.is_shared("shared")
        assert container.is_shared("inst")
        assert not container.is_shared("transient")
        assert not container.is_shared("missing")

    def test_get_bindings_is_a_copy(self, container):
        container.bind("svc", lambda: 1)
        bindings = container.get_bindings()
        bindings.clear()
        assert "svc" in container.get_bindings()
        assert container.get_bindings()["svc"].kind == "factory"

    def test_forget_instance(self, container):
        container.instance("x", 1)
        container.singleton("y", lambda: object())
        first = container.make("y")

        container.forget_instance("x")
        container.forget_instance("y")

        assert not container.bound("x")
        assert container.make("y") is not first

    def test_forget_instances(self, container):
        container.instance("x", 1)
        container.instance("y", 2)
        container.forget_instances()
        assert container.get_instances() == {}

    def test_flush_clears_everything(self, container):
        container.bind("a", lambda: 1)
        container.singleton("b", lambda: 2)
        container.instance("c", 3)
        container.alias("a", "d")
        container.make("b")

        container.flush()

        for abstract in ("a", "b", "c", "d"):
            assert not container.bound(abstract)
        assert not container.resolved("b")
        assert container.get_aliases() == {}
