"""
Async resolution: coroutine factories, make_async and call_async.
"""

import asyncio

import pytest

from orchestr.container import BindingResolutionError, Container


class Connection:
    def __init__(self, dsn):
        self.dsn = dsn


class Repository:
    def __init__(self, connection: Connection):
        self.connection = connection


class TestMakeAsync:

    @pytest.mark.asyncio
    async def test_async_singleton_awaited_once(self):
        container = Container()
        calls = []

        async def connect(c):
            calls.append(c)
            await asyncio.sleep(0)
            return Connection("sqlite://")

        container.singleton(Connection, connect)
        first = await container.make_async(Connection)
        second = await container.make_async(Connection)

        assert first is second
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_singleton_built_once(self):
        container = Container()
        calls = []

        async def connect():
            calls.append(1)
            await asyncio.sleep(0.01)
            return Connection("sqlite://")

        container.singleton("db", connect)
        first, second = await asyncio.gather(
            container.make_async("db"),
            container.make_async("db"),
        )

        assert first is second
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_singleton_failure_reaches_every_caller(self):
        container = Container()
        calls = []

        async def connect():
            calls.append(1)
            await asyncio.sleep(0.01)
            if len(calls) == 1:
                raise ConnectionError("refused")
            return Connection("sqlite://")

        container.singleton("db", connect)
        results = await asyncio.gather(
            container.make_async("db"),
            container.make_async("db"),
            return_exceptions=True,
        )

        assert all(isinstance(r, ConnectionError) for r in results)
        assert len(calls) == 1

        # Nothing left in flight; the next call builds again
        connection = await container.make_async("db")
        assert connection.dsn == "sqlite://"
        assert await container.make_async("db") is connection

    @pytest.mark.asyncio
    async def test_async_dependency_in_class_graph(self):
        container = Container()

        async def connect():
            return Connection("postgres://")

        container.bind(Connection, connect)
        repo = await container.make_async(Repository)
        assert repo.connection.dsn == "postgres://"

    @pytest.mark.asyncio
    async def test_sync_factories_work_async(self):
        container = Container()
        container.instance("name", "orchestr")
        container.bind("upper", lambda c: c.make("name").upper())
        assert await container.make_async("upper") == "ORCHESTR"

    def test_sync_make_rejects_coroutine_factory(self):
        container = Container()

        async def connect():
            return Connection("sqlite://")

        container.bind("db", connect)
        with pytest.raises(BindingResolutionError) as exc:
            container.make("db")
        assert "make_async()" in exc.value.message

    @pytest.mark.asyncio
    async def test_sync_make_rejects_factory_returning_awaitable(self):
        container = Container()

        async def connect():
            return Connection("sqlite://")

        container.singleton("db", lambda c: connect())
        for _ in range(2):
            with pytest.raises(BindingResolutionError) as exc:
                container.make("db")
            assert exc.value.requires_async
            assert "returned an awaitable" in exc.value.message

        assert not container.resolved("db")
        connection = await container.make_async("db")
        assert connection.dsn == "sqlite://"

    def test_async_dependency_not_replaced_by_default(self):
        container = Container()

        async def connect():
            return Connection("sqlite://")

        class Service:
            def __init__(self, connection: Connection = None):
                self.connection = connection

        container.bind(Connection, connect)
        with pytest.raises(BindingResolutionError) as exc:
            container.make(Service)
        assert exc.value.requires_async

    @pytest.mark.asyncio
    async def test_async_dependency_with_default_resolves_async(self):
        container = Container()

        async def connect():
            return Connection("sqlite://")

        class Service:
            def __init__(self, connection: Connection = None):
                self.connection = connection

        container.bind(Connection, connect)
        service = await container.make_async(Service)
        assert service.connection.dsn == "sqlite://"

    @pytest.mark.asyncio
    async def test_concurrent_resolutions_are_isolated(self):
        container = Container()

        async def connect():
            await asyncio.sleep(0)
            return Connection("sqlite://")

        container.bind(Connection, connect)
        first, second = await asyncio.gather(
            container.make_async(Repository),
            container.make_async(Repository),
        )
        assert first.connection is not second.connection

    @pytest.mark.asyncio
    async def test_unbound_string_async(self):
        container = Container()
        with pytest.raises(BindingResolutionError):
            await container.make_async("missing")


class TestCallAsync:

    @pytest.mark.asyncio
    async def test_call_async_injects_and_awaits(self):
        container = Container()

        async def connect():
            return Connection("sqlite://")

        container.bind(Connection, connect)

        async def handler(connection: Connection, table):
            return f"{connection.dsn}/{table}"

        assert await container.call_async(handler, ["users"]) == "sqlite:///users"

    @pytest.mark.asyncio
    async def test_call_async_string_reference(self):
        container = Container()

        class Job:
            async def handle(self, payload):
                return payload * 2

        container.instance("job", Job())
        assert await container.call_async("job", [21]) == 42
