"""Tests for awaiting query builders."""

import asyncio
import json

import pytest
import structlog
from structlog.testing import capture_logs

from mock_tables import MockStore, MockTablesConfig, QueryResult, configure_logging
from mock_tables.logging_config import get_logger


async def _insert_and_read(store):
    await store.from_("leads").insert({"id": "1", "status": "new"})
    return await store.from_("leads").select().eq("id", "1").single()


class TestAwaitable:
    """Tests for the awaitable builder surface."""

    def test_builder_is_directly_awaitable(self):
        """Awaiting a builder executes it and yields the envelope."""
        store = MockStore()

        result = asyncio.run(_insert_and_read(store))

        assert isinstance(result, QueryResult)
        assert result.data["status"] == "new"
        assert result.error is None

    def test_execute_returns_coroutine(self):
        """execute() can be awaited explicitly."""
        store = MockStore()
        store.seed("leads", [{"id": "1"}])

        result = asyncio.run(store.from_("leads").select().execute())

        assert [row["id"] for row in result.data] == ["1"]

    def test_nothing_runs_until_awaited(self):
        """Building a mutation does not touch the store."""
        store = MockStore()
        builder = store.from_("leads").insert({"id": "1"})

        assert store.count("leads") == 0

        asyncio.run(builder.execute())

        assert store.count("leads") == 1

    def test_awaiting_twice_runs_twice(self):
        """Each await re-executes the query."""
        store = MockStore()
        builder = store.from_("leads").insert({"name": "dup"})

        async def await_twice():
            await builder
            await builder

        asyncio.run(await_twice())

        assert store.count("leads") == 2

    def test_latency_is_applied(self, monkeypatch):
        """Configured latency sleeps before executing."""
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr(asyncio, "sleep", fake_sleep)
        store = MockStore(MockTablesConfig(latency_ms=250))

        asyncio.run(store.from_("leads").select().execute())

        assert delays == [0.25]

    def test_run_skips_latency(self, monkeypatch):
        """run() executes synchronously without sleeping."""
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr(asyncio, "sleep", fake_sleep)
        store = MockStore(MockTablesConfig(latency_ms=250))

        store.from_("leads").select().run()

        assert delays == []

    def test_concurrent_queries_are_atomic(self):
        """Interleaved awaits never observe half-applied mutations."""
        store = MockStore(MockTablesConfig(latency_ms=1))
        store.seed("leads", [{"id": str(i), "status": "new"} for i in range(20)])

        async def scenario():
            return await asyncio.gather(
                store.from_("leads").update({"status": "won"}),
                store.from_("leads").select().eq("status", "new"),
                store.from_("leads").select().eq("status", "won"),
            )

        updated, still_new, won = asyncio.run(scenario())

        assert len(updated.data) == 20
        assert len(still_new.data) in (0, 20)
        assert len(won.data) in (0, 20)


class TestOperationLogging:
    """Tests for the structured query log line."""

    @pytest.fixture(autouse=True)
    def default_structlog(self):
        """Restore structlog's default configuration around each test."""
        structlog.reset_defaults()
        yield
        structlog.reset_defaults()

    def test_logs_when_enabled(self):
        """Enabled logging emits one structured event per execution."""
        store = MockStore(MockTablesConfig(log_operations=True))

        with capture_logs() as logs:
            store.from_("leads").select().eq("status", "new").limit(5).run()

        assert logs == [
            {
                "event": "mock_query",
                "log_level": "info",
                "table": "leads",
                "operation": "select",
                "filters": 1,
                "limit": 5,
            }
        ]

    def test_silent_by_default(self):
        store = MockStore()

        with capture_logs() as logs:
            store.from_("leads").select().run()

        assert logs == []

    def test_failures_are_logged(self):
        """Errors caught at the execution boundary emit a warning."""
        store = MockStore(MockTablesConfig(log_operations=True))

        with capture_logs() as logs:
            result = store.from_("leads").insert(["not a row"]).run()

        assert result.error is not None
        assert [entry["event"] for entry in logs] == ["mock_query", "mock_query_failed"]
        assert logs[1]["log_level"] == "warning"
        assert logs[1]["operation"] == "insert"

    def test_failures_silent_by_default(self):
        """Failures stay in the envelope when operation logging is off."""
        store = MockStore()

        with capture_logs() as logs:
            result = store.from_("leads").insert(["not a row"]).run()

        assert result.error is not None
        assert logs == []

    def test_getting_a_logger_leaves_config_alone(self):
        get_logger("mock_tables.example")

        assert not structlog.is_configured()

    def test_json_rendering(self, capsys):
        """configure_logging() renders events as JSON lines with a timestamp and level."""
        configure_logging()
        store = MockStore(MockTablesConfig(log_operations=True))

        store.from_("deals").delete().run()

        lines = [line for line in capsys.readouterr().out.splitlines() if "mock_query" in line]
        event = json.loads(lines[-1])
        assert event["event"] == "mock_query"
        assert event["table"] == "deals"
        assert event["operation"] == "delete"
        assert event["level"] == "info"
        assert "timestamp" in event
