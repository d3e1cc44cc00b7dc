"""Tests for the data store and table primitives."""

import pytest

from mock_tables import MockStore, get_store, reset_store, set_seeder
from mock_tables.table import Table


class TestTable:
    """Tests for the Table class."""

    def test_insert_and_get(self):
        """Records are stored and retrieved by id."""
        table = Table("leads")
        record_id = table.insert({"id": "a", "name": "Ada"})

        assert record_id == "a"
        assert table.get("a") == {"id": "a", "name": "Ada"}
        assert table.count == 1
        assert "a" in table

    def test_insert_without_id_synthesizes_one(self):
        """A record with no id gets a generated one."""
        table = Table("leads")
        record_id = table.insert({"name": "Ada"})

        assert isinstance(record_id, str) and record_id
        assert table.get(record_id)["id"] == record_id

    def test_insert_existing_id_overwrites(self):
        """Inserting an existing id replaces the record (last write wins)."""
        table = Table("leads")
        table.insert({"id": "a", "name": "Ada"})
        table.insert({"id": "a", "name": "Grace"})

        assert table.count == 1
        assert table.get("a")["name"] == "Grace"

    def test_update_missing_is_noop(self):
        """Updating an absent id stores nothing."""
        table = Table("leads")

        assert table.update("missing", {"id": "missing"}) is False
        assert table.count == 0

    def test_delete_missing_is_noop(self):
        """Deleting an absent id is not an error."""
        table = Table("leads")
        table.insert({"id": "a"})

        assert table.delete("missing") is False
        assert table.delete("a") is True
        assert table.count == 0

    def test_snapshot_is_a_copy(self):
        """Mutating a snapshot does not change stored records."""
        table = Table("leads")
        table.insert({"id": "a", "name": "Ada"})

        snapshot = table.snapshot()
        snapshot[0]["name"] = "changed"

        assert table.get("a")["name"] == "Ada"

    def test_get_returns_none_when_absent(self):
        """Missing records read as None."""
        assert Table("leads").get("nope") is None


class TestMockStore:
    """Tests for the MockStore class."""

    def test_tables_created_lazily(self):
        """Referencing a table creates it."""
        store = MockStore()

        assert "leads" not in store
        assert store.get_all("leads") == []
        assert "leads" in store
        assert store.table_names() == ["leads"]

    def test_crud_primitives(self):
        """Insert, update, get and delete work by id."""
        store = MockStore()
        store.insert("leads", {"id": "1", "status": "new"})
        store.update("leads", "1", {"id": "1", "status": "won"})

        assert store.get("leads", "1") == {"id": "1", "status": "won"}

        store.delete("leads", "1")
        assert store.get("leads", "1") is None

    def test_update_absent_does_not_create(self):
        """update() on an unknown id leaves the table empty."""
        store = MockStore()
        store.update("leads", "ghost", {"id": "ghost"})

        assert store.count("leads") == 0

    def test_clear_one_table(self):
        """clear(name) drops only that table."""
        store = MockStore()
        store.insert("leads", {"id": "1"})
        store.insert("deals", {"id": "2"})

        store.clear("leads")

        assert "leads" not in store
        assert store.count("deals") == 1

    def test_clear_all_tables(self):
        """clear() with no name drops every table."""
        store = MockStore()
        store.insert("leads", {"id": "1"})
        store.insert("deals", {"id": "2"})

        store.clear()

        assert store.table_names() == []
        assert store.get_all("leads") == []

    def test_seed(self):
        """seed() bulk inserts records as given."""
        store = MockStore()
        stored = store.seed("leads", [{"id": "1"}, {"id": "2"}])

        assert stored == 2
        assert [r["id"] for r in store.get_all("leads")] == ["1", "2"]

    def test_count_unknown_table(self):
        """count() of a never-referenced table is zero and does not create it."""
        store = MockStore()

        assert store.count("leads") == 0
        assert "leads" not in store

    @pytest.mark.parametrize("name", ["", None, 42])
    def test_invalid_table_name_raises(self, name):
        """Table names must be non-empty strings."""
        store = MockStore()

        with pytest.raises(ValueError):
            store.from_(name)
        with pytest.raises(ValueError):
            store.get_table(name)

    def test_stores_are_isolated(self):
        """Separate store instances share no data."""
        first = MockStore()
        second = MockStore()
        first.insert("leads", {"id": "1"})

        assert second.get_all("leads") == []


class TestDefaultStore:
    """Tests for the process-wide default store."""

    @pytest.fixture(autouse=True)
    def clean_default_store(self):
        reset_store()
        set_seeder(None)
        yield
        reset_store()
        set_seeder(None)

    def test_get_store_is_cached(self):
        """get_store() returns the same instance until reset."""
        assert get_store() is get_store()

    def test_reset_store_builds_new_instance(self):
        """reset_store() discards data held by the old store."""
        store = get_store()
        store.insert("leads", {"id": "1"})

        reset_store()

        assert get_store() is not store
        assert get_store().get_all("leads") == []

    def test_seeder_runs_once_on_first_use(self):
        """The registered seeder populates the store lazily, once."""
        calls = []

        def seeder(store):
            calls.append(store)
            store.seed("leads", [{"id": "seeded"}])

        set_seeder(seeder)
        assert calls == []

        store = get_store()
        get_store()

        assert calls == [store]
        assert store.get("leads", "seeded") == {"id": "seeded"}

    def test_default_store_reads_environment(self, monkeypatch):
        """The default store is configured from the environment."""
        monkeypatch.setenv("MOCK_TABLES_LATENCY_MS", "15")

        assert get_store().config.latency_ms == 15
