"""Tests for BrainGuard storage backends."""

import json
import logging

import pytest

from ..models import PatternKind, PatternRecord, PreviousMessage
from ..storage import (
    InMemoryPatternStore,
    JsonlPatternStore,
    PatternStore,
    create_storage,
)


def make_record(message: str, pattern: PatternKind = PatternKind.DELEGATION, **kwargs) -> PatternRecord:
    return PatternRecord.create(pattern, message, **kwargs)


class TestJsonlPatternStore:
    """Tests for the durable JSONL backend."""

    @pytest.fixture
    def store_path(self, tmp_path):
        return tmp_path / "nested" / "dir" / "patterns.jsonl"

    @pytest.fixture
    def store(self, store_path):
        return JsonlPatternStore(str(store_path))

    def test_creates_parent_directory_eagerly(self, store, store_path):
        """Test that the directory exists before the first write."""
        assert store_path.parent.is_dir()
        assert not store_path.exists()

    def test_load_missing_file(self, store):
        """Test loading before any write returns an empty list."""
        assert store.load_all() == []

    def test_append_and_load_in_order(self, store):
        """Test that records load back in insertion order."""
        records = [make_record(f"message {i}") for i in range(5)]
        for record in records:
            store.append(record)

        assert store.load_all() == records

    def test_one_line_per_record(self, store, store_path):
        """Test that each record is one complete JSON line."""
        store.append(make_record("first"))
        store.append(make_record("second"))

        lines = store_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["message"] == "second"

    def test_persists_embedding_and_previous_messages(self, store):
        """Test that optional fields round-trip through the file."""
        record = make_record(
            "test",
            message_id="msg_123",
            previous_messages=[PreviousMessage(id="p1", text="previous")],
            embedding=[0.9, 0.1, 0.1, 0.1],
        )
        store.append(record)

        loaded = store.load_all()[0]
        assert loaded.embedding == (0.9, 0.1, 0.1, 0.1)
        assert loaded.previous_messages == (PreviousMessage(id="p1", text="previous"),)
        assert loaded.message_id == "msg_123"

    def test_non_ascii_text_preserved(self, store):
        """Test that accented text is stored and read back unchanged."""
        store.append(make_record("écris le code à ma place"))
        assert store.load_all()[0].message == "écris le code à ma place"

    def test_skips_malformed_lines(self, store, store_path, caplog):
        """Test that corrupt lines are skipped and the rest still loads."""
        good_first = make_record("first")
        good_last = make_record("last")
        bad_kind = make_record("bad").to_dict()
        bad_kind["pattern"] = "unknown"
        null_message = make_record("null").to_dict()
        null_message["message"] = None

        with open(store_path, "w", encoding="utf-8") as f:
            f.write(json.dumps(good_first.to_dict()) + "\n")
            f.write("{not json\n")
            f.write("\n")
            f.write(json.dumps(bad_kind) + "\n")
            f.write(json.dumps({"id": "missing-fields"}) + "\n")
            f.write(json.dumps(null_message) + "\n")
            f.write(json.dumps(good_last.to_dict()) + "\n")

        with caplog.at_level(logging.WARNING):
            records = store.load_all()

        assert [r.message for r in records] == ["first", "last"]
        assert "Skipping invalid record" in caplog.text

    def test_data_survives_new_instance(self, store_path):
        """Test that a second store on the same file sees earlier records."""
        JsonlPatternStore(str(store_path)).append(make_record("persisted"))

        reopened = JsonlPatternStore(str(store_path))
        assert [r.message for r in reopened.load_all()] == ["persisted"]

    def test_close_keeps_file(self, store, store_path):
        """Test that close() does not remove durable data."""
        store.append(make_record("kept"))
        store.close()

        assert len(JsonlPatternStore(str(store_path)).load_all()) == 1

    def test_implements_protocol(self, store):
        """Test that the JSONL store satisfies the PatternStore protocol."""
        assert isinstance(store, PatternStore)


class TestInMemoryPatternStore:
    """Tests for the transient backend."""

    def test_append_and_load(self):
        """Test that records load back in append order."""
        store = InMemoryPatternStore()
        first, second = make_record("a"), make_record("b")
        store.append(first)
        store.append(second)

        assert store.load_all() == [first, second]

    def test_load_returns_copy(self):
        """Test that callers cannot mutate the store through load_all()."""
        store = InMemoryPatternStore()
        store.append(make_record("a"))

        store.load_all().clear()

        assert len(store.load_all()) == 1

    def test_stored_embedding_cannot_be_mutated(self):
        """Test that a loaded record's embedding is the stored value, unchangeable."""
        store = InMemoryPatternStore()
        store.append(make_record("a", embedding=[0.9, 0.1]))

        with pytest.raises(AttributeError):
            store.load_all()[0].embedding.append(0.5)

        assert store.load_all()[0].embedding == (0.9, 0.1)

    def test_close_discards_records(self):
        """Test that close() discards transient records."""
        store = InMemoryPatternStore()
        store.append(make_record("a"))
        store.close()

        assert store.load_all() == []

    def test_implements_protocol(self):
        """Test that the memory store satisfies the PatternStore protocol."""
        assert isinstance(InMemoryPatternStore(), PatternStore)


class TestCreateStorage:
    """Tests for the storage factory."""

    def test_memory(self):
        """Test that memory selects the in-memory backend."""
        assert isinstance(create_storage("memory"), InMemoryPatternStore)

    def test_file(self, tmp_path):
        """Test that file selects the JSONL backend at the given path."""
        store = create_storage("file", str(tmp_path / "p.jsonl"))
        assert isinstance(store, JsonlPatternStore)
        assert store.describe() == f"file:{tmp_path / 'p.jsonl'}"

    def test_unknown_type(self):
        """Test that an unknown storage type raises ValueError."""
        with pytest.raises(ValueError, match="Unknown storage type"):
            create_storage("sqlite")

    def test_separate_memory_stores_are_isolated(self):
        """Test that each memory store starts empty."""
        first = create_storage("memory")
        first.append(make_record("a"))

        assert create_storage("memory").load_all() == []
