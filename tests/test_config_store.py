"""Tests for the persisted bot config store."""

import json

import pytest

from src.models import BotConfig
from src.store.config_store import ConfigStore


class TestLoad:
    def test_first_run_persists_defaults(self, tmp_path):
        path = tmp_path / "data" / "bot_config.json"
        store = ConfigStore(str(path))
        config = store.load()

        assert config == BotConfig()
        assert path.exists()
        assert json.loads(path.read_text()) == {
            "contractAddress": "",
            "alertGif": "",
            "chatId": "",
            "watchList": [],
            "lastUpdate": None,
        }

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "bot_config.json"
        path.write_text("{not json")
        store = ConfigStore(str(path))

        config = store.load()
        assert config == BotConfig()
        # File is left alone, not overwritten with defaults
        assert path.read_text() == "{not json"

    def test_non_object_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "bot_config.json"
        path.write_text("[1, 2, 3]")
        assert ConfigStore(str(path)).load() == BotConfig()

    def test_loads_original_key_names(self, tmp_path):
        path = tmp_path / "bot_config.json"
        path.write_text(json.dumps({
            "contractAddress": "TokenAddr111",
            "alertGif": "https://example.com/a.gif",
            "chatId": -100123,
            "watchList": ["W1", "W2", "W1"],
            "lastUpdate": "2025-01-01T00:00:00+00:00",
        }))
        config = ConfigStore(str(path)).load()

        assert config.contract_address == "TokenAddr111"
        assert config.chat_id == "-100123"
        assert config.watch_list == ["W1", "W2"]
        assert config.last_update == "2025-01-01T00:00:00+00:00"

    @pytest.mark.parametrize("watch_list", [5, "abc", {"a": 1}])
    def test_non_list_watch_list_falls_back_to_defaults(self, tmp_path, watch_list):
        path = tmp_path / "bot_config.json"
        path.write_text(json.dumps({"contractAddress": "X", "watchList": watch_list}))
        assert ConfigStore(str(path)).load() == BotConfig()

    def test_non_string_fields_coerced(self, tmp_path):
        path = tmp_path / "bot_config.json"
        path.write_text(json.dumps({"contractAddress": 123, "alertGif": 4.5, "watchList": [7]}))
        config = ConfigStore(str(path)).load()
        assert config.contract_address == "123"
        assert config.alert_gif == "4.5"
        assert config.watch_list == ["7"]

    def test_missing_keys_use_defaults(self, tmp_path):
        path = tmp_path / "bot_config.json"
        path.write_text(json.dumps({"contractAddress": "X"}))
        config = ConfigStore(str(path)).load()
        assert config.contract_address == "X"
        assert config.watch_list == []
        assert config.last_update is None


class TestSave:
    def test_save_then_load_roundtrip(self, tmp_path):
        path = str(tmp_path / "bot_config.json")
        store = ConfigStore(path)
        store.load()
        store.update(
            contract_address="TokenAddr111",
            alert_gif="gif-id",
            chat_id="-100123",
            last_update="2025-02-03T04:05:06+00:00",
        )
        store.add_watch("W1")
        store.add_watch("W2")

        reloaded = ConfigStore(path).load()
        assert reloaded == store.snapshot()

    def test_save_overwrites_not_merges(self, tmp_path):
        path = tmp_path / "bot_config.json"
        path.write_text(json.dumps({"contractAddress": "OLD", "extra": 1}))
        store = ConfigStore(str(path))
        store.load()
        store.update(contract_address="NEW")

        data = json.loads(path.read_text())
        assert data["contractAddress"] == "NEW"
        assert "extra" not in data

    def test_save_failure_returns_false(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        # Parent "directory" is a regular file -> mkdir fails
        store = ConfigStore(str(blocker / "bot_config.json"))
        assert store.save() is False

    def test_update_unknown_field_raises(self, store):
        with pytest.raises(AttributeError):
            store.update(nope="x")


class TestWatchList:
    def test_add_watch(self, store):
        assert store.add_watch("W1") is True
        assert store.snapshot().watch_list == ["W1"]

    def test_add_watch_is_idempotent(self, store):
        store.add_watch("W1")
        assert store.add_watch("W1") is False
        assert store.snapshot().watch_list == ["W1"]

    def test_add_preserves_order(self, store):
        for addr in ("C", "A", "B"):
            store.add_watch(addr)
        assert store.snapshot().watch_list == ["C", "A", "B"]

    def test_remove_watch(self, store):
        store.add_watch("W1")
        store.add_watch("W2")
        assert store.remove_watch("W1") is True
        assert store.snapshot().watch_list == ["W2"]

    def test_remove_absent_leaves_list_unchanged(self, store):
        store.add_watch("W1")
        assert store.remove_watch("NOPE") is False
        assert store.snapshot().watch_list == ["W1"]

    def test_mutations_are_persisted(self, store):
        store.add_watch("W1")
        reloaded = ConfigStore(str(store.path)).load()
        assert reloaded.watch_list == ["W1"]

    def test_snapshot_is_a_copy(self, store):
        snap = store.snapshot()
        snap.watch_list.append("X")
        assert store.snapshot().watch_list == []
