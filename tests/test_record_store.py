"""Unit tests for the user record model and the store adapters."""

import json
from datetime import timedelta
from pathlib import Path

import pytest

from conftest import T0
from nomie_weather.adapters.store.base import UserCooldownRecord, format_timestamp, parse_timestamp
from nomie_weather.adapters.store.factory import create_record_store
from nomie_weather.adapters.store.in_memory import InMemoryRecordStore
from nomie_weather.adapters.store.json_file import JsonFileRecordStore
from nomie_weather.core.config import StoreSettings, settings
from nomie_weather.core.errors import (
    ConfigurationAppError,
    StoreConflictError,
    StoreUnavailableError,
    StoreWriteFailureError,
)


class TestUserCooldownRecord:
    """Serialization of the stored user item."""

    def test_from_item_splits_known_and_extra_fields(self) -> None:
        record = UserCooldownRecord.from_item(
            {"id": "u1", "last_push": "2024-01-01T12:00:00.000Z", "nickname": "sam"}
        )

        assert record.id == "u1"
        assert record.last_action_at == T0
        assert dict(record.extra) == {"nickname": "sam"}

    def test_to_item_keeps_extra_fields(self) -> None:
        record = UserCooldownRecord("u1", T0, {"nickname": "sam", "visits": 3})

        assert record.to_item() == {
            "id": "u1",
            "last_push": "2024-01-01T12:00:00.000Z",
            "nickname": "sam",
            "visits": 3,
        }

    def test_to_item_omits_missing_timestamp(self) -> None:
        assert UserCooldownRecord.empty("u1").to_item() == {"id": "u1"}

    def test_id_wins_over_extra(self) -> None:
        record = UserCooldownRecord("u1", None, {"id": "intruder"})

        assert record.to_item()["id"] == "u1"

    def test_with_last_action_at_preserves_extra(self) -> None:
        record = UserCooldownRecord("u1", None, {"nickname": "sam"})

        updated = record.with_last_action_at(T0)

        assert updated.last_action_at == T0
        assert dict(updated.extra) == {"nickname": "sam"}
        assert record.last_action_at is None

    def test_extra_is_read_only(self) -> None:
        record = UserCooldownRecord("u1", None, {"nickname": "sam"})

        with pytest.raises(TypeError):
            record.extra["nickname"] = "alex"  # type: ignore[index]

    def test_missing_id_is_unreadable(self) -> None:
        with pytest.raises(StoreUnavailableError):
            UserCooldownRecord.from_item({"last_push": "2024-01-01T12:00:00.000Z"})

    def test_naive_timestamp_is_utc(self) -> None:
        assert parse_timestamp("2024-01-01T12:00:00") == T0

    def test_offset_timestamp_is_normalized(self) -> None:
        parsed = parse_timestamp("2024-01-01T14:00:00+02:00")

        assert parsed == T0
        assert format_timestamp(parsed) == "2024-01-01T12:00:00.000Z"

    def test_sub_millisecond_precision_survives(self) -> None:
        precise = T0 + timedelta(microseconds=1234)

        assert parse_timestamp(format_timestamp(precise)) == precise


class TestInMemoryRecordStore:
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self) -> None:
        assert await InMemoryRecordStore().get("nobody") is None

    @pytest.mark.asyncio
    async def test_put_then_get(self) -> None:
        store = InMemoryRecordStore()
        await store.put(UserCooldownRecord("u1", T0, {"nickname": "sam"}))

        record = await store.get("u1")

        assert record == UserCooldownRecord("u1", T0, {"nickname": "sam"})

    @pytest.mark.asyncio
    async def test_returned_records_do_not_alias_storage(self) -> None:
        store = InMemoryRecordStore({"u1": {"id": "u1", "prefs": {"theme": "dark"}}})

        record = await store.get("u1")
        record.extra["prefs"]["theme"] = "light"

        assert store.snapshot()["u1"]["prefs"] == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_conditional_put_succeeds_when_unchanged(self) -> None:
        store = InMemoryRecordStore()
        await store.put(UserCooldownRecord("u1", T0))

        later = T0 + timedelta(minutes=20)
        await store.put(UserCooldownRecord("u1", later), expected_last_action_at=T0)

        assert (await store.get("u1")).last_action_at == later

    @pytest.mark.asyncio
    async def test_conditional_put_conflicts_when_changed(self) -> None:
        store = InMemoryRecordStore()
        await store.put(UserCooldownRecord("u1", T0))

        with pytest.raises(StoreConflictError):
            await store.put(
                UserCooldownRecord("u1", T0 + timedelta(minutes=20)),
                expected_last_action_at=None,
            )

        assert (await store.get("u1")).last_action_at == T0


class TestJsonFileRecordStore:
    @pytest.mark.asyncio
    async def test_missing_file_is_empty_store(self, tmp_path: Path) -> None:
        store = JsonFileRecordStore(tmp_path / "users.json")

        assert await store.get("u1") is None

    @pytest.mark.asyncio
    async def test_put_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "users.json"
        await JsonFileRecordStore(path).put(UserCooldownRecord("u1", T0, {"nickname": "sam"}))

        record = await JsonFileRecordStore(path).get("u1")

        assert record == UserCooldownRecord("u1", T0, {"nickname": "sam"})
        assert json.loads(path.read_text())["u1"]["last_push"] == "2024-01-01T12:00:00.000Z"

    @pytest.mark.asyncio
    async def test_put_keeps_other_users(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text(json.dumps({"u2": {"id": "u2", "nickname": "alex"}}))
        store = JsonFileRecordStore(path)

        await store.put(UserCooldownRecord("u1", T0))

        document = json.loads(path.read_text())
        assert set(document) == {"u1", "u2"}
        assert document["u2"] == {"id": "u2", "nickname": "alex"}

    @pytest.mark.asyncio
    async def test_corrupt_file_is_unavailable(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text("{not json")

        with pytest.raises(StoreUnavailableError):
            await JsonFileRecordStore(path).get("u1")

    @pytest.mark.asyncio
    async def test_corrupt_file_fails_writes(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(StoreWriteFailureError):
            await JsonFileRecordStore(path).put(UserCooldownRecord("u1", T0))

        assert path.read_text() == "[1, 2, 3]"

    @pytest.mark.asyncio
    async def test_unwritable_location_fails_writes(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonFileRecordStore(blocker / "users.json")

        with pytest.raises(StoreWriteFailureError):
            await store.put(UserCooldownRecord("u1", T0))

    @pytest.mark.asyncio
    async def test_conditional_put_conflicts_when_changed(self, tmp_path: Path) -> None:
        store = JsonFileRecordStore(tmp_path / "users.json")
        await store.put(UserCooldownRecord("u1", T0))

        with pytest.raises(StoreConflictError):
            await store.put(
                UserCooldownRecord("u1", T0 + timedelta(minutes=20)),
                expected_last_action_at=T0 - timedelta(minutes=1),
            )

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        store = JsonFileRecordStore(tmp_path / "users.json")
        await store.put(UserCooldownRecord("u1", T0))
        await store.put(UserCooldownRecord("u2", T0))

        assert sorted(p.name for p in tmp_path.iterdir()) == ["users.json"]


class TestStoreFactory:
    def test_memory_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "store", StoreSettings(backend="memory"))

        assert isinstance(create_record_store(), InMemoryRecordStore)

    def test_json_file_backend(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        path = str(tmp_path / "users.json")
        monkeypatch.setattr(settings, "store", StoreSettings(backend="json_file", file_path=path))

        store = create_record_store()

        assert isinstance(store, JsonFileRecordStore)
        assert store.path == Path(path)

    def test_unknown_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "store", StoreSettings(backend="dynamodb"))

        with pytest.raises(ConfigurationAppError, match="Unknown store backend") as exc:
            create_record_store()
        assert exc.value.code == "store_unknown_backend"


def test_timestamps_are_utc_aware() -> None:
    record = UserCooldownRecord.from_item({"id": "u1", "last_push": "2024-01-01T12:00:00.000Z"})

    assert record.last_action_at.tzinfo is not None
    assert record.last_action_at.utcoffset() == timedelta(0)
