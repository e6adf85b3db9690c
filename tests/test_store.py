"""Tests for the SQLite snapshot store."""

import pytest

from feedsmith.memory import SheetStore
from feedsmith.sheets import Cell, CellStyle, grid_from_values, grid_to_json


class TestSnapshots:
    """Tests for saving and loading grid snapshots."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, sheet_store):
        """Test that a styled, ragged grid round-trips through the store."""
        grid = [
            [Cell(value="SKU", style=CellStyle(bold=True, background_color="#eee")), Cell(value=1.5)],
            [],
            [Cell(value=True, is_valid=False, validation_message="check")],
        ]
        info = await sheet_store.save_snapshot("draft", grid)
        assert info.name == "draft"
        assert info.row_count == 3

        loaded = await sheet_store.load_snapshot("draft")
        assert grid_to_json(loaded) == grid_to_json(grid)
        assert loaded[0][0].style.background_color == "#eee"
        assert loaded[2][0].validation_message == "check"

    @pytest.mark.asyncio
    async def test_save_overwrites(self, sheet_store):
        await sheet_store.save_snapshot("draft", grid_from_values([["a"]]))
        await sheet_store.save_snapshot("draft", grid_from_values([["b"]]))
        loaded = await sheet_store.load_snapshot("draft")
        assert loaded[0][0].value == "b"
        assert len(await sheet_store.list_snapshots()) == 1

    @pytest.mark.asyncio
    async def test_load_missing(self, sheet_store):
        assert await sheet_store.load_snapshot("nope") is None

    @pytest.mark.asyncio
    async def test_list_and_delete(self, sheet_store):
        await sheet_store.save_snapshot("one", grid_from_values([["a"]]))
        await sheet_store.save_snapshot("two", grid_from_values([["a"], ["b"]]))

        snapshots = await sheet_store.list_snapshots()
        assert {s.name for s in snapshots} == {"one", "two"}

        assert await sheet_store.delete_snapshot("one")
        assert not await sheet_store.delete_snapshot("one")
        assert [s.name for s in await sheet_store.list_snapshots()] == ["two"]


class TestPublished:
    """Tests for published record sets."""

    @pytest.mark.asyncio
    async def test_publish_and_get(self, sheet_store):
        records = [{"title": "Kemei Trimmer", "price": 250, "in_stock": True, "notes": None}]
        dataset = await sheet_store.publish_records("sheet_data_json", records)
        assert dataset.records == records

        loaded = await sheet_store.get_published("sheet_data_json")
        assert loaded.records == records
        assert loaded.published_at == dataset.published_at

    @pytest.mark.asyncio
    async def test_get_missing(self, sheet_store):
        assert await sheet_store.get_published("nothing") is None


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_use_before_initialize(self, tmp_path):
        store = SheetStore(tmp_path / "x.db")
        with pytest.raises(RuntimeError):
            await store.load_snapshot("autosave")

    @pytest.mark.asyncio
    async def test_reopen_keeps_data(self, tmp_path):
        """Test that data survives closing and reopening the database."""
        path = tmp_path / "nested" / "feedsmith.db"
        store = SheetStore(path)
        await store.initialize()
        await store.save_snapshot("autosave", grid_from_values([["kept"]]))
        await store.close()

        reopened = SheetStore(path)
        await reopened.initialize()
        try:
            loaded = await reopened.load_snapshot("autosave")
            assert loaded[0][0].value == "kept"
        finally:
            await reopened.close()
