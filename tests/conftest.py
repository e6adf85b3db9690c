"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from feedsmith.memory import SheetStore
from feedsmith.sheets import Grid, grid_from_values


@pytest.fixture
def name_grid() -> Grid:
    """Header plus rows of full names with empty First/Last columns."""
    return grid_from_values(
        [
            ["Name", "First", "Last"],
            ["John Doe", "", ""],
            ["Jane Smith", "", ""],
            ["Bob Stone", "", ""],
        ]
    )


@pytest.fixture
def product_grid() -> Grid:
    """A small product feed."""
    return grid_from_values(
        [
            ["Title", "SKU", "Price", "Image URL", "In Stock", "Updated"],
            ["Kemei Trimmer", "km-100", 250, "https://cdn.example.com/km.jpg", True, "2024-05-01"],
            ["HomeGold Blender", "hg-200", 899.5, "https://cdn.example.com/hg.jpg", False, "2024-05-02"],
            ["Kemei Shaver", "km-300", 310, "", True, ""],
        ]
    )


@pytest_asyncio.fixture
async def sheet_store(tmp_path: Path) -> AsyncGenerator[SheetStore, None]:
    """Create a store backed by a temporary database."""
    store = SheetStore(tmp_path / "test_feedsmith.db")
    await store.initialize()
    yield store
    await store.close()
