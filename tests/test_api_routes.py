"""Tests for the HTTP API routes."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from feedsmith.api.routes import router
from feedsmith.editor import EditorSession
from feedsmith.memory import PublishedDataset


@pytest.fixture
def session(name_grid):
    return EditorSession(name_grid)


@pytest.fixture
def store():
    """A store double whose async methods are mocks."""
    mock_store = Mock()
    mock_store.save_snapshot = AsyncMock()
    mock_store.publish_records = AsyncMock()
    mock_store.get_published = AsyncMock(return_value=None)
    mock_store.load_snapshot = AsyncMock(return_value=None)
    return mock_store


@pytest.fixture
def client(session):
    """Create a test client without lifespan, bound to a fresh session and no store."""
    app = FastAPI()
    app.include_router(router, prefix="/api")

    with patch("feedsmith.api.routes.get_session", return_value=session), patch(
        "feedsmith.api.routes.get_store", return_value=None
    ):
        yield TestClient(app)


def _column(data, col):
    return [row[col]["value"] for row in data["grid"]]


class TestSheetEndpoints:
    """Tests for reading and mutating the sheet."""

    def test_get_sheet(self, client):
        response = client.get("/api/sheet")

        assert response.status_code == 200
        data = response.json()
        assert data["row_count"] == 4
        assert data["column_count"] == 3
        assert data["grid"][1][0] == {"value": "John Doe", "style": {}}
        assert data["can_undo"] is False
        assert data["is_empty"] is False

    def test_edit_cell_returns_suggestion(self, client):
        """Test that an edit response carries a camelCase flash fill suggestion."""
        response = client.post("/api/sheet/cell", json={"row": 1, "col": 1, "value": "John"})

        assert response.status_code == 200
        data = response.json()
        assert data["sheet"]["grid"][1][1]["value"] == "John"
        suggestion = data["suggestion"]
        assert suggestion["sourceColumnIndex"] == 0
        assert suggestion["targetColumnIndex"] == 1
        assert suggestion["updates"] == [
            {"row": 2, "col": 1, "value": "Jane"},
            {"row": 3, "col": 1, "value": "Bob"},
        ]

    def test_edit_cell_rejects_negative_index(self, client):
        response = client.post("/api/sheet/cell", json={"row": -1, "col": 0, "value": "x"})
        assert response.status_code == 422

    def test_format_cell(self, client):
        response = client.post(
            "/api/sheet/format",
            json={"row": 0, "col": 0, "style": {"bold": True, "backgroundColor": "#ff0"}},
        )
        assert response.status_code == 200
        assert response.json()["grid"][0][0]["style"] == {"bold": True, "backgroundColor": "#ff0"}

    def test_apply_operations(self, client):
        response = client.post(
            "/api/sheet/operations",
            json={
                "operations": [
                    {"type": "DELETE_ROW", "row": 3},
                    {"type": "DELETE_ROW", "row": 30},
                    {"type": "ADD_COL", "col": 3, "defaultValue": "new"},
                ]
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["applied"] == 2
        assert data["skipped"] == 1
        assert data["sheet"]["row_count"] == 3
        assert _column(data["sheet"], 3) == ["new", "new", "new"]

    def test_apply_ai_response(self, client):
        text = '{"message": "Cleared", "operations": [{"type": "SET_DATA", "data": [["x"]]}]}'
        response = client.post("/api/sheet/ai-response", json={"text": text})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Cleared"
        assert data["sheet"]["grid"] == [[{"value": "x", "style": {}}]]

    def test_undo_redo(self, client):
        client.post("/api/sheet/cell", json={"row": 0, "col": 0, "value": "Full Name"})

        response = client.post("/api/sheet/undo")
        assert response.json()["changed"] is True
        assert response.json()["sheet"]["grid"][0][0]["value"] == "Name"

        response = client.post("/api/sheet/redo")
        assert response.json()["sheet"]["grid"][0][0]["value"] == "Full Name"

        assert client.post("/api/sheet/redo").json()["changed"] is False

    def test_load_sheet(self, client):
        response = client.post(
            "/api/sheet/load",
            json={"grid": [[{"value": "a", "style": {"italic": True}}, None], []]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["grid"][0][0] == {"value": "a", "style": {"italic": True}}
        assert data["grid"][0][1]["value"] == ""
        assert data["can_undo"] is True

    def test_load_sheet_rejects_bad_cells(self, client):
        response = client.post("/api/sheet/load", json={"grid": [[{"value": {"nested": 1}}]]})
        assert response.status_code == 400

    def test_load_template(self, client):
        response = client.post("/api/sheet/template/shopify")
        assert response.status_code == 200
        data = response.json()
        assert data["sheet"]["grid"][0][0] == {"value": "Handle", "style": {"bold": True}}

    def test_unknown_template(self, client):
        response = client.post("/api/sheet/template/woocommerce")
        assert response.status_code == 404


class TestFlashFillEndpoints:
    """Tests for scanning and applying flash fill."""

    def test_scan_and_apply(self, client):
        client.post("/api/sheet/cell", json={"row": 1, "col": 2, "value": "Doe"})
        client.post("/api/flash-fill/dismiss")

        response = client.post("/api/flash-fill/scan")
        assert response.json()["suggestion"]["targetColumnIndex"] == 2

        response = client.post("/api/flash-fill/apply")
        assert response.status_code == 200
        assert _column(response.json()["sheet"], 2) == ["Last", "Doe", "Smith", "Stone"]

    def test_apply_without_suggestion(self, client):
        response = client.post("/api/flash-fill/apply")
        assert response.status_code == 404


class TestFindReplaceEndpoints:
    """Tests for find and replace."""

    def test_find(self, client):
        response = client.post("/api/find", json={"query": "jane"})
        data = response.json()
        assert data["found"] is True
        assert data["position"] == {"row": 2, "col": 0}
        assert data["state"] == "positioned"

    def test_find_miss(self, client):
        data = client.post("/api/find", json={"query": "zzz"}).json()
        assert data["found"] is False
        assert data["state"] == "idle"

    def test_replace(self, client):
        response = client.post("/api/replace", json={"query": "jane", "replacement": "Janet"})
        data = response.json()
        assert data["replaced"] is True
        assert data["sheet"]["grid"][2][0]["value"] == "Janet Smith"

    def test_replace_all(self, client):
        response = client.post("/api/replace-all", json={"query": "o", "replacement": "0"})
        data = response.json()
        assert data["cells_changed"] == 2
        assert _column(data["sheet"], 0) == ["Name", "J0hn D0e", "Jane Smith", "B0b St0ne"]


class TestPublishingEndpoints:
    """Tests for schema, records and publishing."""

    def test_schema(self, client):
        response = client.get("/api/schema", params={"table_name": "People"})
        data = response.json()
        assert data["tableName"] == "People"
        assert data["recordCount"] == 3
        assert [c["key"] for c in data["columns"]] == ["name", "first", "last"]

    def test_records(self, client):
        records = client.get("/api/records").json()
        assert records[0] == {"name": "John Doe", "first": "", "last": ""}

    def test_save_without_store(self, client):
        response = client.post("/api/save", json={})
        assert response.status_code == 503

    def test_save_and_read(self, client, store):
        store.publish_records.return_value = PublishedDataset(
            name="sheet_data_json", records=[{"name": "John Doe"}]
        )
        store.get_published.return_value = PublishedDataset(
            name="sheet_data_json", records=[{"name": "John Doe"}]
        )
        with patch("feedsmith.api.routes.get_store", return_value=store):
            response = client.post("/api/save", json={})
            assert response.status_code == 200
            assert response.json()["name"] == "sheet_data_json"
            name, records = store.publish_records.call_args.args
            assert name == "sheet_data_json"
            assert len(records) == 3

            response = client.get("/api/data")
            assert response.json() == [{"name": "John Doe"}]

    def test_data_not_found(self, client, store):
        with patch("feedsmith.api.routes.get_store", return_value=store):
            response = client.get("/api/data", params={"name": "missing"})
        assert response.status_code == 404


class TestAutosave:
    """Tests for persisting the sheet after mutations."""

    def test_mutation_autosaves(self, client, store, session):
        with patch("feedsmith.api.routes.get_store", return_value=store):
            client.post("/api/sheet/cell", json={"row": 0, "col": 0, "value": "Title"})

        store.save_snapshot.assert_awaited_once()
        name, grid = store.save_snapshot.call_args.args
        assert name == "autosave"
        assert grid is session.grid

    def test_read_does_not_autosave(self, client, store):
        with patch("feedsmith.api.routes.get_store", return_value=store):
            client.get("/api/sheet")
            client.post("/api/find", json={"query": "john"})
        store.save_snapshot.assert_not_awaited()

    def test_restore_missing_snapshot(self, client, store):
        with patch("feedsmith.api.routes.get_store", return_value=store):
            response = client.post("/api/snapshots/draft/restore")
        assert response.status_code == 404
