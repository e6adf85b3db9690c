"""API routes for FeedSmith."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, ValidationError

from ..config import settings
from ..editor import TemplateNotFoundError
from ..flashfill import FlashFillSuggestion
from ..memory import PublishedDataset, SnapshotInfo
from ..publish import TableSchema
from ..search import SearchState
from ..sheets.grid import grid_from_json, grid_to_json, max_width
from ..sheets.models import CellPosition, CellStyle, CellValue

logger = logging.getLogger(__name__)

router = APIRouter()


def get_session():
    """Get the global editor session."""
    from .app import get_session as _get_session

    return _get_session()


def get_store():
    """Get the global store (None before startup)."""
    from .app import get_store as _get_store

    return _get_store()


class SheetResponse(BaseModel):
    """The live grid plus history state."""

    grid: list[list[dict]]
    row_count: int
    column_count: int
    can_undo: bool
    can_redo: bool
    is_empty: bool


class LoadRequest(BaseModel):
    """Request to replace the sheet with a persisted snapshot."""

    grid: list[Any]


class CellEditRequest(BaseModel):
    row: int = Field(ge=0)
    col: int = Field(ge=0)
    value: CellValue


class CellEditResponse(BaseModel):
    sheet: SheetResponse
    suggestion: Optional[FlashFillSuggestion] = None


class FormatRequest(BaseModel):
    row: int = Field(ge=0)
    col: int = Field(ge=0)
    style: CellStyle


class OperationsRequest(BaseModel):
    """Request carrying a raw, untrusted operation batch."""

    operations: list[Any] = Field(default_factory=list)


class OperationsResponse(BaseModel):
    sheet: SheetResponse
    applied: int
    skipped: int
    message: Optional[str] = None


class AIResponseRequest(BaseModel):
    """Raw text returned by the AI service."""

    text: str


class HistoryResponse(BaseModel):
    changed: bool
    sheet: SheetResponse


class SuggestionResponse(BaseModel):
    suggestion: Optional[FlashFillSuggestion] = None


class FindRequest(BaseModel):
    query: str


class FindResponse(BaseModel):
    found: bool
    position: Optional[CellPosition] = None
    state: SearchState


class ReplaceRequest(BaseModel):
    query: str
    replacement: str = ""


class ReplaceResponse(BaseModel):
    replaced: bool
    position: Optional[CellPosition] = None
    sheet: SheetResponse


class ReplaceAllResponse(BaseModel):
    cells_changed: int
    sheet: SheetResponse


class PublishRequest(BaseModel):
    name: str = "sheet_data_json"


def _sheet_response() -> SheetResponse:
    session = get_session()
    grid = session.grid
    return SheetResponse(
        grid=grid_to_json(grid),
        row_count=len(grid),
        column_count=max_width(grid),
        can_undo=session.history.can_undo,
        can_redo=session.history.can_redo,
        is_empty=session.is_empty,
    )


async def _autosave():
    """Persist the live grid after a mutation, if a store is running."""
    store = get_store()
    if store is None:
        return
    try:
        await store.save_snapshot(settings.autosave_snapshot_name, get_session().grid)
    except Exception as e:
        logger.error(f"Autosave failed: {e}")


# Sheet endpoints


@router.get("/sheet", response_model=SheetResponse)
async def get_sheet():
    """Get the live grid."""
    return _sheet_response()


@router.post("/sheet/load", response_model=SheetResponse)
async def load_sheet(request: LoadRequest):
    """Replace the sheet with an imported grid snapshot."""
    try:
        grid = grid_from_json(request.grid)
    except (ValueError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid grid snapshot: {e}")

    get_session().load(grid)
    await _autosave()
    return _sheet_response()


@router.post("/sheet/template/{name}", response_model=OperationsResponse)
async def load_template(name: str):
    """Load a built-in template."""
    try:
        result = get_session().load_template(name)
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail=f"Template not found: {name}")

    await _autosave()
    return OperationsResponse(
        sheet=_sheet_response(), applied=result.applied, skipped=result.skipped
    )


@router.post("/sheet/cell", response_model=CellEditResponse)
async def edit_cell(request: CellEditRequest):
    """Set one cell; the response carries a flash fill suggestion if one was found."""
    edit = get_session().edit_cell(request.row, request.col, request.value)
    await _autosave()
    return CellEditResponse(sheet=_sheet_response(), suggestion=edit.suggestion)


@router.post("/sheet/format", response_model=SheetResponse)
async def format_cell(request: FormatRequest):
    get_session().format_cell(request.row, request.col, request.style)
    await _autosave()
    return _sheet_response()


@router.post("/sheet/operations", response_model=OperationsResponse)
async def apply_operations(request: OperationsRequest):
    """Apply an operation batch as one undoable step."""
    result = get_session().apply_operations(request.operations)
    await _autosave()
    return OperationsResponse(
        sheet=_sheet_response(), applied=result.applied, skipped=result.skipped
    )


@router.post("/sheet/ai-response", response_model=OperationsResponse)
async def apply_ai_response(request: AIResponseRequest):
    """Parse raw AI output and apply its operations."""
    try:
        response, result = get_session().apply_ai_response(request.text)
    except Exception as e:
        logger.error(f"Error applying AI response: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if result.applied:
        await _autosave()
    return OperationsResponse(
        sheet=_sheet_response(),
        applied=result.applied,
        skipped=result.skipped,
        message=response.message,
    )


@router.post("/sheet/undo", response_model=HistoryResponse)
async def undo():
    changed = get_session().undo()
    if changed:
        await _autosave()
    return HistoryResponse(changed=changed, sheet=_sheet_response())


@router.post("/sheet/redo", response_model=HistoryResponse)
async def redo():
    changed = get_session().redo()
    if changed:
        await _autosave()
    return HistoryResponse(changed=changed, sheet=_sheet_response())


# Flash fill endpoints


@router.post("/flash-fill/scan", response_model=SuggestionResponse)
async def scan_flash_fill():
    """Scan the whole sheet for the best fill opportunity."""
    return SuggestionResponse(suggestion=get_session().scan_flash_fill())


@router.post("/flash-fill/apply", response_model=OperationsResponse)
async def apply_flash_fill():
    """Accept the pending flash fill suggestion."""
    result = get_session().accept_suggestion()
    if result is None:
        raise HTTPException(status_code=404, detail="No flash fill suggestion pending")

    await _autosave()
    return OperationsResponse(
        sheet=_sheet_response(), applied=result.applied, skipped=result.skipped
    )


@router.post("/flash-fill/dismiss")
async def dismiss_flash_fill():
    get_session().dismiss_suggestion()
    return {"status": "ok"}


# Find / replace endpoints


@router.post("/find", response_model=FindResponse)
async def find_next(request: FindRequest):
    """Move to the next match (wraps around)."""
    session = get_session()
    position = session.find_next(request.query)
    return FindResponse(
        found=position is not None, position=position, state=session.search.state
    )


@router.post("/replace", response_model=ReplaceResponse)
async def replace(request: ReplaceRequest):
    result = get_session().replace(request.query, request.replacement)
    if result.replaced:
        await _autosave()
    return ReplaceResponse(
        replaced=result.replaced, position=result.next_position, sheet=_sheet_response()
    )


@router.post("/replace-all", response_model=ReplaceAllResponse)
async def replace_all(request: ReplaceRequest):
    result = get_session().replace_all(request.query, request.replacement)
    if result.cells_changed:
        await _autosave()
    return ReplaceAllResponse(cells_changed=result.cells_changed, sheet=_sheet_response())


# Publishing endpoints


@router.get("/schema", response_model=TableSchema)
async def get_schema(table_name: str = "MyTable"):
    """Infer the column schema of the sheet."""
    return get_session().schema(table_name)


@router.get("/records")
async def get_records():
    """Flatten the sheet into header-keyed records."""
    return get_session().records()


def _require_store():
    store = get_store()
    if store is None:
        raise HTTPException(status_code=503, detail="Storage is not available")
    return store


@router.post("/save", response_model=PublishedDataset)
async def save_records(request: PublishRequest):
    """Publish the sheet's records to the store."""
    store = _require_store()
    try:
        return await store.publish_records(request.name, get_session().records())
    except Exception as e:
        logger.error(f"Error publishing records: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/data")
async def get_data(name: str = "sheet_data_json"):
    """Read previously published records."""
    dataset = await _require_store().get_published(name)
    if dataset is None:
        raise HTTPException(status_code=404, detail=f"No published data named '{name}'")
    return dataset.records


# Snapshot endpoints


@router.get("/snapshots", response_model=list[SnapshotInfo])
async def list_snapshots():
    return await _require_store().list_snapshots()


@router.post("/snapshots/{name}", response_model=SnapshotInfo)
async def save_snapshot(name: str):
    return await _require_store().save_snapshot(name, get_session().grid)


@router.post("/snapshots/{name}/restore", response_model=SheetResponse)
async def restore_snapshot(name: str):
    """Load a named snapshot into the session as one undoable step."""
    grid = await _require_store().load_snapshot(name)
    if grid is None:
        raise HTTPException(status_code=404, detail=f"Snapshot not found: {name}")
    get_session().load(grid)
    await _autosave()
    return _sheet_response()
