"""An editing session over one sheet.

The session owns the live grid through its :class:`HistoryManager`. Flash
fill and find/replace only read the grid; whatever they propose is turned
into a grid or operation batch and committed here, so every change is one
undoable step.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..flashfill import FlashFillEngine, FlashFillSuggestion
from ..history import HistoryManager
from ..ops.apply import ApplyResult
from ..ops.models import FormatCellOperation, SetCellOperation
from ..ops.response import AIResponse, parse_ai_response
from ..publish import TableSchema, infer_schema, sheet_to_records
from ..search import FindReplaceSession, ReplaceAllResult, ReplaceResult
from ..sheets.grid import generate_empty_sheet, is_empty_sheet
from ..sheets.models import CellPosition, CellStyle, CellValue, Grid
from .templates import template_operations

logger = logging.getLogger(__name__)


@dataclass
class EditResult:
    """Result of a manual cell edit."""

    result: ApplyResult
    suggestion: Optional[FlashFillSuggestion] = None


class EditorSession:
    """Holds the live grid, its history and the transient editor state."""

    def __init__(
        self,
        grid: Optional[Grid] = None,
        history_limit: Optional[int] = None,
        flash_fill: Optional[FlashFillEngine] = None,
    ):
        self.history = HistoryManager(
            grid if grid is not None else generate_empty_sheet(), limit=history_limit
        )
        self.flash_fill = flash_fill or FlashFillEngine()
        self.search = FindReplaceSession()
        self.pending_suggestion: Optional[FlashFillSuggestion] = None

    @property
    def grid(self) -> Grid:
        return self.history.grid

    @property
    def is_empty(self) -> bool:
        return is_empty_sheet(self.grid)

    # Mutations
    def edit_cell(self, row: int, col: int, value: CellValue) -> EditResult:
        """Set one cell and look for a flash fill pattern from the new value."""
        result = self.history.apply([SetCellOperation(row=row, col=col, value=value)])
        self.pending_suggestion = self.flash_fill.detect(self.grid, row, col, value)
        return EditResult(result=result, suggestion=self.pending_suggestion)

    def format_cell(self, row: int, col: int, style: CellStyle) -> ApplyResult:
        return self.history.apply([FormatCellOperation(row=row, col=col, style=style)])

    def apply_operations(self, operations: Optional[Sequence[Any]]) -> ApplyResult:
        """Apply an operation batch as a single undoable step."""
        self.pending_suggestion = None
        return self.history.apply(operations)

    def apply_ai_response(self, text: str) -> tuple[AIResponse, ApplyResult]:
        """Parse an AI reply and apply its operations, if it has any."""
        response = parse_ai_response(text)
        if not response.operations:
            return response, ApplyResult(grid=self.grid)
        logger.info(f"Applying {len(response.operations)} operations from AI response")
        return response, self.apply_operations(response.operations)

    def load(self, grid: Grid) -> Grid:
        """Replace the sheet (file import or restored snapshot) as one step."""
        self.pending_suggestion = None
        self.search.reset()
        return self.history.commit(grid)

    def load_template(self, name: str) -> ApplyResult:
        self.search.reset()
        return self.apply_operations(template_operations(name))

    def undo(self) -> bool:
        self.pending_suggestion = None
        return self.history.undo()

    def redo(self) -> bool:
        self.pending_suggestion = None
        return self.history.redo()

    # Flash fill
    def scan_flash_fill(self) -> Optional[FlashFillSuggestion]:
        self.pending_suggestion = self.flash_fill.scan(self.grid)
        return self.pending_suggestion

    def accept_suggestion(
        self, suggestion: Optional[FlashFillSuggestion] = None
    ) -> Optional[ApplyResult]:
        """Apply the given (or pending) suggestion. Returns None if there is none."""
        suggestion = suggestion or self.pending_suggestion
        self.pending_suggestion = None
        if suggestion is None:
            return None
        logger.info(
            f"Accepting flash fill '{suggestion.rule_description}' "
            f"({len(suggestion.updates)} cells)"
        )
        return self.history.apply(suggestion.to_operations())

    def dismiss_suggestion(self):
        self.pending_suggestion = None

    # Find / replace
    def find_next(self, query: str) -> Optional[CellPosition]:
        return self.search.find_next(self.grid, query)

    def replace(self, query: str, replacement: str) -> ReplaceResult:
        result = self.search.replace(self.grid, query, replacement)
        if result.replaced:
            self.history.commit(result.grid)
        return result

    def replace_all(self, query: str, replacement: str) -> ReplaceAllResult:
        result = self.search.replace_all(self.grid, query, replacement)
        if result.cells_changed:
            self.history.commit(result.grid)
        return result

    # Publishing
    def records(self) -> list[dict[str, Any]]:
        return sheet_to_records(self.grid)

    def schema(self, table_name: str = "MyTable") -> TableSchema:
        return infer_schema(self.grid, table_name)
