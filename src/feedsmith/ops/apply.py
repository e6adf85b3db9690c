"""Sequential application of operation batches to a grid."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ..sheets.grid import (
    clone_grid,
    ensure_dimensions,
    grid_from_values,
    max_width,
    rectangularize,
)
from ..sheets.models import Cell, CellStyle, CellValue, Grid
from .models import (
    AddColumnOperation,
    AddRowOperation,
    CreateTableOperation,
    DeleteColumnOperation,
    DeleteRowOperation,
    FormatCellOperation,
    Operation,
    SetCellOperation,
    SetDataOperation,
    coerce_operation,
)

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Result of applying an operation batch."""

    grid: Grid
    applied: int = 0
    skipped: int = 0


class OperationApplier:
    """
    Applies operation batches as a left fold over a private copy of the grid.

    Every operation sees the effects of the ones before it. Operations that
    are malformed or reference nothing (e.g. deleting a row that does not
    exist) leave the grid unchanged and are counted as skipped.
    """

    def __init__(self):
        self._handlers = {
            "SET_CELL": self._set_cell,
            "FORMAT_CELL": self._format_cell,
            "ADD_ROW": self._add_row,
            "DELETE_ROW": self._delete_row,
            "ADD_COL": self._add_column,
            "DELETE_COL": self._delete_column,
            "SET_DATA": self._set_data,
            "CREATE_TABLE": self._create_table,
        }

    def apply_batch(self, grid: Grid, operations: Optional[Sequence[Any]]) -> ApplyResult:
        """
        Apply operations in order.

        Args:
            grid: The current grid (not modified)
            operations: Raw operation payloads or operation models

        Returns:
            ApplyResult with the new grid and applied/skipped counts
        """
        working = clone_grid(grid)
        result = ApplyResult(grid=working)

        if operations is None:
            return result
        if not isinstance(operations, (list, tuple)):
            logger.warning(f"Operation batch is not a list, ignoring it: {type(operations).__name__}")
            return result

        touched_width = 0
        for index, raw in enumerate(operations):
            op = coerce_operation(raw)
            if op is None:
                result.skipped += 1
                continue

            if self._handlers[op.type](working, op):
                result.applied += 1
                if isinstance(op, (SetDataOperation, CreateTableOperation)):
                    touched_width = 0
                elif isinstance(op, (SetCellOperation, FormatCellOperation)):
                    touched_width = max(touched_width, op.col + 1)
            else:
                logger.debug(f"Operation {index} ({op.type}) had no effect")
                result.skipped += 1

        if touched_width:
            rectangularize(working, touched_width)

        logger.info(
            f"Applied {result.applied} operations ({result.skipped} skipped); "
            f"grid is now {len(working)}x{max_width(working)}"
        )
        return result

    def _set_cell(self, grid: Grid, op: SetCellOperation) -> bool:
        if not op.has_value:
            return False
        ensure_dimensions(grid, op.row, op.col)
        grid[op.row][op.col].value = op.value
        return True

    def _format_cell(self, grid: Grid, op: FormatCellOperation) -> bool:
        ensure_dimensions(grid, op.row, op.col)
        cell = grid[op.row][op.col]
        cell.style = cell.style.merge(op.style)
        return True

    def _add_row(self, grid: Grid, op: AddRowOperation) -> bool:
        grid.extend(grid_from_values(op.data))
        return bool(op.data)

    def _delete_row(self, grid: Grid, op: DeleteRowOperation) -> bool:
        if op.row >= len(grid):
            return False
        del grid[op.row]
        return True

    def _add_column(self, grid: Grid, op: AddColumnOperation) -> bool:
        # Rows that end before col are left alone, mirroring DELETE_COL
        changed = False
        for r, cells in enumerate(grid):
            if len(cells) < op.col:
                continue
            cells.insert(op.col, Cell(value=self._column_value(op, r), style=CellStyle()))
            changed = True
        return changed

    @staticmethod
    def _column_value(op: AddColumnOperation, row: int) -> CellValue:
        if op.data is not None and row < len(op.data):
            entry = op.data[row]
            if not isinstance(entry, list):
                return entry
            if entry:
                return entry[0]
        return "" if op.default_value is None else op.default_value

    def _delete_column(self, grid: Grid, op: DeleteColumnOperation) -> bool:
        changed = False
        for cells in grid:
            if len(cells) > op.col:
                del cells[op.col]
                changed = True
        return changed

    def _set_data(self, grid: Grid, op: SetDataOperation) -> bool:
        grid[:] = grid_from_values(op.data)
        return True

    def _create_table(self, grid: Grid, op: CreateTableOperation) -> bool:
        header = [Cell(value=h, style=CellStyle(bold=True)) for h in op.headers]
        grid[:] = [header] + grid_from_values(op.data)
        return True


def apply_operations(grid: Grid, operations: Optional[Sequence[Any]]) -> Grid:
    """Apply a batch and return only the resulting grid."""
    return OperationApplier().apply_batch(grid, operations).grid


def operations_for_updates(updates: Iterable[Any]) -> list[Operation]:
    """Turn ``{row, col, value}`` updates into a SET_CELL batch."""
    return [SetCellOperation(row=u.row, col=u.col, value=u.value) for u in updates]
