"""Flash fill: infer a derivation rule from one edit and project it.

Given a freshly typed value, the engine looks at the other columns of the
same row for a source the value can be derived from (a delimiter split, an
email built from a name, or a case change). The first column, in ascending
order, whose rule produces at least one fill for the rest of the sheet wins.
Only empty target cells with a non-empty source are ever filled.
"""

import logging
from typing import Iterator, Optional

from ..config import settings
from ..sheets.grid import cell_text, get_cell, is_empty_value, max_width
from ..sheets.models import CellUpdate, CellValue, Grid
from .models import FlashFillSuggestion
from .rules import CaseRule, DelimiterSplitRule, EmailRule, FillRule, compact_lower

logger = logging.getLogger(__name__)

DELIMITERS = (" ", ",", ".", "-", "_", "@", "/")


class FlashFillEngine:
    """Detects fill patterns from single edits or by scanning the sheet."""

    def __init__(
        self,
        min_length: Optional[int] = None,
        scan_max_columns: Optional[int] = None,
    ):
        self.min_length = settings.flash_fill_min_length if min_length is None else min_length
        self.scan_max_columns = (
            settings.flash_fill_scan_max_columns if scan_max_columns is None else scan_max_columns
        )

    def detect(
        self, grid: Grid, row: int, col: int, value: CellValue
    ) -> Optional[FlashFillSuggestion]:
        """
        Look for a rule deriving ``value`` from another column of ``row``.

        Args:
            grid: The sheet (read only)
            row: Row of the edited cell
            col: Column of the edited cell
            value: The value just typed

        Returns:
            A suggestion with at least one update, or None
        """
        if is_empty_value(value):
            return None
        target = cell_text(value).strip()
        if len(target) < self.min_length:
            return None
        if col < 0 or row < 0 or row >= len(grid) or not grid[row]:
            return None

        for source_col in range(len(grid[row])):
            if source_col == col:
                continue
            source_cell = get_cell(grid, row, source_col)
            if source_cell.is_empty:
                continue
            source = cell_text(source_cell.value).strip()
            if source == target:
                continue

            for rule in self._candidate_rules(source, target):
                updates = self._simulate(grid, source_col, col, rule)
                if updates:
                    logger.info(
                        f"Flash fill: '{rule.description}' from column {source_col} "
                        f"to column {col} ({len(updates)} cells)"
                    )
                    return FlashFillSuggestion(
                        rule_description=rule.description,
                        source_column_index=source_col,
                        target_column_index=col,
                        updates=updates,
                    )

        return None

    def scan(self, grid: Grid) -> Optional[FlashFillSuggestion]:
        """
        Scan the sheet for the fill opportunity with the most updates.

        Each column (up to ``scan_max_columns``) is seeded with its last
        non-empty cell below the header row.
        """
        if len(grid) < 2:
            return None

        best: Optional[FlashFillSuggestion] = None
        for target_col in range(min(max_width(grid), self.scan_max_columns)):
            seed_row = self._last_filled_row(grid, target_col)
            if seed_row is None:
                continue

            seed_value = get_cell(grid, seed_row, target_col).value
            suggestion = self.detect(grid, seed_row, target_col, seed_value)
            if suggestion and (best is None or len(suggestion.updates) > len(best.updates)):
                best = suggestion

        return best

    @staticmethod
    def _last_filled_row(grid: Grid, col: int) -> Optional[int]:
        for r in range(len(grid) - 1, 0, -1):
            if not get_cell(grid, r, col).is_empty:
                return r
        return None

    @staticmethod
    def _candidate_rules(source: str, target: str) -> Iterator[FillRule]:
        """Yield rules that explain ``target`` from ``source``, in priority order."""
        for delimiter in DELIMITERS:
            if delimiter not in source:
                continue
            matches = [
                i for i, part in enumerate(source.split(delimiter)) if part.strip() == target
            ]
            if len(matches) == 1:
                yield DelimiterSplitRule(delimiter, matches[0])

        if "@" in target:
            lowered = target.lower()
            if lowered.startswith(source.lower()) or lowered.startswith(compact_lower(source)):
                domain = target.split("@", 1)[1]
                if domain:
                    yield EmailRule(domain)

        if source.lower() == target.lower():
            if target == target.upper() and source != source.upper():
                yield CaseRule(upper=True)
            elif target == target.lower() and source != source.lower():
                yield CaseRule(upper=False)

    @staticmethod
    def _simulate(
        grid: Grid, source_col: int, target_col: int, rule: FillRule
    ) -> list[CellUpdate]:
        """Apply ``rule`` to every row with an empty target and a filled source."""
        updates: list[CellUpdate] = []
        for r in range(len(grid)):
            if not get_cell(grid, r, target_col).is_empty:
                continue
            source_cell = get_cell(grid, r, source_col)
            if source_cell.is_empty:
                continue

            derived = rule.derive(cell_text(source_cell.value))
            if derived:
                updates.append(CellUpdate(row=r, col=target_col, value=derived))
        return updates
