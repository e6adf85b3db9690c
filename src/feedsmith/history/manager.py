"""Undo/redo history over full grid snapshots."""

import logging
from collections import deque
from typing import Any, Optional, Sequence

from ..config import settings
from ..ops.apply import ApplyResult, OperationApplier
from ..sheets.grid import clone_grid
from ..sheets.models import Grid

logger = logging.getLogger(__name__)


class HistoryManager:
    """
    Linear undo/redo history for a single live grid.

    ``past`` holds snapshots taken before each committed mutation, most
    recent last, and is bounded: once full, committing evicts the oldest
    snapshot. ``future`` holds undone grids, next-to-redo first, and is
    cleared by every commit.

    The live grid and every snapshot are private copies; callers must route
    changes through :meth:`commit` or :meth:`apply` rather than mutating
    :attr:`grid` in place.
    """

    def __init__(
        self,
        grid: Optional[Grid] = None,
        limit: Optional[int] = None,
        applier: Optional[OperationApplier] = None,
    ):
        self.limit = limit or settings.history_limit
        self.applier = applier or OperationApplier()
        self._grid: Grid = clone_grid(grid) if grid is not None else []
        self._past: deque[Grid] = deque(maxlen=self.limit)
        self._future: deque[Grid] = deque(maxlen=self.limit)

    @property
    def grid(self) -> Grid:
        """The live grid."""
        return self._grid

    @property
    def past(self) -> list[Grid]:
        return list(self._past)

    @property
    def future(self) -> list[Grid]:
        return list(self._future)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def depth(self) -> int:
        return len(self._past)

    def commit(self, new_grid: Grid) -> Grid:
        """
        Checkpoint the live grid and replace it with ``new_grid``.

        Args:
            new_grid: The post-mutation grid

        Returns:
            The new live grid
        """
        return self._advance(clone_grid(new_grid))

    def apply(self, operations: Optional[Sequence[Any]]) -> ApplyResult:
        """
        Apply an operation batch and commit it as one snapshot transition.

        A batch in which no operation took effect is not checkpointed.
        """
        result = self.applier.apply_batch(self._grid, operations)
        if result.applied:
            self._advance(result.grid)
        return result

    def _advance(self, new_grid: Grid) -> Grid:
        self._past.append(self._grid)
        self._future.clear()
        self._grid = new_grid
        logger.debug(f"Committed snapshot (depth={len(self._past)})")
        return self._grid

    def undo(self) -> bool:
        """Step back one snapshot. Returns False if there is nothing to undo."""
        if not self._past:
            return False
        self._future.appendleft(self._grid)
        self._grid = self._past.pop()
        logger.debug(f"Undo (depth={len(self._past)}, redo={len(self._future)})")
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False if there is nothing to redo."""
        if not self._future:
            return False
        self._past.append(self._grid)
        self._grid = self._future.popleft()
        logger.debug(f"Redo (depth={len(self._past)}, redo={len(self._future)})")
        return True

    def reset(self, grid: Grid):
        """Replace the live grid and drop all history."""
        self._grid = clone_grid(grid)
        self._past.clear()
        self._future.clear()
