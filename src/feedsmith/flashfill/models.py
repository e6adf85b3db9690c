"""Data models for flash fill suggestions."""

from pydantic import BaseModel, ConfigDict, Field

from ..ops.apply import operations_for_updates
from ..ops.models import SetCellOperation
from ..sheets.models import CellUpdate


class FlashFillSuggestion(BaseModel):
    """A proposed, not yet applied batch of fills for empty target cells."""

    model_config = ConfigDict(populate_by_name=True)

    rule_description: str = Field(alias="ruleDescription")
    source_column_index: int = Field(alias="sourceColumnIndex")
    target_column_index: int = Field(alias="targetColumnIndex")
    updates: list[CellUpdate] = Field(default_factory=list)

    def to_operations(self) -> list[SetCellOperation]:
        """Convert the suggestion into a SET_CELL batch for the applier."""
        return operations_for_updates(self.updates)
