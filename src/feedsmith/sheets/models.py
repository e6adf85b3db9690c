"""Data models for the sheet grid."""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

CellValue = Union[bool, int, float, str, None]


class CellStyle(BaseModel):
    """Presentational attributes of a cell.

    Only attributes that were explicitly set are tracked as set, so a style
    patch merges per key without resetting the others.
    """

    model_config = ConfigDict(populate_by_name=True)

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    color: Optional[str] = None
    background_color: Optional[str] = Field(default=None, alias="backgroundColor")
    align: Optional[Literal["left", "center", "right"]] = None

    def merge(self, patch: "CellStyle") -> "CellStyle":
        """Return a copy with every key set on ``patch`` overwritten."""
        return self.model_copy(update=patch.model_dump(exclude_unset=True))


class Cell(BaseModel):
    """A single grid cell. ``value`` is the only semantic payload."""

    model_config = ConfigDict(populate_by_name=True)

    value: CellValue = ""
    style: CellStyle = Field(default_factory=CellStyle)
    is_valid: Optional[bool] = Field(default=None, alias="isValid")
    validation_message: Optional[str] = Field(default=None, alias="validationMessage")

    @field_validator("style", mode="before")
    @classmethod
    def _none_style_is_default(cls, v):
        return {} if v is None else v

    @property
    def is_empty(self) -> bool:
        return self.value is None or self.value == ""


Row = list[Cell]
Grid = list[Row]


class CellPosition(BaseModel):
    """A 0-indexed (row, col) location in the grid."""

    row: int = Field(ge=0)
    col: int = Field(ge=0)


class CellUpdate(BaseModel):
    """A single proposed cell content update."""

    row: int = Field(ge=0)
    col: int = Field(ge=0)
    value: CellValue
