"""Data models for published records and inferred schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..sheets.models import CellValue

ColumnType = Literal["String", "Number", "Boolean", "Date", "URL", "Unknown"]


class SchemaColumn(BaseModel):
    """One inferred column."""

    name: str  # Header text as shown in the sheet
    key: str  # Sanitized key used in published records
    type: ColumnType
    sample: CellValue = None


class TableSchema(BaseModel):
    """Schema inferred from a sheet's header row and first data rows."""

    model_config = ConfigDict(populate_by_name=True)

    table_name: str = Field(alias="tableName")
    columns: list[SchemaColumn] = Field(default_factory=list)
    record_count: int = Field(default=0, alias="recordCount")
