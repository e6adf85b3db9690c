"""Operation models for grid mutations.

Operations arrive from the AI service or from templates and are untrusted.
Each one is validated on its own against its variant, so a malformed entry
can be dropped without affecting the rest of the batch.
"""

import logging
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..sheets.models import CellStyle, CellValue

logger = logging.getLogger(__name__)


class OperationType(str, Enum):
    """Supported operation types."""

    SET_CELL = "SET_CELL"
    FORMAT_CELL = "FORMAT_CELL"
    ADD_ROW = "ADD_ROW"
    DELETE_ROW = "DELETE_ROW"
    ADD_COL = "ADD_COL"
    DELETE_COL = "DELETE_COL"
    SET_DATA = "SET_DATA"
    CREATE_TABLE = "CREATE_TABLE"


_TYPE_ALIASES = {
    "ADD_COLUMN": OperationType.ADD_COL.value,
    "DELETE_COLUMN": OperationType.DELETE_COL.value,
}


class _BaseOperation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SetCellOperation(_BaseOperation):
    """Set the value of one cell, leaving its style untouched."""

    type: Literal["SET_CELL"] = "SET_CELL"
    row: int = Field(ge=0)
    col: int = Field(ge=0)
    value: CellValue = None

    @property
    def has_value(self) -> bool:
        return "value" in self.model_fields_set


class FormatCellOperation(_BaseOperation):
    """Merge a style patch into one cell."""

    type: Literal["FORMAT_CELL"] = "FORMAT_CELL"
    row: int = Field(ge=0)
    col: int = Field(ge=0)
    style: CellStyle


class AddRowOperation(_BaseOperation):
    """Append one or more rows built from value arrays."""

    type: Literal["ADD_ROW"] = "ADD_ROW"
    data: list[list[CellValue]]


class DeleteRowOperation(_BaseOperation):
    type: Literal["DELETE_ROW"] = "DELETE_ROW"
    row: int = Field(ge=0)


class AddColumnOperation(_BaseOperation):
    """Insert a column at ``col`` into every row.

    ``data`` is parallel to the rows: either ``[[v0], [v1], ...]`` or a flat
    ``[v0, v1, ...]``. Rows without an entry get ``default_value``.
    """

    type: Literal["ADD_COL"] = "ADD_COL"
    col: int = Field(ge=0)
    data: Optional[list[Union[list[CellValue], CellValue]]] = None
    default_value: CellValue = Field(
        default=None,
        validation_alias=AliasChoices("defaultValue", "default_value", "value"),
        serialization_alias="defaultValue",
    )


class DeleteColumnOperation(_BaseOperation):
    type: Literal["DELETE_COL"] = "DELETE_COL"
    col: int = Field(ge=0)


class SetDataOperation(_BaseOperation):
    """Replace the whole grid."""

    type: Literal["SET_DATA"] = "SET_DATA"
    data: list[list[CellValue]]


class CreateTableOperation(_BaseOperation):
    """Replace the whole grid with a bold header row and data rows."""

    type: Literal["CREATE_TABLE"] = "CREATE_TABLE"
    headers: list[CellValue]
    data: list[list[CellValue]] = Field(default_factory=list)


Operation = Annotated[
    Union[
        SetCellOperation,
        FormatCellOperation,
        AddRowOperation,
        DeleteRowOperation,
        AddColumnOperation,
        DeleteColumnOperation,
        SetDataOperation,
        CreateTableOperation,
    ],
    Field(discriminator="type"),
]

_operation_adapter: TypeAdapter = TypeAdapter(Operation)


def coerce_operation(raw: Any) -> Optional[Operation]:
    """
    Validate one untrusted operation payload.

    Args:
        raw: A dict from a parsed AI response, or an operation model

    Returns:
        The typed operation, or None if the payload is malformed
    """
    if isinstance(raw, _BaseOperation):
        return raw

    if not isinstance(raw, dict):
        logger.warning(f"Skipping operation that is not an object: {raw!r}")
        return None

    payload = dict(raw)
    op_type = payload.get("type")
    if isinstance(op_type, str):
        normalized = op_type.strip().upper()
        payload["type"] = _TYPE_ALIASES.get(normalized, normalized)

    if payload.get("type") not in OperationType._value2member_map_:
        logger.warning(f"Skipping operation with unknown type: {op_type!r}")
        return None

    try:
        return _operation_adapter.validate_python(payload)
    except ValidationError as e:
        logger.warning(
            f"Skipping malformed {payload['type']} operation: "
            f"{e.error_count()} validation error(s)"
        )
        return None
