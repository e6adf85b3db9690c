"""Operation models and the batch applier."""

from .apply import ApplyResult, OperationApplier, apply_operations, operations_for_updates
from .models import (
    AddColumnOperation,
    AddRowOperation,
    CreateTableOperation,
    DeleteColumnOperation,
    DeleteRowOperation,
    FormatCellOperation,
    Operation,
    OperationType,
    SetCellOperation,
    SetDataOperation,
    coerce_operation,
)
from .response import AIResponse, clean_json_response, parse_ai_response

__all__ = [
    "ApplyResult",
    "OperationApplier",
    "apply_operations",
    "operations_for_updates",
    "AddColumnOperation",
    "AddRowOperation",
    "CreateTableOperation",
    "DeleteColumnOperation",
    "DeleteRowOperation",
    "FormatCellOperation",
    "Operation",
    "OperationType",
    "SetCellOperation",
    "SetDataOperation",
    "coerce_operation",
    # AI responses
    "AIResponse",
    "clean_json_response",
    "parse_ai_response",
]
