"""Record publishing and schema inference."""

from .models import SchemaColumn, TableSchema
from .records import detect_type, infer_schema, sanitize_key, sheet_to_records

__all__ = [
    "SchemaColumn",
    "TableSchema",
    "detect_type",
    "infer_schema",
    "sanitize_key",
    "sheet_to_records",
]
