"""Editing session and templates."""

from .session import EditorSession, EditResult
from .templates import TEMPLATES, TemplateNotFoundError, template_operations

__all__ = [
    "EditorSession",
    "EditResult",
    "TEMPLATES",
    "TemplateNotFoundError",
    "template_operations",
]
