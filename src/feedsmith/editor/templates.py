"""Built-in sheet templates, expressed as operation batches."""

from typing import Callable

from ..config import settings
from ..ops.models import CreateTableOperation, Operation, SetDataOperation


class TemplateNotFoundError(KeyError):
    """Raised when a template name is not registered."""


SHOPIFY_HEADERS = [
    "Handle",
    "Title",
    "Body (HTML)",
    "Vendor",
    "Product Category",
    "Type",
    "Tags",
    "Published",
    "Option1 Name",
    "Option1 Value",
    "Variant SKU",
    "Variant Price",
    "Variant Compare At Price",
    "Variant Inventory Qty",
    "Image Src",
    "Status",
]


def blank_template() -> list[Operation]:
    rows = settings.default_row_count
    cols = settings.default_column_count
    return [SetDataOperation(data=[[""] * cols for _ in range(rows)])]


def shopify_template() -> list[Operation]:
    """Shopify product import layout with bold headers and empty data rows."""
    blank_rows = [[""] * len(SHOPIFY_HEADERS) for _ in range(settings.default_row_count - 1)]
    return [CreateTableOperation(headers=SHOPIFY_HEADERS, data=blank_rows)]


TEMPLATES: dict[str, Callable[[], list[Operation]]] = {
    "blank": blank_template,
    "shopify": shopify_template,
}


def template_operations(name: str) -> list[Operation]:
    """
    Get the operation batch that builds a template.

    Raises:
        TemplateNotFoundError: If no template has that name
    """
    try:
        factory = TEMPLATES[name.lower()]
    except KeyError:
        raise TemplateNotFoundError(name) from None
    return factory()
