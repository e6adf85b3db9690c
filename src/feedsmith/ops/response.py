"""Parsing of AI service responses into operation batches."""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\n?")


class AIResponse(BaseModel):
    """A parsed AI reply: an opaque message plus raw, untrusted operations."""

    message: str = ""
    operations: list[Any] = Field(default_factory=list)


def clean_json_response(text: str) -> str:
    """Strip markdown fences and surrounding chatter from a JSON reply."""
    if not text:
        return "{}"
    clean = _FENCE_RE.sub("", text).strip()
    first_brace = clean.find("{")
    last_brace = clean.rfind("}")
    if first_brace != -1 and last_brace != -1:
        clean = clean[first_brace : last_brace + 1]
    return clean


def parse_ai_response(text: str) -> AIResponse:
    """
    Parse the raw text returned by the AI service.

    Text that is not a JSON object is treated as a plain message with no
    operations. The operations themselves are left unvalidated; the applier
    validates them one at a time.

    Args:
        text: Raw model output

    Returns:
        AIResponse with message and operations
    """
    try:
        payload = json.loads(clean_json_response(text))
    except json.JSONDecodeError:
        logger.warning("AI response is not valid JSON, treating it as a message")
        return AIResponse(message=text or "")

    if not isinstance(payload, dict):
        return AIResponse(message=text or "")

    message = payload.get("message")
    operations = payload.get("operations")
    if not isinstance(operations, list):
        if operations is not None:
            logger.warning("AI response 'operations' is not a list, ignoring it")
        operations = []

    return AIResponse(
        message=message if isinstance(message, str) else "",
        operations=operations,
    )
