"""Diagnostic dumps of values we could not render."""

import json
from typing import Any

from pydantic import BaseModel


def dump_for_diagnostics(value: Any) -> str:
    """
    Serialize a model (or raw value) as indented JSON for placeholder text.

    Never raises: anything json cannot encode falls back to `str()`.

    Args:
        value: Pydantic model or plain JSON-like value

    Returns:
        Pretty-printed JSON string
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)
