"""
JSON serializer utility for audit metadata
"""
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel


def sanitize_for_json(value: Any) -> Any:
    """
    Recursively convert Python objects to JSON-safe values before they are
    stored in audit_logs.meta_json.

    Sets become sorted lists so replaced override sets are logged in a
    stable order.
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return sanitize_for_json(value.model_dump())
    if isinstance(value, dict):
        return {str(k): sanitize_for_json(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted((sanitize_for_json(v) for v in value), key=str)
    if isinstance(value, (list, tuple)):
        return [sanitize_for_json(v) for v in value]
    return str(value)
