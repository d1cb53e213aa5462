"""
Logging utilities for safe structured logging.

Keeps provider payloads and generated documents from flooding the logs.

Dependencies: json (stdlib)
System role: Logging helper functions
"""

import json
from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Safely convert any value to a string for logging.

    Handles lists, dicts, None, and other types safely.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def safe_log_payload(payload: Any, max_length: int = 2000) -> str:
    """
    Render a JSON-like payload as compact JSON for a single log line.

    Args:
        payload: Decoded request body or any JSON-serializable value
        max_length: Maximum length before truncating

    Returns:
        str: Compact JSON, truncated when too long
    """
    try:
        rendered = json.dumps(payload, default=str, separators=(",", ":"))
    except (TypeError, ValueError):
        rendered = repr(payload)
    return safe_log_value(rendered, max_length=max_length)
