"""Input sanitisation helpers and validation-error formatting."""

import html
from typing import Any, Dict, Iterable, List, Mapping

from fastapi.encoders import jsonable_encoder
from pydantic_core import PydanticCustomError

LIKE_ESCAPE_CHAR = "\\"


def escape_html(value: str) -> str:
    """Escape HTML special characters so stored text is inert in any HTML context.

    Example:
        >>> escape_html("<script>alert(1)</script>Safe")
        '&lt;script&gt;alert(1)&lt;/script&gt;Safe'
    """
    return html.escape(value, quote=True)


def clean_text(value: str, *, field: str, min_length: int, max_length: int, escape: bool = False) -> str:
    """Trim a free-text value and enforce its length bounds.

    Bounds are checked on the trimmed text. When ``escape`` is set the
    escaped result must still fit ``max_length``, since that is what gets
    stored.

    Raises:
        PydanticCustomError: Picked up by Pydantic as a regular field error.
    """
    trimmed = value.strip()
    label = field.replace("_", " ").capitalize()

    if len(trimmed) < min_length:
        if min_length == 1:
            raise PydanticCustomError("empty_text", f"{label} is required and cannot be blank")
        raise PydanticCustomError(
            "text_too_short", f"{label} must be at least {{min_length}} characters", {"min_length": min_length}
        )

    if len(trimmed) > max_length:
        raise PydanticCustomError(
            "text_too_long", f"{label} must not exceed {{max_length}} characters", {"max_length": max_length}
        )

    if not escape:
        return trimmed

    escaped = escape_html(trimmed)
    if len(escaped) > max_length:
        raise PydanticCustomError(
            "text_too_long",
            f"{label} must not exceed {{max_length}} characters once HTML entities are escaped",
            {"max_length": max_length},
        )
    return escaped


def reject_boolean(value: Any) -> Any:
    """Refuse JSON booleans where an integer is expected.

    Pydantic's lax mode would otherwise read ``true`` as ``1``.
    """
    if isinstance(value, bool):
        raise PydanticCustomError("int_type", "Input should be a valid integer, not a boolean")
    return value


def like_pattern(term: str) -> str:
    """Build a LIKE pattern matching ``term`` as a literal substring."""
    escaped = (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )
    return f"%{escaped}%"


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten Pydantic/FastAPI error dicts into the itemised ``details`` list.

    Every violation is kept, not just the first one.

    Example:
        ``{"loc": ("body", "classification"), "msg": "...", "input": 99}`` becomes
        ``{"field": "classification", "location": "body", "message": "...", "value": 99}``
    """
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        location = loc[0] if loc and loc[0] in ("body", "query", "path", "header") else "body"
        field_parts = loc[1:] if loc and loc[0] == location else loc
        details.append(
            {
                "field": ".".join(field_parts) or location,
                "location": location,
                "message": error.get("msg", "Invalid value"),
                "value": _safe_value(error.get("input")),
            }
        )
    return details


def _safe_value(value: Any) -> Any:
    try:
        return jsonable_encoder(value)
    except (TypeError, ValueError):
        return str(value)
