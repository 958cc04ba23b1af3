"""Validate untrusted arguments against a declared shape.

Validation never coerces: a string field given ``7`` fails, and ``True`` is
not accepted as a number. Only declared fields survive into the returned
mapping; anything else the caller sent is dropped.

All fields are checked before failing, so a ``ShapeValidationError`` lists
every offending path at once.
"""

import math
import re
import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from lambda_mcp.core.errors import ShapeValidationError, ValidationIssue

from .fields import (
    ArrayField,
    BooleanField,
    EnumField,
    NumberField,
    ObjectField,
    Shape,
    StringField,
)


__all__ = ["validate_arguments", "collect_issues"]


EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)([A-Z0-9_'+\-\.]*)[A-Z0-9_+-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)

_url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class _Invalid:
    """Marker for a value that failed validation."""


_INVALID = _Invalid()


def validate_arguments(shape: Shape, args: Mapping[str, Any] | None) -> dict[str, Any]:
    """Validate ``args`` against ``shape``.

    Args:
        shape: Declared shape of the operation or template
        args: Caller supplied arguments; ``None`` is treated as empty

    Returns:
        A new dict holding only the declared fields, with defaults applied

    Raises:
        ShapeValidationError: If one or more fields fail their descriptor
    """
    issues: list[ValidationIssue] = []

    if args is None:
        args = {}
    if not isinstance(args, Mapping):
        raise ShapeValidationError(
            [ValidationIssue("arguments", f"Expected object, received {_type_name(args)}")]
        )

    validated = _validate_mapping(shape, args, "", issues)
    if issues:
        raise ShapeValidationError(issues)
    return validated


def collect_issues(shape: Shape, args: Mapping[str, Any] | None) -> list[ValidationIssue]:
    """Return the validation issues for ``args`` without raising."""
    try:
        validate_arguments(shape, args)
    except ShapeValidationError as e:
        return e.issues
    return []


def _validate_mapping(
    shape: Shape,
    values: Mapping[str, Any],
    prefix: str,
    issues: list[ValidationIssue],
) -> dict[str, Any]:
    validated: dict[str, Any] = {}

    for name, field in shape.items():
        path = f"{prefix}.{name}" if prefix else name

        if name not in values:
            if getattr(field, "has_default", False):
                validated[name] = field.resolve_default()
            elif getattr(field, "is_optional", False):
                continue
            else:
                issues.append(ValidationIssue(path, "Required"))
            continue

        result = _validate_value(field, values[name], path, issues)
        if result is not _INVALID:
            validated[name] = result

    return validated


def _validate_value(
    field: Any, value: Any, path: str, issues: list[ValidationIssue]
) -> Any:
    def fail(message: str) -> _Invalid:
        issues.append(ValidationIssue(path, message))
        return _INVALID

    match field:
        case StringField():
            if not isinstance(value, str):
                return fail(f"Expected string, received {_type_name(value)}")
            if field.min_length is not None and len(value) < field.min_length:
                return fail(
                    f"String must contain at least {field.min_length} character(s)"
                )
            if field.max_length is not None and len(value) > field.max_length:
                return fail(
                    f"String must contain at most {field.max_length} character(s)"
                )
            if field.format is not None and not _matches_format(value, field.format):
                return fail(f"Invalid {field.format}")
            return value

        case NumberField():
            if isinstance(value, bool) or not isinstance(value, int | float):
                return fail(f"Expected number, received {_type_name(value)}")
            if isinstance(value, float) and not math.isfinite(value):
                return fail("Expected finite number")
            if field.integer and isinstance(value, float) and not value.is_integer():
                return fail("Expected integer, received float")
            if field.minimum is not None and value < field.minimum:
                return fail(
                    f"Number must be greater than or equal to {_format_bound(field.minimum)}"
                )
            if field.maximum is not None and value > field.maximum:
                return fail(
                    f"Number must be less than or equal to {_format_bound(field.maximum)}"
                )
            return value

        case BooleanField():
            if not isinstance(value, bool):
                return fail(f"Expected boolean, received {_type_name(value)}")
            return value

        case EnumField():
            if not isinstance(value, str) or value not in field.values:
                expected = " | ".join(f"'{v}'" for v in field.values)
                return fail(
                    f"Invalid enum value. Expected {expected}, received {value!r}"
                )
            return value

        case ArrayField():
            if not isinstance(value, list | tuple):
                return fail(f"Expected array, received {_type_name(value)}")
            if field.min_items is not None and len(value) < field.min_items:
                return fail(f"Array must contain at least {field.min_items} element(s)")
            if field.max_items is not None and len(value) > field.max_items:
                return fail(f"Array must contain at most {field.max_items} element(s)")
            before = len(issues)
            items = [
                _validate_value(field.items, item, f"{path}.{index}", issues)
                for index, item in enumerate(value)
            ]
            if len(issues) > before:
                return _INVALID
            return items

        case ObjectField():
            if not isinstance(value, Mapping):
                return fail(f"Expected object, received {_type_name(value)}")
            before = len(issues)
            nested = _validate_mapping(field.properties, value, path, issues)
            if len(issues) > before:
                return _INVALID
            return nested

        case _:
            # Unmodeled descriptors are passed through untouched
            return value


def _matches_format(value: str, fmt: str) -> bool:
    if fmt == "email":
        return EMAIL_PATTERN.match(value) is not None
    if fmt == "uuid":
        try:
            uuid.UUID(value)
        except ValueError:
            return False
        return True
    if fmt == "url":
        try:
            _url_adapter.validate_python(value)
        except PydanticValidationError:
            return False
        return True
    return True


def _format_bound(bound: float) -> str:
    if float(bound).is_integer():
        return str(int(bound))
    return str(bound)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__
