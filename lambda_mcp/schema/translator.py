"""Translate declared shapes into JSON Schema documents for client introspection."""

from typing import Any

from .fields import (
    ArrayField,
    BooleanField,
    EnumField,
    NumberField,
    ObjectField,
    Shape,
    StringField,
)


__all__ = ["to_json_schema", "field_to_json_schema", "prompt_arguments"]


# JSON Schema spells the url tag "uri"
_STRING_FORMATS = {"email": "email", "url": "uri", "uuid": "uuid"}


def to_json_schema(shape: Shape) -> dict[str, Any]:
    """Convert a declared shape into an object JSON Schema.

    Every field that is neither optional nor defaulted is listed in
    ``required``, in declaration order.
    """
    properties: dict[str, Any] = {}
    required: list[str] = []

    for name, field in shape.items():
        properties[name] = field_to_json_schema(field)
        if not getattr(field, "is_optional", False):
            required.append(name)

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }


def field_to_json_schema(field: Any) -> dict[str, Any]:
    """Convert a single field descriptor.

    Unknown descriptor types degrade to a plain string schema instead of
    failing the registration.
    """
    schema: dict[str, Any]

    match field:
        case StringField():
            schema = {"type": "string"}
            if field.min_length is not None:
                schema["minLength"] = field.min_length
            if field.max_length is not None:
                schema["maxLength"] = field.max_length
            if field.format is not None:
                schema["format"] = _STRING_FORMATS[field.format]

        case NumberField():
            schema = {"type": "integer" if field.integer else "number"}
            if field.minimum is not None:
                schema["minimum"] = field.minimum
            if field.maximum is not None:
                schema["maximum"] = field.maximum

        case BooleanField():
            schema = {"type": "boolean"}

        case EnumField():
            schema = {"type": "string", "enum": list(field.values)}

        case ArrayField():
            schema = {"type": "array", "items": field_to_json_schema(field.items)}
            if field.min_items is not None:
                schema["minItems"] = field.min_items
            if field.max_items is not None:
                schema["maxItems"] = field.max_items

        case ObjectField():
            schema = to_json_schema(field.properties)

        case _:
            return {
                "type": "string",
                "description": getattr(field, "description", None) or "Unknown type",
            }

    if field.description:
        schema["description"] = field.description
    if field.has_default:
        schema["default"] = field.resolve_default()

    return schema


def prompt_arguments(shape: Shape) -> list[dict[str, Any]]:
    """Describe a prompt's arguments the way ``prompts/list`` reports them."""
    return [
        {
            "name": name,
            "description": getattr(field, "description", None) or f"{name} parameter",
            "required": not getattr(field, "is_optional", False),
        }
        for name, field in shape.items()
    ]
