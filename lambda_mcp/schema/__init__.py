"""Declared shapes, their JSON Schema projection and argument validation."""

from . import fields
from .common import CommonSchemas
from .fields import (
    ArrayField,
    BaseField,
    BooleanField,
    EnumField,
    FieldDescriptor,
    NumberField,
    ObjectField,
    Shape,
    StringField,
)
from .translator import field_to_json_schema, prompt_arguments, to_json_schema
from .validator import collect_issues, validate_arguments


__all__ = [
    "fields",
    "CommonSchemas",
    "ArrayField",
    "BaseField",
    "BooleanField",
    "EnumField",
    "FieldDescriptor",
    "NumberField",
    "ObjectField",
    "Shape",
    "StringField",
    "field_to_json_schema",
    "prompt_arguments",
    "to_json_schema",
    "collect_issues",
    "validate_arguments",
]
