"""Declared argument shapes.

A shape is a plain ``dict`` mapping argument names to field descriptors.
Descriptors form a closed set of frozen pydantic models tagged by ``kind``;
modifiers such as ``optional()`` or ``with_default()`` return new
descriptors instead of mutating the receiver.

Example:
    shape = {
        "operation": fields.enum(["add", "subtract"]),
        "a": fields.number().describe("First operand"),
        "precision": fields.integer(minimum=0).with_default(2),
    }
"""

from collections.abc import Callable, Sequence
from typing import Annotated, Any, Literal, Self, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


__all__ = [
    "BaseField",
    "StringField",
    "NumberField",
    "BooleanField",
    "EnumField",
    "ArrayField",
    "ObjectField",
    "FieldDescriptor",
    "Shape",
    "StringFormat",
    "string",
    "number",
    "integer",
    "boolean",
    "enum",
    "array",
    "obj",
]


StringFormat = Literal["email", "url", "uuid"]


class BaseField(BaseModel):
    """Options shared by every field kind."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    description: str | None = Field(
        default=None,
        description="Human readable description exposed to clients",
    )
    required: bool = Field(
        default=True,
        description="Whether the caller must supply the field",
    )
    has_default: bool = Field(
        default=False,
        description="Whether an omitted field is filled from a default",
    )
    default: Any = None
    default_factory: Callable[[], Any] | None = None

    @property
    def is_optional(self) -> bool:
        """A field with a default is implicitly optional."""
        return not self.required or self.has_default

    def resolve_default(self) -> Any:
        """Evaluate the default, calling the factory anew on every use."""
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    def optional(self) -> Self:
        return self.model_copy(update={"required": False})

    def with_default(
        self,
        value: Any = None,
        *,
        factory: Callable[[], Any] | None = None,
    ) -> Self:
        """Return a copy that is filled with ``value`` (or ``factory()``) when omitted."""
        return self.model_copy(
            update={
                "has_default": True,
                "default": value,
                "default_factory": factory,
            }
        )

    def describe(self, description: str) -> Self:
        return self.model_copy(update={"description": description})


class StringField(BaseField):
    kind: Literal["string"] = "string"
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    format: StringFormat | None = None


class NumberField(BaseField):
    kind: Literal["number"] = "number"
    minimum: float | None = None
    maximum: float | None = None
    integer: bool = False


class BooleanField(BaseField):
    kind: Literal["boolean"] = "boolean"


class EnumField(BaseField):
    kind: Literal["enum"] = "enum"
    values: tuple[str, ...]

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("Enum fields need at least one allowed value")
        return v


class ArrayField(BaseField):
    kind: Literal["array"] = "array"
    items: "FieldDescriptor"
    min_items: int | None = Field(default=None, ge=0)
    max_items: int | None = Field(default=None, ge=0)


class ObjectField(BaseField):
    kind: Literal["object"] = "object"
    properties: dict[str, "FieldDescriptor"] = Field(default_factory=dict)


FieldDescriptor = Annotated[
    Union[StringField, NumberField, BooleanField, EnumField, ArrayField, ObjectField],
    Field(discriminator="kind"),
]

Shape = dict[str, BaseField]

ArrayField.model_rebuild()
ObjectField.model_rebuild()


# === Builders ===


def string(
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    format: StringFormat | None = None,
    description: str | None = None,
) -> StringField:
    return StringField(
        min_length=min_length,
        max_length=max_length,
        format=format,
        description=description,
    )


def number(
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    description: str | None = None,
) -> NumberField:
    return NumberField(minimum=minimum, maximum=maximum, description=description)


def integer(
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    description: str | None = None,
) -> NumberField:
    return NumberField(
        minimum=minimum, maximum=maximum, integer=True, description=description
    )


def boolean(*, description: str | None = None) -> BooleanField:
    return BooleanField(description=description)


def enum(values: Sequence[str], *, description: str | None = None) -> EnumField:
    return EnumField(values=tuple(values), description=description)


def array(
    items: BaseField,
    *,
    min_items: int | None = None,
    max_items: int | None = None,
    description: str | None = None,
) -> ArrayField:
    return ArrayField(
        items=items,
        min_items=min_items,
        max_items=max_items,
        description=description,
    )


def obj(properties: Shape, *, description: str | None = None) -> ObjectField:
    return ObjectField(properties=dict(properties), description=description)
