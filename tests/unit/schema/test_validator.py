"""Tests for validating call arguments against declared shapes."""

import pytest

from lambda_mcp.core.errors import INVALID_PARAMS, ShapeValidationError
from lambda_mcp.schema import fields
from lambda_mcp.schema.common import CommonSchemas
from lambda_mcp.schema.validator import collect_issues, validate_arguments


def issue_map(shape, args) -> dict[str, str]:
    return {issue.path: issue.message for issue in collect_issues(shape, args)}


@pytest.mark.unit
class TestValidateArguments:
    def test_unknown_fields_are_dropped(self) -> None:
        shape = {"a": fields.number(), "b": fields.number()}
        assert validate_arguments(shape, {"a": 1, "b": 2, "c": 3}) == {"a": 1, "b": 2}

    def test_default_applies_only_on_omission(self) -> None:
        shape = {"n": fields.number().optional().with_default(42)}
        assert validate_arguments(shape, {}) == {"n": 42}
        assert validate_arguments(shape, {"n": 7}) == {"n": 7}

    def test_default_factory_runs_per_call(self) -> None:
        shape = {"tags": fields.array(fields.string()).with_default(factory=list)}
        first = validate_arguments(shape, {})
        second = validate_arguments(shape, {})
        assert first == {"tags": []}
        assert first["tags"] is not second["tags"]

    def test_optional_field_is_omitted(self) -> None:
        shape = {"note": fields.string().optional()}
        assert validate_arguments(shape, {}) == {}
        assert validate_arguments(shape, None) == {}

    def test_returns_new_mapping(self) -> None:
        args = {"a": 1}
        validated = validate_arguments({"a": fields.number()}, args)
        validated["a"] = 2
        assert args == {"a": 1}

    def test_missing_required_email(self) -> None:
        shape = {"email": fields.string(format="email")}

        with pytest.raises(ShapeValidationError) as exc_info:
            validate_arguments(shape, {})

        error = exc_info.value
        assert error.code == INVALID_PARAMS
        assert [issue.path for issue in error.issues] == ["email"]
        assert error.issues[0].message == "Required"
        assert error.message == "Validation error: email: Required"

    def test_invalid_email_format(self) -> None:
        shape = {"email": fields.string(format="email")}
        assert issue_map(shape, {"email": "not-an-email"}) == {"email": "Invalid email"}
        assert validate_arguments(shape, {"email": "dev@example.com"}) == {
            "email": "dev@example.com"
        }

    def test_all_failures_are_reported(self) -> None:
        shape = {
            "name": fields.string(min_length=3),
            "age": fields.integer(minimum=0),
            "active": fields.boolean(),
        }
        issues = issue_map(shape, {"name": "al", "age": -1})
        assert issues == {
            "name": "String must contain at least 3 character(s)",
            "age": "Number must be greater than or equal to 0",
            "active": "Required",
        }

    def test_data_carries_issue_list(self) -> None:
        with pytest.raises(ShapeValidationError) as exc_info:
            validate_arguments({"a": fields.number()}, {"a": "1"})
        assert exc_info.value.to_dict() == {
            "code": INVALID_PARAMS,
            "message": "Validation error: a: Expected number, received string",
            "data": {
                "issues": [
                    {"path": "a", "message": "Expected number, received string"}
                ]
            },
        }

    def test_non_object_arguments(self) -> None:
        with pytest.raises(ShapeValidationError) as exc_info:
            validate_arguments({"a": fields.number()}, ["a"])  # type: ignore[arg-type]
        assert str(exc_info.value.issues[0]) == "arguments: Expected object, received array"


@pytest.mark.unit
class TestFieldKinds:
    def test_no_coercion(self) -> None:
        assert issue_map({"s": fields.string()}, {"s": 7}) == {
            "s": "Expected string, received number"
        }
        assert issue_map({"n": fields.number()}, {"n": True}) == {
            "n": "Expected number, received boolean"
        }
        assert issue_map({"b": fields.boolean()}, {"b": "true"}) == {
            "b": "Expected boolean, received string"
        }
        assert issue_map({"n": fields.number()}, {"n": None}) == {
            "n": "Expected number, received null"
        }

    def test_numbers(self) -> None:
        shape = {"n": fields.number(minimum=0.5, maximum=10)}
        assert issue_map(shape, {"n": 11}) == {
            "n": "Number must be less than or equal to 10"
        }
        assert issue_map(shape, {"n": 0.1}) == {
            "n": "Number must be greater than or equal to 0.5"
        }
        assert issue_map(shape, {"n": float("nan")}) == {"n": "Expected finite number"}
        assert validate_arguments(shape, {"n": 2.5}) == {"n": 2.5}

    def test_integers(self) -> None:
        shape = {"count": fields.integer()}
        assert issue_map(shape, {"count": 1.5}) == {
            "count": "Expected integer, received float"
        }
        assert validate_arguments(shape, {"count": 3}) == {"count": 3}
        assert validate_arguments(shape, {"count": 3.0}) == {"count": 3.0}

    def test_string_max_length(self) -> None:
        assert issue_map({"s": fields.string(max_length=2)}, {"s": "abc"}) == {
            "s": "String must contain at most 2 character(s)"
        }

    @pytest.mark.parametrize(
        ("fmt", "good", "bad"),
        [
            ("url", "https://example.com/path", "not a url"),
            ("uuid", "123e4567-e89b-12d3-a456-426614174000", "123"),
        ],
    )
    def test_formats(self, fmt: str, good: str, bad: str) -> None:
        shape = {"value": fields.string(format=fmt)}  # type: ignore[arg-type]
        assert validate_arguments(shape, {"value": good}) == {"value": good}
        assert issue_map(shape, {"value": bad}) == {"value": f"Invalid {fmt}"}

    def test_enum(self) -> None:
        shape = {"op": fields.enum(["add", "subtract"])}
        assert issue_map(shape, {"op": "divide"}) == {
            "op": "Invalid enum value. Expected 'add' | 'subtract', received 'divide'"
        }

    def test_enum_requires_values(self) -> None:
        with pytest.raises(ValueError):
            fields.enum([])

    def test_array_elements_and_bounds(self) -> None:
        shape = {"ids": fields.array(fields.integer(), min_items=1, max_items=3)}
        assert issue_map(shape, {"ids": []}) == {
            "ids": "Array must contain at least 1 element(s)"
        }
        assert issue_map(shape, {"ids": [1, 2, 3, 4]}) == {
            "ids": "Array must contain at most 3 element(s)"
        }
        assert issue_map(shape, {"ids": [1, "two", 3.5]}) == {
            "ids.1": "Expected number, received string",
            "ids.2": "Expected integer, received float",
        }
        assert validate_arguments(shape, {"ids": [1, 2]}) == {"ids": [1, 2]}

    def test_nested_objects(self) -> None:
        shape = {
            "filters": fields.obj(
                {
                    "category": fields.enum(["A", "B"]),
                    "include": fields.boolean().with_default(True),
                }
            )
        }
        assert validate_arguments(shape, {"filters": {"category": "A", "x": 1}}) == {
            "filters": {"category": "A", "include": True}
        }
        assert issue_map(shape, {"filters": {}}) == {"filters.category": "Required"}
        assert issue_map(shape, {"filters": "A"}) == {
            "filters": "Expected object, received string"
        }


@pytest.mark.unit
def test_common_schemas() -> None:
    shape = {
        "email": CommonSchemas.email,
        "website": CommonSchemas.url,
        "nickname": CommonSchemas.optional_string,
        "level": CommonSchemas.enum(["low", "high"]),
    }
    assert validate_arguments(
        shape,
        {"email": "a@b.io", "website": "http://b.io", "level": "low"},
    ) == {"email": "a@b.io", "website": "http://b.io", "level": "low"}


@pytest.mark.unit
def test_common_schema_presets_are_shared_and_builders_are_fresh() -> None:
    preset = CommonSchemas.optional_number
    described = preset.describe("Limit")

    assert preset.required is False
    assert described is not preset
    assert described.description == "Limit"
    assert preset.description is None

    first = CommonSchemas.enum(["a"])
    assert first is not CommonSchemas.enum(["a"])
    assert CommonSchemas.array(CommonSchemas.string, min_items=1).min_items == 1
