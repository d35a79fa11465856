"""
Declarative field schemas and the input validator.

A FieldSchema is an ordered set of named fields. Every field is one of a
closed set of kinds, each knowing how to check a raw value and how to
describe itself as JSON Schema:

- StringField: length bounds, exact length, uuid format, regex pattern
- NumberField: inclusive range, integer-only
- EnumField: membership in a fixed list of strings
- ArrayField: a list whose items are one of the scalar kinds above

Cross-field constraints (AtLeastOneOf, RequiredWhen) live on the schema.

Example:
    ```python
    schema = FieldSchema(
        properties={
            "latitude": NumberField(minimum=-90, maximum=90, required=True),
            "pathway": ArrayField(items=EnumField(members=("ssp245", "ssp585"))),
        }
    )
    validated = validate_input(schema, {"latitude": 43.7, "pathway": ["ssp245"]})
    ```
"""

import math
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from cdt_express.core.exceptions import ValidationError, ValidationIssue

Scalar = str | int | float
FieldValue = Scalar | tuple[Scalar, ...]
ValidatedInput = Mapping[str, FieldValue]

ROOT_FIELD = "<input>"

_UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def describe_type(value: Any) -> str:
    """Name a raw value's type the way JSON would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


class BaseField(BaseModel, ABC):
    """Common attributes of every field kind."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: str | None = None
    required: bool = False
    default: Any = None

    @abstractmethod
    def check(self, name: str, value: Any) -> list[ValidationIssue]:
        """Return every constraint violated by a non-null value."""

    @abstractmethod
    def _type_schema(self) -> dict[str, Any]:
        pass

    def json_schema(self) -> dict[str, Any]:
        schema = self._type_schema()
        if self.description:
            schema["description"] = self.description
        if self.default is not None:
            schema["default"] = (
                list(self.default) if isinstance(self.default, tuple) else self.default
            )
        return schema


class StringField(BaseField):
    kind: Literal["string"] = "string"
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    length: int | None = Field(default=None, ge=0)
    format: Literal["uuid"] | None = None
    pattern: str | None = None

    def check(self, name: str, value: Any) -> list[ValidationIssue]:
        if not isinstance(value, str):
            return [ValidationIssue(field=name, reason=f"Expected string, received {describe_type(value)}")]

        issues: list[ValidationIssue] = []
        if self.length is not None and len(value) != self.length:
            issues.append(
                ValidationIssue(field=name, reason=f"String must contain exactly {self.length} character(s)")
            )
        if self.min_length is not None and len(value) < self.min_length:
            issues.append(
                ValidationIssue(field=name, reason=f"String must contain at least {self.min_length} character(s)")
            )
        if self.max_length is not None and len(value) > self.max_length:
            issues.append(
                ValidationIssue(field=name, reason=f"String must contain at most {self.max_length} character(s)")
            )
        if self.format == "uuid" and not _UUID_PATTERN.match(value):
            issues.append(ValidationIssue(field=name, reason="Invalid uuid"))
        if self.pattern is not None and not re.search(self.pattern, value):
            issues.append(ValidationIssue(field=name, reason=f"String must match pattern {self.pattern!r}"))
        return issues

    def _type_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "string"}
        if self.length is not None:
            schema["minLength"] = schema["maxLength"] = self.length
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self.format:
            schema["format"] = self.format
        if self.pattern:
            schema["pattern"] = self.pattern
        return schema


class NumberField(BaseField):
    kind: Literal["number"] = "number"
    minimum: float | None = None
    maximum: float | None = None
    integer: bool = False

    def check(self, name: str, value: Any) -> list[ValidationIssue]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return [ValidationIssue(field=name, reason=f"Expected number, received {describe_type(value)}")]
        if isinstance(value, float) and not math.isfinite(value):
            return [ValidationIssue(field=name, reason="Expected finite number")]

        issues: list[ValidationIssue] = []
        if self.integer and isinstance(value, float) and not value.is_integer():
            issues.append(ValidationIssue(field=name, reason="Expected integer, received float"))
        if self.minimum is not None and value < self.minimum:
            issues.append(
                ValidationIssue(field=name, reason=f"Number must be greater than or equal to {self.minimum:g}")
            )
        if self.maximum is not None and value > self.maximum:
            issues.append(
                ValidationIssue(field=name, reason=f"Number must be less than or equal to {self.maximum:g}")
            )
        return issues

    def _type_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "integer" if self.integer else "number"}
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema


class EnumField(BaseField):
    kind: Literal["enum"] = "enum"
    members: tuple[str, ...] = Field(..., min_length=1)

    def check(self, name: str, value: Any) -> list[ValidationIssue]:
        if not isinstance(value, str):
            return [ValidationIssue(field=name, reason=f"Expected string, received {describe_type(value)}")]
        if value not in self.members:
            expected = " | ".join(f"'{m}'" for m in self.members)
            return [
                ValidationIssue(
                    field=name, reason=f"Invalid enum value. Expected {expected}, received '{value}'"
                )
            ]
        return []

    def _type_schema(self) -> dict[str, Any]:
        return {"type": "string", "enum": list(self.members)}


ScalarField = Annotated[StringField | NumberField | EnumField, Field(discriminator="kind")]


class ArrayField(BaseField):
    kind: Literal["array"] = "array"
    items: ScalarField
    min_items: int | None = Field(default=None, ge=0)
    max_items: int | None = Field(default=None, ge=0)

    def check(self, name: str, value: Any) -> list[ValidationIssue]:
        if not isinstance(value, (list, tuple)):
            return [ValidationIssue(field=name, reason=f"Expected array, received {describe_type(value)}")]

        issues: list[ValidationIssue] = []
        if self.min_items is not None and len(value) < self.min_items:
            issues.append(
                ValidationIssue(field=name, reason=f"Array must contain at least {self.min_items} element(s)")
            )
        if self.max_items is not None and len(value) > self.max_items:
            issues.append(
                ValidationIssue(field=name, reason=f"Array must contain at most {self.max_items} element(s)")
            )
        for index, item in enumerate(value):
            item_name = f"{name}[{index}]"
            if item is None:
                issues.append(ValidationIssue(field=item_name, reason="Expected value, received null"))
                continue
            issues.extend(self.items.check(item_name, item))
        return issues

    def _type_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "array", "items": self.items.json_schema()}
        if self.min_items is not None:
            schema["minItems"] = self.min_items
        if self.max_items is not None:
            schema["maxItems"] = self.max_items
        return schema


AnyField = Annotated[
    StringField | NumberField | EnumField | ArrayField, Field(discriminator="kind")
]


class AtLeastOneOf(BaseModel):
    """At least one of the named fields must be present and non-empty."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["at_least_one_of"] = "at_least_one_of"
    field_names: tuple[str, ...] = Field(..., min_length=2)

    def check(self, values: Mapping[str, Any]) -> list[ValidationIssue]:
        if any(_is_present(values.get(name)) for name in self.field_names):
            return []
        names = " or ".join(f"'{name}'" for name in self.field_names)
        return [
            ValidationIssue(
                field=", ".join(self.field_names),
                reason=f"At least one of {names} must be provided.",
            )
        ]


class RequiredWhen(BaseModel):
    """A field becomes required when another field holds a given value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["required_when"] = "required_when"
    field_name: str
    when_field: str
    equals: str

    def check(self, values: Mapping[str, Any]) -> list[ValidationIssue]:
        if values.get(self.when_field) == self.equals and not _is_present(values.get(self.field_name)):
            return [
                ValidationIssue(
                    field=self.field_name,
                    reason=f"{self.field_name} is required when {self.when_field} is '{self.equals}'",
                )
            ]
        return []


SchemaRule = Annotated[AtLeastOneOf | RequiredWhen, Field(discriminator="kind")]


class FieldSchema(BaseModel):
    """Ordered, read-only declaration of a tool's input fields."""

    model_config = ConfigDict(frozen=True)

    properties: dict[str, AnyField] = Field(default_factory=dict)
    rules: tuple[SchemaRule, ...] = ()

    @property
    def field_names(self) -> list[str]:
        return list(self.properties)

    def extend(self, *others: "FieldSchema | Mapping[str, AnyField]") -> "FieldSchema":
        """Return a new schema with more fields; a redeclared field keeps its position."""
        properties = dict(self.properties)
        rules = list(self.rules)
        for other in others:
            if isinstance(other, FieldSchema):
                properties.update(other.properties)
                rules.extend(other.rules)
            else:
                properties.update(other)
        return FieldSchema(properties=properties, rules=tuple(rules))

    def with_rules(self, *rules: AtLeastOneOf | RequiredWhen) -> "FieldSchema":
        return FieldSchema(properties=dict(self.properties), rules=(*self.rules, *rules))

    def apply_defaults(self, raw_input: Any) -> Any:
        """Fill declared defaults for absent fields. Non-mapping input is returned untouched."""
        if not isinstance(raw_input, Mapping):
            return raw_input
        filled = dict(raw_input)
        for name, field in self.properties.items():
            if field.default is not None and filled.get(name) is None:
                filled[name] = (
                    list(field.default) if isinstance(field.default, (list, tuple)) else field.default
                )
        return filled

    def json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {name: field.json_schema() for name, field in self.properties.items()},
            "required": [name for name, field in self.properties.items() if field.required],
            "additionalProperties": False,
        }


def validate_input(schema: FieldSchema, raw_input: Any) -> ValidatedInput:
    """
    Check a raw input map against a schema.

    Every issue is collected before failing. Values are never coerced and
    defaults are never applied here. An explicit null for an optional field
    counts as absent.

    Returns:
        Read-only mapping in the schema's field order; arrays become tuples

    Raises:
        ValidationError: With one ValidationIssue per violated constraint
    """
    if not isinstance(raw_input, Mapping):
        raise ValidationError(
            [ValidationIssue(field=ROOT_FIELD, reason=f"Expected object, received {describe_type(raw_input)}")]
        )

    issues = [
        ValidationIssue(field=str(key), reason="Unrecognized field")
        for key in raw_input
        if key not in schema.properties
    ]

    values: dict[str, FieldValue] = {}
    for name, field in schema.properties.items():
        value = raw_input.get(name)
        if value is None:
            if field.required:
                issues.append(ValidationIssue(field=name, reason="Required"))
            continue
        field_issues = field.check(name, value)
        if field_issues:
            issues.extend(field_issues)
            continue
        values[name] = tuple(value) if isinstance(value, (list, tuple)) else value

    if not issues:
        for rule in schema.rules:
            issues.extend(rule.check(values))

    if issues:
        raise ValidationError(issues)
    return MappingProxyType(values)
