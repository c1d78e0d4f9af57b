"""
Field types for adminschema IR.

This module contains the field specification together with the conditional
machinery it owns: evals (single-field membership tests), if/then rules and
conditional values. They live in one module because an eval references a
field and a field owns evals.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..resolver import evaluate, evaluate_any, resolve
from .checks import InputCheck, ValidatorKind

if TYPE_CHECKING:
    from ..values import ValueSource
    from .schema import SchemaSpec

T = TypeVar("T")


class Condition(StrEnum):
    """Membership tests an eval can apply."""

    MATCH_ANY = "match_any"
    MATCH_NONE = "match_none"


class Eval(BaseModel):
    """
    Test of another field's current value against a list of literals.

    Attributes:
        field: The field whose current value is tested
        values: Literal values to compare against
        condition: MATCH_ANY (value is one of) or MATCH_NONE (value is none of)
    """

    field: FieldSpec = Field(repr=False)
    values: list[str] = Field(default_factory=list)
    condition: Condition = Condition.MATCH_ANY

    model_config = ConfigDict(frozen=True)

    @property
    def field_id(self) -> str:
        return self.field.id

    def evaluate(self, values: ValueSource) -> bool:
        return evaluate(self, values)


class IfThen(BaseModel, Generic[T]):
    """A single rule: when ``when`` holds, the value is ``value``."""

    when: Eval
    value: T

    model_config = ConfigDict(frozen=True)


class ConditionalValue(BaseModel, Generic[T]):
    """
    Ordered if/then rules with an optional fallback.

    Rules are tried top to bottom and the first match wins. When nothing
    matches the fallback is used, and when there is no fallback the result
    is None.
    """

    if_thens: list[IfThen[T]] = Field(default_factory=list)
    fallback: T | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        """Check if this value has neither rules nor a fallback."""
        return not self.if_thens and self.fallback is None

    def resolve(self, values: ValueSource) -> T | None:
        return resolve(self, values)


class FieldTypeKind(StrEnum):
    """Enumeration of supported field kinds."""

    INPUT = "input"
    ARRAY = "array"
    SECRET = "secret"
    TEXT = "text"
    EXPRESSION = "expression"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DURATION = "duration"
    SIZE = "size"


# Kinds that accept several entries instead of a scalar
MULTIVALUE_KINDS = frozenset({FieldTypeKind.ARRAY, FieldTypeKind.EXPRESSION})

# Kinds that always count as required
ALWAYS_REQUIRED_KINDS = frozenset({FieldTypeKind.CHECKBOX, FieldTypeKind.SELECT})


class StaticSource(BaseModel):
    """
    Fixed table of selectable options.

    Attributes:
        options: Ordered (key, label) pairs
    """

    options: list[tuple[str, str]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self.options]

    def label_for(self, key: str, values: ValueSource) -> str | None:
        for option_key, label in self.options:
            if option_key == key:
                return label
        return None


class DynamicSource(BaseModel):
    """
    Options sourced from another schema's field.

    The label for a selection is the current value of ``source_field``
    as seen through the same value source the selecting field is read from.

    Attributes:
        source_schema: Schema whose records supply the options
        source_field: Field of ``source_schema`` providing the labels
    """

    source_schema: SchemaSpec = Field(repr=False)
    source_field: FieldSpec = Field(repr=False)

    model_config = ConfigDict(frozen=True)

    def label_for(self, key: str, values: ValueSource) -> str | None:
        return values.get(self.source_field.id)


class FieldType(BaseModel):
    """
    Kind of a field, with the option source for select fields.

    Examples:
        - FieldType(kind=FieldTypeKind.DURATION)
        - FieldType(kind=FieldTypeKind.SELECT, source=StaticSource(options=[("smtp", "SMTP")]))
    """

    kind: FieldTypeKind = FieldTypeKind.EXPRESSION
    source: StaticSource | DynamicSource | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_source(self) -> FieldType:
        if self.kind == FieldTypeKind.SELECT and self.source is None:
            raise ValueError("Select fields require an option source")
        if self.kind != FieldTypeKind.SELECT and self.source is not None:
            raise ValueError(f"Field kind {self.kind.value!r} does not take an option source")
        return self


class FieldSpec(BaseModel):
    """
    Specification for a single configuration attribute.

    Attributes:
        id: Field identifier, unique within its schema
        label_form: Label shown next to the form input
        label_column: Label shown as the list column header
        help: Optional help text
        checks: Input check selected by the current values
        type: Field kind and option source
        default: Default value selected by the current values
        placeholder: Placeholder selected by the current values
        display: Evals controlling visibility, OR-combined
        readonly: Whether the value is fixed once the record exists
    """

    id: str
    label_form: str = ""
    label_column: str = ""
    help: str | None = None
    checks: ConditionalValue[InputCheck] = Field(default_factory=ConditionalValue[InputCheck])
    type: FieldType = Field(default_factory=FieldType)
    default: ConditionalValue[str] = Field(default_factory=ConditionalValue[str])
    placeholder: ConditionalValue[str] = Field(default_factory=ConditionalValue[str])
    display: list[Eval] = Field(default_factory=list)
    readonly: bool = False

    model_config = ConfigDict(frozen=True)

    def current_value(self, values: ValueSource) -> str:
        """Current value of this field, empty when unset."""
        return values.get(self.id) or ""

    def display_label(self, values: ValueSource) -> str:
        """
        Human-readable rendering of the current value.

        Select fields look the label up through their option source and fall
        back to the raw value when the source has nothing for it.
        """
        value = self.current_value(values)
        if self.type.kind == FieldTypeKind.SELECT and self.type.source is not None:
            label = self.type.source.label_for(value, values)
            if label is not None:
                return label
        return value

    def is_visible(self, values: ValueSource) -> bool:
        return evaluate_any(self.display, values)

    def resolve_default(self, values: ValueSource) -> str | None:
        return self.default.resolve(values)

    def resolve_placeholder(self, values: ValueSource) -> str | None:
        return self.placeholder.resolve(values)

    def resolve_input_check(self, values: ValueSource) -> InputCheck | None:
        return self.checks.resolve(values)

    def is_required(self, values: ValueSource) -> bool:
        """Checkbox and select fields are always required."""
        if self.type.kind in ALWAYS_REQUIRED_KINDS:
            return True
        check = self.resolve_input_check(values)
        return check is not None and check.has_validator(ValidatorKind.REQUIRED)

    @property
    def is_multivalue(self) -> bool:
        """Check if the field accepts several entries."""
        return self.type.kind in MULTIVALUE_KINDS
