"""
Schema types for adminschema IR.

A schema is one configuration entity type: its fields, its list view and its
form view. Schemas are compared and hashed by id alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import IllegalSchemaKindError, make_field_not_found
from .checks import InputCheck
from .fields import (
    ConditionalValue,
    DynamicSource,
    Eval,
    FieldSpec,
    FieldType,
    IfThen,
    StaticSource,
)
from .views import Action, FormView, ListView, SectionSpec

if TYPE_CHECKING:
    from ..values import ValueSource


class SchemaKind(StrEnum):
    """How records of a schema are identified in the settings store."""

    LIST = "list"
    ENTRY = "entry"
    RECORD = "record"


class SchemaType(BaseModel):
    """
    Kind of a schema with its key prefix and suffix.

    Examples:
        - SchemaType.list_(): a flat list of settings, no id semantics
        - SchemaType.entry("lookup"): entries keyed "lookup.<id>"
        - SchemaType.record("acme", "directory"): records keyed "acme.<id>.*",
          detected by their "directory" key
    """

    kind: SchemaKind = SchemaKind.LIST
    prefix: str | None = None
    suffix: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def list_(cls) -> SchemaType:
        return cls(kind=SchemaKind.LIST)

    @classmethod
    def entry(cls, prefix: str) -> SchemaType:
        return cls(kind=SchemaKind.ENTRY, prefix=prefix)

    @classmethod
    def record(cls, prefix: str, suffix: str) -> SchemaType:
        return cls(kind=SchemaKind.RECORD, prefix=prefix, suffix=suffix)


class SchemaSpec(BaseModel):
    """
    Specification for a configuration entity type.

    Attributes:
        id: Schema identifier, unique within the registry
        name_singular: Display name for one record
        name_plural: Display name for several records
        fields: Fields keyed by id
        type: Schema kind with prefix/suffix
        list_view: List view definition
        form_view: Form view definition
    """

    id: str
    name_singular: str = ""
    name_plural: str = ""
    fields: Mapping[str, FieldSpec] = Field(default_factory=dict, validate_default=True, repr=False)
    type: SchemaType = Field(default_factory=SchemaType)
    list_view: ListView = Field(default_factory=ListView, repr=False)
    form_view: FormView = Field(default_factory=FormView, repr=False)

    model_config = ConfigDict(frozen=True)

    @field_validator("fields", mode="after")
    @classmethod
    def _freeze_fields(cls, fields: Mapping[str, FieldSpec]) -> Mapping[str, FieldSpec]:
        return MappingProxyType(dict(fields))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SchemaSpec):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def field(self, field_id: str) -> FieldSpec:
        """Get a field by id, raising FieldNotFoundError when unknown."""
        try:
            return self.fields[field_id]
        except KeyError:
            raise make_field_not_found(field_id, self.id) from None

    def has_list_action(self, action: Action) -> bool:
        return action in self.list_view.actions

    def has_form_action(self, action: Action) -> bool:
        return action in self.form_view.actions

    def can_create(self) -> bool:
        return self.has_list_action(Action.CREATE)

    def can_edit(self) -> bool:
        return self.has_list_action(Action.MODIFY)

    def can_delete(self) -> bool:
        return self.has_list_action(Action.DELETE)

    def unwrap_prefix(self) -> str:
        """
        Key prefix of an entry or record schema.

        Raises:
            IllegalSchemaKindError: If the schema is a plain list
        """
        if self.type.kind == SchemaKind.LIST or self.type.prefix is None:
            raise IllegalSchemaKindError(
                f"Schema {self.id!r} is of kind {self.type.kind.value!r}, not record or entry"
            )
        return self.type.prefix

    def try_suffix(self) -> str | None:
        """Key suffix of a record schema, None for other kinds."""
        if self.type.kind == SchemaKind.RECORD:
            return self.type.suffix
        return None

    def visible_sections(self, values: ValueSource) -> list[SectionSpec]:
        """Form sections that are visible for the current values."""
        return [s for s in self.form_view.sections if s.is_visible(values)]


def _rebuild_field_models() -> None:
    """Rebuild field and view models to resolve the forward reference to SchemaSpec."""
    namespace = {
        "SchemaSpec": SchemaSpec,
        "FieldSpec": FieldSpec,
        "Eval": Eval,
        "InputCheck": InputCheck,
    }
    for model in (
        Eval,
        IfThen,
        IfThen[str],
        IfThen[InputCheck],
        ConditionalValue,
        ConditionalValue[str],
        ConditionalValue[InputCheck],
        StaticSource,
        DynamicSource,
        FieldType,
        FieldSpec,
        SectionSpec,
        ListView,
        FormView,
        SchemaSpec,
    ):
        model.model_rebuild(_types_namespace=namespace)


_rebuild_field_models()
