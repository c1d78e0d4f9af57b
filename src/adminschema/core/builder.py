"""
Staged schema builder.

Schemas are assembled at startup with a chained API::

    registry = (
        SchemaRegistry.builder()
        .new_schema("acme")
        .names("ACME provider", "ACME providers")
        .prefix("acme")
        .suffix("directory")
        .new_id_field()
        .label("Directory Id")
        .build()
        .new_field("directory")
        .label("Directory URL")
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED, ValidatorKind.IS_URL])
        .build()
        .list_fields(["_id", "directory"])
        .build()
        .build()
    )

Each stage is its own builder object: ``RegistryBuilder`` opens a
``SchemaBuilder``, which opens ``FieldBuilder`` and ``SectionBuilder``
instances. ``build()`` on a stage hands the finished item to its parent and
returns the parent.

Cross references are resolved while building, so they can only point at items
that already exist: a field's conditions and a schema's list/section columns
must name fields built earlier in the same schema, and a dynamic select must
name a schema already in the registry. Every violation raises
``SchemaBuildError`` on the spot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .errors import SchemaBuildError, make_build_error, make_field_not_found
from .ir import (
    DEFAULT_FORM_ACTIONS,
    DEFAULT_LIST_ACTIONS,
    DEFAULT_PAGE_SIZE,
    Action,
    Condition,
    ConditionalValue,
    DynamicSource,
    Eval,
    FieldSpec,
    FieldType,
    FieldTypeKind,
    FormView,
    IfThen,
    InputCheck,
    ListView,
    SchemaKind,
    SchemaSpec,
    SchemaType,
    SectionSpec,
    StaticSource,
    Transformer,
    Validator,
    ValidatorKind,
)
from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

ID_FIELD = "_id"
VALUE_FIELD = "_value"


@dataclass(frozen=True)
class SourceRef:
    """
    Reference to another schema's field, used to declare a dynamic select.

    Resolved into a ``DynamicSource`` when passed to ``FieldBuilder.typ()``.
    """

    schema: str
    field: str


def _literals(values: str | Iterable[str]) -> list[str]:
    if isinstance(values, str):
        return [values]
    return list(values)


def _rule(field: FieldSpec, values: str | Iterable[str], condition: Condition) -> Eval:
    return Eval(field=field, values=_literals(values), condition=condition)


# =============================================================================
# Registry stage
# =============================================================================


class RegistryBuilder:
    """Collects built schemas; ``build()`` freezes them into a registry."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.page_size = page_size
        self._schemas: dict[str, SchemaSpec] = {}
        self._open: SchemaBuilder | None = None
        self._built = False

    def _ensure_open(self) -> None:
        if self._built:
            raise SchemaBuildError("Registry builder was already built")
        if self._open is not None:
            raise make_build_error(
                "Schema is still being built; call build() on it first",
                schema=self._open.schema_id,
            )

    def schema(self, schema_id: str) -> SchemaSpec:
        """Get an already built schema, for cross-schema references."""
        try:
            return self._schemas[schema_id]
        except KeyError:
            raise SchemaBuildError(
                f"Schema {schema_id!r} not found; schemas must be built before they are referenced"
            ) from None

    def new_schema(self, schema_id: str) -> SchemaBuilder:
        self._ensure_open()
        if schema_id in self._schemas:
            raise make_build_error(f"Duplicate schema {schema_id!r}", schema=schema_id)
        self._open = SchemaBuilder(self, schema_id)
        return self._open

    def apply(self, func: Callable[..., RegistryBuilder], *args: Any, **kwargs: Any) -> RegistryBuilder:
        """Apply a function that adds schemas, keeping the chain going."""
        self._ensure_open()
        return func(self, *args, **kwargs)

    def _insert(self, schema: SchemaSpec) -> None:
        self._schemas[schema.id] = schema
        self._open = None
        logger.debug(
            "Registered schema %r (%s, %d fields)",
            schema.id,
            schema.type.kind.value,
            len(schema.fields),
        )

    def build(self) -> SchemaRegistry:
        self._ensure_open()
        self._built = True
        return SchemaRegistry(self._schemas)


# =============================================================================
# Schema stage
# =============================================================================


class SchemaBuilder:
    """Builds one schema; opens field and section builders."""

    def __init__(self, parent: RegistryBuilder, schema_id: str) -> None:
        self.parent = parent
        self.schema_id = schema_id
        self._name_singular = ""
        self._name_plural = ""
        self._type = SchemaType.list_()
        self._fields: dict[str, FieldSpec] = {}
        self._list_title = ""
        self._list_subtitle = ""
        self._list_fields: list[FieldSpec] = []
        self._list_actions: list[Action] = list(DEFAULT_LIST_ACTIONS)
        self._page_size = parent.page_size
        self._form_title = ""
        self._form_subtitle = ""
        self._form_actions: list[Action] = list(DEFAULT_FORM_ACTIONS)
        self._sections: list[SectionSpec] = []
        self._open: FieldBuilder | SectionBuilder | None = None
        self._built = False

    def _error(self, message: str) -> SchemaBuildError:
        return make_build_error(message, schema=self.schema_id)

    def _ensure_open(self) -> None:
        if self._built:
            raise self._error("Schema builder was already built")
        if self._open is not None:
            raise self._open._error(
                f"{type(self._open).__name__} is still open; call build() on it first"
            )

    def field(self, field_id: str) -> FieldSpec:
        """Get a field already built in this schema."""
        try:
            return self._fields[field_id]
        except KeyError:
            raise make_field_not_found(field_id, self.schema_id) from None

    def names(self, singular: str, plural: str) -> SchemaBuilder:
        self._ensure_open()
        self._name_singular = singular
        self._name_plural = plural
        return self

    def prefix(self, prefix: str) -> SchemaBuilder:
        """Turn a list schema into an entry schema keyed by ``prefix``."""
        self._ensure_open()
        if self._type.kind != SchemaKind.LIST:
            raise self._error(
                f"prefix() requires a list schema, schema is already {self._type.kind.value!r}"
            )
        self._type = SchemaType.entry(prefix)
        return self

    def suffix(self, suffix: str) -> SchemaBuilder:
        """Turn an entry schema into a record schema detected by ``suffix``."""
        self._ensure_open()
        if self._type.kind != SchemaKind.ENTRY or self._type.prefix is None:
            raise self._error(
                f"suffix() requires an entry schema, schema is {self._type.kind.value!r}"
            )
        self._type = SchemaType.record(self._type.prefix, suffix)
        return self

    def list_title(self, title: str) -> SchemaBuilder:
        self._ensure_open()
        self._list_title = title
        return self

    def list_subtitle(self, subtitle: str) -> SchemaBuilder:
        self._ensure_open()
        self._list_subtitle = subtitle
        return self

    def list_field(self, field_id: str) -> SchemaBuilder:
        self._ensure_open()
        self._list_fields.append(self.field(field_id))
        return self

    def list_fields(self, field_ids: Iterable[str]) -> SchemaBuilder:
        for field_id in field_ids:
            self.list_field(field_id)
        return self

    def list_actions(self, actions: Iterable[Action]) -> SchemaBuilder:
        self._ensure_open()
        self._list_actions = list(actions)
        return self

    def list_page_size(self, page_size: int) -> SchemaBuilder:
        self._ensure_open()
        if page_size < 1:
            raise self._error(f"Page size must be positive, got {page_size}")
        self._page_size = page_size
        return self

    def form_title(self, title: str) -> SchemaBuilder:
        self._ensure_open()
        self._form_title = title
        return self

    def form_subtitle(self, subtitle: str) -> SchemaBuilder:
        self._ensure_open()
        self._form_subtitle = subtitle
        return self

    def form_actions(self, actions: Iterable[Action]) -> SchemaBuilder:
        self._ensure_open()
        self._form_actions = list(actions)
        return self

    def new_field(self, field_id: str) -> FieldBuilder:
        """Start a field; new fields are plain inputs until typ() says otherwise."""
        self._ensure_open()
        if field_id in self._fields:
            raise self._error(f"Duplicate field {field_id!r}")
        self._open = FieldBuilder(self, field_id)
        return self._open

    def new_id_field(self) -> FieldBuilder:
        """Start the conventional record identifier field."""
        return (
            self.new_field(ID_FIELD)
            .label("Id")
            .typ(FieldTypeKind.INPUT)
            .input_check(
                [Transformer.TRIM, Transformer.LOWERCASE],
                [ValidatorKind.REQUIRED, ValidatorKind.IS_ID],
            )
            .readonly()
        )

    def new_value_field(self) -> FieldBuilder:
        """Start the conventional single-value field."""
        return (
            self.new_field(VALUE_FIELD)
            .label("Value")
            .typ(FieldTypeKind.INPUT)
            .input_check([Transformer.TRIM], [])
        )

    def new_form_section(self) -> SectionBuilder:
        self._ensure_open()
        self._open = SectionBuilder(self)
        return self._open

    def apply(self, func: Callable[..., SchemaBuilder], *args: Any, **kwargs: Any) -> SchemaBuilder:
        """Apply a function that adds fields or sections, keeping the chain going."""
        self._ensure_open()
        return func(self, *args, **kwargs)

    def _insert_field(self, field: FieldSpec) -> None:
        if field.id in self._fields:
            raise self._error(f"Duplicate field {field.id!r}")
        self._fields[field.id] = field
        self._open = None

    def _insert_section(self, section: SectionSpec) -> None:
        self._sections.append(section)
        self._open = None

    def build(self) -> RegistryBuilder:
        self._ensure_open()
        schema = SchemaSpec(
            id=self.schema_id,
            name_singular=self._name_singular,
            name_plural=self._name_plural,
            fields=self._fields,
            type=self._type,
            list_view=ListView(
                title=self._list_title,
                subtitle=self._list_subtitle,
                fields=self._list_fields,
                actions=self._list_actions,
                page_size=self._page_size,
            ),
            form_view=FormView(
                title=self._form_title,
                subtitle=self._form_subtitle,
                sections=self._sections,
                actions=self._form_actions,
            ),
        )
        self._built = True
        self.parent._insert(schema)
        return self.parent


# =============================================================================
# Field stage
# =============================================================================


class FieldBuilder:
    """Builds one field of the schema in progress."""

    def __init__(self, parent: SchemaBuilder, field_id: str) -> None:
        self.parent = parent
        self.field_id = field_id
        self._label_form = ""
        self._label_column = ""
        self._help: str | None = None
        self._readonly = False
        self._type = FieldType(kind=FieldTypeKind.INPUT)
        self._checks: list[IfThen[InputCheck]] = []
        self._checks_fallback: InputCheck | None = None
        self._defaults: list[IfThen[str]] = []
        self._default_fallback: str | None = None
        self._placeholders: list[IfThen[str]] = []
        self._placeholder_fallback: str | None = None
        self._display: list[Eval] = []
        self._built = False

    def _error(self, message: str) -> SchemaBuildError:
        return make_build_error(message, schema=self.parent.schema_id, field=self.field_id)

    def _ensure_open(self) -> None:
        if self._built:
            raise self._error("Field builder was already built")

    def _field(self, field_id: str) -> FieldSpec:
        try:
            return self.parent._fields[field_id]
        except KeyError:
            raise make_field_not_found(
                field_id, self.parent.schema_id, field=self.field_id
            ) from None

    def label(self, label: str) -> FieldBuilder:
        """Set both the form and the column label."""
        self._ensure_open()
        self._label_form = label
        self._label_column = label
        return self

    def label_form(self, label: str) -> FieldBuilder:
        self._ensure_open()
        self._label_form = label
        return self

    def label_column(self, label: str) -> FieldBuilder:
        self._ensure_open()
        self._label_column = label
        return self

    def help(self, text: str) -> FieldBuilder:
        self._ensure_open()
        self._help = text
        return self

    def readonly(self) -> FieldBuilder:
        self._ensure_open()
        self._readonly = True
        return self

    def typ(
        self,
        kind: FieldTypeKind,
        source: StaticSource | SourceRef | Iterable[tuple[str, str]] | None = None,
    ) -> FieldBuilder:
        """
        Set the field kind.

        Select fields need a source: a ``StaticSource`` (or plain list of
        ``(key, label)`` pairs), or a ``SourceRef`` naming a field of a schema
        that is already registered.
        """
        self._ensure_open()
        if kind == FieldTypeKind.SELECT:
            if source is None:
                raise self._error("Select fields require an option source")
            if isinstance(source, SourceRef):
                if source.schema not in self.parent.parent._schemas:
                    raise self._error(
                        f"Schema {source.schema!r} not found; "
                        "schemas must be built before they are referenced"
                    )
                schema = self.parent.parent.schema(source.schema)
                if source.field not in schema.fields:
                    raise make_field_not_found(source.field, source.schema, field=self.field_id)
                resolved: StaticSource | DynamicSource = DynamicSource(
                    source_schema=schema, source_field=schema.fields[source.field]
                )
            elif isinstance(source, StaticSource):
                resolved = source
            else:
                resolved = StaticSource(options=list(source))
            self._type = FieldType(kind=kind, source=resolved)
        else:
            if source is not None:
                raise self._error(f"Field kind {kind.value!r} does not take an option source")
            self._type = FieldType(kind=kind)
        return self

    def input_check(
        self,
        transformers: Iterable[Transformer],
        validators: Iterable[Validator | ValidatorKind],
    ) -> FieldBuilder:
        """Set the input check used when no conditional check matches."""
        self._ensure_open()
        self._checks_fallback = InputCheck.new(transformers, validators)
        return self

    def input_check_if_eq(
        self,
        field: str,
        values: str | Iterable[str],
        transformers: Iterable[Transformer],
        validators: Iterable[Validator | ValidatorKind],
    ) -> FieldBuilder:
        self._ensure_open()
        self._checks.append(
            IfThen[InputCheck](
                when=_rule(self._field(field), values, Condition.MATCH_ANY),
                value=InputCheck.new(transformers, validators),
            )
        )
        return self

    def placeholder(self, placeholder: str) -> FieldBuilder:
        self._ensure_open()
        self._placeholder_fallback = placeholder
        return self

    def placeholder_if_eq(
        self, field: str, values: str | Iterable[str], placeholder: str
    ) -> FieldBuilder:
        self._ensure_open()
        self._placeholders.append(
            IfThen[str](
                when=_rule(self._field(field), values, Condition.MATCH_ANY),
                value=placeholder,
            )
        )
        return self

    def default(self, default: str) -> FieldBuilder:
        """Set the fallback default; it doubles as the fallback placeholder."""
        self._ensure_open()
        self._default_fallback = default
        self._placeholder_fallback = default
        return self

    def default_if_eq(self, field: str, values: str | Iterable[str], default: str) -> FieldBuilder:
        self._ensure_open()
        self._defaults.append(
            IfThen[str](
                when=_rule(self._field(field), values, Condition.MATCH_ANY),
                value=default,
            )
        )
        return self

    def display_if(
        self, field: str, values: str | Iterable[str], condition: Condition
    ) -> FieldBuilder:
        self._ensure_open()
        self._display.append(_rule(self._field(field), values, condition))
        return self

    def display_if_eq(self, field: str, values: str | Iterable[str]) -> FieldBuilder:
        return self.display_if(field, values, Condition.MATCH_ANY)

    def display_if_ne(self, field: str, values: str | Iterable[str]) -> FieldBuilder:
        return self.display_if(field, values, Condition.MATCH_NONE)

    def _to_spec(self) -> FieldSpec:
        return FieldSpec(
            id=self.field_id,
            label_form=self._label_form,
            label_column=self._label_column,
            help=self._help,
            checks=ConditionalValue[InputCheck](
                if_thens=self._checks, fallback=self._checks_fallback
            ),
            type=self._type,
            default=ConditionalValue[str](if_thens=self._defaults, fallback=self._default_fallback),
            placeholder=ConditionalValue[str](
                if_thens=self._placeholders, fallback=self._placeholder_fallback
            ),
            display=self._display,
            readonly=self._readonly,
        )

    def build(self) -> SchemaBuilder:
        self._ensure_open()
        spec = self._to_spec()
        self._built = True
        self.parent._insert_field(spec)
        return self.parent

    def new_field(self, field_id: str) -> FieldBuilder:
        """
        Build this field and start a sibling.

        The sibling inherits this field's kind, display conditions and input
        checks; labels, defaults and placeholders start empty.
        """
        schema = self.build()
        sibling = schema.new_field(field_id)
        sibling._type = self._type
        sibling._display = list(self._display)
        sibling._checks = list(self._checks)
        sibling._checks_fallback = self._checks_fallback
        return sibling


# =============================================================================
# Section stage
# =============================================================================


class SectionBuilder:
    """Builds one form section of the schema in progress."""

    def __init__(self, parent: SchemaBuilder) -> None:
        self.parent = parent
        self._title: str | None = None
        self._fields: list[FieldSpec] = []
        self._display: list[Eval] = []
        self._built = False

    def _error(self, message: str) -> SchemaBuildError:
        return make_build_error(message, schema=self.parent.schema_id, section=self._title)

    def _ensure_open(self) -> None:
        if self._built:
            raise self._error("Section builder was already built")

    def _field(self, field_id: str) -> FieldSpec:
        try:
            return self.parent._fields[field_id]
        except KeyError:
            raise make_field_not_found(
                field_id, self.parent.schema_id, section=self._title
            ) from None

    def title(self, title: str) -> SectionBuilder:
        self._ensure_open()
        self._title = title
        return self

    def field(self, field_id: str) -> SectionBuilder:
        self._ensure_open()
        self._fields.append(self._field(field_id))
        return self

    def fields(self, field_ids: Iterable[str]) -> SectionBuilder:
        for field_id in field_ids:
            self.field(field_id)
        return self

    def _display_if(
        self, field: str, values: str | Iterable[str], condition: Condition
    ) -> SectionBuilder:
        self._ensure_open()
        self._display.append(_rule(self._field(field), values, condition))
        return self

    def display_if_eq(self, field: str, values: str | Iterable[str]) -> SectionBuilder:
        return self._display_if(field, values, Condition.MATCH_ANY)

    def display_if_ne(self, field: str, values: str | Iterable[str]) -> SectionBuilder:
        return self._display_if(field, values, Condition.MATCH_NONE)

    def build(self) -> SchemaBuilder:
        self._ensure_open()
        section = SectionSpec(title=self._title, display=self._display, fields=self._fields)
        self._built = True
        self.parent._insert_section(section)
        return self.parent
