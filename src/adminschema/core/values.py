"""
Value sources consumed during resolution.

Resolution reads current field values through the ``ValueSource`` protocol:
a synchronous ``get(key) -> str | None`` lookup. A plain ``dict[str, str]``
of persisted settings satisfies it, and so does ``FormData``, the edit buffer
of a form being filled in.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .ir import FieldSpec, SchemaSpec, SectionSpec

# A submitted value: a scalar, or the entries of a multi-valued field
FormValue = str | list[str]


@runtime_checkable
class ValueSource(Protocol):
    """Read-only lookup of the current string value of a field."""

    def get(self, key: str) -> str | None: ...


@dataclass
class FormData:
    """
    Values of a form instance bound to a schema.

    Attributes:
        schema: The schema the form edits
        values: Submitted values keyed by field id
        errors: Validation messages keyed by field id
        is_update: Whether the form edits an existing record
    """

    schema: SchemaSpec
    values: dict[str, FormValue] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    is_update: bool = False

    def get(self, key: str) -> str | None:
        """Scalar value of a field; multi-valued entries read as absent."""
        value = self.values.get(key)
        if isinstance(value, str):
            return value
        return None

    def get_multi(self, key: str) -> list[str]:
        """Entries of a multi-valued field; a scalar is a single entry."""
        value = self.values.get(key)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return list(value)

    def set_value(self, key: str, value: str) -> None:
        self.values[key] = value

    def set_values(self, key: str, values: Iterable[str]) -> None:
        self.values[key] = list(values)

    def set_error(self, key: str, message: str) -> None:
        self.errors[key] = message

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def visible_sections(self) -> list[SectionSpec]:
        """Sections of the bound schema visible for the current values."""
        return self.schema.visible_sections(self)

    def visible_fields(self) -> list[FieldSpec]:
        """Visible fields of visible sections, in form order."""
        return [f for section in self.visible_sections() for f in section.visible_fields(self)]
