"""
View types for adminschema IR.

This module contains the list view and form view of a schema, the form
sections grouping fields, and the actions each view offers.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ..resolver import evaluate_any
from .fields import Eval, FieldSpec

if TYPE_CHECKING:
    from ..values import ValueSource


class Action(StrEnum):
    """Actions a list or form view can offer."""

    CREATE = "create"
    SAVE = "save"
    CANCEL = "cancel"
    MODIFY = "modify"
    DELETE = "delete"
    SEARCH = "search"


DEFAULT_LIST_ACTIONS = (Action.CREATE, Action.SEARCH, Action.DELETE, Action.MODIFY)
DEFAULT_FORM_ACTIONS = (Action.SAVE, Action.CANCEL)
DEFAULT_PAGE_SIZE = 10


class SectionSpec(BaseModel):
    """
    Group of fields shown together in a form.

    Attributes:
        title: Optional section heading
        display: Evals controlling visibility, OR-combined
        fields: Fields in display order
    """

    title: str | None = None
    display: tuple[Eval, ...] = ()
    fields: tuple[FieldSpec, ...] = ()

    model_config = ConfigDict(frozen=True)

    def is_visible(self, values: ValueSource) -> bool:
        return evaluate_any(self.display, values)

    def visible_fields(self, values: ValueSource) -> list[FieldSpec]:
        """Fields of this section that are visible for the current values."""
        return [f for f in self.fields if f.is_visible(values)]


class ListView(BaseModel):
    """
    Definition of the list (table) view of a schema.

    Attributes:
        title: Page title
        subtitle: Page subtitle
        fields: Columns in display order
        actions: Actions offered on the list
        page_size: Rows per page
    """

    title: str = ""
    subtitle: str = ""
    fields: tuple[FieldSpec, ...] = ()
    actions: tuple[Action, ...] = DEFAULT_LIST_ACTIONS
    page_size: int = DEFAULT_PAGE_SIZE

    model_config = ConfigDict(frozen=True)


class FormView(BaseModel):
    """
    Definition of the edit form of a schema.

    Attributes:
        title: Form title
        subtitle: Form subtitle
        sections: Sections in display order
        actions: Actions offered on the form
    """

    title: str = ""
    subtitle: str = ""
    sections: tuple[SectionSpec, ...] = ()
    actions: tuple[Action, ...] = DEFAULT_FORM_ACTIONS

    model_config = ConfigDict(frozen=True)
