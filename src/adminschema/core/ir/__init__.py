"""
adminschema Intermediate Representation (IR) types.

This package contains the schema entity graph: schemas, fields, sections,
views, conditional values and the input check vocabulary. All types are
frozen pydantic models and are re-exported here.
"""

# Input checks
from .checks import (
    InputCheck,
    Transformer,
    Validator,
    ValidatorKind,
)

# Fields and conditions
from .fields import (
    Condition,
    ConditionalValue,
    DynamicSource,
    Eval,
    FieldSpec,
    FieldType,
    FieldTypeKind,
    IfThen,
    StaticSource,
)

# Schemas (import resolves forward references between fields and schemas)
from .schema import (
    SchemaKind,
    SchemaSpec,
    SchemaType,
)

# Views
from .views import (
    DEFAULT_FORM_ACTIONS,
    DEFAULT_LIST_ACTIONS,
    DEFAULT_PAGE_SIZE,
    Action,
    FormView,
    ListView,
    SectionSpec,
)

__all__ = [
    # Checks
    "InputCheck",
    "Transformer",
    "Validator",
    "ValidatorKind",
    # Fields
    "Condition",
    "ConditionalValue",
    "DynamicSource",
    "Eval",
    "FieldSpec",
    "FieldType",
    "FieldTypeKind",
    "IfThen",
    "StaticSource",
    # Schemas
    "SchemaKind",
    "SchemaSpec",
    "SchemaType",
    # Views
    "Action",
    "DEFAULT_FORM_ACTIONS",
    "DEFAULT_LIST_ACTIONS",
    "DEFAULT_PAGE_SIZE",
    "FormView",
    "ListView",
    "SectionSpec",
]
