"""
adminschema - declarative schemas for administrative configuration UIs.

Describes configuration entities (fields, list views, form sections) and
resolves field visibility, defaults, placeholders and input checks from the
current values of other fields.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.builder import SourceRef
from .core.errors import (
    AdminSchemaError,
    IllegalSchemaKindError,
    SchemaBuildError,
    SchemaNotFoundError,
)
from .core.registry import SchemaRegistry, install_registry, installed_registry
from .core.values import FormData, ValueSource

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "AdminSchemaError",
    "FormData",
    "IllegalSchemaKindError",
    "SchemaBuildError",
    "SchemaNotFoundError",
    "SchemaRegistry",
    "SourceRef",
    "ValueSource",
    "install_registry",
    "installed_registry",
]
