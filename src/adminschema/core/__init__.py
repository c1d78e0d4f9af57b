"""
Core schema entity graph and conditional value resolution.
"""

from . import ir
from .builder import FieldBuilder, RegistryBuilder, SchemaBuilder, SectionBuilder, SourceRef
from .errors import (
    AdminSchemaError,
    FieldNotFoundError,
    IllegalSchemaKindError,
    ManifestError,
    RegistryNotInstalledError,
    SchemaBuildError,
    SchemaNotFoundError,
)
from .registry import SchemaRegistry, install_registry, installed_registry
from .resolver import evaluate, evaluate_any, resolve
from .values import FormData, FormValue, ValueSource

__all__ = [
    "ir",
    # Builder
    "FieldBuilder",
    "RegistryBuilder",
    "SchemaBuilder",
    "SectionBuilder",
    "SourceRef",
    # Errors
    "AdminSchemaError",
    "FieldNotFoundError",
    "IllegalSchemaKindError",
    "ManifestError",
    "RegistryNotInstalledError",
    "SchemaBuildError",
    "SchemaNotFoundError",
    # Registry
    "SchemaRegistry",
    "install_registry",
    "installed_registry",
    # Resolution
    "evaluate",
    "evaluate_any",
    "resolve",
    # Values
    "FormData",
    "FormValue",
    "ValueSource",
]
