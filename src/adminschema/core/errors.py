"""
Error types for schema construction and registry lookups.

Construction errors describe mistakes in the static schema definitions that
are compiled into the process. They are raised immediately and are never
caught inside this package: a process whose schemas fail to build must not
start serving requests.
"""

from dataclasses import dataclass
from typing import Optional


class AdminSchemaError(Exception):
    """Base exception for all adminschema errors."""

    def __init__(self, message: str, context: Optional["BuildContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message} ({self.context.format()})"
        return self.message


class SchemaBuildError(AdminSchemaError):
    """
    Raised when a schema definition violates a construction invariant.

    Examples:
    - Referencing a field that has not been built yet
    - Dynamic select sourced from an unregistered schema
    - prefix()/suffix() called out of order
    - Duplicate schema or field ids
    - Reusing a builder after build()
    """

    pass


class FieldNotFoundError(SchemaBuildError):
    """Raised when a field id is not registered in a schema."""

    pass


class SchemaNotFoundError(AdminSchemaError, LookupError):
    """
    Raised when a schema id is not registered.

    Schema ids are constants wired at startup, so a miss is a wiring bug
    rather than a user error.
    """

    pass


class IllegalSchemaKindError(AdminSchemaError):
    """Raised when a kind-specific accessor is used on the wrong schema kind."""

    pass


class RegistryNotInstalledError(AdminSchemaError):
    """Raised when the process-wide registry is read before installation."""

    pass


class ManifestError(AdminSchemaError):
    """Raised when adminschema.toml cannot be loaded or names unknown bundles."""

    pass


@dataclass
class BuildContext:
    """
    Location of a construction error within the schema definitions.

    Attributes:
        schema: Id of the schema being built
        field: Id of the field being built, if any
        section: Title of the form section being built, if any
    """

    schema: str
    field: str | None = None
    section: str | None = None

    def format(self) -> str:
        """
        Format the context as a human-readable string.

        Returns:
            Formatted string like: "schema 'acme', field 'directory'"
        """
        location = f"schema {self.schema!r}"
        if self.field:
            location += f", field {self.field!r}"
        if self.section:
            location += f", section {self.section!r}"
        return location


def make_build_error(
    message: str,
    schema: str,
    field: str | None = None,
    section: str | None = None,
) -> SchemaBuildError:
    """
    Helper to create a SchemaBuildError with context.

    Args:
        message: Error description
        schema: Id of the schema being built
        field: Optional id of the field being built
        section: Optional title of the section being built

    Returns:
        SchemaBuildError with context attached
    """
    return SchemaBuildError(message, BuildContext(schema=schema, field=field, section=section))


def make_field_not_found(
    missing: str,
    schema: str,
    field: str | None = None,
    section: str | None = None,
) -> FieldNotFoundError:
    """
    Helper to create a FieldNotFoundError naming the missing field and schema.

    Args:
        missing: Id of the field that could not be found
        schema: Id of the schema searched
        field: Optional id of the field being built when the lookup happened
        section: Optional title of the section being built
    """
    return FieldNotFoundError(
        f"Field {missing!r} not found in schema {schema!r}",
        BuildContext(schema=schema, field=field, section=section),
    )
