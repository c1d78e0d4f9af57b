"""
Schema registry.

The registry holds every schema of the process, indexed by id. It is built
once at startup through ``SchemaRegistry.builder()`` and never mutated
afterwards, so any number of request handlers may read it without locking.

A process installs its registry once with ``install_registry()``; handlers
then read it back with ``installed_registry()``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import RegistryNotInstalledError, SchemaBuildError, SchemaNotFoundError
from .ir import DEFAULT_PAGE_SIZE, SchemaSpec
from .values import FormData

if TYPE_CHECKING:
    from .builder import RegistryBuilder

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Immutable collection of schemas keyed by id.

    Lookups of unknown ids raise ``SchemaNotFoundError``: ids are constants
    wired into the process, so a miss is a wiring bug. Callers are not
    expected to recover from it.
    """

    def __init__(self, schemas: Mapping[str, SchemaSpec]) -> None:
        self._schemas: Mapping[str, SchemaSpec] = MappingProxyType(dict(schemas))

    @staticmethod
    def builder(page_size: int = DEFAULT_PAGE_SIZE) -> RegistryBuilder:
        """Start building a registry."""
        from .builder import RegistryBuilder

        return RegistryBuilder(page_size=page_size)

    @property
    def schemas(self) -> Mapping[str, SchemaSpec]:
        return self._schemas

    def get(self, schema_id: str) -> SchemaSpec:
        """
        Get a schema by id.

        Raises:
            SchemaNotFoundError: If no schema with this id is registered
        """
        try:
            return self._schemas[schema_id]
        except KeyError:
            raise SchemaNotFoundError(f"Schema {schema_id!r} not found") from None

    def build_form(self, schema_id: str) -> FormData:
        """Create an empty form bound to a schema."""
        return FormData(schema=self.get(schema_id))

    def ids(self) -> list[str]:
        return list(self._schemas)

    def __contains__(self, schema_id: object) -> bool:
        return schema_id in self._schemas

    def __iter__(self) -> Iterator[SchemaSpec]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self) -> str:
        return f"SchemaRegistry({', '.join(self._schemas)})"


# =============================================================================
# Process-wide registry
# =============================================================================

_installed: SchemaRegistry | None = None
_install_lock = threading.Lock()


def install_registry(registry: SchemaRegistry) -> SchemaRegistry:
    """
    Install the process-wide registry.

    Must be called once, before request handling starts.

    Raises:
        SchemaBuildError: If a registry is already installed
    """
    global _installed

    with _install_lock:
        if _installed is not None:
            raise SchemaBuildError("A schema registry is already installed")
        _installed = registry

    logger.info("Installed schema registry with %d schemas", len(registry))
    return registry


def installed_registry() -> SchemaRegistry:
    """
    Get the process-wide registry.

    Raises:
        RegistryNotInstalledError: If install_registry() has not been called
    """
    if _installed is None:
        raise RegistryNotInstalledError("No schema registry has been installed")
    return _installed


def uninstall_registry() -> None:
    """Remove the installed registry. Intended for test isolation only."""
    global _installed

    with _install_lock:
        _installed = None
