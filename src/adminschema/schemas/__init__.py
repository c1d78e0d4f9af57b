"""
Built-in schema bundles.

A bundle is a function adding one or more schemas to a ``RegistryBuilder``.
Bundles are built in the order given, and a bundle may only reference
schemas of bundles built before it (``listener`` needs ``tls``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from adminschema.core.builder import RegistryBuilder
from adminschema.core.errors import ManifestError
from adminschema.core.ir import DEFAULT_PAGE_SIZE
from adminschema.core.registry import SchemaRegistry
from adminschema.logging import log_with_context

from .listener import build_listener
from .tls import add_tls_fields, build_tls

logger = logging.getLogger(__name__)

BUNDLES: dict[str, Callable[[RegistryBuilder], RegistryBuilder]] = {
    "tls": build_tls,
    "listener": build_listener,
}


def build_registry(
    bundles: Iterable[str] = ("tls", "listener"),
    page_size: int = DEFAULT_PAGE_SIZE,
) -> SchemaRegistry:
    """
    Build a registry from named bundles.

    Raises:
        ManifestError: If a bundle name is unknown
        SchemaBuildError: If a bundle's definitions are inconsistent
    """
    bundles = list(bundles)
    unknown = [name for name in bundles if name not in BUNDLES]
    if unknown:
        raise ManifestError(
            f"Unknown schema bundle(s): {', '.join(unknown)}. "
            f"Available: {', '.join(BUNDLES)}"
        )

    builder = SchemaRegistry.builder(page_size=page_size)
    for name in bundles:
        builder = builder.apply(BUNDLES[name])
    registry = builder.build()

    log_with_context(
        logger,
        logging.INFO,
        "Built schema registry",
        bundles=bundles,
        schemas=registry.ids(),
    )
    return registry


__all__ = [
    "BUNDLES",
    "add_tls_fields",
    "build_listener",
    "build_registry",
    "build_tls",
]
