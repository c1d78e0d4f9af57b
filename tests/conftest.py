"""Shared pytest fixtures for adminschema tests."""

import logging
from collections.abc import Iterator

import pytest

from adminschema.core import ir
from adminschema.core.registry import SchemaRegistry, uninstall_registry
from adminschema.logging import ROOT_LOGGER
from adminschema.schemas import build_registry


@pytest.fixture(autouse=True)
def _no_installed_registry() -> Iterator[None]:
    """Leave the process-wide registry slot empty around every test."""
    uninstall_registry()
    yield
    uninstall_registry()


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo setup_logging() so caplog sees records of the package loggers."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def status_registry() -> SchemaRegistry:
    """Return a registry with a ticket schema whose reason shows only when status is off."""
    return (
        SchemaRegistry.builder()
        .new_schema("ticket")
        .names("ticket", "tickets")
        .new_field("status")
        .label("Status")
        .typ(ir.FieldTypeKind.SELECT, [("on", "On"), ("off", "Off")])
        .default("on")
        .build()
        .new_field("reason")
        .label("Reason")
        .typ(ir.FieldTypeKind.TEXT)
        .display_if_eq("status", "off")
        .build()
        .list_fields(["status"])
        .new_form_section()
        .title("Ticket")
        .fields(["status", "reason"])
        .build()
        .build()
        .build()
    )


@pytest.fixture
def timeout_registry() -> SchemaRegistry:
    """Return a registry with a timeout field whose default depends on the mode."""
    return (
        SchemaRegistry.builder()
        .new_schema("client")
        .names("client", "clients")
        .new_field("mode")
        .label("Mode")
        .typ(ir.FieldTypeKind.INPUT)
        .build()
        .new_field("timeout")
        .label("Timeout")
        .typ(ir.FieldTypeKind.DURATION)
        .default("30s")
        .default_if_eq("mode", "fast", "1s")
        .build()
        .build()
        .build()
    )


@pytest.fixture
def builtin_registry() -> SchemaRegistry:
    """Return the registry built from every built-in bundle."""
    return build_registry()
