"""Tests for the built-in TLS and listener schema bundles."""

import pytest

from adminschema.core.errors import ManifestError, SchemaBuildError
from adminschema.core.ir import DynamicSource, FieldTypeKind, SchemaKind, ValidatorKind
from adminschema.core.registry import SchemaRegistry
from adminschema.schemas import BUNDLES, build_registry
from adminschema.schemas.tls import TLS_FIELDS


class TestBuildRegistry:
    """Tests for bundle assembly."""

    def test_default_bundles(self, builtin_registry: SchemaRegistry) -> None:
        assert builtin_registry.ids() == ["acme", "certificate", "tls", "listener"]

    def test_single_bundle(self) -> None:
        assert build_registry(["tls"]).ids() == ["acme", "certificate", "tls"]

    def test_listener_requires_tls(self) -> None:
        with pytest.raises(SchemaBuildError, match="Schema 'certificate' not found"):
            build_registry(["listener"])

    def test_unknown_bundle_raises(self) -> None:
        with pytest.raises(ManifestError, match="Unknown schema bundle\\(s\\): smtp"):
            build_registry(["tls", "smtp"])

    def test_page_size(self) -> None:
        registry = build_registry(page_size=50)
        assert all(schema.list_view.page_size == 50 for schema in registry)

    def test_bundle_names(self) -> None:
        assert set(BUNDLES) == {"tls", "listener"}


class TestAcmeSchema:
    """Tests for the ACME provider schema."""

    def test_kind(self, builtin_registry: SchemaRegistry) -> None:
        acme = builtin_registry.get("acme")
        assert acme.type.kind == SchemaKind.RECORD
        assert acme.unwrap_prefix() == "acme"
        assert acme.try_suffix() == "directory"

    def test_directory_default(self, builtin_registry: SchemaRegistry) -> None:
        directory = builtin_registry.get("acme").field("directory")
        assert directory.resolve_default({}) == "https://acme-v02.api.letsencrypt.org/directory"
        assert directory.resolve_input_check({}).has_validator(ValidatorKind.IS_URL)

    def test_list_columns(self, builtin_registry: SchemaRegistry) -> None:
        acme = builtin_registry.get("acme")
        assert [f.id for f in acme.list_view.fields] == ["_id", "contact", "renew-before", "default"]

    def test_default_checkbox_is_required(self, builtin_registry: SchemaRegistry) -> None:
        assert builtin_registry.get("acme").field("default").is_required({})


class TestTlsSchema:
    """Tests for the server-wide TLS defaults."""

    def test_list_schema(self, builtin_registry: SchemaRegistry) -> None:
        tls = builtin_registry.get("tls")
        assert tls.type.kind == SchemaKind.LIST
        assert tls.try_suffix() is None

    def test_fields_always_visible(self, builtin_registry: SchemaRegistry) -> None:
        tls = builtin_registry.get("tls")
        for name in TLS_FIELDS:
            assert tls.field(f"server.tls.{name}").is_visible({})

    def test_timeout_default(self, builtin_registry: SchemaRegistry) -> None:
        timeout = builtin_registry.get("tls").field("server.tls.timeout")
        assert timeout.type.kind == FieldTypeKind.DURATION
        assert timeout.resolve_default({}) == "1m"


class TestListenerSchema:
    """Tests for the listener schema."""

    @pytest.mark.parametrize(
        "protocol,placeholder",
        [
            ("smtp", "[::]:25"),
            ("lmtp", "[::]:24"),
            ("http", "[::]:443"),
            ("imap", "[::]:993"),
            ("pop3", "[::]:995"),
            ("managesieve", "[::]:4190"),
        ],
    )
    def test_bind_placeholder(
        self, builtin_registry: SchemaRegistry, protocol: str, placeholder: str
    ) -> None:
        bind = builtin_registry.get("listener").field("bind")
        assert bind.resolve_placeholder({"protocol": protocol}) == placeholder

    def test_bind_placeholder_without_protocol(self, builtin_registry: SchemaRegistry) -> None:
        assert builtin_registry.get("listener").field("bind").resolve_placeholder({}) is None

    def test_bind_is_multivalue(self, builtin_registry: SchemaRegistry) -> None:
        bind = builtin_registry.get("listener").field("bind")
        assert bind.is_multivalue
        assert bind.is_required({})

    def test_backlog(self, builtin_registry: SchemaRegistry) -> None:
        backlog = builtin_registry.get("listener").field("socket.backlog")
        assert backlog.resolve_default({"protocol": "http"}) == "4096"
        assert backlog.resolve_default({"protocol": "smtp"}) == "1024"
        assert backlog.is_visible({})
        assert not backlog.is_visible({"protocol": "lmtp"})

    def test_implicit_tls_default(self, builtin_registry: SchemaRegistry) -> None:
        implicit = builtin_registry.get("listener").field("tls.implicit")
        assert implicit.resolve_default({"protocol": "imap"}) == "true"
        assert implicit.resolve_default({"protocol": "smtp"}) == "false"
        assert implicit.resolve_default({}) == "false"

    def test_tls_fields_follow_override(self, builtin_registry: SchemaRegistry) -> None:
        listener = builtin_registry.get("listener")
        for name in (*TLS_FIELDS, "certificate"):
            field = listener.field(f"tls.{name}")
            assert field.is_visible({"tls.override": "true"}), name
            assert not field.is_visible({"tls.override": "false"}), name
            assert not field.is_visible({}), name

    def test_protocol_label(self, builtin_registry: SchemaRegistry) -> None:
        protocol = builtin_registry.get("listener").field("protocol")
        assert protocol.display_label({"protocol": "imap"}) == "IMAP4"
        assert protocol.resolve_default({}) == "smtp"

    def test_certificate_source(self, builtin_registry: SchemaRegistry) -> None:
        certificate = builtin_registry.get("certificate")
        source = builtin_registry.get("listener").field("tls.certificate").type.source

        assert isinstance(source, DynamicSource)
        assert source.source_schema is certificate
        assert source.source_field is certificate.field("_id")

    def test_certificate_label_reads_given_values(self, builtin_registry: SchemaRegistry) -> None:
        field = builtin_registry.get("listener").field("tls.certificate")
        source = field.type.source
        assert isinstance(source, DynamicSource)
        assert source.label_for("mycert", {"_id": "mycert"}) == "mycert"
        # Listener values carry the listener id under "_id"
        assert field.display_label({"_id": "smtp-in", "tls.certificate": "mycert"}) == "smtp-in"

    def test_tls_section_fields(self, builtin_registry: SchemaRegistry) -> None:
        listener = builtin_registry.get("listener")
        section = listener.form_view.sections[1]
        values = {"tls.override": "false"}

        assert section.title == "TLS"
        assert [f.id for f in section.visible_fields(values)] == ["tls.implicit", "tls.override"]
