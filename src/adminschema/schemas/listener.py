"""Listener schema: network listeners with optional per-listener TLS options."""

from __future__ import annotations

from adminschema.core.builder import RegistryBuilder, SourceRef
from adminschema.core.ir import FieldTypeKind, StaticSource, Transformer, Validator, ValidatorKind

from .tls import TLS_FIELDS, add_tls_fields

PROTOCOLS = StaticSource(
    options=[
        ("smtp", "SMTP"),
        ("lmtp", "LMTP"),
        ("http", "HTTP"),
        ("imap", "IMAP4"),
        ("pop3", "POP3"),
        ("managesieve", "ManageSieve"),
    ]
)


def build_listener(builder: RegistryBuilder) -> RegistryBuilder:
    """Build the listener schema. Requires the ``certificate`` schema."""
    return (
        builder.new_schema("listener")
        .names("listener", "listeners")
        .prefix("server.listener")
        .suffix("bind")
        # Id
        .new_id_field()
        .label("Listener Id")
        .help("Unique identifier for the listener")
        .build()
        # Protocol
        .new_field("protocol")
        .label("Protocol")
        .help("The protocol used by the listener")
        .typ(FieldTypeKind.SELECT, PROTOCOLS)
        .default("smtp")
        .build()
        # Bind
        .new_field("bind")
        .label("Bind addresses")
        .help("The addresses the listener will bind to")
        .typ(FieldTypeKind.ARRAY)
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED, Validator.min_items(1)])
        .placeholder_if_eq("protocol", "smtp", "[::]:25")
        .placeholder_if_eq("protocol", "lmtp", "[::]:24")
        .placeholder_if_eq("protocol", "http", "[::]:443")
        .placeholder_if_eq("protocol", "imap", "[::]:993")
        .placeholder_if_eq("protocol", "pop3", "[::]:995")
        .placeholder_if_eq("protocol", "managesieve", "[::]:4190")
        .build()
        # Backlog
        .new_field("socket.backlog")
        .label("Backlog")
        .help("Maximum number of incoming connections that can be pending")
        .typ(FieldTypeKind.INPUT)
        .input_check([Transformer.TRIM], [Validator.min_value(1), Validator.max_value(65535)])
        .default("1024")
        .default_if_eq("protocol", "http", "4096")
        .display_if_ne("protocol", "lmtp")
        .build()
        # Implicit TLS
        .new_field("tls.implicit")
        .label("Implicit TLS")
        .help("Whether the listener starts TLS before the protocol greeting")
        .typ(FieldTypeKind.CHECKBOX)
        .default("false")
        .default_if_eq("protocol", ["imap", "pop3", "http"], "true")
        .build()
        # TLS override
        .new_field("tls.override")
        .label("Override TLS options")
        .help("Whether to override the default TLS options for this listener")
        .typ(FieldTypeKind.CHECKBOX)
        .default("false")
        .build()
        .apply(add_tls_fields, is_listener=True)
        # Certificate. Option labels are read from the values passed in, so
        # they resolve against a certificate record, not this listener.
        .new_field("tls.certificate")
        .label("Certificate")
        .help("Certificate presented by this listener")
        .typ(FieldTypeKind.SELECT, SourceRef(schema="certificate", field="_id"))
        .display_if_eq("tls.override", "true")
        .build()
        # Lists
        .list_title("Listeners")
        .list_subtitle("Manage network listeners")
        .list_fields(["_id", "protocol", "bind"])
        # Form
        .new_form_section()
        .title("Listener")
        .fields(["_id", "protocol", "bind", "socket.backlog"])
        .build()
        .new_form_section()
        .title("TLS")
        .fields(["tls.implicit", "tls.override", "tls.certificate"])
        .fields([f"tls.{name}" for name in TLS_FIELDS])
        .build()
        .build()
    )
