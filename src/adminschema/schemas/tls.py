"""TLS schemas: ACME providers, certificates and default TLS options."""

from __future__ import annotations

from adminschema.core.builder import FieldBuilder, RegistryBuilder, SchemaBuilder
from adminschema.core.ir import FieldTypeKind, StaticSource, Transformer, ValidatorKind

TLS_PROTOCOLS = StaticSource(
    options=[
        ("TLSv1.2", "TLS version 1.2"),
        ("TLSv1.3", "TLS version 1.3"),
    ]
)

TLS_CIPHERSUITES = StaticSource(
    options=[
        ("TLS13_AES_256_GCM_SHA384", "TLS1.3 AES256 GCM SHA384"),
        ("TLS13_AES_128_GCM_SHA256", "TLS1.3 AES128 GCM SHA256"),
        ("TLS13_CHACHA20_POLY1305_SHA256", "TLS1.3 CHACHA20 POLY1305 SHA256"),
        ("TLS_ECDHE_ECDSA_WITH_AES_256_GCM_SHA384", "ECDHE ECDSA AES256 GCM SHA384"),
        ("TLS_ECDHE_ECDSA_WITH_AES_128_GCM_SHA256", "ECDHE ECDSA AES128 GCM SHA256"),
        ("TLS_ECDHE_ECDSA_WITH_CHACHA20_POLY1305_SHA256", "ECDHE ECDSA CHACHA20 POLY1305 SHA256"),
        ("TLS_ECDHE_RSA_WITH_AES_256_GCM_SHA384", "ECDHE RSA AES256 GCM SHA384"),
        ("TLS_ECDHE_RSA_WITH_AES_128_GCM_SHA256", "ECDHE RSA AES128 GCM SHA256"),
        ("TLS_ECDHE_RSA_WITH_CHACHA20_POLY1305_SHA256", "ECDHE RSA CHACHA20 POLY1305 SHA256"),
    ]
)

TLS_FIELDS = ("ignore-client-order", "timeout", "disable-protocols", "disable-ciphers")


def _overridable(field: FieldBuilder, is_listener: bool) -> SchemaBuilder:
    if is_listener:
        field = field.display_if_eq("tls.override", "true")
    return field.build()


def add_tls_fields(schema: SchemaBuilder, is_listener: bool) -> SchemaBuilder:
    """
    Add the TLS option fields.

    Server-wide defaults are keyed ``server.tls.*`` and always shown.
    Listener fields are keyed ``tls.*`` and only shown when the listener
    overrides the defaults, which needs a ``tls.override`` field built first.
    """
    prefix = "tls." if is_listener else "server.tls."

    schema = _overridable(
        schema.new_field(f"{prefix}ignore-client-order")
        .label("Ignore client order")
        .help("Whether to ignore the client's cipher order")
        .typ(FieldTypeKind.CHECKBOX)
        .default("true"),
        is_listener,
    )
    schema = _overridable(
        schema.new_field(f"{prefix}timeout")
        .label("Handshake Timeout")
        .help("TLS handshake timeout")
        .typ(FieldTypeKind.DURATION)
        .default("1m"),
        is_listener,
    )
    schema = _overridable(
        schema.new_field(f"{prefix}disable-protocols")
        .label("Disabled Protocols")
        .help("Which TLS protocols to disable")
        .typ(FieldTypeKind.SELECT, TLS_PROTOCOLS),
        is_listener,
    )
    return _overridable(
        schema.new_field(f"{prefix}disable-ciphers")
        .label("Disabled Ciphersuites")
        .help("Which ciphersuites to disable")
        .typ(FieldTypeKind.SELECT, TLS_CIPHERSUITES),
        is_listener,
    )


def build_tls(builder: RegistryBuilder) -> RegistryBuilder:
    return (
        builder.new_schema("acme")
        .names("ACME provider", "ACME providers")
        .prefix("acme")
        .suffix("directory")
        # Id
        .new_id_field()
        .label("Directory Id")
        .help("Unique identifier for the ACME provider")
        .build()
        # Directory
        .new_field("directory")
        .label("Directory URL")
        .help("The URL of the ACME directory endpoint")
        .typ(FieldTypeKind.INPUT)
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED, ValidatorKind.IS_URL])
        .default("https://acme-v02.api.letsencrypt.org/directory")
        .build()
        # Domains
        .new_field("domains")
        .typ(FieldTypeKind.ARRAY)
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED])
        .label("Domains")
        .help("Domains covered by this ACME manager")
        .build()
        # Default provider
        .new_field("default")
        .typ(FieldTypeKind.CHECKBOX)
        .label("Default provider")
        .help(
            "Whether the certificates generated by this provider "
            "should be the default when no SNI is provided"
        )
        .build()
        # Contact
        .new_field("contact")
        .label("Contact Email")
        .help(
            "the contact email address, which is used for important "
            "communications regarding your ACME account and certificates"
        )
        .typ(FieldTypeKind.ARRAY)
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED, ValidatorKind.IS_EMAIL])
        .build()
        # Renew before
        .new_field("renew-before")
        .typ(FieldTypeKind.DURATION)
        .label("Renew before")
        .help("Determines how early before expiration the certificate should be renewed.")
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED])
        .default("30d")
        .build()
        # Account key
        .new_field("account-key")
        .label("Account key")
        .help("The account key used to authenticate with the ACME provider (auto-generated)")
        .typ(FieldTypeKind.SECRET)
        .build()
        # Certificate
        .new_field("cert")
        .label("TLS Certificate")
        .help(
            "The TLS certificate generated by the ACME provider "
            "(auto-generated, do not modify)"
        )
        .typ(FieldTypeKind.SECRET)
        .build()
        # Lists
        .list_title("ACME providers")
        .list_subtitle("Manage ACME TLS certificate providers")
        .list_fields(["_id", "contact", "renew-before", "default"])
        # Form
        .new_form_section()
        .title("ACME provider")
        .fields(["_id", "directory", "contact", "domains", "renew-before", "default"])
        .build()
        .new_form_section()
        .title("Certificate")
        .fields(["account-key", "cert"])
        .build()
        .build()
        # ---- TLS certificates ----
        .new_schema("certificate")
        .names("certificate", "certificates")
        .prefix("certificate")
        .suffix("cert")
        # Id
        .new_id_field()
        .label("Certificate Id")
        .help("Unique identifier for the TLS certificate")
        .build()
        # Default certificate
        .new_field("default")
        .typ(FieldTypeKind.CHECKBOX)
        .label("Default certificate")
        .help("Whether this certificate should be the default when no SNI is provided")
        .build()
        # Certificate
        .new_field("cert")
        .label("Certificate")
        .typ(FieldTypeKind.TEXT)
        .help("TLS certificate in PEM format")
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED])
        .build()
        # Private key
        .new_field("private-key")
        .label("Private Key")
        .typ(FieldTypeKind.TEXT)
        .help("Private key in PEM format")
        .input_check([Transformer.TRIM], [ValidatorKind.REQUIRED])
        .build()
        .new_field("subjects")
        .typ(FieldTypeKind.ARRAY)
        .input_check([Transformer.TRIM], [ValidatorKind.IS_DOMAIN])
        .label("Subject Alternative Names")
        .help("Subject Alternative Names (SAN) for the certificate")
        .build()
        .list_title("TLS certificates")
        .list_subtitle("Manage TLS certificates")
        .list_fields(["_id", "subjects", "default"])
        .new_form_section()
        .title("TLS certificate")
        .fields(["_id", "cert", "private-key", "subjects", "default"])
        .build()
        .build()
        # ---- TLS settings ----
        .new_schema("tls")
        .names("TLS setting", "TLS settings")
        .apply(add_tls_fields, is_listener=False)
        .new_form_section()
        .title("Default TLS options")
        .fields(
            [
                "server.tls.disable-protocols",
                "server.tls.disable-ciphers",
                "server.tls.timeout",
                "server.tls.ignore-client-order",
            ]
        )
        .build()
        .build()
    )
