"""
Input check vocabulary for adminschema IR.

Transformers and validators are an enumerated, opaque rule vocabulary. This
package only records which rules apply to a field; applying them to submitted
values is the job of the submission handler.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Transformer(StrEnum):
    """Transformations applied to a raw value before validation."""

    TRIM = "trim"
    REMOVE_SPACES = "remove_spaces"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


class ValidatorKind(StrEnum):
    """Kinds of validation rules."""

    REQUIRED = "required"
    IS_EMAIL = "is_email"
    IS_CRON = "is_cron"
    IS_ID = "is_id"
    IS_HOST = "is_host"
    IS_DOMAIN = "is_domain"
    IS_PORT = "is_port"
    IS_URL = "is_url"
    IS_GLOB_PATTERN = "is_glob_pattern"
    IS_REGEX_PATTERN = "is_regex_pattern"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    MIN_VALUE = "min_value"
    MAX_VALUE = "max_value"
    MIN_ITEMS = "min_items"
    MAX_ITEMS = "max_items"
    IS_VALID_EXPRESSION = "is_valid_expression"


# Kinds that carry a numeric limit
LIMIT_KINDS = frozenset(
    {
        ValidatorKind.MIN_LENGTH,
        ValidatorKind.MAX_LENGTH,
        ValidatorKind.MIN_VALUE,
        ValidatorKind.MAX_VALUE,
        ValidatorKind.MIN_ITEMS,
        ValidatorKind.MAX_ITEMS,
    }
)


class Validator(BaseModel):
    """
    A single validation rule.

    Plain kinds carry no arguments. Length, value and item-count kinds carry a
    numeric ``limit``. Expression validation lists the variables, functions
    (name and arity) and constants an expression may use.

    Examples:
        - Validator(kind=ValidatorKind.REQUIRED)
        - Validator.min_length(3)
        - Validator.max_value(65535)
        - Validator.valid_expression(variables=["rcpt"], functions=[("contains", 2)])
    """

    kind: ValidatorKind
    limit: int | float | None = None
    variables: list[str] = Field(default_factory=list)
    functions: list[tuple[str, int]] = Field(default_factory=list)
    constants: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_arguments(self) -> Validator:
        if self.kind in LIMIT_KINDS:
            if self.limit is None:
                raise ValueError(f"Validator {self.kind.value!r} requires a limit")
        elif self.limit is not None:
            raise ValueError(f"Validator {self.kind.value!r} does not take a limit")
        if self.kind != ValidatorKind.IS_VALID_EXPRESSION and (
            self.variables or self.functions or self.constants
        ):
            raise ValueError(f"Validator {self.kind.value!r} does not take expression context")
        return self

    @classmethod
    def min_length(cls, limit: int) -> Validator:
        return cls(kind=ValidatorKind.MIN_LENGTH, limit=limit)

    @classmethod
    def max_length(cls, limit: int) -> Validator:
        return cls(kind=ValidatorKind.MAX_LENGTH, limit=limit)

    @classmethod
    def min_value(cls, limit: int | float) -> Validator:
        return cls(kind=ValidatorKind.MIN_VALUE, limit=limit)

    @classmethod
    def max_value(cls, limit: int | float) -> Validator:
        return cls(kind=ValidatorKind.MAX_VALUE, limit=limit)

    @classmethod
    def min_items(cls, limit: int) -> Validator:
        return cls(kind=ValidatorKind.MIN_ITEMS, limit=limit)

    @classmethod
    def max_items(cls, limit: int) -> Validator:
        return cls(kind=ValidatorKind.MAX_ITEMS, limit=limit)

    @classmethod
    def valid_expression(
        cls,
        variables: Iterable[str] = (),
        functions: Iterable[tuple[str, int]] = (),
        constants: Iterable[str] = (),
    ) -> Validator:
        return cls(
            kind=ValidatorKind.IS_VALID_EXPRESSION,
            variables=list(variables),
            functions=list(functions),
            constants=list(constants),
        )


class InputCheck(BaseModel):
    """
    Transformers and validators applied to a submitted value.

    Transformers run first, in order, then validators, in order.
    """

    transformers: list[Transformer] = Field(default_factory=list)
    validators: list[Validator] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def new(
        cls,
        transformers: Iterable[Transformer] = (),
        validators: Iterable[Validator | ValidatorKind] = (),
    ) -> InputCheck:
        """Build a check, accepting bare kinds for argument-free validators."""
        return cls(
            transformers=list(transformers),
            validators=[
                v if isinstance(v, Validator) else Validator(kind=v) for v in validators
            ],
        )

    def has_validator(self, kind: ValidatorKind) -> bool:
        """Check whether a validator of the given kind is present."""
        return any(v.kind == kind for v in self.validators)
