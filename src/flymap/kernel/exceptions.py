"""Unified exception hierarchy for flymap.

All library exceptions inherit from FlyMapException, enabling unified
error handling: catch FlyMapException to handle every failure raised while
declaring or building a mapping specification.

Categories:
- MappingException: declaration and resolution errors raised by the builder
- TypeNotFoundError: a type loader could not resolve a type name
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flymap.kernel.types import FieldError


# =============================================================================
# Base Exception
# =============================================================================


class FlyMapException(Exception):
    """Base exception for all flymap errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "MAPPING_FIELD_NAME").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Type loading
# =============================================================================


class TypeNotFoundError(FlyMapException):
    """A type loader could not resolve a type name."""

    def __init__(self, type_name: str, reason: str | None = None) -> None:
        self.type_name = type_name
        message = f"Type '{type_name}' could not be found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="TYPE_NOT_FOUND", context={"type_name": type_name})


# =============================================================================
# Mapping Exceptions
# =============================================================================


class MappingException(FlyMapException):
    """Errors raised while declaring or building a mapping specification."""


class InvalidFieldNameError(MappingException):
    """A field name was empty or consisted only of whitespace."""

    def __init__(self, raw_name: str | None) -> None:
        self.raw_name = raw_name
        super().__init__(
            "Field name can not be empty",
            code="MAPPING_FIELD_NAME",
            context={"raw_name": raw_name},
        )


class IncompleteFieldError(MappingException):
    """One or more field rules reached ``build()`` without any endpoint.

    ``errors`` lists every offending field rule so that all defects of a
    specification are reported in a single pass.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        lines = [f"{len(self.errors)} field rule(s) have neither a source nor a destination field:"]
        lines.extend(f"  - {e.field}: {e.message}" for e in self.errors)
        super().__init__("\n".join(lines), code="MAPPING_INCOMPLETE_FIELD")


class TypeResolutionError(MappingException):
    """A type name passed to the builder could not be resolved."""

    def __init__(self, type_name: str, reason: str | None = None) -> None:
        self.type_name = type_name
        message = f"Unable to resolve type '{type_name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="MAPPING_TYPE_RESOLUTION", context={"type_name": type_name})


class InvalidConfigurationError(MappingException):
    """A configuration value was rejected at declaration time."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="MAPPING_INVALID_CONFIGURATION", context=context)


class IncompleteClassMappingError(MappingException):
    """Strict validation found structurally incomplete class mappings."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        lines = [f"Specification failed structural validation with {len(self.errors)} issue(s):"]
        lines.extend(f"  - {e.field}: {e.message}" for e in self.errors)
        super().__init__("\n".join(lines), code="MAPPING_INCOMPLETE_CLASS_MAPPING")
