"""Exception hierarchy for the envelope helpers.

Every failure the library can report is a subclass of RespondWithJsonError,
grouped by the facet that raises it:

- **DecodeError**: strict request decoding (empty body, unknown field,
  malformed JSON)
- **ReflectionError**: shape introspection and JSON text serialization
- **FieldValidationError**: non-empty field validation

Each exception carries a machine-readable ``error_code`` from ErrorCode, a
human-readable ``message`` (what ``str()`` returns and what ends up in an
envelope's ``error`` field), optional structured ``context`` and the
original ``cause`` when one exists.
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the envelope helpers."""

    # Decode errors
    EMPTY_BODY = "EMPTY_BODY"
    """The request body stream was absent."""

    UNKNOWN_FIELD = "UNKNOWN_FIELD"
    """The JSON payload contained a field the target model does not declare."""

    MALFORMED_JSON = "MALFORMED_JSON"
    """The payload was not valid JSON or did not match the declared types."""

    # Reflection errors
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    """A value could not be encoded as JSON."""

    UNSUPPORTED_SHAPE = "UNSUPPORTED_SHAPE"
    """The value has no inspectable fields."""

    # Validation errors
    EMPTY_FIELD = "EMPTY_FIELD"
    """A text field was empty or whitespace only."""

    ZERO_FIELD = "ZERO_FIELD"
    """An integer field was zero."""

    UNSUPPORTED_KIND = "UNSUPPORTED_KIND"
    """The validator does not handle values of this kind."""


class RespondWithJsonError(Exception):
    """Base exception class for all respondwithjson exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return the human-readable message.

        Returns:
            str: The error message, suitable for an envelope's error field
        """
        return self.message

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: A string showing the class name, error code, message and context
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}'{context_str})"
        )


class DecodeError(RespondWithJsonError):
    """Base class for failures while strictly decoding a request body."""


class EmptyBodyError(DecodeError):
    """Raised when the request body is absent before any read is attempted."""

    def __init__(self, message: str = "request body is empty") -> None:
        super().__init__(ErrorCode.EMPTY_BODY, message)


class UnknownFieldError(DecodeError):
    """Raised when the payload contains a field the target model lacks.

    Args:
        field: The offending JSON key
        cause: The original exception that caused this error
    """

    def __init__(self, field: str, cause: Exception | None = None) -> None:
        self.field = field
        super().__init__(
            ErrorCode.UNKNOWN_FIELD,
            f'json: unknown field "{field}"',
            context={"field": field},
            cause=cause,
        )


class MalformedJSONError(DecodeError):
    """Raised for syntactically invalid JSON or a type mismatch while decoding.

    Args:
        message: Description of the decode failure
        context: Additional context (e.g. the validation error list)
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.MALFORMED_JSON, message, context, cause)


class ReflectionError(RespondWithJsonError):
    """Base class for shape introspection and serialization failures."""


class SerializationError(ReflectionError):
    """Raised when a value cannot be encoded as JSON."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ErrorCode.SERIALIZATION_ERROR, message, cause=cause)


class UnsupportedShapeError(ReflectionError):
    """Raised when a value has no inspectable fields.

    Args:
        type_name: Name of the type that was inspected
    """

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            ErrorCode.UNSUPPORTED_SHAPE,
            f"cannot describe fields of non-structured type: {type_name}",
            context={"type": type_name},
        )


class FieldValidationError(RespondWithJsonError):
    """Base class for non-empty field validation failures."""


class EmptyFieldError(FieldValidationError):
    """Raised when a text field is empty or contains only whitespace."""

    def __init__(self) -> None:
        super().__init__(
            ErrorCode.EMPTY_FIELD, "fields cannot be empty or contain spaces"
        )


class ZeroFieldError(FieldValidationError):
    """Raised when an integer field equals zero."""

    def __init__(self) -> None:
        super().__init__(ErrorCode.ZERO_FIELD, "integer fields cannot be zero")


class UnsupportedKindError(FieldValidationError):
    """Raised when the validator receives a value that is neither text nor int.

    Args:
        kind: Name of the offending value's type
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            ErrorCode.UNSUPPORTED_KIND,
            f"unsupported field type: {kind}",
            context={"kind": kind},
        )
