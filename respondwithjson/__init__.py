"""respondwithjson - JSON envelope helpers for FastAPI services.

Responses share one envelope, ``{"message": ..., "data": ..., "error": ...}``,
with empty keys omitted. Requests are decoded strictly: unknown fields are
rejected instead of ignored.

Example:
    >>> @app.post("/users")
    ... async def create_user(request: Request) -> EnvelopeResponse:
    ...     user = await decode_request_strict(request, User)
    ...     validate_fields(user.name, user.age)
    ...     return respond_with_success(user)
"""

from respondwithjson.api.decoding import (
    StrictBody,
    decode_request_strict,
    decode_strict,
)
from respondwithjson.api.schemas.envelope import Envelope, build_envelope
from respondwithjson.api.utils.responses import EnvelopeResponse
from respondwithjson.api.writer import (
    respond_with_error,
    respond_with_json,
    respond_with_json_simple,
    respond_with_message_error,
    respond_with_success,
    write_error,
    write_json,
    write_json_simple,
    write_message_error,
    write_success,
)
from respondwithjson.core.exceptions import (
    DecodeError,
    EmptyBodyError,
    EmptyFieldError,
    ErrorCode,
    FieldValidationError,
    MalformedJSONError,
    ReflectionError,
    RespondWithJsonError,
    SerializationError,
    UnknownFieldError,
    UnsupportedKindError,
    UnsupportedShapeError,
    ZeroFieldError,
)
from respondwithjson.core.reflection import describe_field_types, to_json_text
from respondwithjson.core.validation import validate_fields

__all__ = [
    "DecodeError",
    "EmptyBodyError",
    "EmptyFieldError",
    "Envelope",
    "EnvelopeResponse",
    "ErrorCode",
    "FieldValidationError",
    "MalformedJSONError",
    "ReflectionError",
    "RespondWithJsonError",
    "SerializationError",
    "StrictBody",
    "UnknownFieldError",
    "UnsupportedKindError",
    "UnsupportedShapeError",
    "ZeroFieldError",
    "build_envelope",
    "decode_request_strict",
    "decode_strict",
    "describe_field_types",
    "respond_with_error",
    "respond_with_json",
    "respond_with_json_simple",
    "respond_with_message_error",
    "respond_with_success",
    "to_json_text",
    "validate_fields",
    "write_error",
    "write_json",
    "write_json_simple",
    "write_message_error",
    "write_success",
]
