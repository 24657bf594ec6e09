"""Shape introspection and JSON text serialization.

``describe_field_types`` derives a ``{serialized name: type name}`` mapping
from the declared shape of a Pydantic model or a dataclass. Only the class
is inspected, never the values of an instance, so passing an instance and
passing its class give the same result.

Serialized names follow the same rules the encoders use:

- Pydantic models: ``serialization_alias``, then ``alias``, then the field
  name. Fields excluded from serialization fall back to the field name.
- Dataclasses: the ``"json"`` entry of the field metadata, up to the first
  comma (``field(metadata={"json": "user_id,omitempty"})``). An empty tag or
  ``"-"`` falls back to the field name.

Example:
    >>> class Person(BaseModel):
    ...     Name: str
    ...     Age: int
    >>> print(describe_field_types(Person))
    {
      "Age": "int",
      "Name": "str"
    }
"""

import dataclasses
import math
import types
from collections.abc import Iterable
from typing import Any, Final

import orjson
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from respondwithjson.core.exceptions import SerializationError, UnsupportedShapeError
from respondwithjson.core.types import FieldTypeMap

JSON_TAG_KEY: Final[str] = "json"
SKIP_TAG: Final[str] = "-"

TO_JSON_OPTIONS: Final[int] = orjson.OPT_NON_STR_KEYS
DESCRIBE_OPTIONS: Final[int] = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS

# Nesting limit of orjson; deeper values fail to encode anyway
MAX_SCAN_DEPTH: Final[int] = 255


def type_name(annotation: Any) -> str:  # noqa: ANN401 - any annotation object
    """Render a declared type annotation as text.

    Args:
        annotation: The annotation as declared on the field.

    Returns:
        str: ``__name__`` for plain classes, otherwise the annotation's repr
            without the ``typing.`` prefix.
    """
    if isinstance(annotation, type) and not isinstance(annotation, types.GenericAlias):
        return annotation.__name__
    if isinstance(annotation, str):
        return annotation
    return repr(annotation).replace("typing.", "")


def _tag_name(field: dataclasses.Field[Any]) -> str:
    tag = str(field.metadata.get(JSON_TAG_KEY, ""))
    name = tag.split(",")[0]
    if not name or tag == SKIP_TAG:
        return field.name
    return name


def _model_fields(shape: type[BaseModel]) -> list[tuple[str, str]]:
    pairs = []
    for name, info in shape.model_fields.items():
        serialized = name
        if not info.exclude:
            serialized = info.serialization_alias or info.alias or name
        pairs.append((serialized, type_name(info.annotation)))
    return pairs


def _dataclass_fields(shape: type) -> list[tuple[str, str]]:
    return [
        (_tag_name(field), type_name(field.type)) for field in dataclasses.fields(shape)
    ]


def field_types(shape: Any) -> FieldTypeMap:  # noqa: ANN401 - any model or dataclass
    """Map each field's serialized name to its declared type name.

    Args:
        shape: A Pydantic model or dataclass, as a class or an instance.

    Returns:
        FieldTypeMap: Field names in declaration order. A name declared twice
            keeps the type of the later field.

    Raises:
        UnsupportedShapeError: If the shape has no inspectable fields.
    """
    cls = shape if isinstance(shape, type) else type(shape)

    if issubclass(cls, BaseModel):
        pairs = _model_fields(cls)
    elif dataclasses.is_dataclass(cls):
        pairs = _dataclass_fields(cls)
    else:
        raise UnsupportedShapeError(cls.__name__)

    return dict(pairs)


def describe_field_types(shape: Any) -> str:  # noqa: ANN401 - any model or dataclass
    """Describe a shape's fields as pretty-printed JSON.

    Args:
        shape: A Pydantic model or dataclass, as a class or an instance.

    Returns:
        str: JSON object mapping serialized field names to type names,
            indented by two spaces with keys sorted.

    Raises:
        UnsupportedShapeError: If the shape has no inspectable fields.
    """
    return orjson.dumps(field_types(shape), option=DESCRIBE_OPTIONS).decode()


def json_default(obj: Any) -> Any:  # noqa: ANN401 - orjson default hook
    """Serialize objects orjson does not handle natively.

    Pydantic models, at any depth of the value, are dumped in JSON mode.

    Args:
        obj: The object orjson could not serialize.

    Returns:
        Any: A JSON-compatible representation.

    Raises:
        TypeError: If the object has no JSON representation.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def _children(value: Any) -> Iterable[Any] | None:  # noqa: ANN401
    if isinstance(value, dict):
        return value.values()
    if isinstance(value, list | tuple):
        return value
    if isinstance(value, BaseModel):
        return [item for _, item in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [getattr(value, field.name) for field in dataclasses.fields(value)]
    return None


def _scan(value: Any, path: set[int]) -> float | None:  # noqa: ANN401
    if isinstance(value, float):
        return None if math.isfinite(value) else value
    children = _children(value)
    if children is None or id(value) in path or len(path) >= MAX_SCAN_DEPTH:
        return None
    path.add(id(value))
    try:
        for child in children:
            found = _scan(child, path)
            if found is not None:
                return found
    finally:
        path.discard(id(value))
    return None


def find_non_finite(value: Any) -> float | None:  # noqa: ANN401
    """Return the first NaN or infinite float inside a value, if any.

    Dict values, lists, tuples, Pydantic models and dataclass instances are
    searched. A container already on the current path is not entered again,
    so cyclic values terminate and are left for the encoder to reject.
    """
    return _scan(value, set())


def float_text(value: float) -> str:
    """Render a non-finite float as ``NaN``, ``+Inf`` or ``-Inf``."""
    if math.isnan(value):
        return "NaN"
    return "+Inf" if value > 0 else "-Inf"


def ensure_finite(value: Any) -> None:  # noqa: ANN401 - any JSON content
    """Reject values holding floats JSON cannot represent.

    orjson writes NaN and infinities as ``null``, which would silently change
    the document.

    Raises:
        SerializationError: If a NaN or infinite float is found.
    """
    found = find_non_finite(value)
    if found is not None:
        raise SerializationError(f"json: unsupported value: {float_text(found)}")


def to_json_text(value: Any) -> str:  # noqa: ANN401 - any JSON content
    """Serialize a value to compact JSON text.

    Dataclasses, datetimes, UUIDs, enums and non-string dict keys are handled
    natively by orjson; Pydantic models are dumped in JSON mode.

    Args:
        value: The value to serialize.

    Returns:
        str: The JSON document.

    Raises:
        SerializationError: If the value cannot be encoded (functions, sets,
            cyclic references, integers beyond 64 bits, NaN or infinity).
    """
    ensure_finite(value)
    try:
        return orjson.dumps(
            value, default=json_default, option=TO_JSON_OPTIONS
        ).decode()
    except (orjson.JSONEncodeError, PydanticSerializationError) as e:
        raise SerializationError(f"json: {e}", cause=e) from e
