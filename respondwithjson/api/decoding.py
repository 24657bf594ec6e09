"""Strict JSON request decoding into Pydantic models.

Decoding is strict in two ways:

- **Unknown fields are rejected at every depth.** Each object key must be a
  name the receiving model or dataclass accepts on input (a field alias, or
  the field name when the field has no alias or the model validates by
  name), whatever the model's own ``extra`` setting is. Objects reached
  through ``list[Model]``, ``dict[str, Model]``, ``Model | None`` and
  ``AliasPath`` aliases are checked the same way.
- **Types are not coerced.** Validation runs in Pydantic strict mode, so
  ``"1"`` does not become ``1``. JSON-native conversions (ISO strings to
  datetimes, for example) still apply.

``NaN`` and ``Infinity`` are not JSON and are rejected, as are numbers too
large to be represented as a float.

The body is read once. A failed decode produces no model instance, so there
is never a partially populated result to misuse.
"""

import dataclasses
import types
from collections import deque
from collections.abc import (
    Mapping,
    MutableMapping,
    MutableSequence,
    MutableSet,
    Sequence,
)
from collections.abc import Set as AbstractSet
from functools import lru_cache
from typing import (
    IO,
    Annotated,
    Any,
    TypeAliasType,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from fastapi import Request
from pydantic import AliasChoices, AliasPath, BaseModel, RootModel
from pydantic import ValidationError as PydanticValidationError
from pydantic.fields import FieldInfo
from pydantic_core import from_json

from respondwithjson.core.exceptions import (
    EmptyBodyError,
    MalformedJSONError,
    UnknownFieldError,
)
from respondwithjson.core.reflection import find_non_finite, float_text

type RequestBody = bytes | bytearray | str | IO[bytes] | IO[str] | None

# Remaining alias path below an accepted key, and the annotation found there
type Route = tuple[tuple[str | int, ...], Any]

EXTRA_FORBIDDEN = "extra_forbidden"

MAPPING_ORIGINS = frozenset({dict, Mapping, MutableMapping})
ITEM_ORIGINS = frozenset(
    {list, set, frozenset, deque, Sequence, MutableSequence, AbstractSet, MutableSet}
)
UNION_ORIGINS = frozenset({Union, types.UnionType})


def _input_paths(info: FieldInfo) -> list[tuple[str | int, ...]]:
    alias = info.validation_alias if info.validation_alias is not None else info.alias
    choices = alias.choices if isinstance(alias, AliasChoices) else [alias]

    paths: list[tuple[str | int, ...]] = []
    for choice in choices:
        if isinstance(choice, AliasPath):
            paths.append(tuple(choice.path))
        elif isinstance(choice, str):
            paths.append((choice,))
    return paths


def _model_routes(model: type[BaseModel]) -> dict[str, list[Route]]:
    config = model.model_config
    by_name = bool(config.get("populate_by_name") or config.get("validate_by_name"))
    by_alias = config.get("validate_by_alias", True)

    routes: dict[str, list[Route]] = {}
    for name, info in model.model_fields.items():
        paths = _input_paths(info) if by_alias else []
        if by_name or not paths:
            paths.append((name,))
        for path in paths:
            routes.setdefault(str(path[0]), []).append((path[1:], info.annotation))
    return routes


def _dataclass_routes(shape: type) -> dict[str, list[Route]]:
    hints = get_type_hints(shape, include_extras=True)
    return {
        field.name: [((), hints.get(field.name, Any))]
        for field in dataclasses.fields(shape)
        if field.init
    }


@lru_cache(maxsize=256)
def input_routes(shape: type) -> dict[str, tuple[Route, ...]]:
    """Map each JSON key a model or dataclass accepts to where its value goes.

    Args:
        shape: A Pydantic model class or a dataclass.

    Returns:
        dict[str, tuple[Route, ...]]: For every accepted key, the remaining
            alias path (empty for plain fields) and the field annotation.
    """
    if issubclass(shape, BaseModel):
        routes = _model_routes(shape)
    else:
        routes = _dataclass_routes(shape)
    return {key: tuple(entries) for key, entries in routes.items()}


@lru_cache(maxsize=256)
def accepted_keys(model: type[BaseModel]) -> frozenset[str]:
    """Return the top-level JSON keys ``model`` accepts on input.

    Args:
        model: The target model class.

    Returns:
        frozenset[str]: Aliases of every field (the first element for alias
            paths), plus field names for fields without an alias or when the
            model validates by name.
    """
    return frozenset(input_routes(model))


def _unwrap(annotation: Any) -> Any:  # noqa: ANN401 - any annotation object
    while True:
        if isinstance(annotation, TypeAliasType):
            annotation = annotation.__value__
        elif get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]
        elif isinstance(annotation, type) and issubclass(annotation, RootModel):
            annotation = annotation.model_fields["root"].annotation
        else:
            return annotation


def _is_structured(annotation: Any) -> bool:  # noqa: ANN401
    return isinstance(annotation, type) and (
        issubclass(annotation, BaseModel) or dataclasses.is_dataclass(annotation)
    )


def _takes(value: Any, annotation: Any) -> bool:  # noqa: ANN401
    annotation = _unwrap(annotation)
    origin = get_origin(annotation)
    if origin in UNION_ORIGINS:
        return any(_takes(value, arm) for arm in get_args(annotation))
    if isinstance(value, dict):
        return _is_structured(annotation) or origin in MAPPING_ORIGINS
    if isinstance(value, list):
        return origin in ITEM_ORIGINS or origin is tuple
    return False


def _reject_unknown_in_union(value: Any, arms: tuple[Any, ...]) -> None:  # noqa: ANN401
    first_error: UnknownFieldError | None = None
    for arm in arms:
        if not _takes(value, arm):
            continue
        try:
            reject_unknown_fields(value, arm)
        except UnknownFieldError as e:
            first_error = first_error or e
        else:
            return
    if first_error is not None:
        raise first_error


def _follow(value: Any, routes: Sequence[Route]) -> None:  # noqa: ANN401
    direct = [annotation for path, annotation in routes if not path]
    if direct:
        for annotation in direct:
            reject_unknown_fields(value, annotation)
        return

    branches: dict[str | int, list[Route]] = {}
    for path, annotation in routes:
        branches.setdefault(path[0], []).append((path[1:], annotation))

    if isinstance(value, dict):
        for key, entry in value.items():
            if key not in branches:
                raise UnknownFieldError(key)
            _follow(entry, branches[key])
    elif isinstance(value, list):
        for index, branch in branches.items():
            if isinstance(index, int) and -len(value) <= index < len(value):
                _follow(value[index], branch)


def reject_unknown_fields(value: Any, annotation: Any) -> None:  # noqa: ANN401
    """Check parsed JSON against an annotation for keys it does not declare.

    Objects are checked wherever the annotation expects a Pydantic model or a
    dataclass, including inside lists, dicts, tuples, unions and alias paths.
    Values of any other shape are left for validation to judge.

    Args:
        value: Parsed JSON.
        annotation: The type the value is about to be validated against.

    Raises:
        UnknownFieldError: For the first key no receiving model declares.
    """
    annotation = _unwrap(annotation)
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin in UNION_ORIGINS:
        _reject_unknown_in_union(value, args)
    elif isinstance(value, dict):
        if _is_structured(annotation):
            routes = input_routes(annotation)
            for key, entry in value.items():
                if key not in routes:
                    raise UnknownFieldError(key)
                _follow(entry, routes[key])
        elif origin in MAPPING_ORIGINS and len(args) == 2:
            for entry in value.values():
                reject_unknown_fields(entry, args[1])
    elif isinstance(value, list) and args:
        if origin in ITEM_ORIGINS:
            for entry in value:
                reject_unknown_fields(entry, args[0])
        elif origin is tuple:
            items = args[:1] * len(value) if args[-1] is Ellipsis else args
            for entry, item in zip(value, items, strict=False):
                reject_unknown_fields(entry, item)


def _read(body: Any) -> bytes | bytearray | str:  # noqa: ANN401 - any readable body
    if isinstance(body, bytes | bytearray | str):
        return body
    return body.read()


def _translate(exc: PydanticValidationError) -> MalformedJSONError | UnknownFieldError:
    """Map a Pydantic validation failure to a decode error.

    Args:
        exc: The validation error raised by Pydantic.

    Returns:
        UnknownFieldError for the first unknown field, otherwise
        MalformedJSONError carrying the error list.
    """
    errors = exc.errors(include_url=False, include_input=False)
    for error in errors:
        if error["type"] == EXTRA_FORBIDDEN:
            return UnknownFieldError(str(error["loc"][-1]), cause=exc)

    message = f"json: {exc.error_count()} validation error(s) for {exc.title}"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first["loc"])
        message = f"json: {first['msg']}"
        if location:
            message = f"{message} (at {location})"
    return MalformedJSONError(message, context={"errors": errors}, cause=exc)


def decode_strict[ModelT: BaseModel](body: RequestBody, model: type[ModelT]) -> ModelT:
    """Decode a JSON body into ``model``, rejecting unknown fields.

    Args:
        body: Raw bytes or text, a readable file-like object, or None when the
            body stream is absent.
        model: The Pydantic model class describing the expected payload.

    Returns:
        ModelT: A new, fully validated instance of ``model``.

    Raises:
        EmptyBodyError: If ``body`` is None. Nothing is read.
        UnknownFieldError: If an object in the payload has a field the model
            receiving it does not declare.
        MalformedJSONError: If the payload is not valid JSON (an empty body,
            NaN and Infinity included), holds a number beyond the float
            range, or a value does not match its declared type.
    """
    if body is None:
        raise EmptyBodyError

    raw = _read(body)
    try:
        payload = from_json(raw, allow_inf_nan=False)
    except ValueError as e:
        raise MalformedJSONError(f"json: {e}", cause=e) from e

    overflow = find_non_finite(payload)
    if overflow is not None:
        raise MalformedJSONError(f"json: number out of range: {float_text(overflow)}")

    reject_unknown_fields(payload, model)

    try:
        return model.model_validate_json(raw, strict=True)
    except PydanticValidationError as e:
        raise _translate(e) from e


async def decode_request_strict[ModelT: BaseModel](
    request: Request, model: type[ModelT]
) -> ModelT:
    """Read a request's body and decode it with ``decode_strict``.

    An ASGI request always has a body stream, so an empty body is reported as
    MalformedJSONError rather than EmptyBodyError.

    Args:
        request: The incoming Starlette/FastAPI request.
        model: The Pydantic model class describing the expected payload.

    Returns:
        ModelT: A new, fully validated instance of ``model``.
    """
    return decode_strict(await request.body(), model)


class StrictBody[ModelT: BaseModel]:
    """FastAPI dependency decoding the request body strictly.

    Example:
        >>> @app.post("/users")
        ... async def create_user(
        ...     user: Annotated[User, Depends(StrictBody(User))],
        ... ) -> EnvelopeResponse:
        ...     return respond_with_success(user)
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def __call__(self, request: Request) -> ModelT:
        """Decode the current request's body into the configured model."""
        return await decode_request_strict(request, self.model)
