"""Non-empty checks for handler input fields.

Only text and integer values are supported. Any other kind, including
``bool`` (a subclass of ``int``), ``float`` and ``None``, is rejected with
UnsupportedKindError rather than checked for emptiness.
"""

from respondwithjson.core.exceptions import (
    EmptyFieldError,
    UnsupportedKindError,
    ZeroFieldError,
)


def validate_fields(*fields: object) -> None:
    """Check that every field is a non-blank string or a non-zero integer.

    Fields are checked in argument order and the first failure is raised.

    Args:
        *fields: The values to check.

    Raises:
        EmptyFieldError: If a string is empty or whitespace only.
        ZeroFieldError: If an integer is zero.
        UnsupportedKindError: If a value is neither a string nor an integer.
    """
    for field in fields:
        if isinstance(field, str):
            if not field.strip():
                raise EmptyFieldError
        elif isinstance(field, int) and not isinstance(field, bool):
            if field == 0:
                raise ZeroFieldError
        else:
            raise UnsupportedKindError(type(field).__name__)
