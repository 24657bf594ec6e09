"""Uniform response envelope.

Every JSON response produced by the helpers has the same shape::

    {"message": "...", "data": ..., "error": "..."}

Keys whose value is empty are left out of the wire document entirely rather
than sent as ``null``:

- ``message`` and ``error`` are omitted when they are the empty string;
- ``data`` is omitted only when it is ``None``. Any other value, including
  an empty string, is sent as is.

By convention a success envelope carries ``data`` and a failure envelope
carries ``error``. The model does not enforce this.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Envelope(BaseModel):
    """Response wrapper with an optional message, payload and error text."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(
        default="",
        description="Short human-readable message",
        examples=["Success", "ERROR"],
    )

    data: Any = Field(
        default=None,
        description="Payload of arbitrary shape",
        examples=[{"id": 1, "name": "example"}],
    )

    error: str = Field(
        default="",
        description="Human-readable error description",
        examples=["request body is empty"],
    )

    def to_wire(self) -> dict[str, Any]:
        """Return the document sent on the wire, without empty keys.

        Returns:
            dict[str, Any]: The envelope with empty message, ``None`` data and
                empty error removed.
        """
        wire: dict[str, Any] = {}
        if self.message:
            wire["message"] = self.message
        if self.data is not None:
            wire["data"] = self.data
        if self.error:
            wire["error"] = self.error
        return wire


def build_envelope(
    message: str = "",
    data: Any = None,  # noqa: ANN401 - payload of any shape
    error: str = "",
) -> Envelope:
    """Construct an envelope without validation or side effects.

    Args:
        message: Short human-readable message.
        data: Payload of arbitrary shape.
        error: Human-readable error description.

    Returns:
        Envelope: The new envelope.
    """
    return Envelope.model_construct(message=message, data=data, error=error)
