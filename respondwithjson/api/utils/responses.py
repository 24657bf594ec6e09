"""JSON response class rendering envelopes with orjson.

EnvelopeResponse is the default response class of applications built with
``create_app`` and the single rendering path used by every ``respond_with_*``
builder and ``write_*`` writer.

Rendering rules:
- Envelope content is rendered through ``Envelope.to_wire()`` so empty keys
  are omitted.
- Other Pydantic models are dumped in JSON mode; nested models at any depth
  are handled by the shared orjson default hook.
- Every body ends with a newline.
- NaN and infinite floats are treated as unserializable rather than
  written as ``null``.

Serialization failures are not raised. Once a handler has chosen its status
code and headers there is nothing useful a caller can do with the error, so
the failure is logged at ERROR level and an empty body is sent instead.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from respondwithjson.api.constants import JSON_LINE_TERMINATOR, JSON_MEDIA_TYPE
from respondwithjson.api.schemas.envelope import Envelope
from respondwithjson.core.exceptions import SerializationError
from respondwithjson.core.reflection import ensure_finite, json_default


class EnvelopeResponse(JSONResponse):
    """FastAPI Response class rendering envelopes with orjson.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = JSON_MEDIA_TYPE

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - any JSON content
        """Render the content as a newline-terminated JSON document.

        Args:
            content: An Envelope, another Pydantic model or plain content.

        Returns:
            bytes: The JSON-encoded bytes, or an empty body if the content
                cannot be serialized.
        """
        if isinstance(content, Envelope):
            content = content.to_wire()

        try:
            ensure_finite(content)
            if isinstance(content, BaseModel):
                content = content.model_dump(mode="json")
            return orjson.dumps(content, default=json_default) + JSON_LINE_TERMINATOR
        except (orjson.JSONEncodeError, ValueError, SerializationError) as e:
            # The status line is already decided; report and send no body.
            logger.error(
                "Failed to serialize response body: {}",
                e,
                status_code=getattr(self, "status_code", None),
                exception_type=type(e).__name__,
            )
            return b""
