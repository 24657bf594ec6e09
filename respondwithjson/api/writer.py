"""Envelope response builders and ASGI stream writers.

Two surfaces produce the same envelopes:

- ``respond_with_*`` build an EnvelopeResponse for FastAPI handlers to return.
- ``write_*`` emit the response directly through an ASGI ``send`` callable,
  for raw ASGI apps and middleware that own the output stream.

Envelope conventions:

==========================  =========  ===========  =============  ==============
function                    status     message      data           error
==========================  =========  ===========  =============  ==============
``*_json``                  given      given        given          given
``*_json_simple``           given      omitted      given          omitted
``*_success``               200        ``Success``  given          omitted
``*_error``                 given      ``ERROR``    omitted        ``str(err)``
``*_message_error``         given      omitted      ``""``         given
==========================  =========  ===========  =============  ==============

``*_error`` with ``err=None`` leaves both message and error empty; avoiding
that is the caller's responsibility.
"""

from typing import Any

from fastapi import status
from starlette.types import Send

from respondwithjson.api.constants import ERROR_MESSAGE, SUCCESS_MESSAGE
from respondwithjson.api.schemas.envelope import Envelope, build_envelope
from respondwithjson.api.utils.responses import EnvelopeResponse


def _error_envelope(err: BaseException | None) -> Envelope:
    if err is None:
        return build_envelope("", None, "")
    return build_envelope(ERROR_MESSAGE, None, str(err))


def respond_with_json(status_code: int, envelope: Envelope) -> EnvelopeResponse:
    """Build a JSON response carrying the envelope.

    Args:
        status_code: HTTP status code, passed through unchecked.
        envelope: The envelope to serialize.

    Returns:
        EnvelopeResponse: Response with ``Content-Type: application/json``.
    """
    return EnvelopeResponse(content=envelope, status_code=status_code)


def respond_with_json_simple(
    status_code: int,
    data: Any,  # noqa: ANN401 - payload of any shape
) -> EnvelopeResponse:
    """Build a response whose envelope carries only data."""
    return respond_with_json(status_code, build_envelope("", data, ""))


def respond_with_success(data: Any) -> EnvelopeResponse:  # noqa: ANN401
    """Build a 200 response with message ``Success`` and the given data."""
    return respond_with_json(
        status.HTTP_200_OK, build_envelope(SUCCESS_MESSAGE, data, "")
    )


def respond_with_error(
    status_code: int, err: BaseException | None
) -> EnvelopeResponse:
    """Build an error response from an exception.

    Args:
        status_code: HTTP status code, passed through unchecked.
        err: The error to report. ``None`` produces an envelope with empty
            message and error.

    Returns:
        EnvelopeResponse: Response without a data key.
    """
    return respond_with_json(status_code, _error_envelope(err))


def respond_with_message_error(
    status_code: int, message_error: str
) -> EnvelopeResponse:
    """Build an error response from plain text.

    Unlike ``respond_with_error``, ``data`` is sent as an empty string.
    """
    return respond_with_json(status_code, build_envelope("", "", message_error))


async def write_json(send: Send, status_code: int, envelope: Envelope) -> None:
    """Write the envelope as a complete HTTP response to an ASGI stream.

    Headers, including ``content-type: application/json``, travel with the
    status in ``http.response.start``; the body follows in a single
    ``http.response.body`` message.

    Args:
        send: The ASGI send callable owned by the calling request handler.
        status_code: HTTP status code, passed through unchecked.
        envelope: The envelope to serialize.
    """
    response = respond_with_json(status_code, envelope)
    await send(
        {
            "type": "http.response.start",
            "status": response.status_code,
            "headers": response.raw_headers,
        }
    )
    await send({"type": "http.response.body", "body": response.body})


async def write_json_simple(
    send: Send,
    status_code: int,
    data: Any,  # noqa: ANN401 - payload of any shape
) -> None:
    """Write a response whose envelope carries only data."""
    await write_json(send, status_code, build_envelope("", data, ""))


async def write_success(send: Send, data: Any) -> None:  # noqa: ANN401
    """Write a 200 response with message ``Success`` and the given data."""
    await write_json(
        send, status.HTTP_200_OK, build_envelope(SUCCESS_MESSAGE, data, "")
    )


async def write_error(
    send: Send, status_code: int, err: BaseException | None
) -> None:
    """Write an error response from an exception (see ``respond_with_error``)."""
    await write_json(send, status_code, _error_envelope(err))


async def write_message_error(
    send: Send, status_code: int, message_error: str
) -> None:
    """Write an error response from plain text, with ``data`` as ``""``."""
    await write_json(send, status_code, build_envelope("", "", message_error))
