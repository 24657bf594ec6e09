"""Unit tests for the EnvelopeResponse class."""

from typing import Any

import orjson
import pytest
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pytest_mock import MockerFixture

from respondwithjson.api.schemas.envelope import Envelope, build_envelope
from respondwithjson.api.utils.responses import EnvelopeResponse


class Item(BaseModel):
    """Model used as response payload."""

    name: str
    price: int


@pytest.mark.unit
class TestEnvelopeResponse:
    """Test suite for EnvelopeResponse class."""

    def test_initialization(self) -> None:
        """Test EnvelopeResponse initializes with the JSON media type."""
        response = EnvelopeResponse(content=Envelope())

        assert response.media_type == "application/json"
        assert response.headers["content-type"] == "application/json"
        assert isinstance(response, JSONResponse)

    def test_render_envelope_omits_empty_keys(self) -> None:
        """Test that envelopes are rendered through to_wire."""
        response = EnvelopeResponse(content=build_envelope("Success", {"a": 1}, ""))

        assert response.body == b'{"message":"Success","data":{"a":1}}\n'

    def test_render_is_newline_terminated(self) -> None:
        """Test that every body ends with a newline."""
        response = EnvelopeResponse(content=Envelope())

        assert response.body == b"{}\n"

    def test_render_model_payload(self) -> None:
        """Test that models inside the envelope are dumped."""
        envelope = build_envelope("", [Item(name="pen", price=2)], "")

        response = EnvelopeResponse(content=envelope)

        assert orjson.loads(response.body) == {"data": [{"name": "pen", "price": 2}]}

    def test_render_plain_model(self) -> None:
        """Test that non-envelope models are dumped in JSON mode."""
        response = EnvelopeResponse(content=Item(name="pen", price=2))

        assert orjson.loads(response.body) == {"name": "pen", "price": 2}

    @pytest.mark.parametrize(
        "content",
        [
            {"key": "value"},
            [1, 2, 3],
            "text",
            None,
        ],
    )
    def test_render_plain_content(self, content: Any) -> None:  # noqa: ANN401
        """Test that plain content is serialized as is."""
        response = EnvelopeResponse(content=content)

        assert orjson.loads(response.body) == content

    @pytest.mark.parametrize(
        ("status_code", "headers"),
        [
            (200, None),
            (201, {"X-Custom-Header": "value"}),
            (404, None),
            (599, {"X-Error": "Nonstandard"}),
        ],
    )
    def test_constructor_parameters(
        self,
        status_code: int,
        headers: dict[str, str] | None,
    ) -> None:
        """Test that status codes pass through unchecked with extra headers."""
        response = EnvelopeResponse(
            content=Envelope(), status_code=status_code, headers=headers
        )

        assert response.status_code == status_code
        for key, value in (headers or {}).items():
            assert response.headers.get(key) == value

    @pytest.mark.parametrize(
        "data",
        [
            {1, 2},
            lambda: None,
            object(),
        ],
    )
    def test_serialization_failure_writes_empty_body(
        self,
        data: object,
        mocker: MockerFixture,
    ) -> None:
        """Test that unencodable data is logged and produces an empty body."""
        mock_logger = mocker.patch("respondwithjson.api.utils.responses.logger")

        response = EnvelopeResponse(
            content=build_envelope("Success", data, ""), status_code=200
        )

        assert response.body == b""
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        mock_logger.error.assert_called_once()
        kwargs = mock_logger.error.call_args.kwargs
        assert kwargs["status_code"] == 200
        assert kwargs["exception_type"] == "JSONEncodeError"

    def test_cyclic_payload_does_not_raise(self, mocker: MockerFixture) -> None:
        """Test that a cyclic payload is logged rather than raised."""
        mock_logger = mocker.patch("respondwithjson.api.utils.responses.logger")
        cyclic: list[Any] = []
        cyclic.append(cyclic)

        response = EnvelopeResponse(content=build_envelope("", cyclic, ""))

        assert response.body == b""
        mock_logger.error.assert_called_once()

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), [float("-inf")]])
    def test_non_finite_floats_write_empty_body(
        self, value: object, mocker: MockerFixture
    ) -> None:
        """Test that NaN and infinities are not written as null."""
        mock_logger = mocker.patch("respondwithjson.api.utils.responses.logger")

        envelope = build_envelope("Success", {"v": value}, "")

        response = EnvelopeResponse(content=envelope)

        assert response.body == b""
        kwargs = mock_logger.error.call_args.kwargs
        assert kwargs["exception_type"] == "SerializationError"

    def test_render_without_init(self, mocker: MockerFixture) -> None:
        """Test rendering on a bare instance, before any status is set."""
        mock_logger = mocker.patch("respondwithjson.api.utils.responses.logger")
        response = EnvelopeResponse.__new__(EnvelopeResponse)

        assert response.render({"ok": True}) == b'{"ok":true}\n'
        assert response.render({"bad": {1}}) == b""
        assert mock_logger.error.call_args.kwargs["status_code"] is None

    def test_media_type_class_attribute(self) -> None:
        """Test that media_type is a class attribute matching JSONResponse."""
        assert EnvelopeResponse.media_type == "application/json"
        assert EnvelopeResponse.media_type == JSONResponse.media_type
