"""Tests for response sinks."""

import pytest
from sitestage.core.resources import get_descriptor
from sitestage.core.sink import HttpResponseSink, NullSink
from sitestage.core.types import InternalError, NotFound, Rendered, Unsupported


class TestHttpResponseSink:
    """Tests for HttpResponseSink."""

    def test__rendered_text__utf8_response(self) -> None:
        """Build a 200 response with charset for text resources."""
        sink = HttpResponseSink()

        sink.deliver(Rendered(b"body {}", get_descriptor(".css")))

        assert sink.response.status == 200
        assert sink.response.body == b"body {}"
        assert sink.response.content_type == "text/css"
        assert sink.response.charset == "utf-8"

    def test__rendered_binary__no_charset(self) -> None:
        """Build a 200 response without charset for binary resources."""
        sink = HttpResponseSink()

        sink.deliver(Rendered(b"\x89PNG", get_descriptor(".png")))

        assert sink.response.status == 200
        assert sink.response.content_type == "image/png"
        assert sink.response.charset is None

    @pytest.mark.parametrize(
        ("outcome", "status"),
        [
            (NotFound("missing"), 404),
            (Unsupported(".bmp"), 501),
            (InternalError(None), 500),
        ],
    )
    def test__failure_outcomes__status(self, outcome, status: int) -> None:
        """Map failure outcomes to their status codes."""
        sink = HttpResponseSink()

        sink.deliver(outcome)

        assert sink.response.status == status

    def test__internal_error_message__in_body(self) -> None:
        """Include the error message in 500 responses."""
        sink = HttpResponseSink()

        sink.deliver(InternalError("template exploded"))

        assert sink.response.status == 500
        assert sink.response.text == "template exploded"

    def test__second_delivery__raises(self) -> None:
        """Deliver exactly one response."""
        sink = HttpResponseSink()
        sink.deliver(NotFound())

        with pytest.raises(RuntimeError, match="already delivered"):
            sink.deliver(NotFound())

    def test__no_delivery__raises(self) -> None:
        """Refuse to return a response before delivery."""
        with pytest.raises(RuntimeError, match="No response delivered"):
            HttpResponseSink().response

    def test__unknown_outcome__type_error(self) -> None:
        """Reject values that are not outcomes."""
        with pytest.raises(TypeError):
            HttpResponseSink().deliver("not an outcome")  # type: ignore[arg-type]


class TestNullSink:
    """Tests for NullSink."""

    def test__deliver__accepts_any_outcome(self) -> None:
        """Discard outcomes, any number of times."""
        sink = NullSink()

        sink.deliver(NotFound())
        sink.deliver(InternalError("x"))
