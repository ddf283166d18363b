"""Response sinks.

A sink receives the single terminal outcome of a request. The HTTP sink
turns it into an aiohttp response; the null sink discards it, which is how
static generation reuses the live pipeline without a socket.
"""

from typing import Protocol

from aiohttp import web

from sitestage.core.types import InternalError, NotFound, Outcome, Rendered, Unsupported


class ResponseSink(Protocol):
    """Delivers a request outcome to the caller."""

    def deliver(self, outcome: Outcome) -> None: ...


class NullSink:
    """Sink for batch mode: delivery is a no-op."""

    def deliver(self, outcome: Outcome) -> None:
        pass


class HttpResponseSink:
    """Builds exactly one aiohttp response per request."""

    def __init__(self) -> None:
        self._response: web.Response | None = None

    @property
    def response(self) -> web.Response:
        """The delivered response.

        Raises:
            RuntimeError: If nothing was delivered yet
        """
        if self._response is None:
            raise RuntimeError("No response delivered")
        return self._response

    def deliver(self, outcome: Outcome) -> None:
        """Build the HTTP response for an outcome.

        Raises:
            RuntimeError: If a response was already delivered
        """
        if self._response is not None:
            raise RuntimeError("Response already delivered")
        self._response = _to_response(outcome)


def _to_response(outcome: Outcome) -> web.Response:
    if isinstance(outcome, Rendered):
        descriptor = outcome.descriptor
        return web.Response(
            body=outcome.body,
            content_type=descriptor.mime_type,
            charset="utf-8" if descriptor.encoding == "utf-8" else None,
        )
    if isinstance(outcome, NotFound):
        return web.Response(status=404)
    if isinstance(outcome, Unsupported):
        return web.Response(status=501)
    if isinstance(outcome, InternalError):
        if outcome.message:
            return web.Response(status=500, text=outcome.message)
        return web.Response(status=500)
    raise TypeError(f"Unknown outcome: {outcome!r}")
