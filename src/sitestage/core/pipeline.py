"""Request pipeline shared by live serving and static generation."""

import asyncio
import logging

from sitestage.core.dispatch import RenderDispatcher
from sitestage.core.resolver import RequestResolver
from sitestage.core.sink import ResponseSink
from sitestage.core.types import NotFound, Outcome

logger = logging.getLogger(__name__)


class Pipeline:
    """Resolve, render and deliver one request.

    Live requests pass an HTTP sink, static generation passes a null sink;
    everything else is the same code path.
    """

    def __init__(self, resolver: RequestResolver, dispatcher: RenderDispatcher) -> None:
        self._resolver = resolver
        self._dispatcher = dispatcher

    @property
    def resolver(self) -> RequestResolver:
        return self._resolver

    @property
    def dispatcher(self) -> RenderDispatcher:
        return self._dispatcher

    async def handle(self, url_path: str, sink: ResponseSink) -> Outcome:
        """Run a request through resolution and rendering.

        Args:
            url_path: Request path (e.g., "/fr/guide/intro")
            sink: Receives the outcome exactly once

        Returns:
            The delivered outcome
        """
        resolved = await asyncio.to_thread(self._resolver.resolve, url_path)
        if isinstance(resolved, NotFound):
            outcome: Outcome = resolved
        else:
            outcome = await self._dispatcher.render(resolved)

        logger.debug(f"{url_path} -> {type(outcome).__name__}")
        sink.deliver(outcome)
        return outcome

    async def drain(self) -> None:
        """Wait for pending cache writes."""
        await self._dispatcher.drain()
