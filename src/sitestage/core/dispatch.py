"""Render dispatch.

Decides whether a resolved page is a templated page or a static asset,
produces its bytes and writes them back to the cache.
"""

import asyncio
import errno
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from sitestage.core.cache import ContentCache
from sitestage.core.resources import get_descriptor
from sitestage.core.types import (
    InternalError,
    NotFound,
    Outcome,
    Rendered,
    ResolvedPage,
    ResourceDescriptor,
    Unsupported,
)

logger = logging.getLogger(__name__)


class PageParserProtocol(Protocol):
    """Renders page sources to HTML."""

    async def parse_page(self, page: str, extension: str, locale: str | None) -> str: ...


class TranslatorProtocol(Protocol):
    """Replaces translation tokens in rendered HTML."""

    def translate(self, html: str, page: str, locale: str | None) -> str: ...


class RenderDispatcher:
    """Produces the bytes for resolved pages.

    Cache writes are fire-and-forget: the render returns as soon as the
    bytes exist and the write completes in the background. ``drain()``
    waits for outstanding writes.
    """

    def __init__(
        self,
        public_dir: Path,
        page_extensions: Sequence[str],
        parser: PageParserProtocol,
        translator: TranslatorProtocol,
        cache: ContentCache | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            public_dir: Root directory containing static assets
            page_extensions: Extensions rendered through the page parser
            parser: Page parser collaborator
            translator: Translator collaborator
            cache: Render cache, or None when caching is disabled
        """
        self._public_dir = public_dir
        self._page_extensions = frozenset(page_extensions)
        self._parser = parser
        self._translator = translator
        self._cache = cache
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def cache(self) -> ContentCache | None:
        """Render cache, None when caching is disabled."""
        return self._cache

    async def render(self, page: ResolvedPage) -> Outcome:
        """Produce the bytes for a resolved page.

        Args:
            page: Resolved page identity

        Returns:
            Rendered bytes, or NotFound, Unsupported or InternalError
        """
        descriptor = get_descriptor(page.extension)
        if descriptor is None:
            return Unsupported(page.extension)

        if self._cache is not None:
            cached_path = await asyncio.to_thread(self._cache.lookup, page)
            if cached_path is not None:
                try:
                    body = await asyncio.to_thread(cached_path.read_bytes)
                except OSError as e:
                    logger.warning(f"Failed to read cache entry {cached_path}: {e}")
                else:
                    logger.debug(f"Cache hit for {page.page_path}: {cached_path}")
                    return Rendered(body, descriptor, from_cache=True)

        if page.extension in self._page_extensions:
            return await self._render_page(page, descriptor)
        return await self._read_asset(page, descriptor)

    async def drain(self) -> None:
        """Wait for all pending cache writes."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _render_page(
        self,
        page: ResolvedPage,
        descriptor: ResourceDescriptor,
    ) -> Outcome:
        try:
            html = await self._parser.parse_page(page.page_path, page.extension, page.locale)
            html = self._translator.translate(html, page.page_path, page.locale)
        except FileNotFoundError as e:
            return NotFound(str(e))
        except Exception as e:
            logger.exception(f"Failed to render {page.page_path}{page.extension}")
            return InternalError(str(e) or None)

        body = html.encode("utf-8")
        if self._cache is not None:
            self._schedule_write(self._cache, self._cache.page_path(page), body)
        return Rendered(body, descriptor)

    async def _read_asset(
        self,
        page: ResolvedPage,
        descriptor: ResourceDescriptor,
    ) -> Outcome:
        source_path = self._public_dir / f"{page.page_path}{page.extension}"
        try:
            body = await asyncio.to_thread(source_path.read_bytes)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError, ValueError):
            return NotFound(f"Asset not found: {source_path}")
        except OSError as e:
            if e.errno == errno.ENAMETOOLONG:
                return NotFound(f"Asset not found: {source_path}")
            logger.error(f"Failed to read asset {source_path}: {e}")
            return InternalError(str(e))

        if self._cache is not None:
            self._schedule_write(self._cache, self._cache.asset_path(page), body)
        return Rendered(body, descriptor)

    def _schedule_write(self, cache: ContentCache, path: Path, body: bytes) -> None:
        task = asyncio.create_task(_write_entry(cache, path, body))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


async def _write_entry(cache: ContentCache, path: Path, body: bytes) -> None:
    """Write a cache entry, logging failures instead of raising."""
    try:
        await asyncio.to_thread(cache.write, path, body)
    except OSError as e:
        logger.warning(f"Failed to write cache entry {path}: {e}")
    else:
        logger.debug(f"Cached {path}")
