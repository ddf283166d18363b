"""Versioned configuration snapshots.

A snapshot bundles an immutable Config with everything derived from it
(known locales, translations, the wired pipeline). Requests read one
snapshot for their whole lifetime; reloads build a new snapshot and swap it
in atomically.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sitestage.config import Config
from sitestage.core.cache import ContentCache
from sitestage.core.dispatch import RenderDispatcher
from sitestage.core.i18n import Translator, discover_locales
from sitestage.core.parser import PageParser
from sitestage.core.pipeline import Pipeline
from sitestage.core.resolver import RequestResolver

logger = logging.getLogger(__name__)

ConfigLoader = Callable[[], Config]


@dataclass(frozen=True)
class SiteSnapshot:
    """Immutable configuration plus the pipeline built from it."""

    version: int
    config: Config
    locales: tuple[str, ...]
    translator: Translator
    pipeline: Pipeline

    @property
    def multi_lang(self) -> bool:
        """Whether pages are served per locale."""
        return self.translator.multi_lang

    @classmethod
    def build(cls, config: Config, version: int = 1) -> "SiteSnapshot":
        """Wire the pipeline for a configuration.

        Args:
            config: Configuration to build from
            version: Snapshot version number

        Returns:
            New SiteSnapshot
        """
        dirs = config.dirs
        locales = discover_locales(dirs.locales_dir)
        translator = Translator.load(config.i18n, dirs.locales_dir, locales)
        parser = PageParser(
            dirs.pages_dir,
            dirs.layouts_dir,
            site_data=config.site.data,
            root=config.site.root,
            markdown_extensions=config.markdown.extensions,
        )
        resolver = RequestResolver(
            dirs.pages_dir,
            config.pages.extensions,
            translator.get_locale_from_path,
        )
        dispatcher = RenderDispatcher(
            dirs.public_dir,
            config.pages.extensions,
            parser,
            translator,
            cache=ContentCache(dirs.content_dir) if config.cache.enabled else None,
        )
        return cls(
            version=version,
            config=config,
            locales=locales,
            translator=translator,
            pipeline=Pipeline(resolver, dispatcher),
        )


class SnapshotHolder:
    """Holds the current snapshot and swaps in reloaded ones."""

    def __init__(self, config: Config, loader: ConfigLoader | None = None) -> None:
        """Initialize holder.

        Args:
            config: Initial configuration
            loader: Produces a fresh Config on reload; when None, reloads
                    reuse the current Config and only rediscover locales
                    and translations
        """
        self._loader = loader
        self._current = SiteSnapshot.build(config)

    @property
    def current(self) -> SiteSnapshot:
        """The snapshot new requests should use."""
        return self._current

    async def reload(self) -> SiteSnapshot:
        """Build a new snapshot and swap it in.

        A failing reload keeps the previous snapshot.

        Returns:
            The snapshot in effect after the reload
        """
        previous = self._current
        try:
            config = self._loader() if self._loader is not None else previous.config
            snapshot = await asyncio.to_thread(SiteSnapshot.build, config, previous.version + 1)
        except (OSError, ValueError) as e:
            logger.warning(f"Configuration reload failed, keeping version {previous.version}: {e}")
            return previous

        self._current = snapshot
        logger.info(f"Configuration reloaded (version {snapshot.version})")
        await previous.pipeline.drain()
        return snapshot
