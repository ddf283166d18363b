"""Static site generation.

Replays every URL of the site through the live pipeline with response
delivery suppressed. The cache writes the pipeline performs are the
generated site.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from sitestage.config import Config
from sitestage.core.site import SiteManifest
from sitestage.core.sink import NullSink
from sitestage.core.snapshot import SiteSnapshot
from sitestage.core.types import InternalError, NotFound, Outcome, Rendered, Unsupported

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 16


@dataclass
class GenerationReport:
    """Counts of request outcomes during a generation run."""

    rendered: int = 0
    not_found: int = 0
    unsupported: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.rendered + self.not_found + self.unsupported + self.failed

    def record(self, url_path: str, outcome: Outcome) -> None:
        """Count an outcome."""
        if isinstance(outcome, Rendered):
            self.rendered += 1
        elif isinstance(outcome, NotFound):
            self.not_found += 1
            logger.debug(f"Skipped {url_path}: {outcome.reason}")
        elif isinstance(outcome, Unsupported):
            self.unsupported += 1
            logger.debug(f"Skipped {url_path}: unsupported extension {outcome.extension}")
        elif isinstance(outcome, InternalError):
            self.failed += 1
            self.failures.append(url_path)


class StaticGenerator:
    """Materializes the whole site into the content directory.

    Always runs with caching enabled: the content directory is the output.
    """

    def __init__(
        self,
        config: Config,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        clean: bool = True,
    ) -> None:
        """Initialize generator.

        Args:
            config: Site configuration
            concurrency: Maximum number of requests in flight
            clean: Remove the content directory before generating
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._config = config.with_overrides(cache_enabled=True)
        self._concurrency = concurrency
        self._clean = clean

    async def generate(self) -> GenerationReport:
        """Generate the static site.

        Returns:
            GenerationReport with outcome counts
        """
        snapshot = SiteSnapshot.build(self._config)
        cache = snapshot.pipeline.dispatcher.cache
        if self._clean and cache is not None:
            await asyncio.to_thread(cache.clear)

        manifest = await asyncio.to_thread(SiteManifest.discover, self._config, snapshot.locales)
        urls = manifest.request_urls()
        logger.info(
            f"Generating {len(urls)} requests "
            f"({len(manifest.public_asset_paths)} assets, {len(manifest.page_paths)} pages, "
            f"{len(manifest.locales)} locales)"
        )

        report = GenerationReport()
        semaphore = asyncio.Semaphore(self._concurrency)
        sink = NullSink()

        async def run(url_path: str) -> None:
            async with semaphore:
                outcome = await snapshot.pipeline.handle(url_path, sink)
            report.record(url_path, outcome)

        await asyncio.gather(*(run(url_path) for url_path in urls))
        await snapshot.pipeline.drain()

        logger.info(
            f"Generated {report.rendered} files into {self._config.dirs.content_dir} "
            f"({report.not_found} not found, {report.unsupported} unsupported, "
            f"{report.failed} failed)"
        )
        return report
