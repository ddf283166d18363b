"""Configuration reload for the live server.

Watches the configuration file, the locales directory and any extra
configured paths, and swaps in a freshly built snapshot when they change.
The watched paths follow the current snapshot, so a reload that moves the
locales directory or changes ``[reload] watch`` restarts the watch.
"""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from watchfiles import Change, awatch

from sitestage.config import Config
from sitestage.core.snapshot import SnapshotHolder

logger = logging.getLogger(__name__)


class ConfigWatcher:
    """Reloads the site snapshot on configuration changes."""

    def __init__(self, holder: SnapshotHolder) -> None:
        """Initialize the watcher.

        Args:
            holder: Snapshot holder to reload; its current configuration
                    decides what is watched
        """
        self._holder = holder
        self._watch_task: asyncio.Task[None] | None = None
        self._paths_changed = asyncio.Event()

    @property
    def watch_paths(self) -> tuple[Path, ...]:
        """Existing paths the watcher observes."""
        return tuple(path for path in watch_paths_for(self._holder.current.config) if path.exists())

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        if not self.watch_paths:
            logger.info("Nothing to watch, configuration reload disabled")
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

    async def _watch_files(self) -> None:
        """Watch for changes and reload the snapshot.

        Restarts the watch whenever a reload changes the watched paths.
        """
        while True:
            paths = self.watch_paths
            if not paths:
                logger.info("Nothing left to watch, configuration reload stopped")
                return
            self._paths_changed.clear()
            async for changes in awatch(*paths, stop_event=self._paths_changed):
                await self.handle_changes(changes)
            if not self._paths_changed.is_set():
                return
            logger.info(f"Watching {', '.join(str(path) for path in self.watch_paths)}")

    async def handle_changes(self, changes: set[tuple[Change, str]]) -> None:
        """Reload the snapshot for a batch of file changes.

        Args:
            changes: Changes reported by watchfiles
        """
        if not changes:
            return
        changed = sorted(path for _, path in changes)
        logger.info(f"Configuration change detected: {', '.join(changed)}")
        previous_paths = self.watch_paths
        await self._holder.reload()
        if self.watch_paths != previous_paths:
            self._paths_changed.set()


def watch_paths_for(config: Config) -> list[Path]:
    """List the paths of a configuration whose changes require a reload."""
    return collect_watch_paths(config.config_path, config.dirs.locales_dir, config.reload.watch_paths)


def collect_watch_paths(
    config_path: Path | None,
    locales_dir: Path,
    extra_paths: Iterable[Path] = (),
) -> list[Path]:
    """List the paths whose changes require a snapshot reload.

    Args:
        config_path: Configuration file, if any
        locales_dir: Locales directory
        extra_paths: Additional configured paths

    Returns:
        Paths to watch
    """
    paths = [config_path] if config_path is not None else []
    return [*paths, locales_dir, *extra_paths]
