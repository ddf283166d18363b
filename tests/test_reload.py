"""Tests for configuration reload."""

from dataclasses import replace
from pathlib import Path

import pytest
from sitestage.config import Config, DirsConfig, ReloadConfig
from sitestage.core.snapshot import SnapshotHolder
from sitestage.live.reload import ConfigWatcher, collect_watch_paths, watch_paths_for
from watchfiles import Change


class TestConfigWatcher:
    """Tests for ConfigWatcher."""

    @pytest.mark.asyncio
    async def test__changes__reload_snapshot(self, site_dir: Path, test_config: Config) -> None:
        """Reload the snapshot when files change."""
        holder = SnapshotHolder(test_config)
        watcher = ConfigWatcher(holder)

        await watcher.handle_changes({(Change.modified, str(site_dir / "locales" / "fr" / "index.json"))})

        assert holder.current.version == 2

    @pytest.mark.asyncio
    async def test__no_changes__no_reload(self, test_config: Config) -> None:
        """Ignore empty change batches."""
        holder = SnapshotHolder(test_config)
        watcher = ConfigWatcher(holder)

        await watcher.handle_changes(set())

        assert holder.current.version == 1

    def test__watch_paths__only_existing(self, site_dir: Path, test_config: Config) -> None:
        """Skip watch paths that don't exist."""
        config = replace(test_config, config_path=site_dir / "sitestage.toml")
        watcher = ConfigWatcher(SnapshotHolder(config))

        assert watcher.watch_paths == (site_dir / "locales",)

    @pytest.mark.asyncio
    async def test__reload_changes_watch_list__paths_follow(self, site_dir: Path, test_config: Config) -> None:
        """Watch the paths of the reloaded configuration."""
        theme = site_dir / "theme"
        holder = SnapshotHolder(
            test_config,
            lambda: replace(test_config, reload=ReloadConfig(enabled=False, watch_paths=(theme,))),
        )
        watcher = ConfigWatcher(holder)
        assert watcher.watch_paths == (site_dir / "locales",)

        await watcher.handle_changes({(Change.modified, str(site_dir / "sitestage.toml"))})

        assert watcher.watch_paths == (site_dir / "locales", theme)
        assert watcher._paths_changed.is_set()

    @pytest.mark.asyncio
    async def test__reload_keeps_watch_list__no_restart(self, site_dir: Path, test_config: Config) -> None:
        """Keep the running watch when the paths are unchanged."""
        watcher = ConfigWatcher(SnapshotHolder(test_config))

        await watcher.handle_changes({(Change.modified, str(site_dir / "locales" / "en" / "index.json"))})

        assert not watcher._paths_changed.is_set()

    @pytest.mark.asyncio
    async def test__nothing_to_watch__start_is_noop(self, tmp_path: Path) -> None:
        """Don't start a watch task without existing paths."""
        watcher = ConfigWatcher(SnapshotHolder(Config.default(tmp_path)))

        await watcher.start()

        assert watcher._watch_task is None
        await watcher.stop()

    @pytest.mark.asyncio
    async def test__start_stop__cancels_task(self, test_config: Config) -> None:
        """Stop cancels the running watch task."""
        watcher = ConfigWatcher(SnapshotHolder(test_config))

        await watcher.start()
        assert watcher._watch_task is not None
        await watcher.stop()

        assert watcher._watch_task is None


class TestCollectWatchPaths:
    """Tests for collect_watch_paths()."""

    def test__config_file__included(self, tmp_path: Path) -> None:
        """Watch the configuration file, locales and extra paths."""
        paths = collect_watch_paths(
            tmp_path / "sitestage.toml",
            tmp_path / "locales",
            [tmp_path / "theme"],
        )

        assert paths == [tmp_path / "sitestage.toml", tmp_path / "locales", tmp_path / "theme"]

    def test__no_config_file__locales_only(self, tmp_path: Path) -> None:
        """Watch only the locales directory without a configuration file."""
        assert collect_watch_paths(None, tmp_path / "locales") == [tmp_path / "locales"]

    def test__from_config__uses_configured_dirs(self, tmp_path: Path) -> None:
        """Derive the paths from a configuration."""
        config = replace(
            Config.default(tmp_path),
            dirs=replace(DirsConfig.relative_to(tmp_path), locales_dir=tmp_path / "i18n"),
            config_path=tmp_path / "sitestage.toml",
        )

        assert watch_paths_for(config) == [tmp_path / "sitestage.toml", tmp_path / "i18n"]
