"""Application keys for type-safe app configuration access."""

from aiohttp import web

from sitestage.core.snapshot import SnapshotHolder
from sitestage.live.reload import ConfigWatcher

snapshot_holder_key = web.AppKey("snapshot_holder", SnapshotHolder)
config_watcher_key = web.AppKey("config_watcher", ConfigWatcher)
