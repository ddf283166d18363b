"""aiohttp server for Sitestage.

Application factory and route registration for live serving mode.
"""

import logging

from aiohttp import web

from sitestage.app_keys import config_watcher_key, snapshot_holder_key
from sitestage.config import Config
from sitestage.core.sink import HttpResponseSink
from sitestage.core.snapshot import ConfigLoader, SnapshotHolder
from sitestage.live.reload import ConfigWatcher

logger = logging.getLogger(__name__)


async def handle_request(request: web.Request) -> web.Response:
    """Serve any URL through the current snapshot's pipeline."""
    snapshot = request.app[snapshot_holder_key].current
    sink = HttpResponseSink()
    await snapshot.pipeline.handle(request.path, sink)
    return sink.response


def create_app(config: Config, *, loader: ConfigLoader | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        loader: Produces a fresh Config when watched files change

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    holder = SnapshotHolder(config, loader)
    app[snapshot_holder_key] = holder

    if config.reload.enabled:
        app[config_watcher_key] = ConfigWatcher(holder)
        app.on_startup.append(_start_config_watcher)
        app.on_cleanup.append(_stop_config_watcher)

    app.on_cleanup.append(_drain_cache_writes)

    app.router.add_get("/{path:.*}", handle_request)

    return app


async def _start_config_watcher(app: web.Application) -> None:
    """Start configuration watching on application startup."""
    await app[config_watcher_key].start()


async def _stop_config_watcher(app: web.Application) -> None:
    """Stop configuration watching on application cleanup."""
    await app[config_watcher_key].stop()


async def _drain_cache_writes(app: web.Application) -> None:
    """Let pending cache writes finish before shutdown."""
    await app[snapshot_holder_key].current.pipeline.drain()


def run_server(config: Config, *, loader: ConfigLoader | None = None) -> None:
    """Run the server.

    Args:
        config: Application configuration
        loader: Produces a fresh Config when watched files change

    Raises:
        OSError: If the server cannot bind to the configured address
    """
    app = create_app(config, loader=loader)
    logger.info(f"Serving on http://{config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
