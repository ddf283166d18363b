"""Live server support."""

from sitestage.live.reload import ConfigWatcher

__all__ = ["ConfigWatcher"]
