"""File-based render cache.

The content directory doubles as the static site output:
    content/
    ├── css/
    │   └── main.css                 # Asset copy, native extension
    ├── en/
    │   ├── index.html               # Rendered page, always .html
    │   └── guide/
    │       └── intro.html
    └── fr/
        └── ...

File existence is the only cache signal. There is no metadata and no
expiry; an entry goes away only when its file is deleted.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path

from sitestage.core.fs import is_file
from sitestage.core.types import ResolvedPage

logger = logging.getLogger(__name__)


class ContentCache:
    """Render cache rooted at the content directory.

    Writes are atomic (temporary file in the target directory, then rename)
    so concurrent writers of the same entry never leave a partial file;
    the last writer wins.
    """

    def __init__(self, content_dir: Path) -> None:
        """Initialize cache with directory path.

        Args:
            content_dir: Root directory for cached files (e.g., content/)
        """
        self._content_dir = content_dir

    @property
    def content_dir(self) -> Path:
        """Root cache directory."""
        return self._content_dir

    def asset_path(self, page: ResolvedPage) -> Path:
        """Cache path keeping the resource's native extension."""
        return self._content_dir / f"{page.page_path}{page.extension}"

    def page_path(self, page: ResolvedPage) -> Path:
        """Cache path of a rendered page, keyed by locale."""
        return self._content_dir / (page.locale or "") / f"{page.page_path}.html"

    def lookup(self, page: ResolvedPage) -> Path | None:
        """Find a cached artifact for a resolved page.

        Args:
            page: Resolved page identity

        Returns:
            Path to the cached file, or None on a cache miss
        """
        for candidate in (self.asset_path(page), self.page_path(page)):
            if is_file(candidate):
                return candidate
        return None

    def write(self, path: Path, data: bytes) -> None:
        """Atomically write an entry.

        Args:
            path: Target path inside the content directory
            data: Bytes to store

        Raises:
            OSError: If the entry cannot be written
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        """Remove all cached entries."""
        if self._content_dir.exists():
            shutil.rmtree(self._content_dir)
            logger.info(f"Cleared {self._content_dir}")
