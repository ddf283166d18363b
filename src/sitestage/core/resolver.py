"""Request resolution.

Maps a request URL onto a page or asset identity: strips the locale
segment, rejects non-canonical URLs and searches the page tree for the
extension of extensionless URLs.
"""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path, PurePosixPath

from sitestage.core.fs import is_file
from sitestage.core.types import NotFound, ResolvedPage

logger = logging.getLogger(__name__)

LocaleExtractor = Callable[[str], str | None]


class RequestResolver:
    """Resolves URL paths against the page tree.

    Resolution only reads the file system to check for page existence, so
    for a fixed file-system state it always yields the same result.
    """

    def __init__(
        self,
        pages_dir: Path,
        page_extensions: Sequence[str],
        locale_of: LocaleExtractor,
    ) -> None:
        """Initialize resolver.

        Args:
            pages_dir: Root directory containing page sources
            page_extensions: Page extensions in lookup order (e.g., [".md", ".html"])
            locale_of: Returns the locale of a URL path, or None
        """
        self._pages_dir = pages_dir
        self._page_extensions = tuple(page_extensions)
        self._locale_of = locale_of

    @property
    def pages_dir(self) -> Path:
        """Root directory containing page sources."""
        return self._pages_dir

    def resolve(self, url_path: str) -> ResolvedPage | NotFound:
        """Resolve a URL path.

        Args:
            url_path: Request path (e.g., "/fr/guide/intro")

        Returns:
            ResolvedPage, or NotFound for non-canonical or unknown URLs
        """
        parts = list(PurePosixPath("/" + url_path.lstrip("/")).parts[1:])
        if any(part in (".", "..") for part in parts):
            return NotFound(f"Relative segment in {url_path}")
        if "\x00" in url_path:
            return NotFound(f"NUL byte in {url_path!r}")

        locale = self._locale_of(url_path)
        if locale is not None and parts and parts[0] == locale:
            parts = parts[1:]

        directory: tuple[str, ...] = ()
        base_name = ""
        extension = ""
        if parts:
            leaf = PurePosixPath(parts[-1])
            directory = tuple(parts[:-1])
            base_name = leaf.stem
            extension = leaf.suffix

        # Page URLs are extensionless and directory URLs omit "index"
        if extension in self._page_extensions:
            return NotFound(f"Page extension in {url_path}")
        if not extension and base_name == "index":
            return NotFound(f"Explicit index in {url_path}")

        if not extension:
            page_path = "/".join((*directory, base_name)) if base_name else ""
            found = self.find_extension(page_path) if page_path else None
            if found is None:
                if base_name:
                    directory = (*directory, base_name)
                base_name = "index"
                found = self.find_extension("/".join((*directory, base_name)))
            if found is None:
                return NotFound(f"No page for {url_path}")
            extension = found

        resolved = ResolvedPage(
            locale=locale,
            directory=directory,
            base_name=base_name,
            extension=extension,
        )
        logger.debug(f"Resolved {url_path} to {resolved}")
        return resolved

    def find_extension(self, page_path: str) -> str | None:
        """Find the first configured page extension with an existing source.

        Args:
            page_path: Page path without extension
                       e.g., "documentation/internationalization/index"

        Returns:
            Extension (e.g., ".md"), or None when no source exists
        """
        for extension in self._page_extensions:
            if is_file(self._pages_dir / f"{page_path}{extension}"):
                return extension
        return None
