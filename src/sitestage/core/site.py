"""Site address space.

Enumerates every URL a site answers: each public asset, and each page in
each locale. Static generation replays these URLs through the live
pipeline.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from sitestage.config import Config


@dataclass(frozen=True)
class SiteManifest:
    """Files and locales making up a site.

    Paths are POSIX paths relative to their root directory.
    """

    public_asset_paths: frozenset[str]
    page_paths: frozenset[str]
    locales: frozenset[str]

    @classmethod
    def discover(cls, config: Config, locales: Iterable[str]) -> "SiteManifest":
        """Enumerate the site's public and page trees.

        Args:
            config: Site configuration
            locales: Known locales, empty for single-locale sites

        Returns:
            SiteManifest
        """
        page_extensions = set(config.pages.extensions)
        pages = {
            path
            for path in _list_files(config.dirs.pages_dir)
            if PurePosixPath(path).suffix in page_extensions
        }
        return cls(
            public_asset_paths=frozenset(_list_files(config.dirs.public_dir)),
            page_paths=frozenset(pages),
            locales=frozenset(locales),
        )

    def request_urls(self) -> list[str]:
        """Build one request URL per asset and per page per locale.

        Index pages are addressed by their directory; single-locale sites
        get URLs without a locale prefix.

        Returns:
            Sorted, de-duplicated URL paths
        """
        urls = {f"/{path}" for path in self.public_asset_paths}
        prefixes = sorted(self.locales) or [None]
        for page in self.page_paths:
            page_url = _page_url(page)
            for locale in prefixes:
                parts = [part for part in (locale, page_url) if part]
                urls.add("/" + "/".join(parts))
        return sorted(urls)


def _page_url(page: str) -> str:
    """Canonical URL path of a page file, without leading slash."""
    path = PurePosixPath(page)
    directory = "" if str(path.parent) == "." else str(path.parent)
    if path.stem == "index":
        return directory
    return f"{directory}/{path.stem}" if directory else path.stem


def _list_files(root: Path) -> Iterator[str]:
    """Yield non-hidden files below root as relative POSIX paths."""
    if not root.is_dir():
        return
    for file_path in root.rglob("*"):
        relative = file_path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if file_path.is_file():
            yield relative.as_posix()
