"""Tests for the file-based render cache."""

from pathlib import Path

import pytest
from sitestage.core.cache import ContentCache
from sitestage.core.types import ResolvedPage

INTRO = ResolvedPage(locale="fr", directory=("guide",), base_name="intro", extension=".md")
LOGO = ResolvedPage(locale="en", directory=("img",), base_name="logo", extension=".png")


class TestContentCachePaths:
    """Tests for cache path derivation."""

    def test__page_path__keyed_by_locale(self, tmp_path: Path) -> None:
        """Store rendered pages as .html under the locale."""
        cache = ContentCache(tmp_path / "content")

        assert cache.page_path(INTRO) == tmp_path / "content" / "fr" / "guide" / "intro.html"

    def test__page_path_without_locale__at_root(self, tmp_path: Path) -> None:
        """Store single-locale pages directly under the content root."""
        cache = ContentCache(tmp_path / "content")
        page = ResolvedPage(locale=None, directory=(), base_name="index", extension=".md")

        assert cache.page_path(page) == tmp_path / "content" / "index.html"

    def test__asset_path__keeps_extension(self, tmp_path: Path) -> None:
        """Store assets with their native extension, without locale."""
        cache = ContentCache(tmp_path / "content")

        assert cache.asset_path(LOGO) == tmp_path / "content" / "img" / "logo.png"

    def test__content_dir_property(self, tmp_path: Path) -> None:
        """Return the content directory path."""
        cache = ContentCache(tmp_path / "content")

        assert cache.content_dir == tmp_path / "content"


class TestContentCacheLookup:
    """Tests for ContentCache.lookup()."""

    def test__missing_entry__returns_none(self, tmp_path: Path) -> None:
        """Return None on a cache miss."""
        cache = ContentCache(tmp_path / "content")

        assert cache.lookup(INTRO) is None

    def test__rendered_page__found(self, tmp_path: Path) -> None:
        """Find a rendered page by locale and path."""
        cache = ContentCache(tmp_path / "content")
        cache.write(cache.page_path(INTRO), b"<p>Intro</p>")

        assert cache.lookup(INTRO) == cache.page_path(INTRO)

    def test__asset__found(self, tmp_path: Path) -> None:
        """Find an asset copy by its native extension."""
        cache = ContentCache(tmp_path / "content")
        cache.write(cache.asset_path(LOGO), b"png")

        assert cache.lookup(LOGO) == cache.asset_path(LOGO)

    def test__both_entries__native_extension_first(self, tmp_path: Path) -> None:
        """Check the native-extension path before the rendered page path."""
        cache = ContentCache(tmp_path / "content")
        page = ResolvedPage(locale="en", directory=(), base_name="about", extension=".html")
        cache.write(cache.asset_path(page), b"asset")
        cache.write(cache.page_path(page), b"page")

        assert cache.lookup(page) == tmp_path / "content" / "about.html"

    def test__overlong_name__miss(self, tmp_path: Path) -> None:
        """Report names beyond the file name limit as a cache miss."""
        cache = ContentCache(tmp_path / "content")
        page = ResolvedPage(locale="fr", directory=(), base_name="a" * 300, extension=".md")

        assert cache.lookup(page) is None

    def test__other_locale__not_found(self, tmp_path: Path) -> None:
        """Do not serve one locale's page for another locale."""
        cache = ContentCache(tmp_path / "content")
        cache.write(cache.page_path(INTRO), b"<p>Intro</p>")
        english = ResolvedPage(locale="en", directory=("guide",), base_name="intro", extension=".md")

        assert cache.lookup(english) is None


class TestContentCacheWrite:
    """Tests for ContentCache.write()."""

    def test__creates_directories(self, tmp_path: Path) -> None:
        """Create parent directories if they don't exist."""
        cache = ContentCache(tmp_path / "content")
        path = tmp_path / "content" / "fr" / "a" / "b" / "page.html"

        cache.write(path, b"<p>Deep</p>")

        assert path.read_bytes() == b"<p>Deep</p>"

    def test__overwrites_entry(self, tmp_path: Path) -> None:
        """Replace an existing entry; the last write wins."""
        cache = ContentCache(tmp_path / "content")
        path = tmp_path / "content" / "page.html"

        cache.write(path, b"first")
        cache.write(path, b"second")

        assert path.read_bytes() == b"second"

    def test__leaves_no_temporary_files(self, tmp_path: Path) -> None:
        """Remove the temporary file after renaming it into place."""
        cache = ContentCache(tmp_path / "content")

        cache.write(tmp_path / "content" / "page.html", b"data")

        assert [p.name for p in (tmp_path / "content").iterdir()] == ["page.html"]

    def test__unwritable_location__raises_os_error(self, tmp_path: Path) -> None:
        """Raise OSError when the parent path is a file."""
        blocker = tmp_path / "content"
        blocker.write_text("not a directory")
        cache = ContentCache(blocker)

        with pytest.raises(OSError):
            cache.write(blocker / "page.html", b"data")


class TestContentCacheClear:
    """Tests for ContentCache.clear()."""

    def test__removes_all_entries(self, tmp_path: Path) -> None:
        """Remove the whole content directory."""
        cache = ContentCache(tmp_path / "content")
        cache.write(cache.page_path(INTRO), b"<p>Intro</p>")
        cache.write(cache.asset_path(LOGO), b"png")

        cache.clear()

        assert not (tmp_path / "content").exists()

    def test__handles_empty_cache(self, tmp_path: Path) -> None:
        """Do nothing when cache is already empty."""
        cache = ContentCache(tmp_path / "content")

        cache.clear()  # Should not raise
