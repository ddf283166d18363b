"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
from sitestage.config import Config

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01"

LAYOUT = '<html lang="{{ locale }}"><body>{{ content | safe }}</body></html>\n'


def write_file(path: Path, content: str | bytes) -> Path:
    """Write a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a small two-locale site.

    Layout:
        pages/index.md, pages/about.md, pages/guide/index.md, pages/guide/intro.md
        public/css/main.css, public/img/logo.png
        locales/en/index.json, locales/fr/index.json
        theme/layouts/default.html
    """
    root = tmp_path / "site"

    write_file(
        root / "pages" / "index.md",
        "---\ntitle: Home\n---\n{greeting[Greeting on the home page] Hello}\n",
    )
    write_file(root / "pages" / "about.md", "# About\n\nAbout us.\n")
    write_file(root / "pages" / "guide" / "index.md", "Guide index\n")
    write_file(root / "pages" / "guide" / "intro.md", "Intro to {topic[Topic] sitestage}\n")

    write_file(root / "public" / "css" / "main.css", "body { color: red; }\n")
    write_file(root / "public" / "img" / "logo.png", PNG_BYTES)

    write_file(
        root / "locales" / "en" / "index.json",
        json.dumps({"greeting": {"message": "Hello", "description": "Greeting"}}),
    )
    write_file(
        root / "locales" / "fr" / "index.json",
        json.dumps({"greeting": {"message": "Bonjour", "description": "Greeting"}}),
    )

    write_file(root / "theme" / "layouts" / "default.html", LAYOUT)

    return root


@pytest.fixture
def test_config(site_dir: Path) -> Config:
    """Create a test configuration for the sample site.

    Cache and configuration reload are disabled.
    """
    return Config.default(site_dir).with_overrides(reload_enabled=False)
