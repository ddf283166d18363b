"""Page parsing.

Turns a page source (markdown, Jinja2 template or plain HTML, with optional
YAML front matter) into a full HTML document wrapped in a layout.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import frontmatter
import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitestage.assets import get_default_layouts_dir

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "default"


class PageParser:
    """Renders page sources to HTML.

    Layouts are looked up in the site's layouts directory first, then in the
    layouts bundled with sitestage. Parsing runs in a worker thread so the
    event loop keeps serving other requests.
    """

    def __init__(
        self,
        pages_dir: Path,
        layouts_dir: Path,
        *,
        site_data: Mapping[str, Any] | None = None,
        root: str = "",
        markdown_extensions: Sequence[str] = (),
    ) -> None:
        """Initialize parser.

        Args:
            pages_dir: Root directory containing page sources
            layouts_dir: Directory containing site layout templates
            site_data: Data exposed to templates as ``site``
            root: URL prefix the site is served under, exposed as ``root``
            markdown_extensions: Python-Markdown extension names
        """
        self._pages_dir = pages_dir
        self._site_data = dict(site_data or {})
        self._root = root
        self._markdown_extensions = list(markdown_extensions)
        self._env = Environment(
            loader=FileSystemLoader([str(layouts_dir), str(get_default_layouts_dir())]),
            autoescape=select_autoescape(["html"]),
            keep_trailing_newline=True,
        )

    @property
    def pages_dir(self) -> Path:
        """Root directory containing page sources."""
        return self._pages_dir

    async def parse_page(self, page: str, extension: str, locale: str | None) -> str:
        """Render a page to HTML.

        Args:
            page: Page path without extension (e.g., "guide/index")
            extension: Source extension (e.g., ".md")
            locale: Locale the page is rendered for

        Returns:
            Rendered HTML document

        Raises:
            FileNotFoundError: If the page source doesn't exist
        """
        return await asyncio.to_thread(self._parse, page, extension, locale)

    def _parse(self, page: str, extension: str, locale: str | None) -> str:
        source_path = self._pages_dir / f"{page}{extension}"
        if not source_path.is_file():
            raise FileNotFoundError(f"Source file not found: {source_path}")

        post = frontmatter.loads(source_path.read_text(encoding="utf-8"))
        metadata = dict(post.metadata)
        context = {
            "site": self._site_data,
            "page": {**metadata, "path": page},
            "locale": locale,
            "root": self._root,
        }

        content = self._render_body(post.content, extension, context)

        layout = metadata.get("layout", DEFAULT_LAYOUT)
        if layout is False:
            return content

        logger.debug(f"Rendering {source_path} with layout {layout}")
        template = self._env.get_template(f"{layout}.html")
        return template.render(content=content, **context)

    def _render_body(self, body: str, extension: str, context: dict[str, Any]) -> str:
        """Render the page body according to its source type."""
        if extension == ".md":
            return markdown.Markdown(extensions=self._markdown_extensions).convert(body)
        if extension == ".jinja":
            return self._env.from_string(body).render(**context)
        return body
