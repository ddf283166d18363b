"""Configuration management for Sitestage.

Supports TOML configuration format with auto-discovery. Every section is a
frozen dataclass so a loaded Config can be shared as an immutable snapshot.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "sitestage.toml"

DEFAULT_PAGE_EXTENSIONS = (".md", ".jinja", ".html")
DEFAULT_MARKDOWN_EXTENSIONS = ("fenced_code", "tables", "toc")


def _default_site_data() -> dict[str, Any]:
    return {
        "title": "Sitestage",
        "description": "Static and live site server built for internationalization",
    }


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 4000


@dataclass(frozen=True)
class DirsConfig:
    """Site directory layout."""

    pages_dir: Path = field(default_factory=lambda: Path("pages"))
    public_dir: Path = field(default_factory=lambda: Path("public"))
    content_dir: Path = field(default_factory=lambda: Path("content"))
    locales_dir: Path = field(default_factory=lambda: Path("locales"))
    layouts_dir: Path = field(default_factory=lambda: Path("theme/layouts"))

    @classmethod
    def relative_to(cls, base_dir: Path) -> "DirsConfig":
        """Create the default layout rooted at base_dir."""
        return cls(
            pages_dir=base_dir / "pages",
            public_dir=base_dir / "public",
            content_dir=base_dir / "content",
            locales_dir=base_dir / "locales",
            layouts_dir=base_dir / "theme" / "layouts",
        )


@dataclass(frozen=True)
class PagesConfig:
    """Page source configuration."""

    extensions: tuple[str, ...] = DEFAULT_PAGE_EXTENSIONS


@dataclass(frozen=True)
class I18nConfig:
    """Internationalization configuration."""

    default_locale: str = "en"
    prefix: str = "{"
    postfix: str = "}"


@dataclass(frozen=True)
class CacheConfig:
    """Render cache configuration."""

    enabled: bool = False


@dataclass(frozen=True)
class SiteConfig:
    """Data passed to page templates."""

    data: dict[str, Any] = field(default_factory=_default_site_data)
    root: str = ""


@dataclass(frozen=True)
class MarkdownConfig:
    """Markdown rendering configuration."""

    extensions: tuple[str, ...] = DEFAULT_MARKDOWN_EXTENSIONS


@dataclass(frozen=True)
class ReloadConfig:
    """Configuration reload configuration."""

    enabled: bool = True
    watch_paths: tuple[Path, ...] = ()


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    server: ServerConfig
    dirs: DirsConfig
    pages: PagesConfig
    i18n: I18nConfig
    cache: CacheConfig
    site: SiteConfig
    markdown: MarkdownConfig
    reload: ReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        src_dir: Path | None = None,
    ) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file. Otherwise looks for
        sitestage.toml in src_dir, or, when src_dir is not given, in the
        current directory and its parents.

        Args:
            config_path: Optional explicit path to config file
            src_dir: Optional site source directory

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        if src_dir is not None:
            candidate = src_dir / CONFIG_FILENAME
            if candidate.exists():
                return cls._load_from_file(candidate)
            return cls.default(src_dir)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls.default(Path())

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def default(cls, base_dir: Path) -> "Config":
        """Create config with all defaults.

        Args:
            base_dir: Directory the site directories are relative to

        Returns:
            Config instance with default values
        """
        return cls(
            server=ServerConfig(),
            dirs=DirsConfig.relative_to(base_dir),
            pages=PagesConfig(),
            i18n=I18nConfig(),
            cache=CacheConfig(),
            site=SiteConfig(),
            markdown=MarkdownConfig(),
            reload=ReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            dirs=cls._parse_dirs(data.get("dirs"), config_dir),
            pages=cls._parse_pages(data.get("pages")),
            i18n=cls._parse_i18n(data.get("i18n")),
            cache=cls._parse_cache(data.get("cache")),
            site=cls._parse_site(data.get("site")),
            markdown=cls._parse_markdown(data.get("markdown")),
            reload=cls._parse_reload(data.get("reload"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 4000)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_dirs(cls, data: object, config_dir: Path) -> DirsConfig:
        """Parse dirs configuration section.

        Args:
            data: Raw dirs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DirsConfig instance
        """
        defaults = DirsConfig.relative_to(config_dir)
        if data is None:
            return defaults

        if not isinstance(data, dict):
            raise ValueError("dirs section must be a dictionary")

        resolved: dict[str, Path] = {}
        for key in ("pages", "public", "content", "locales", "layouts"):
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"dirs.{key} must be a string")
            resolved[f"{key}_dir"] = config_dir / value

        return replace(defaults, **resolved)

    @classmethod
    def _parse_pages(cls, data: object) -> PagesConfig:
        """Parse pages configuration section.

        Args:
            data: Raw pages section data

        Returns:
            PagesConfig instance
        """
        if data is None:
            return PagesConfig()

        if not isinstance(data, dict):
            raise ValueError("pages section must be a dictionary")

        extensions_raw = data.get("extensions", list(DEFAULT_PAGE_EXTENSIONS))
        if not isinstance(extensions_raw, list):
            raise ValueError("pages.extensions must be a list")
        extensions: list[str] = []
        for item in extensions_raw:
            if not isinstance(item, str):
                raise ValueError("pages.extensions items must be strings")
            if not item.startswith("."):
                raise ValueError("pages.extensions items must start with '.'")
            extensions.append(item)

        return PagesConfig(extensions=tuple(extensions))

    @classmethod
    def _parse_i18n(cls, data: object) -> I18nConfig:
        """Parse i18n configuration section.

        Args:
            data: Raw i18n section data

        Returns:
            I18nConfig instance
        """
        if data is None:
            return I18nConfig()

        if not isinstance(data, dict):
            raise ValueError("i18n section must be a dictionary")

        default_locale = data.get("default_locale", "en")
        if not isinstance(default_locale, str):
            raise ValueError("i18n.default_locale must be a string")

        prefix = data.get("prefix", "{")
        if not isinstance(prefix, str) or not prefix:
            raise ValueError("i18n.prefix must be a non-empty string")

        postfix = data.get("postfix", "}")
        if not isinstance(postfix, str) or not postfix:
            raise ValueError("i18n.postfix must be a non-empty string")

        return I18nConfig(default_locale=default_locale, prefix=prefix, postfix=postfix)

    @classmethod
    def _parse_cache(cls, data: object) -> CacheConfig:
        """Parse cache configuration section."""
        if data is None:
            return CacheConfig()

        if not isinstance(data, dict):
            raise ValueError("cache section must be a dictionary")

        enabled = data.get("enabled", False)
        if not isinstance(enabled, bool):
            raise ValueError("cache.enabled must be a boolean")

        return CacheConfig(enabled=enabled)

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section.

        Everything except ``root`` is template data, merged over the defaults.

        Args:
            data: Raw site section data

        Returns:
            SiteConfig instance
        """
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        site_data = dict(data)
        root = site_data.pop("root", "")
        if not isinstance(root, str):
            raise ValueError("site.root must be a string")

        return SiteConfig(data={**_default_site_data(), **site_data}, root=root)

    @classmethod
    def _parse_markdown(cls, data: object) -> MarkdownConfig:
        """Parse markdown configuration section."""
        if data is None:
            return MarkdownConfig()

        if not isinstance(data, dict):
            raise ValueError("markdown section must be a dictionary")

        extensions_raw = data.get("extensions", list(DEFAULT_MARKDOWN_EXTENSIONS))
        if not isinstance(extensions_raw, list):
            raise ValueError("markdown.extensions must be a list")
        for item in extensions_raw:
            if not isinstance(item, str):
                raise ValueError("markdown.extensions items must be strings")

        return MarkdownConfig(extensions=tuple(extensions_raw))

    @classmethod
    def _parse_reload(cls, data: object, config_dir: Path) -> ReloadConfig:
        """Parse reload configuration section.

        Args:
            data: Raw reload section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ReloadConfig instance
        """
        if data is None:
            return ReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("reload.enabled must be a boolean")

        watch_raw = data.get("watch", [])
        if not isinstance(watch_raw, list):
            raise ValueError("reload.watch must be a list")
        watch_paths: list[Path] = []
        for item in watch_raw:
            if not isinstance(item, str):
                raise ValueError("reload.watch items must be strings")
            watch_paths.append(config_dir / item)

        return ReloadConfig(enabled=enabled, watch_paths=tuple(watch_paths))

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        cache_enabled: bool | None = None,
        reload_enabled: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            cache_enabled: Override cache.enabled
            reload_enabled: Override reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        cache = self.cache
        if cache_enabled is not None:
            cache = replace(self.cache, enabled=cache_enabled)

        reload = self.reload
        if reload_enabled is not None:
            reload = replace(self.reload, enabled=reload_enabled)

        return replace(self, server=server, cache=cache, reload=reload)
