"""Translation of rendered pages.

Translation files live at ``locales/{locale}/{page}.json`` and map string
ids to messages. Rendered HTML marks translatable strings with tokens like
``{heading-main[Main page heading] Welcome}``: an id, an optional
description for translators and optional default text.
"""

import json
import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path, PurePosixPath

from sitestage.config import I18nConfig

logger = logging.getLogger(__name__)

Strings = Mapping[str, Mapping[str, Mapping[str, str]]]


def discover_locales(locales_dir: Path) -> tuple[str, ...]:
    """List locale names (sub-directories of the locales directory).

    Args:
        locales_dir: Locales root directory

    Returns:
        Sorted locale names, empty when the directory doesn't exist
    """
    if not locales_dir.is_dir():
        return ()
    return tuple(
        sorted(
            entry.name
            for entry in locales_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )
    )


def load_strings(locales_dir: Path, locales: Iterable[str]) -> dict[str, dict[str, dict[str, str]]]:
    """Load every translation file of the given locales.

    Malformed files are logged and skipped.

    Args:
        locales_dir: Locales root directory
        locales: Locale names to load

    Returns:
        Mapping of locale -> page path -> string id -> message
    """
    strings: dict[str, dict[str, dict[str, str]]] = {}
    for locale in locales:
        locale_dir = locales_dir / locale
        pages: dict[str, dict[str, str]] = {}
        for file_path in sorted(locale_dir.rglob("*.json")):
            page = file_path.relative_to(locale_dir).with_suffix("").as_posix()
            messages = _read_messages(file_path)
            if messages is not None:
                pages[page] = messages
        strings[locale] = pages
    return strings


def _read_messages(file_path: Path) -> dict[str, str] | None:
    """Read a translation file.

    Args:
        file_path: Path to translation JSON file

    Returns:
        Mapping of string id -> message, or None if the file is invalid
    """
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Skipping translation file {file_path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Skipping translation file {file_path}: not a JSON object")
        return None

    messages: dict[str, str] = {}
    for string_id, value in data.items():
        if isinstance(value, str):
            messages[string_id] = value
        elif isinstance(value, dict) and isinstance(value.get("message"), str):
            messages[string_id] = value["message"]
    return messages


class Translator:
    """Replaces translation tokens and extracts locales from URLs.

    Holds all translation strings in memory; a new Translator is built for
    every configuration snapshot.
    """

    def __init__(
        self,
        config: I18nConfig,
        locales: Iterable[str],
        strings: Strings | None = None,
    ) -> None:
        """Initialize translator.

        Args:
            config: i18n configuration (default locale, token delimiters)
            locales: Known locales; empty means single-locale mode
            strings: Mapping of locale -> page path -> string id -> message
        """
        self._default_locale = config.default_locale
        self._locales = frozenset(locales)
        self._strings: Strings = strings or {}
        self._token = re.compile(
            re.escape(config.prefix)
            + r"(?P<id>[A-Za-z_][\w\-.]*)"
            + r"(?:\[(?P<description>[^\]]*)\])?"
            + r"(?:\s(?P<text>.*?))?"
            + re.escape(config.postfix),
            re.DOTALL,
        )

    @classmethod
    def load(cls, config: I18nConfig, locales_dir: Path, locales: Iterable[str]) -> "Translator":
        """Create a translator with strings loaded from the locales directory."""
        locales = tuple(locales)
        return cls(config, locales, load_strings(locales_dir, locales))

    @property
    def locales(self) -> frozenset[str]:
        """Known locales."""
        return self._locales

    @property
    def multi_lang(self) -> bool:
        """Whether the site is served in more than a single implicit locale."""
        return bool(self._locales)

    def get_locale_from_path(self, url_path: str) -> str | None:
        """Get the locale a URL is served in.

        Args:
            url_path: Request path (e.g., "/fr/guide/intro")

        Returns:
            The leading locale segment, the default locale when the URL has
            none, or None in single-locale mode
        """
        if not self._locales:
            return None
        parts = PurePosixPath("/" + url_path.lstrip("/")).parts[1:]
        if parts and parts[0] in self._locales:
            return parts[0]
        return self._default_locale

    def translate(self, html: str, page: str, locale: str | None) -> str:
        """Replace translation tokens in rendered HTML.

        Lookup order: the locale's strings for the page, the default
        locale's strings for the page, the token's default text. Tokens
        without any of those are left untouched.

        Args:
            html: Rendered page HTML
            page: Page path (e.g., "guide/index")
            locale: Locale to translate into

        Returns:
            Translated HTML
        """
        lookups = [
            self._strings.get(candidate, {}).get(page, {})
            for candidate in (locale, self._default_locale)
            if candidate is not None
        ]

        def replace(match: re.Match[str]) -> str:
            string_id = match.group("id")
            for messages in lookups:
                if string_id in messages:
                    return messages[string_id]
            text = match.group("text")
            return text if text is not None else match.group(0)

        return self._token.sub(replace, html)
