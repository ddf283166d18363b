"""Core type definitions.

Resolution and rendering never raise across the pipeline boundary: every
step returns one of the outcome values defined here.
"""

from dataclasses import dataclass
from typing import Literal

Encoding = Literal["utf-8", "binary"]


@dataclass(frozen=True)
class ResourceDescriptor:
    """How a resource with a given extension is delivered."""

    encoding: Encoding
    mime_type: str


@dataclass(frozen=True)
class ResolvedPage:
    """A request URL mapped onto the site's content trees.

    The locale, when the URL carried one, has already been removed from
    ``directory`` and ``base_name``.
    """

    locale: str | None
    directory: tuple[str, ...]
    base_name: str
    extension: str

    @property
    def page_path(self) -> str:
        """Page path relative to a content root, without extension."""
        return "/".join(part for part in (*self.directory, self.base_name) if part)


@dataclass(frozen=True)
class Rendered:
    """Successfully produced bytes."""

    body: bytes
    descriptor: ResourceDescriptor
    from_cache: bool = False


@dataclass(frozen=True)
class NotFound:
    """Unknown URL shape, non-canonical URL, or missing source file."""

    reason: str = ""


@dataclass(frozen=True)
class Unsupported:
    """Extension absent from the resource type table."""

    extension: str


@dataclass(frozen=True)
class InternalError:
    """The page parser or translator failed unexpectedly."""

    message: str | None = None


Outcome = Rendered | NotFound | Unsupported | InternalError
