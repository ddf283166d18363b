"""Resource type table.

Maps a file extension to the encoding and MIME type it is served with.
"""

from types import MappingProxyType

from sitestage.core.types import ResourceDescriptor

RESOURCE_TYPES = MappingProxyType(
    {
        ".html": ResourceDescriptor("utf-8", "text/html"),
        ".jinja": ResourceDescriptor("utf-8", "text/html"),
        ".md": ResourceDescriptor("utf-8", "text/html"),
        ".js": ResourceDescriptor("utf-8", "text/javascript"),
        ".css": ResourceDescriptor("utf-8", "text/css"),
        ".json": ResourceDescriptor("utf-8", "application/json"),
        ".ico": ResourceDescriptor("binary", "image/x-icon"),
        ".png": ResourceDescriptor("binary", "image/png"),
        ".jpg": ResourceDescriptor("binary", "image/jpeg"),
        ".gif": ResourceDescriptor("binary", "image/gif"),
        ".woff": ResourceDescriptor("binary", "font/woff"),
        ".woff2": ResourceDescriptor("binary", "font/woff2"),
        ".ttf": ResourceDescriptor("binary", "font/ttf"),
        ".eot": ResourceDescriptor("binary", "application/vnd.ms-fontobject"),
        ".otf": ResourceDescriptor("binary", "font/otf"),
        ".svg": ResourceDescriptor("binary", "image/svg+xml"),
    }
)


def get_descriptor(extension: str) -> ResourceDescriptor | None:
    """Look up how resources with the given extension are served.

    Args:
        extension: File extension including the leading dot (e.g., ".css")

    Returns:
        ResourceDescriptor, or None for unsupported extensions
    """
    return RESOURCE_TYPES.get(extension)
