"""Bundled default layouts.

Locates layout templates shipped inside the sitestage package. Site layouts
take precedence; these are the fallback when a site defines none.
"""

from importlib.resources import files
from pathlib import Path


def get_default_layouts_dir() -> Path:
    """Return path to bundled default layouts.

    Returns:
        Path to the directory containing the bundled layout templates.

    Raises:
        FileNotFoundError: If the layouts are not bundled.
    """
    layouts = files("sitestage").joinpath("layouts")
    if not layouts.is_dir():
        msg = "Bundled layouts not found. Reinstall sitestage."
        raise FileNotFoundError(msg)
    return Path(str(layouts))
