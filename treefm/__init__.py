"""treefm: a terminal file manager with a directory tree, trash and undo."""

from .constants import APP_VERSION

__version__ = APP_VERSION
