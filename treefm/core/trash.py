"""Trash directory used as the soft-delete target."""
import logging
import os
import time

from .paths import final_component, unique_path

LOGGER = logging.getLogger(__name__)


def default_trash_dir():
    """Return the per-user trash directory (~/.local/share/treefm/trash)."""
    home = os.path.expanduser('~')
    if not home or home == '~':
        return os.path.join('/tmp', 'treefm_trash')
    return os.path.join(home, '.local', 'share', 'treefm', 'trash')


class TrashStore:
    """Names and holds soft-deleted items as ``{unix_timestamp}_{name}``."""

    def __init__(self, root=None, clock=time.time):
        self.root = os.path.abspath(root or default_trash_dir())
        self._clock = clock

    def ensure(self):
        """Create the trash directory if it is missing."""
        os.makedirs(self.root, exist_ok=True)
        LOGGER.debug('trash root ready: %s', self.root)
        return self.root

    def path_for(self, original_path):
        """Return a free trash path for ``original_path``."""
        name = final_component(original_path)
        stamp = int(self._clock())
        return unique_path(os.path.join(self.root, f'{stamp}_{name}'))
