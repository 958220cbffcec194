"""Direct filesystem backend used when the process has the rights it needs."""
import errno
import logging
import os
import shutil

from .paths import copy_tree

LOGGER = logging.getLogger(__name__)


class DirectBackend:
    """Perform mutations with os/shutil calls in this process."""

    elevated = False

    def rename(self, src, dst):
        LOGGER.debug('rename %s -> %s', src, dst)
        try:
            os.rename(src, dst)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
            LOGGER.debug('cross-device rename, falling back to shutil.move')
            shutil.move(src, dst)

    def copy(self, src, dst):
        LOGGER.debug('copy %s -> %s', src, dst)
        if os.path.isdir(src) and not os.path.islink(src):
            copy_tree(src, dst)
        else:
            shutil.copy2(src, dst, follow_symlinks=False)

    def remove(self, path):
        LOGGER.debug('remove %s', path)
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)

    def make_file(self, path):
        LOGGER.debug('create file %s', path)
        with open(path, 'x', encoding='utf-8'):
            pass

    def make_dir(self, path):
        LOGGER.debug('create directory %s', path)
        os.mkdir(path)
