"""Directory listing: the ordered entry list the navigation model works over."""
import logging
import os
from dataclasses import dataclass

LOGGER = logging.getLogger(__name__)

SORT_KEYS = ('name', 'modified')


@dataclass(frozen=True)
class Entry:
    """One child of the open directory, read fresh on every load."""

    path: str
    name: str
    is_dir: bool
    modified_time: float
    size: int = 0


def _read_entry(dir_entry):
    try:
        is_dir = dir_entry.is_dir()
        st = dir_entry.stat(follow_symlinks=False)
    except OSError:
        LOGGER.debug('skipping unreadable entry %s', dir_entry.path)
        return None
    return Entry(
        path=dir_entry.path,
        name=dir_entry.name,
        is_dir=is_dir,
        modified_time=st.st_mtime,
        size=0 if is_dir else st.st_size,
    )


def list_directory(path, show_hidden=False, sort_key='name'):
    """Return the entries of ``path``, directories first.

    Within each group entries sort by case-insensitive name, or newest first
    when ``sort_key`` is ``'modified'``. Raises OSError when ``path`` cannot
    be read.
    """
    entries = []
    with os.scandir(path) as it:
        for dir_entry in it:
            if not show_hidden and dir_entry.name.startswith('.'):
                continue
            entry = _read_entry(dir_entry)
            if entry is not None:
                entries.append(entry)

    if sort_key == 'modified':
        entries.sort(key=lambda e: (not e.is_dir, -e.modified_time, e.name.lower()))
    else:
        entries.sort(key=lambda e: (not e.is_dir, e.name.lower(), e.name))
    return entries


class DirectoryLister:
    """Callable listing policy (hidden entries, sort key) for the navigator."""

    def __init__(self, show_hidden=False, sort_key='name'):
        self.show_hidden = bool(show_hidden)
        self.sort_key = sort_key if sort_key in SORT_KEYS else 'name'

    def __call__(self, path):
        return list_directory(path, self.show_hidden, self.sort_key)

    def toggle_hidden(self):
        self.show_hidden = not self.show_hidden
        return self.show_hidden

    def cycle_sort(self):
        index = SORT_KEYS.index(self.sort_key)
        self.sort_key = SORT_KEYS[(index + 1) % len(SORT_KEYS)]
        return self.sort_key
