"""
Utility functions for treefm.
"""
import curses
import locale
import logging
import os
import subprocess
import sys
import time

from .theme import ROLE_TO_PAIR_ID, get_theme

LOGGER = logging.getLogger(__name__)

SIZE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def init_colors(theme_key_or_obj=None):
    """Initialize curses color pairs from the active semantic theme."""
    curses.start_color()
    curses.use_default_colors()

    if theme_key_or_obj is None or isinstance(theme_key_or_obj, str):
        theme = get_theme(theme_key_or_obj)
    else:
        theme = theme_key_or_obj

    for role, pair_id in ROLE_TO_PAIR_ID.items():
        fg, bg = theme.pairs[role]
        curses.init_pair(pair_id, fg, bg)


def theme_attr(role):
    """Return curses color attribute for a semantic role."""
    return curses.color_pair(ROLE_TO_PAIR_ID[role])


def safe_addstr(win, y, x, text, attr=0):
    """Write string safely, clipping to window bounds."""
    h, w = win.getmaxyx()
    if y < 0 or y >= h or x >= w:
        return
    max_len = w - x - 1
    if max_len <= 0:
        return
    try:
        win.addnstr(y, x, text, max_len, attr)
    except curses.error:
        pass


def normalize_key_code(key):
    """Normalize keys from get_wch()/getch() into comparable integer codes."""
    if isinstance(key, int):
        return key
    if not isinstance(key, str) or not key or len(key) != 1:
        return None
    if key in ('\n', '\r'):
        return 10
    if key == '\x1b':
        return 27
    if key == '\t':
        return 9
    if key == '\x7f':
        return 127
    if key == '\b':
        return 8
    return ord(key)


def check_unicode_support():
    """Check if terminal supports Unicode."""
    try:
        '▼│'.encode(locale.getpreferredencoding())
        return True
    except (UnicodeEncodeError, LookupError):
        return False


def format_size(num_bytes):
    """Human-readable byte count: ``512 B``, ``1.5 KB``, ``2.0 GB``."""
    size = float(max(0, num_bytes))
    for unit in SIZE_UNITS:
        if size < 1024 or unit == SIZE_UNITS[-1]:
            if unit == 'B':
                return f'{int(size)} B'
            return f'{size:.1f} {unit}'
        size /= 1024
    return f'{size:.1f} {SIZE_UNITS[-1]}'


def format_date(timestamp):
    """Local modification time as ``YYYY-MM-DD HH:MM``."""
    try:
        return time.strftime('%Y-%m-%d %H:%M', time.localtime(timestamp))
    except (OverflowError, OSError, ValueError):
        return '?'


def system_opener():
    """Command that opens a file with the desktop's default application."""
    if sys.platform == 'darwin':
        return 'open'
    return 'xdg-open'


def open_with_system(path, popen=subprocess.Popen):
    """Launch the desktop opener for ``path`` without waiting for it.

    Raises OSError when the opener cannot be started.
    """
    cmd = [system_opener(), os.fspath(path)]
    LOGGER.debug('open: %s', cmd)
    popen(
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
