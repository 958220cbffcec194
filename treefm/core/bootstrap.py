"""Terminal bootstrap helpers for treefm startup and cleanup."""

import curses
import logging
import sys
import termios

LOGGER = logging.getLogger(__name__)


def configure_terminal(stdscr, timeout_ms=500):
    """Apply core curses terminal setup.

    Raw mode delivers Ctrl+C, Ctrl+Z, Ctrl+Q and Ctrl+S as ordinary keys
    instead of signals.
    """
    curses.curs_set(0)
    curses.noecho()
    curses.raw()
    stdscr.keypad(True)
    stdscr.nodelay(False)
    stdscr.timeout(timeout_ms)


def restore_terminal():
    """Leave raw mode before curses tears the screen down."""
    try:
        curses.noraw()
    except curses.error:
        pass


def disable_flow_control(stdin_stream=None):
    """Disable XON/XOFF so Ctrl+Q/Ctrl+S reach the app."""
    stream = sys.stdin if stdin_stream is None else stdin_stream
    try:
        fd = stream.fileno()
        attrs = termios.tcgetattr(fd)
    except (AttributeError, ValueError, OSError, termios.error) as exc:
        LOGGER.debug("flow control left unchanged: %s", exc)
        return False
    attrs[0] &= ~(termios.IXON | termios.IXOFF)
    try:
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    except (OSError, termios.error) as exc:
        LOGGER.debug("flow control left unchanged: %s", exc)
        return False
    return True


def enable_mouse_support():
    """Enable curses mouse mask and SGR button-event tracking."""
    curses.mousemask(
        curses.ALL_MOUSE_EVENTS
        | curses.REPORT_MOUSE_POSITION
    )
    curses.mouseinterval(0)
    # 1002: button-event tracking (drag), 1006: SGR coordinates.
    print('\033[?1002h', end='', flush=True)
    print('\033[?1006h', end='', flush=True)


def disable_mouse_support():
    """Restore terminal mouse tracking modes."""
    print('\033[?1002l', end='', flush=True)
    print('\033[?1006l', end='', flush=True)
