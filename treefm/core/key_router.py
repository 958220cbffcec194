"""Keyboard and mouse decoding: raw curses input to logical commands."""

import curses

from ..utils import normalize_key_code
from .actions import Command, Key, MouseKind

# Control characters delivered in raw mode.
CONTROL_COMMANDS = {
    0: Command.TOGGLE_SELECT,   # Ctrl+Space
    1: Command.SELECT_ALL,      # Ctrl+A
    3: Command.COPY,            # Ctrl+C
    4: Command.DELETE,          # Ctrl+D
    12: Command.REFRESH,        # Ctrl+L
    14: Command.NEW,            # Ctrl+N
    17: Command.QUIT,           # Ctrl+Q
    18: Command.RENAME,         # Ctrl+R
    22: Command.PASTE,          # Ctrl+V
    24: Command.CUT,            # Ctrl+X
    26: Command.UNDO,           # Ctrl+Z
    10: Command.ENTER,
    13: Command.ENTER,
    27: Command.ESCAPE,
    8: Command.BACKSPACE,
    127: Command.BACKSPACE,
}

_PLAIN_KEYS = (
    ("KEY_UP", Command.UP),
    ("KEY_DOWN", Command.DOWN),
    ("KEY_LEFT", Command.LEFT),
    ("KEY_RIGHT", Command.RIGHT),
    ("KEY_HOME", Command.HOME),
    ("KEY_END", Command.END),
    ("KEY_PPAGE", Command.PAGE_UP),
    ("KEY_NPAGE", Command.PAGE_DOWN),
    ("KEY_ENTER", Command.ENTER),
    ("KEY_BACKSPACE", Command.BACKSPACE),
    ("KEY_DC", Command.DELETE),
    ("KEY_IC", Command.TOGGLE_SELECT),
    ("KEY_F1", Command.HELP),
    ("KEY_F2", Command.RENAME),
    ("KEY_F5", Command.REFRESH),
)

_SHIFTED_KEYS = (
    ("KEY_SR", Command.UP),
    ("KEY_SF", Command.DOWN),
    ("KEY_SLEFT", Command.LEFT),
    ("KEY_SRIGHT", Command.RIGHT),
    ("KEY_SHOME", Command.HOME),
    ("KEY_SEND", Command.END),
    ("KEY_SPREVIOUS", Command.PAGE_UP),
    ("KEY_SNEXT", Command.PAGE_DOWN),
)

# ncurses extended key names for Shift+arrow on xterm-like terminals.
_SHIFTED_KEYNAMES = {
    b"kUP2": Command.UP,
    b"kDN2": Command.DOWN,
    b"kLFT2": Command.LEFT,
    b"kRIT2": Command.RIGHT,
    b"kHOM2": Command.HOME,
    b"kEND2": Command.END,
}


def _keypad_table():
    """Map of curses keypad codes to (command, shift) for this curses build."""
    table = {}
    for name, command in _PLAIN_KEYS:
        code = getattr(curses, name, None)
        if code is not None:
            table[code] = (command, False)
    for name, command in _SHIFTED_KEYS:
        code = getattr(curses, name, None)
        if code is not None:
            table[code] = (command, True)
    return table


def _extended_keyname(code):
    keyname = getattr(curses, "keyname", None)
    if not callable(keyname):
        return None
    try:
        return keyname(code)
    except (curses.error, ValueError):
        return None


def decode_key(key):
    """Translate a get_wch() value into a Key, or None when it means nothing."""
    if isinstance(key, str) and len(key) == 1 and key.isprintable():
        return Key(Command.CHAR, key)

    code = normalize_key_code(key)
    if code is None:
        return None
    if not isinstance(key, int) and code in CONTROL_COMMANDS:
        return Key(CONTROL_COMMANDS[code])

    found = _keypad_table().get(code)
    if found is not None:
        command, shift = found
        return Key(command, shift=shift)

    if code in CONTROL_COMMANDS:
        return Key(CONTROL_COMMANDS[code])
    if 32 <= code <= 126:
        return Key(Command.CHAR, chr(code))

    command = _SHIFTED_KEYNAMES.get(_extended_keyname(code))
    if command is not None:
        return Key(command, shift=True)
    return None


class MouseDecoder:
    """Turns curses button-state masks into press/drag/release events.

    Terminals in button-event tracking mode report motion with the button
    still down as another PRESSED (or REPORT_MOUSE_POSITION) event, so a press
    while the button is already down is a drag.
    """

    def __init__(self):
        self.button_down = False

    def decode(self, bstate):
        """Return a list of MouseKind events for one ``bstate`` mask."""
        pressed = getattr(curses, "BUTTON1_PRESSED", 0)
        released = getattr(curses, "BUTTON1_RELEASED", 0)
        clicked = getattr(curses, "BUTTON1_CLICKED", 0) | getattr(curses, "BUTTON1_DOUBLE_CLICKED", 0)
        motion = getattr(curses, "REPORT_MOUSE_POSITION", 0)

        if bstate & released:
            self.button_down = False
            return [MouseKind.RELEASE]
        if bstate & clicked:
            self.button_down = False
            return [MouseKind.PRESS, MouseKind.RELEASE]
        if bstate & pressed:
            if self.button_down:
                return [MouseKind.DRAG]
            self.button_down = True
            return [MouseKind.PRESS]
        if bstate & motion and self.button_down:
            return [MouseKind.DRAG]
        return []

    @staticmethod
    def ctrl_held(bstate):
        return bool(bstate & getattr(curses, "BUTTON_CTRL", 0))
