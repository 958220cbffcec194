"""
Typed contracts between input decoding, the controller and the app loop.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ActionType(str, Enum):
    """Results the controller hands back to the app loop."""

    OPEN_FILE = "open_file"
    QUIT = "quit"


@dataclass(frozen=True)
class ActionResult:
    """Action message emitted by the controller."""

    type: ActionType
    payload: Any = None


class Command(str, Enum):
    """Logical commands decoded from keys; each mode interprets them."""

    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TOGGLE_SELECT = "toggle_select"
    SELECT_ALL = "select_all"
    COPY = "copy"
    CUT = "cut"
    PASTE = "paste"
    NEW = "new"
    RENAME = "rename"
    UNDO = "undo"
    REFRESH = "refresh"
    HELP = "help"
    QUIT = "quit"


@dataclass(frozen=True)
class Key:
    """A decoded key press: a command, the typed character, the Shift state."""

    command: Command
    char: Optional[str] = None
    shift: bool = False


class MouseKind(str, Enum):
    PRESS = "press"
    DRAG = "drag"
    RELEASE = "release"
