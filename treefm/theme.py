"""Theme definitions and lookup helpers for treefm."""

from dataclasses import dataclass
import curses
from typing import Optional

from .constants import (
    C_CURSOR,
    C_CURSOR_SELECTED,
    C_DIALOG,
    C_DIALOG_TITLE,
    C_DIRECTORY,
    C_ERROR,
    C_INPUT,
    C_INPUT_SELECTION,
    C_SELECTED,
    C_STATUS,
    C_TREE,
)

# Test doubles may expose only a subset of color constants.
for _name, _fallback in {
    "COLOR_BLACK": 0,
    "COLOR_RED": 1,
    "COLOR_BLUE": 4,
    "COLOR_CYAN": 6,
    "COLOR_GREEN": 2,
    "COLOR_WHITE": 7,
    "COLOR_YELLOW": 3,
}.items():
    if not hasattr(curses, _name):
        setattr(curses, _name, _fallback)

DEFAULT_THEME = "classic"

# -1 is the terminal's default color (curses.use_default_colors).
DEFAULT_COLOR = -1

ROLE_TO_PAIR_ID = {
    "tree": C_TREE,
    "directory": C_DIRECTORY,
    "cursor": C_CURSOR,
    "selected": C_SELECTED,
    "cursor_selected": C_CURSOR_SELECTED,
    "status": C_STATUS,
    "dialog": C_DIALOG,
    "dialog_title": C_DIALOG_TITLE,
    "input": C_INPUT,
    "input_selection": C_INPUT_SELECTION,
    "error": C_ERROR,
}


def _mk_pairs(fg_bg):
    return {
        "tree": fg_bg[0],
        "directory": fg_bg[1],
        "cursor": fg_bg[2],
        "selected": fg_bg[3],
        "cursor_selected": fg_bg[4],
        "status": fg_bg[5],
        "dialog": fg_bg[6],
        "dialog_title": fg_bg[7],
        "input": fg_bg[8],
        "input_selection": fg_bg[2],
        "error": fg_bg[9],
    }


@dataclass(frozen=True)
class Theme:
    """Semantic theme definition."""

    key: str
    label: str
    pairs: dict[str, tuple[int, int]]


THEMES = {
    "classic": Theme(
        key="classic",
        label="Classic",
        pairs=_mk_pairs(
            (
                (DEFAULT_COLOR, DEFAULT_COLOR),
                (curses.COLOR_BLUE, DEFAULT_COLOR),
                (curses.COLOR_BLACK, curses.COLOR_WHITE),
                (curses.COLOR_BLACK, curses.COLOR_YELLOW),
                (curses.COLOR_WHITE, curses.COLOR_BLUE),
                (curses.COLOR_BLACK, curses.COLOR_CYAN),
                (curses.COLOR_BLACK, curses.COLOR_WHITE),
                (curses.COLOR_WHITE, curses.COLOR_BLUE),
                (curses.COLOR_WHITE, curses.COLOR_BLACK),
                (curses.COLOR_RED, DEFAULT_COLOR),
            )
        ),
    ),
    "dos_cga": Theme(
        key="dos_cga",
        label="DOS / CGA",
        pairs=_mk_pairs(
            (
                (curses.COLOR_WHITE, curses.COLOR_BLUE),
                (curses.COLOR_YELLOW, curses.COLOR_BLUE),
                (curses.COLOR_BLACK, curses.COLOR_CYAN),
                (curses.COLOR_BLACK, curses.COLOR_YELLOW),
                (curses.COLOR_BLUE, curses.COLOR_YELLOW),
                (curses.COLOR_BLACK, curses.COLOR_CYAN),
                (curses.COLOR_YELLOW, curses.COLOR_BLUE),
                (curses.COLOR_BLUE, curses.COLOR_YELLOW),
                (curses.COLOR_BLACK, curses.COLOR_WHITE),
                (curses.COLOR_RED, curses.COLOR_BLUE),
            )
        ),
    ),
    "hacker": Theme(
        key="hacker",
        label="Hacker",
        pairs=_mk_pairs(
            (
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_YELLOW, curses.COLOR_BLACK),
                (curses.COLOR_BLACK, curses.COLOR_YELLOW),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_RED, curses.COLOR_BLACK),
            )
        ),
    ),
}


def get_theme(theme_key: Optional[str]) -> Theme:
    """Resolve theme by key with fallback to default."""
    if not theme_key:
        return THEMES[DEFAULT_THEME]
    return THEMES.get(theme_key, THEMES[DEFAULT_THEME])
