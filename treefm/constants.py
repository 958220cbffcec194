"""Constants for treefm."""

APP_NAME = "treefm"
APP_VERSION = "0.3.0"

# Tree glyphs (Unicode).
GLYPH_EXPANDED = "\u25bc"
GLYPH_COLLAPSED = "\u25b6"
GLYPH_FOLDER = "\U0001f4c1"
GLYPH_FILE = "\U0001f4c4"
GLYPH_SELECTED = "\u25cf"

# ASCII fallbacks for terminals without Unicode.
GLYPH_EXPANDED_ASCII = "v"
GLYPH_COLLAPSED_ASCII = ">"
GLYPH_FOLDER_ASCII = "[D]"
GLYPH_FILE_ASCII = "   "
GLYPH_SELECTED_ASCII = "*"

# Single-line box characters for modal panels.
SB_TL = "\u250c"
SB_TR = "\u2510"
SB_BL = "\u2514"
SB_BR = "\u2518"
SB_H = "\u2500"
SB_V = "\u2502"

SB_ASCII = ("+", "+", "+", "+", "-", "|")

INDENT_WIDTH = 2

# Color pair ids.
C_TREE = 1
C_DIRECTORY = 2
C_CURSOR = 3
C_SELECTED = 4
C_CURSOR_SELECTED = 5
C_STATUS = 6
C_DIALOG = 7
C_DIALOG_TITLE = 8
C_INPUT = 9
C_INPUT_SELECTION = 10
C_ERROR = 11

# Layout.
STATUS_BAR_HEIGHT = 1
DIALOG_MIN_WIDTH = 40
DIALOG_MAX_WIDTH = 72
INPUT_TIMEOUT_MS = 500

HELP_LINES = (
    ("Up/Down", "Move cursor (Shift extends selection)"),
    ("PgUp/PgDn/Home/End", "Jump (Shift extends selection)"),
    ("Enter", "Open directory or file"),
    ("Right / Left", "Enter directory / go to parent"),
    ("Space / Ctrl+Space / Ins", "Toggle selection"),
    ("Ctrl+A", "Select all"),
    ("Esc", "Clear selection"),
    ("Ctrl+C / Ctrl+X", "Copy / cut selection"),
    ("Ctrl+V", "Paste into current directory"),
    ("Ctrl+N", "New file or directory"),
    ("Ctrl+R / F2", "Rename"),
    ("Del / Ctrl+D", "Delete (move to trash)"),
    ("Ctrl+Z", "Undo last operation"),
    (".", "Show/hide hidden entries"),
    ("s", "Cycle sort (name / modified)"),
    ("F5 / Ctrl+L", "Reload directory"),
    ("? / F1", "This help"),
    ("Ctrl+Q", "Quit"),
)
