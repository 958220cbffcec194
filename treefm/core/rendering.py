"""Rendering helpers for treefm."""

import curses
import os

from ..constants import (
    DIALOG_MAX_WIDTH,
    DIALOG_MIN_WIDTH,
    GLYPH_COLLAPSED,
    GLYPH_COLLAPSED_ASCII,
    GLYPH_EXPANDED,
    GLYPH_EXPANDED_ASCII,
    GLYPH_FILE,
    GLYPH_FILE_ASCII,
    GLYPH_FOLDER,
    GLYPH_FOLDER_ASCII,
    GLYPH_SELECTED,
    GLYPH_SELECTED_ASCII,
    HELP_LINES,
    INDENT_WIDTH,
    SB_ASCII,
    SB_BL,
    SB_BR,
    SB_H,
    SB_TL,
    SB_TR,
    SB_V,
    STATUS_BAR_HEIGHT,
)
from ..utils import format_date, format_size, safe_addstr, theme_attr
from .modes import (
    ConfirmDeleteMode,
    CreateNewMode,
    HelpMode,
    PasswordPromptMode,
    RenameItemMode,
    StatusMessageMode,
)

MAX_LISTED_ITEMS = 5


def glyph_set(use_unicode):
    """Return the glyphs for the tree, with ASCII fallbacks."""
    if use_unicode:
        return {
            "expanded": GLYPH_EXPANDED,
            "collapsed": GLYPH_COLLAPSED,
            "folder": GLYPH_FOLDER,
            "file": GLYPH_FILE,
            "selected": GLYPH_SELECTED,
            "box": (SB_TL, SB_TR, SB_BL, SB_BR, SB_H, SB_V),
        }
    return {
        "expanded": GLYPH_EXPANDED_ASCII,
        "collapsed": GLYPH_COLLAPSED_ASCII,
        "folder": GLYPH_FOLDER_ASCII,
        "file": GLYPH_FILE_ASCII,
        "selected": GLYPH_SELECTED_ASCII,
        "box": SB_ASCII,
    }


def format_tree_line(row, glyphs):
    """Text of one tree row: indentation, expander, icon and name."""
    indent = " " * (row.depth * INDENT_WIDTH)
    if not row.is_dir:
        return f"{indent}  {glyphs['file']} {row.name}"
    expander = glyphs["collapsed"] if row.entry_index is not None else glyphs["expanded"]
    return f"{indent}{expander} {glyphs['folder']} {row.name}"


def tree_height(stdscr):
    h, _ = stdscr.getmaxyx()
    return max(0, h - STATUS_BAR_HEIGHT)


def _row_attr(row, nav):
    if row.entry_index is None:
        return theme_attr("tree") | (curses.A_BOLD if row.is_current_dir else 0)
    is_cursor = row.entry_index == nav.cursor_index
    is_selected = row.entry_index in nav.selected
    if is_cursor and is_selected:
        return theme_attr("cursor_selected") | curses.A_BOLD
    if is_cursor:
        return theme_attr("cursor")
    if is_selected:
        return theme_attr("selected")
    if row.is_dir:
        return theme_attr("directory") | curses.A_BOLD
    return theme_attr("tree")


def draw_tree(app):
    """Draw the visible slice of tree rows, scrolled to keep the cursor in view."""
    stdscr = app.stdscr
    nav = app.nav
    _, w = stdscr.getmaxyx()
    height = tree_height(stdscr)
    nav.scroll_to_cursor(height)
    rows = nav.tree_rows()[nav.scroll_offset:nav.scroll_offset + height]
    for line, row in enumerate(rows):
        attr = _row_attr(row, nav)
        marker = app.glyphs["selected"] if row.entry_index in nav.selected else " "
        text = f"{marker}{format_tree_line(row, app.glyphs)}"
        if row.entry_index is not None and row.entry_index == nav.cursor_index:
            text = text.ljust(w - 1)
        safe_addstr(stdscr, line, 0, text, attr)
    if nav.load_error and height > len(rows):
        safe_addstr(stdscr, len(rows), 2, f"(unreadable: {nav.load_error})", theme_attr("error"))


def status_text(nav):
    """Summary line for the status bar: counts, selection size, cursor entry."""
    parts = [f" {len(nav.entries)} item(s)"]
    if nav.selected:
        parts.append(f"{len(nav.selected)} selected ({format_size(nav.selected_size())})")
    entry = nav.current_entry()
    if entry is not None:
        if entry.is_dir:
            parts.append(f"{entry.name}/  {format_date(entry.modified_time)}")
        else:
            parts.append(
                f"{entry.name}  {format_size(entry.size)}  {format_date(entry.modified_time)}"
            )
    return " | ".join(parts)


def listing_flags(lister):
    """Right-hand status indicator for the listing policy, e.g. ``[name]``."""
    sort_key = getattr(lister, "sort_key", "name")
    hidden = " +hidden" if getattr(lister, "show_hidden", False) else ""
    return f"[{sort_key}{hidden}] "


def draw_statusbar(app):
    """Draw the bottom status bar, or the current status message."""
    stdscr = app.stdscr
    h, w = stdscr.getmaxyx()
    y = h - 1
    attr = theme_attr("status")
    safe_addstr(stdscr, y, 0, " " * (w - 1), attr)
    mode = app.controller.mode
    if isinstance(mode, StatusMessageMode):
        safe_addstr(stdscr, y, 0, f" {mode.message}", attr | curses.A_BOLD)
        return
    flags = listing_flags(app.nav.lister)
    left = status_text(app.nav)
    safe_addstr(stdscr, y, 0, left[: max(0, w - len(flags) - 2)], attr)
    safe_addstr(stdscr, y, max(0, w - len(flags) - 1), flags, attr)


def modal_content(mode):
    """Describe the panel for a modal mode as (title, lines, footer), or None."""
    if isinstance(mode, PasswordPromptMode):
        return "Authentication required", [mode.prompt], "Enter: submit  Esc: cancel"
    if isinstance(mode, ConfirmDeleteMode):
        lines = [f"Move {len(mode.items)} item(s) to trash?"]
        for path in mode.items[:MAX_LISTED_ITEMS]:
            lines.append(f"  {os.path.basename(path)}")
        if len(mode.items) > MAX_LISTED_ITEMS:
            lines.append(f"  ... and {len(mode.items) - MAX_LISTED_ITEMS} more")
        return "Delete", lines, "y: delete  n/Esc: cancel"
    if isinstance(mode, CreateNewMode):
        if mode.kind is None:
            return "New", ["Create a (f)ile or a (d)irectory?"], "f / d  Esc: cancel"
        return "New", [f"Name of the new {mode.kind.value}:"], "Enter: create  Esc: cancel"
    if isinstance(mode, RenameItemMode):
        name = os.path.basename(mode.original_path)
        return "Rename", [f"Rename '{name}' to:"], "Enter: rename  Esc: cancel"
    if isinstance(mode, HelpMode):
        width = max(len(keys) for keys, _ in HELP_LINES)
        lines = [f"{keys.ljust(width)}  {text}" for keys, text in HELP_LINES]
        return "Keys", lines, "Press any key to close"
    return None


def _modal_input(mode):
    """Editable field for a modal mode: a LineEditor, masked text, or None."""
    if isinstance(mode, PasswordPromptMode):
        return mode.masked()
    if isinstance(mode, RenameItemMode):
        return mode.editor
    if isinstance(mode, CreateNewMode) and mode.kind is not None:
        return mode.editor
    return None


def draw_box(win, y, x, h, w, box, attr=0):
    """Draw a single-line box using ``box`` = (tl, tr, bl, br, h, v)."""
    tl, tr, bl, br, hz, vt = box
    safe_addstr(win, y, x, tl + hz * (w - 2) + tr, attr)
    for i in range(1, h - 1):
        safe_addstr(win, y + i, x, vt, attr)
        safe_addstr(win, y + i, x + w - 1, vt, attr)
    safe_addstr(win, y + h - 1, x, bl + hz * (w - 2) + br, attr)


def draw_line_editor(win, y, x, width, editor):
    """Draw ``editor`` in a field ``width`` cells wide, keeping the cursor visible."""
    attr = theme_attr("input")
    sel_attr = theme_attr("input_selection")
    start = max(0, editor.cursor - (width - 1))
    visible = editor.text[start:start + width]
    safe_addstr(win, y, x, " " * width, attr)
    safe_addstr(win, y, x, visible, attr)
    span = editor.selection()
    if span:
        sel_start = max(span[0], start)
        sel_end = min(span[1], start + width)
        if sel_end > sel_start:
            safe_addstr(win, y, x + sel_start - start, editor.text[sel_start:sel_end], sel_attr)
    cursor_char = editor.text[editor.cursor] if editor.cursor < len(editor.text) else " "
    safe_addstr(win, y, x + editor.cursor - start, cursor_char, attr | curses.A_REVERSE)


def draw_modal(app):
    """Draw the centred panel of the current modal mode, if any."""
    mode = app.controller.mode
    content = modal_content(mode)
    if content is None:
        return
    title, lines, footer = content
    field = _modal_input(mode)
    stdscr = app.stdscr
    max_h, max_w = stdscr.getmaxyx()

    longest = max([len(title) + 4, len(footer)] + [len(line) for line in lines])
    width = min(max(DIALOG_MIN_WIDTH, longest + 4), DIALOG_MAX_WIDTH, max(4, max_w - 2))
    height = len(lines) + 4 + (2 if field is not None else 0)
    x = max(0, (max_w - width) // 2)
    y = max(0, (max_h - height) // 2)

    attr = theme_attr("dialog")
    for row in range(height):
        safe_addstr(stdscr, y + row, x, " " * width, attr)
    draw_box(stdscr, y, x, height, width, app.glyphs["box"], attr)
    safe_addstr(stdscr, y, x + 2, f" {title} ", theme_attr("dialog_title") | curses.A_BOLD)

    for i, line in enumerate(lines):
        safe_addstr(stdscr, y + 1 + i, x + 2, line[: width - 4], attr)

    field_y = y + 2 + len(lines)
    inner_w = width - 4
    if isinstance(field, str):
        safe_addstr(stdscr, field_y, x + 2, " " * inner_w, theme_attr("input"))
        safe_addstr(stdscr, field_y, x + 2, field[-(inner_w - 1):] if field else "", theme_attr("input"))
    elif field is not None:
        draw_line_editor(stdscr, field_y, x + 2, inner_w, field)

    safe_addstr(stdscr, y + height - 2, x + 2, footer[:inner_w], attr | curses.A_DIM)
