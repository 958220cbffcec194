"""
Navigation and selection model.

Tracks the open directory, its entries, the cursor, the selected set and the
range anchor, and remembers that state per directory so revisiting a
directory puts the cursor back where it was.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import FrozenSet, Optional

from .listing import list_directory

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryState:
    """Snapshot of cursor, selection and scroll for one directory."""

    cursor_index: int = 0
    selected_indices: FrozenSet[int] = frozenset()
    scroll_offset: int = 0


@dataclass(frozen=True)
class TreeRow:
    """One renderable row: an ancestor directory or a child of the open one."""

    path: str
    name: str
    depth: int
    is_dir: bool
    entry_index: Optional[int] = None
    is_current_dir: bool = False


def ancestor_chain(path):
    """Return the directories from the filesystem root down to ``path``."""
    chain = [path]
    current = path
    while True:
        parent = os.path.dirname(current)
        if parent == current:
            break
        chain.append(parent)
        current = parent
    chain.reverse()
    return chain


class NavigationModel:
    """Cursor/selection state over the entries of the current directory."""

    SCROLL_CONTEXT = 1
    PAGE_SIZE = 10

    def __init__(self, start_dir, lister=list_directory):
        self.current_dir = os.path.abspath(start_dir)
        self.lister = lister
        self.entries = []
        self.cursor_index = 0
        self.selected = set()
        self.anchor = None
        self.scroll_offset = 0
        self.memory = {}
        self.load_error = None
        self._dragging = False

    # ------------------------------------------------------------------
    # Loading and directory memory
    # ------------------------------------------------------------------

    def load(self):
        """Read the current directory and restore its remembered state."""
        try:
            self.entries = list(self.lister(self.current_dir))
            self.load_error = None
        except OSError as exc:
            LOGGER.debug('cannot list %s: %s', self.current_dir, exc)
            self.entries = []
            self.load_error = exc.strerror or str(exc)

        state = self.memory.get(self.current_dir)
        count = len(self.entries)
        if state is not None:
            self.cursor_index = max(0, min(state.cursor_index, count - 1))
            self.selected = {i for i in state.selected_indices if 0 <= i < count}
            self.scroll_offset = state.scroll_offset
        else:
            self.cursor_index = 0
            self.selected = set()
            self.scroll_offset = 0
        self.anchor = None
        self._dragging = False

    def reload(self):
        """Re-read the current directory after a mutation."""
        self.save_state()
        self.load()

    def save_state(self):
        self.memory[self.current_dir] = DirectoryState(
            self.cursor_index, frozenset(self.selected), self.scroll_offset,
        )

    def change_directory(self, path):
        """Leave the current directory (remembering it) and open ``path``."""
        self.save_state()
        self.current_dir = os.path.abspath(path)
        LOGGER.debug('open directory %s', self.current_dir)
        self.load()

    # ------------------------------------------------------------------
    # Cursor movement and selection
    # ------------------------------------------------------------------

    def current_entry(self):
        if 0 <= self.cursor_index < len(self.entries):
            return self.entries[self.cursor_index]
        return None

    def move_to(self, index, extend=False):
        """Move the cursor to ``index`` (clamped).

        Without ``extend`` the selection is cleared. With ``extend`` the
        anchor is set on first use and the selection becomes the closed
        range between anchor and cursor.
        """
        if not self.entries:
            return False
        target = max(0, min(index, len(self.entries) - 1))
        # Staying put keeps the selection, even without extend.
        if target == self.cursor_index:
            return False
        if extend:
            if self.anchor is None:
                self.anchor = self.cursor_index
        else:
            self.selected.clear()
            self.anchor = None
        self.cursor_index = target
        if extend:
            self._apply_range()
        self.save_state()
        return True

    def move_up(self, extend=False):
        return self.move_to(self.cursor_index - 1, extend)

    def move_down(self, extend=False):
        return self.move_to(self.cursor_index + 1, extend)

    def page_up(self, extend=False):
        return self.move_to(self.cursor_index - self.PAGE_SIZE, extend)

    def page_down(self, extend=False):
        return self.move_to(self.cursor_index + self.PAGE_SIZE, extend)

    def move_home(self, extend=False):
        return self.move_to(0, extend)

    def move_end(self, extend=False):
        return self.move_to(len(self.entries) - 1, extend)

    def _apply_range(self):
        if self.anchor is None:
            return
        start = min(self.anchor, self.cursor_index)
        end = max(self.anchor, self.cursor_index)
        self.selected = set(range(start, end + 1))

    def toggle_selection(self):
        if not self.entries:
            return
        if self.cursor_index in self.selected:
            self.selected.discard(self.cursor_index)
        else:
            self.selected.add(self.cursor_index)
        self.anchor = None
        self.save_state()

    def select_all(self):
        self.selected = set(range(len(self.entries)))
        self.anchor = None
        self.save_state()

    def clear_selection(self):
        self.selected.clear()
        self.anchor = None
        self.save_state()

    def select_by_names(self, names):
        """Select the entries called ``names`` and put the cursor on the first."""
        wanted = set(names)
        self.selected = {i for i, entry in enumerate(self.entries) if entry.name in wanted}
        self.anchor = None
        if self.selected:
            self.cursor_index = min(self.selected)
        self.save_state()

    def focus(self, name):
        """Put the cursor on the entry called ``name`` if it is listed."""
        for i, entry in enumerate(self.entries):
            if entry.name == name:
                self.cursor_index = i
                self.save_state()
                return True
        return False

    def selected_paths(self):
        """Paths an operation applies to: the selection, else the cursor entry."""
        if not self.selected:
            entry = self.current_entry()
            return [entry.path] if entry else []
        return [self.entries[i].path for i in sorted(self.selected) if i < len(self.entries)]

    def selected_size(self):
        return sum(self.entries[i].size for i in self.selected if i < len(self.entries))

    # ------------------------------------------------------------------
    # Mouse selection
    # ------------------------------------------------------------------

    def click(self, index, toggle=False):
        """Put the cursor on ``index``; toggle it, or start a drag range."""
        if not 0 <= index < len(self.entries):
            return
        self.cursor_index = index
        if toggle:
            self.toggle_selection()
            return
        self.selected = {index}
        self.anchor = index
        self._dragging = True
        self.save_state()

    def drag_to(self, index):
        if not self._dragging or not 0 <= index < len(self.entries):
            return
        self.cursor_index = index
        self._apply_range()
        self.save_state()

    def release(self):
        self._dragging = False

    # ------------------------------------------------------------------
    # Directory changes
    # ------------------------------------------------------------------

    def enter_directory(self):
        entry = self.current_entry()
        if entry is None or not entry.is_dir:
            return False
        self.change_directory(entry.path)
        return True

    def go_to_parent(self):
        """Open the parent directory with the cursor on the one just left."""
        parent = os.path.dirname(self.current_dir)
        if parent == self.current_dir:
            return False
        left = os.path.basename(self.current_dir)
        self.change_directory(parent)
        self.focus(left)
        return True

    # ------------------------------------------------------------------
    # Tree rows and scrolling
    # ------------------------------------------------------------------

    def ancestors(self):
        return ancestor_chain(self.current_dir)

    def tree_rows(self):
        """Ancestor rows from the root down, then the open directory's children."""
        rows = []
        for depth, path in enumerate(self.ancestors()):
            is_current = path == self.current_dir
            rows.append(TreeRow(
                path=path,
                name=os.path.basename(path) or path,
                depth=depth,
                is_dir=True,
                is_current_dir=is_current,
            ))
            if is_current:
                for index, entry in enumerate(self.entries):
                    rows.append(TreeRow(
                        path=entry.path,
                        name=entry.name,
                        depth=depth + 1,
                        is_dir=entry.is_dir,
                        entry_index=index,
                    ))
        return rows

    def cursor_row(self):
        depth = len(self.ancestors())
        if not self.entries:
            return depth - 1
        return depth + self.cursor_index

    def scroll_to_cursor(self, height):
        """Adjust the scroll offset so the cursor row is visible with context."""
        if height <= 0:
            return self.scroll_offset
        total = len(self.ancestors()) + len(self.entries)
        row = self.cursor_row()
        context = min(self.SCROLL_CONTEXT, (height - 1) // 2)
        if row < self.scroll_offset + context:
            self.scroll_offset = max(0, row - context)
        elif row >= self.scroll_offset + height - context:
            self.scroll_offset = max(0, row + context + 1 - min(height, total))
        self.scroll_offset = max(0, min(self.scroll_offset, total - height))
        return self.scroll_offset

    def row_at(self, line):
        """Return the TreeRow drawn on visible ``line`` (0-based) or None."""
        index = self.scroll_offset + line
        rows = self.tree_rows()
        if 0 <= index < len(rows):
            return rows[index]
        return None
