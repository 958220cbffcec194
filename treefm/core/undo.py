"""
Undo records and the undo stack.

Each record carries exactly what is needed to reverse it, so reversing never
re-reads state other than checking that the expected paths still exist.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Tuple, Union

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopyAction:
    """Copies produced ``produced_paths``; undo removes them."""

    produced_paths: Tuple[str, ...]

    def __len__(self):
        return len(self.produced_paths)

    def describe(self, count):
        return f'Undone copy: removed {count} item(s)'


@dataclass(frozen=True)
class MoveAction:
    """Items moved as (original, destination) pairs; undo moves them back."""

    pairs: Tuple[Tuple[str, str], ...]

    def __len__(self):
        return len(self.pairs)

    def describe(self, count):
        return f'Undone move: restored {count} item(s)'


@dataclass(frozen=True)
class DeleteAction:
    """Items trashed as (original, trash_path) pairs; undo restores them."""

    pairs: Tuple[Tuple[str, str], ...]

    def __len__(self):
        return len(self.pairs)

    def describe(self, count):
        return f'Undone delete: restored {count} item(s)'


@dataclass(frozen=True)
class RenameAction:
    """Renamed ``original_path`` to ``new_path``; undo renames it back."""

    original_path: str
    new_path: str

    def __len__(self):
        return 1

    def describe(self, count):
        if not count:
            return 'Cannot undo rename: file not found'
        return f"Undone rename: restored to '{os.path.basename(self.original_path)}'"


UndoAction = Union[CopyAction, MoveAction, DeleteAction, RenameAction]


def reverse_action(action: UndoAction, backend) -> int:
    """Reverse ``action`` through ``backend`` and return how many items were reversed.

    Items whose expected path has disappeared are skipped. The first backend
    error propagates; items reversed before it stay reversed.
    """
    count = 0
    if isinstance(action, CopyAction):
        for path in action.produced_paths:
            if not os.path.lexists(path):
                LOGGER.debug('undo copy: %s already gone', path)
                continue
            backend.remove(path)
            count += 1
    elif isinstance(action, (MoveAction, DeleteAction)):
        for original, current in action.pairs:
            if not os.path.lexists(current):
                LOGGER.debug('undo: %s already gone', current)
                continue
            backend.rename(current, original)
            count += 1
    elif isinstance(action, RenameAction):
        if os.path.lexists(action.new_path):
            backend.rename(action.new_path, action.original_path)
            count += 1
    else:
        raise TypeError(f'Unknown undo action: {action!r}')
    return count


class UndoStack:
    """Last-in first-out log of reversible actions."""

    def __init__(self):
        self._items = []

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)

    def push(self, action: UndoAction):
        if not len(action):
            return
        self._items.append(action)
        LOGGER.debug('undo push: %r (depth %d)', action, len(self._items))

    def pop(self) -> UndoAction | None:
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> UndoAction | None:
        return self._items[-1] if self._items else None

    def restore(self, action: UndoAction):
        """Put a popped action back on top after a failed undo."""
        self._items.append(action)
        LOGGER.debug('undo restore: %r', action)

    def discard(self, action: UndoAction) -> bool:
        """Remove ``action`` from the top of the stack if it is still there."""
        if self._items and self._items[-1] == action:
            self._items.pop()
            return True
        return False
