"""
Operation engine: copy, move, delete, rename, create and undo.

Every mutation goes through a backend object (direct os/shutil calls or the
elevated helper), so the privileged retry of an operation follows exactly the
same naming and bookkeeping as the unprivileged attempt.
"""
import logging
import os
from enum import Enum

from .backends import DirectBackend
from .elevation import ElevationRunner
from .errors import (
    BatchError, ElevationError, OperationError, UndoPermissionError, is_permission_error,
)
from .paths import final_component, is_inside, unique_path
from .undo import CopyAction, DeleteAction, MoveAction, RenameAction, UndoStack, reverse_action

LOGGER = logging.getLogger(__name__)

_BATCH_ERRORS = (OSError, OperationError, ElevationError)


class CreationKind(str, Enum):
    FILE = 'file'
    DIRECTORY = 'directory'


def validate_name(name):
    """Return ``name`` if it can be used as a single path component."""
    if not name or not name.strip():
        raise OperationError('Name cannot be empty')
    if os.sep in name or (os.altsep and os.altsep in name):
        raise OperationError(f"'{name}' must not contain '{os.sep}'")
    if name in (os.curdir, os.pardir):
        raise OperationError(f"'{name}' is not a valid name")
    return name


class OperationEngine:
    """Applies filesystem mutations and records how to undo them."""

    def __init__(self, trash, elevation=None, backend=None):
        self.trash = trash
        self.elevation = elevation or ElevationRunner()
        self.backend = backend or DirectBackend()
        self.undo_stack = UndoStack()

    # ------------------------------------------------------------------
    # Batch primitives (backend-agnostic)
    # ------------------------------------------------------------------

    def _transfer(self, sources, dest_dir, move, backend):
        done = []
        make_action = (lambda: MoveAction(tuple(done))) if move else (lambda: CopyAction(tuple(done)))
        for index, src in enumerate(sources):
            try:
                name = final_component(src)
                if os.path.isdir(src) and not os.path.islink(src) and is_inside(dest_dir, src):
                    verb = 'move' if move else 'copy'
                    raise OperationError(f"Cannot {verb} '{name}' into itself")
                target = unique_path(os.path.join(dest_dir, name))
                if move:
                    backend.rename(src, target)
                    done.append((src, target))
                else:
                    backend.copy(src, target)
                    done.append(target)
            except _BATCH_ERRORS as exc:
                completed = make_action() if done else None
                self.commit(completed)
                LOGGER.debug('%s stopped at %s after %d item(s): %s',
                             'move' if move else 'copy', src, len(done), exc)
                raise BatchError(exc, completed, sources[index:]) from exc
        action = make_action()
        self.commit(action)
        return len(done), action

    def _delete(self, sources, backend):
        done = []
        for index, src in enumerate(sources):
            try:
                trash_path = self.trash.path_for(src)
                backend.rename(src, trash_path)
                done.append((src, trash_path))
            except _BATCH_ERRORS as exc:
                completed = DeleteAction(tuple(done)) if done else None
                self.commit(completed)
                LOGGER.debug('delete stopped at %s after %d item(s): %s', src, len(done), exc)
                raise BatchError(exc, completed, sources[index:]) from exc
        action = DeleteAction(tuple(done))
        self.commit(action)
        return action

    def _rename(self, original, new_name, backend):
        validate_name(new_name)
        parent = os.path.dirname(original)
        new_path = os.path.join(parent, new_name)
        if new_path == original:
            raise OperationError('Name unchanged')
        if os.path.lexists(new_path):
            raise OperationError(f"'{new_name}' already exists")
        backend.rename(original, new_path)
        action = RenameAction(original, new_path)
        self.commit(action)
        return action

    def commit(self, action):
        """Record a completed action on the undo stack."""
        if action is not None:
            self.undo_stack.push(action)

    # ------------------------------------------------------------------
    # Direct operations
    # ------------------------------------------------------------------

    def copy(self, sources, dest_dir):
        """Copy ``sources`` into ``dest_dir``; return (count, CopyAction)."""
        return self._transfer(list(sources), dest_dir, False, self.backend)

    def move(self, sources, dest_dir):
        """Move ``sources`` into ``dest_dir``; return (count, MoveAction)."""
        return self._transfer(list(sources), dest_dir, True, self.backend)

    def delete(self, sources):
        """Move ``sources`` into the trash; return the DeleteAction."""
        return self._delete(list(sources), self.backend)

    def rename(self, original, new_name):
        """Rename ``original`` to ``new_name`` in the same directory."""
        return self._rename(original, new_name, self.backend)

    def create(self, kind, dest_dir, name):
        """Create an empty file or directory and return its path."""
        name = validate_name(name.strip() if name else name)
        path = os.path.join(dest_dir, name)
        if os.path.lexists(path):
            raise OperationError(f"'{name}' already exists")
        if CreationKind(kind) is CreationKind.DIRECTORY:
            self.backend.make_dir(path)
        else:
            self.backend.make_file(path)
        return path

    def undo(self):
        """Reverse the most recent action; return (action, reversed_count).

        A permission failure puts the action back on the stack and raises
        UndoPermissionError so the caller can retry with elevation. Any other
        OSError propagates and the action stays consumed.
        """
        action = self.undo_stack.pop()
        if action is None:
            raise OperationError('Nothing to undo')
        try:
            count = reverse_action(action, self.backend)
        except OSError as exc:
            if is_permission_error(exc):
                self.undo_stack.restore(action)
                raise UndoPermissionError(action, exc) from exc
            LOGGER.debug('undo of %r failed and was dropped: %s', action, exc)
            raise
        LOGGER.debug('undid %r (%d item(s))', action, count)
        return action, count

    # ------------------------------------------------------------------
    # Elevated operations: one credential check per batch
    # ------------------------------------------------------------------

    def copy_elevated(self, secret, sources, dest_dir):
        backend = self.elevation.session(secret)
        return self._transfer(list(sources), dest_dir, False, backend)

    def move_elevated(self, secret, sources, dest_dir):
        backend = self.elevation.session(secret)
        return self._transfer(list(sources), dest_dir, True, backend)

    def delete_elevated(self, secret, sources):
        backend = self.elevation.session(secret)
        return self._delete(list(sources), backend)

    def rename_elevated(self, secret, original, new_name):
        backend = self.elevation.session(secret)
        return self._rename(original, new_name, backend)

    def undo_elevated(self, secret, action):
        """Reverse ``action`` with elevation and drop it from the stack."""
        backend = self.elevation.session(secret)
        count = reverse_action(action, backend)
        self.undo_stack.discard(action)
        LOGGER.debug('undid %r with elevation (%d item(s))', action, count)
        return count
