"""
UI-mode state machine.

Receives decoded keys and mouse events, asks the navigation model which paths
an operation applies to, runs the operation engine and turns every outcome
into the next mode: a status line, a password prompt carrying the pending
operation, or back to normal browsing.
"""
import logging
import os

from .actions import ActionResult, ActionType, Command, MouseKind
from .clipboard import Clipboard, ClipboardOp
from .errors import (
    BatchError, ElevationError, IncorrectCredentialError, OperationError,
    UndoPermissionError, is_permission_error,
)
from .line_edit import LineEditor
from .modes import (
    PERMISSION_PROMPT, ConfirmDeleteMode, CreateNewMode, HelpMode, NormalMode,
    OperationKind, PasswordPromptMode, PendingOperation, RenameItemMode,
    StatusMessageMode,
)
from .operations import CreationKind
from .undo import CopyAction, MoveAction

LOGGER = logging.getLogger(__name__)


def _produced_names(action):
    """Names of the entries an action created in the destination directory."""
    if isinstance(action, CopyAction):
        return [os.path.basename(path) for path in action.produced_paths]
    if isinstance(action, MoveAction):
        return [os.path.basename(dest) for _src, dest in action.pairs]
    return []


class ExplorerController:
    """Routes input through the current UI mode."""

    def __init__(self, navigation, engine, on_listing_changed=None):
        self.nav = navigation
        self.engine = engine
        self.mode = NormalMode()
        self.clipboard = None
        self._on_listing_changed = on_listing_changed
        self._handlers = {
            NormalMode: self._handle_normal,
            HelpMode: self._handle_help,
            PasswordPromptMode: self._handle_password,
            ConfirmDeleteMode: self._handle_confirm_delete,
            CreateNewMode: self._handle_create_new,
            RenameItemMode: self._handle_rename,
        }

    # ------------------------------------------------------------------
    # Mode helpers
    # ------------------------------------------------------------------

    def show_status(self, message):
        LOGGER.debug('status: %s', message)
        self.mode = StatusMessageMode(message)

    def request_password(self, pending, prompt=PERMISSION_PROMPT):
        LOGGER.debug('permission denied, pending %s of %d item(s)', pending.kind.value, len(pending.items))
        self.mode = PasswordPromptMode(prompt, pending)

    def handle_key(self, key):
        """Process one decoded key; return an ActionResult for the app or None."""
        if isinstance(self.mode, StatusMessageMode):
            self.mode = NormalMode()
        handler = self._handlers[type(self.mode)]
        return handler(self.mode, key)

    def handle_mouse(self, kind, line, ctrl=False):
        """Process a mouse event on visible tree ``line``."""
        if kind is MouseKind.RELEASE:
            self.nav.release()
            return
        if isinstance(self.mode, StatusMessageMode):
            self.mode = NormalMode()
        if not isinstance(self.mode, NormalMode):
            return
        row = self.nav.row_at(line)
        if row is None or row.entry_index is None:
            return
        if kind is MouseKind.PRESS:
            self.nav.click(row.entry_index, toggle=ctrl)
        elif kind is MouseKind.DRAG:
            self.nav.drag_to(row.entry_index)

    def report_open(self, path, error=None):
        name = os.path.basename(path)
        if error is None:
            self.show_status(f"Opening '{name}'")
        else:
            self.show_status(f'Failed to open file: {error}')

    # ------------------------------------------------------------------
    # Normal mode
    # ------------------------------------------------------------------

    def _handle_normal(self, _mode, key):
        command = key.command
        nav = self.nav
        if command is Command.UP:
            nav.move_up(key.shift)
        elif command is Command.DOWN:
            nav.move_down(key.shift)
        elif command is Command.PAGE_UP:
            nav.page_up(key.shift)
        elif command is Command.PAGE_DOWN:
            nav.page_down(key.shift)
        elif command is Command.HOME:
            nav.move_home(key.shift)
        elif command is Command.END:
            nav.move_end(key.shift)
        elif command is Command.ENTER:
            return self.open_or_enter()
        elif command is Command.RIGHT:
            nav.enter_directory()
            self._report_load_error()
        elif command is Command.LEFT:
            nav.go_to_parent()
            self._report_load_error()
        elif command is Command.TOGGLE_SELECT:
            nav.toggle_selection()
        elif command is Command.SELECT_ALL:
            nav.select_all()
        elif command is Command.ESCAPE:
            nav.clear_selection()
        elif command is Command.COPY:
            self.copy_selected()
        elif command is Command.CUT:
            self.cut_selected()
        elif command is Command.PASTE:
            self.paste()
        elif command is Command.NEW:
            self.mode = CreateNewMode()
        elif command is Command.RENAME:
            self.start_rename()
        elif command is Command.DELETE:
            self.delete_selected()
        elif command is Command.UNDO:
            self.undo()
        elif command is Command.REFRESH:
            nav.reload()
            self._report_load_error()
        elif command is Command.HELP:
            self.mode = HelpMode()
        elif command is Command.QUIT:
            return ActionResult(ActionType.QUIT)
        elif command is Command.CHAR:
            return self._handle_normal_char(key.char)
        return None

    def _handle_normal_char(self, char):
        if char == ' ':
            self.nav.toggle_selection()
        elif char == '?':
            self.mode = HelpMode()
        elif char == '.':
            shown = self.nav.lister.toggle_hidden()
            self._relist()
            self.show_status('Showing hidden entries' if shown else 'Hiding hidden entries')
        elif char in ('s', 'S'):
            key = self.nav.lister.cycle_sort()
            self._relist()
            self.show_status(f'Sorted by {key}')
        return None

    def _relist(self):
        """Reload after a listing-policy change, keeping the cursor entry."""
        entry = self.nav.current_entry()
        self.nav.clear_selection()
        self.nav.reload()
        if entry is not None:
            self.nav.focus(entry.name)
        if self._on_listing_changed is not None:
            self._on_listing_changed(self.nav.lister)

    def _report_load_error(self):
        if self.nav.load_error:
            self.show_status(f'Cannot read directory: {self.nav.load_error}')

    def open_or_enter(self):
        entry = self.nav.current_entry()
        if entry is None:
            return None
        if entry.is_dir:
            self.nav.enter_directory()
            self._report_load_error()
            return None
        return ActionResult(ActionType.OPEN_FILE, entry.path)

    def _set_clipboard(self, operation):
        items = self.nav.selected_paths()
        if not items:
            return
        self.clipboard = Clipboard(tuple(items), operation)
        verb = 'Copied' if operation is ClipboardOp.COPY else 'Cut'
        self.show_status(f'{verb} {len(items)} item(s)')

    def copy_selected(self):
        self._set_clipboard(ClipboardOp.COPY)

    def cut_selected(self):
        self._set_clipboard(ClipboardOp.CUT)

    def _after_paste(self, action):
        self.nav.reload()
        names = _produced_names(action) if action is not None else []
        if names:
            self.nav.select_by_names(names)

    def paste(self):
        clipboard = self.clipboard
        if clipboard is None:
            self.show_status('Clipboard is empty')
            return
        destination = self.nav.current_dir
        items = list(clipboard.items)
        try:
            if clipboard.is_cut:
                count, action = self.engine.move(items, destination)
            else:
                count, action = self.engine.copy(items, destination)
        except BatchError as exc:
            self._after_paste(exc.completed)
            if exc.permission_denied:
                kind = OperationKind.MOVE if clipboard.is_cut else OperationKind.COPY
                self.request_password(PendingOperation(kind, tuple(exc.remaining), destination))
            else:
                self.show_status(f'Error: {exc.cause}')
            return
        if clipboard.is_cut:
            self.clipboard = None
        self._after_paste(action)
        self.show_status(f'Pasted {count} item(s)')

    def delete_selected(self):
        items = self.nav.selected_paths()
        if items:
            self.mode = ConfirmDeleteMode(tuple(items))

    def start_rename(self):
        entry = self.nav.current_entry()
        if entry is None:
            return
        self.mode = RenameItemMode(entry.path, LineEditor.for_rename(entry.name))

    def undo(self):
        try:
            action, count = self.engine.undo()
        except OperationError as exc:
            self.show_status(str(exc))
            return
        except UndoPermissionError as exc:
            self.request_password(PendingOperation(OperationKind.UNDO, undo_action=exc.action))
            return
        except OSError as exc:
            self.nav.reload()
            self.show_status(f'Undo error: {exc}')
            return
        self.nav.reload()
        self.show_status(action.describe(count))

    # ------------------------------------------------------------------
    # Modal states
    # ------------------------------------------------------------------

    def _handle_help(self, _mode, _key):
        self.mode = NormalMode()
        return None

    def _handle_confirm_delete(self, mode, key):
        if key.command is Command.CHAR and key.char in ('y', 'Y'):
            self.perform_delete(list(mode.items))
        elif key.command is Command.ESCAPE or (key.command is Command.CHAR and key.char in ('n', 'N')):
            self.mode = NormalMode()
        return None

    def _after_delete(self):
        self.nav.clear_selection()
        self.nav.reload()

    def perform_delete(self, items):
        self.mode = NormalMode()
        try:
            action = self.engine.delete(items)
        except BatchError as exc:
            self._after_delete()
            if exc.permission_denied:
                self.request_password(PendingOperation(OperationKind.DELETE, tuple(exc.remaining)))
            else:
                self.show_status(f'Error: {exc.cause}')
            return
        self._after_delete()
        self.show_status(f'Deleted {len(action)} item(s) (moved to trash)')

    def _edit_line(self, editor, key):
        """Apply an editing key to ``editor``; return True when it was consumed."""
        command = key.command
        if command is Command.CHAR:
            editor.insert(key.char)
        elif command is Command.BACKSPACE:
            editor.backspace()
        elif command is Command.DELETE:
            editor.delete()
        elif command is Command.LEFT:
            editor.left(key.shift)
        elif command is Command.RIGHT:
            editor.right(key.shift)
        elif command is Command.HOME:
            editor.home(key.shift)
        elif command is Command.END:
            editor.end(key.shift)
        elif command is Command.SELECT_ALL:
            editor.select_all()
        elif command is Command.COPY:
            editor.copy()
        elif command is Command.CUT:
            editor.cut()
        elif command is Command.PASTE:
            editor.paste()
        else:
            return False
        return True

    def _handle_rename(self, mode, key):
        if key.command is Command.ESCAPE:
            self.mode = NormalMode()
        elif key.command is Command.ENTER:
            self.submit_rename(mode.original_path, mode.editor.text)
        else:
            self._edit_line(mode.editor, key)
        return None

    def submit_rename(self, original_path, new_name):
        self.mode = NormalMode()
        try:
            self.engine.rename(original_path, new_name)
        except OperationError as exc:
            self.show_status(str(exc))
            return
        except OSError as exc:
            if is_permission_error(exc):
                self.request_password(
                    PendingOperation(
                        OperationKind.RENAME,
                        (original_path,),
                        os.path.join(os.path.dirname(original_path), new_name),
                    ),
                    prompt=f"Enter sudo password to rename '{os.path.basename(original_path)}':",
                )
            else:
                self.show_status(f'Error: {exc}')
            return
        self.nav.reload()
        self.nav.select_by_names([new_name])
        self.show_status(f"Renamed to '{new_name}'")

    def _handle_create_new(self, mode, key):
        if key.command is Command.ESCAPE:
            self.mode = NormalMode()
        elif mode.kind is None:
            if key.command is Command.CHAR and key.char in ('f', 'F'):
                mode.kind = CreationKind.FILE
            elif key.command is Command.CHAR and key.char in ('d', 'D'):
                mode.kind = CreationKind.DIRECTORY
        elif key.command is Command.ENTER:
            self.create_new(mode.kind, mode.editor.text)
        else:
            self._edit_line(mode.editor, key)
        return None

    def create_new(self, kind, name):
        self.mode = NormalMode()
        try:
            path = self.engine.create(kind, self.nav.current_dir, name)
        except OperationError as exc:
            self.show_status(str(exc))
            return
        except OSError as exc:
            self.show_status(f'Error: {exc}')
            return
        created = os.path.basename(path)
        self.nav.reload()
        self.nav.select_by_names([created])
        self.show_status(f"Created {CreationKind(kind).value} '{created}'")

    # ------------------------------------------------------------------
    # Password prompt and privileged retry
    # ------------------------------------------------------------------

    def _handle_password(self, mode, key):
        if key.command is Command.ESCAPE:
            self.mode = NormalMode()
        elif key.command is Command.ENTER:
            secret, mode.secret = mode.secret, ''
            self.submit_password(mode.pending, secret)
        elif key.command is Command.BACKSPACE:
            mode.secret = mode.secret[:-1]
        elif key.command is Command.CHAR:
            mode.secret += key.char
        return None

    def submit_password(self, pending, secret):
        """Retry ``pending`` through the escalation helper."""
        self.mode = NormalMode()
        try:
            message = self._run_pending(pending, secret)
        except IncorrectCredentialError as exc:
            self.show_status(str(exc))
            return
        except BatchError as exc:
            self.nav.reload()
            self.show_status(f'Error: {exc.cause}')
            return
        except (ElevationError, OperationError, OSError) as exc:
            self.nav.reload()
            self.show_status(f'Error: {exc}')
            return
        self.show_status(message)

    def _run_pending(self, pending, secret):
        engine = self.engine
        kind = pending.kind
        if kind in (OperationKind.COPY, OperationKind.MOVE):
            if kind is OperationKind.MOVE:
                count, action = engine.move_elevated(secret, pending.items, pending.destination)
                if self.clipboard is not None and self.clipboard.is_cut:
                    self.clipboard = None
            else:
                count, action = engine.copy_elevated(secret, pending.items, pending.destination)
            self._after_paste(action)
            return f'Pasted {count} item(s) with sudo'
        if kind is OperationKind.DELETE:
            action = engine.delete_elevated(secret, pending.items)
            self._after_delete()
            return f'Deleted {len(action)} item(s) with sudo (moved to trash)'
        if kind is OperationKind.RENAME:
            new_name = os.path.basename(pending.destination)
            engine.rename_elevated(secret, pending.items[0], new_name)
            self.nav.reload()
            self.nav.select_by_names([new_name])
            return f"Renamed to '{new_name}' with sudo"
        if kind is OperationKind.UNDO:
            count = engine.undo_elevated(secret, pending.undo_action)
            self.nav.reload()
            return f'{pending.undo_action.describe(count)} with sudo'
        raise ValueError(f'Unknown pending operation: {kind!r}')
