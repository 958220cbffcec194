"""
UI modes: one dataclass per state of the interaction, each carrying only what
that state needs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from .line_edit import LineEditor
from .operations import CreationKind
from .undo import UndoAction

PERMISSION_PROMPT = 'Permission denied. Enter sudo password:'


class OperationKind(str, Enum):
    COPY = 'copy'
    MOVE = 'move'
    DELETE = 'delete'
    RENAME = 'rename'
    UNDO = 'undo'


@dataclass(frozen=True)
class PendingOperation:
    """Everything needed to retry a denied operation once a password is given."""

    kind: OperationKind
    items: Tuple[str, ...] = ()
    destination: Optional[str] = None
    undo_action: Optional[UndoAction] = None


@dataclass
class NormalMode:
    pass


@dataclass
class StatusMessageMode:
    message: str


@dataclass
class PasswordPromptMode:
    prompt: str
    pending: PendingOperation
    secret: str = field(default='', repr=False)

    def masked(self):
        return '*' * len(self.secret)


@dataclass
class ConfirmDeleteMode:
    items: Tuple[str, ...]


@dataclass
class CreateNewMode:
    kind: Optional[CreationKind] = None
    editor: LineEditor = field(default_factory=LineEditor)


@dataclass
class RenameItemMode:
    original_path: str
    editor: LineEditor


@dataclass
class HelpMode:
    pass


UIMode = Union[
    NormalMode, StatusMessageMode, PasswordPromptMode, ConfirmDeleteMode,
    CreateNewMode, RenameItemMode, HelpMode,
]
