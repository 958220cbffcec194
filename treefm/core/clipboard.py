"""
Clipboards: the in-process path clipboard for copy/cut/paste of entries, and
text copy/paste for the rename prompt through the system clipboard.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import pyperclip

LOGGER = logging.getLogger(__name__)

_STATE = {"text": ""}


class ClipboardOp(str, Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True)
class Clipboard:
    """Snapshot of paths taken at copy/cut time; validated only on paste."""

    items: Tuple[str, ...]
    operation: ClipboardOp

    @property
    def is_cut(self) -> bool:
        return self.operation is ClipboardOp.CUT


def clear_clipboard() -> None:
    """Clear internal clipboard text."""
    _STATE["text"] = ""


def copy_text(text: str, sync_system: bool = True) -> str:
    """Store text in internal clipboard and optionally mirror to system clipboard."""
    _STATE["text"] = text or ""
    if sync_system:
        try:
            pyperclip.copy(_STATE["text"])
        except pyperclip.PyperclipException as exc:
            LOGGER.debug("system clipboard unavailable: %s", exc)
    return _STATE["text"]


def paste_text(sync_system: bool = True) -> str:
    """Return clipboard text, preferring the system clipboard when it has some."""
    if sync_system:
        try:
            system_text = pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            LOGGER.debug("system clipboard unavailable: %s", exc)
        else:
            if system_text:
                _STATE["text"] = system_text
    return _STATE["text"]
