"""Single-line text editor state for the rename and create prompts."""
from .clipboard import copy_text, paste_text
from .paths import split_name


class LineEditor:
    """Text buffer with a cursor and an optional selection anchor.

    The selection is the half-open range between ``anchor`` and ``cursor``.
    """

    def __init__(self, text='', cursor=None, anchor=None):
        self.text = text
        self.cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))
        self.anchor = anchor

    def __repr__(self):
        return f'LineEditor(text={self.text!r}, cursor={self.cursor}, anchor={self.anchor})'

    @classmethod
    def for_rename(cls, name):
        """Editor over ``name`` with its stem selected and the extension kept."""
        stem, _ext = split_name(name)
        return cls(name, cursor=len(stem), anchor=0)

    def selection(self):
        """Return (start, end) of the selection, or None."""
        if self.anchor is None or self.anchor == self.cursor:
            return None
        return min(self.anchor, self.cursor), max(self.anchor, self.cursor)

    def selected_text(self):
        span = self.selection()
        return self.text[span[0]:span[1]] if span else ''

    def _delete_selection(self):
        span = self.selection()
        self.anchor = None
        if not span:
            return False
        start, end = span
        self.text = self.text[:start] + self.text[end:]
        self.cursor = start
        return True

    def insert(self, chars):
        self._delete_selection()
        self.text = self.text[:self.cursor] + chars + self.text[self.cursor:]
        self.cursor += len(chars)

    def backspace(self):
        if self._delete_selection() or self.cursor == 0:
            return
        self.text = self.text[:self.cursor - 1] + self.text[self.cursor:]
        self.cursor -= 1

    def delete(self):
        if self._delete_selection() or self.cursor >= len(self.text):
            return
        self.text = self.text[:self.cursor] + self.text[self.cursor + 1:]

    def _move(self, position, extend):
        if extend:
            if self.anchor is None:
                self.anchor = self.cursor
        else:
            self.anchor = None
        self.cursor = max(0, min(position, len(self.text)))

    def left(self, extend=False):
        self._move(self.cursor - 1, extend)

    def right(self, extend=False):
        self._move(self.cursor + 1, extend)

    def home(self, extend=False):
        self._move(0, extend)

    def end(self, extend=False):
        self._move(len(self.text), extend)

    def select_all(self):
        self.anchor = 0
        self.cursor = len(self.text)

    def copy(self):
        text = self.selected_text()
        if text:
            copy_text(text)

    def cut(self):
        text = self.selected_text()
        if text:
            copy_text(text)
            self._delete_selection()

    def paste(self):
        text = paste_text()
        # Names are single-line.
        text = text.splitlines()[0] if text else ''
        if text:
            self.insert(text)
