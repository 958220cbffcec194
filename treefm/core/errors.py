"""Error taxonomy for filesystem operations."""

import errno

PERMISSION_ERRNOS = (errno.EACCES, errno.EPERM)


def is_permission_error(exc):
    """Return True when an exception means the OS denied the operation."""
    if isinstance(exc, PermissionError):
        return True
    return isinstance(exc, OSError) and exc.errno in PERMISSION_ERRNOS


class OperationError(Exception):
    """User-facing rejection: invalid name, existing target, nothing to do."""


class BatchError(Exception):
    """A multi-item operation stopped part way through.

    ``completed`` is the undo record for the items that were processed before
    the failure (or None when nothing succeeded); ``remaining`` lists the
    sources that were not processed, starting with the one that failed.
    """

    def __init__(self, cause, completed=None, remaining=()):
        super().__init__(str(cause))
        self.cause = cause
        self.completed = completed
        self.remaining = list(remaining)

    @property
    def permission_denied(self):
        return is_permission_error(self.cause)


class UndoPermissionError(Exception):
    """Undo was denied; the action is back on the stack awaiting escalation."""

    def __init__(self, action, cause):
        super().__init__(str(cause))
        self.action = action
        self.cause = cause


class ElevationError(Exception):
    """The escalation helper ran the command and reported a failure."""


class IncorrectCredentialError(ElevationError):
    """The escalation helper rejected the password."""

    def __init__(self, message='Incorrect password'):
        super().__init__(message)
