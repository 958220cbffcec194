"""
Privilege escalation through an external helper (sudo by default).

The password is written to the helper's stdin and is never kept beyond the
call that receives it.
"""
import logging
import os
import subprocess

from .errors import ElevationError, IncorrectCredentialError

LOGGER = logging.getLogger(__name__)

DEFAULT_HELPER = 'sudo'


class ElevationRunner:
    """Run single commands through the escalation helper."""

    def __init__(self, helper=DEFAULT_HELPER, run=subprocess.run):
        self.helper = helper
        self._run = run

    def _invoke(self, secret, args):
        argv = [self.helper, *args]
        LOGGER.debug('elevation helper: %s', ' '.join(argv))
        # input= makes subprocess write and close stdin before waiting.
        return self._run(
            argv,
            input=f'{secret}\n',
            text=True,
            capture_output=True,
            check=False,
        )

    def validate(self, secret):
        """Drop any cached grant and check the password.

        Raises IncorrectCredentialError when the helper rejects it.
        """
        try:
            result = self._invoke(secret, ['-k', '-S', '-p', '', '-v'])
        except OSError as exc:
            raise ElevationError(f'Cannot run {self.helper}: {exc}') from exc
        if result.returncode != 0:
            LOGGER.debug('credential validation failed (exit %s)', result.returncode)
            raise IncorrectCredentialError()

    def run(self, secret, argv):
        """Run ``argv`` through the helper; raise ElevationError on failure."""
        try:
            result = self._invoke(secret, ['-S', '-p', '', *argv])
        except OSError as exc:
            raise ElevationError(f'Cannot run {self.helper}: {exc}') from exc
        if result.returncode != 0:
            message = (result.stderr or '').strip() or f'{argv[0]} failed (exit {result.returncode})'
            raise ElevationError(message)
        return result

    def session(self, secret):
        """Validate once and return a backend that runs every call elevated."""
        self.validate(secret)
        return ElevatedBackend(self, secret)


class ElevatedBackend:
    """Backend twin of DirectBackend that shells out through the helper."""

    elevated = True

    def __init__(self, runner, secret):
        self._runner = runner
        self._secret = secret

    def __repr__(self):
        return f'ElevatedBackend(helper={self._runner.helper!r})'

    def rename(self, src, dst):
        # -T: an existing directory at dst is a target, never a container.
        self._runner.run(self._secret, ['mv', '-T', '--', src, dst])

    def copy(self, src, dst):
        self._runner.run(self._secret, ['cp', '-r', '--', src, dst])

    def remove(self, path):
        if os.path.isdir(path) and not os.path.islink(path):
            self._runner.run(self._secret, ['rm', '-rf', '--', path])
        else:
            self._runner.run(self._secret, ['rm', '--', path])
