"""
uncompress.process - decompression through external programs

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import os
import shutil
import logging
import tempfile
import subprocess

from .base import SpawnError
from .streams import ProcessStream


class Program:
    """Decompression method that runs `command [args] path` and reads stdout."""

    external = True

    def __init__(self, command, *args):
        """
        command: name or path of the decompression program
        args: arguments inserted before the file path
        """
        if not command:
            raise ValueError('No program given')
        self.command = command
        self.args = args
        self.format = command

    def __repr__(self):
        """String representation."""
        return f"<{type(self).__name__} {' '.join((self.command, *self.args))}>"

    def __eq__(self, other):
        if not isinstance(other, Program):
            return NotImplemented
        return (self.command, self.args) == (other.command, other.args)

    def __hash__(self):
        return hash((self.command, self.args))

    def __call__(self, path, cancel=None, *, name=''):
        """
        Start the program on a file and return its output stream.

        path: file to decompress; opened by the program itself
        cancel: Cancellation that kills the program when triggered
        name: name for the decompressed stream
        """
        path = os.fspath(path)
        executable = shutil.which(self.command)
        if executable is None:
            raise SpawnError(
                f'`{self.command}` not found in PATH; '
                f"cannot decompress '{path}'"
            )
        if cancel is not None and cancel.cancelled:
            raise SpawnError(
                f"Cancelled before starting `{self.command}` on '{path}'"
            )
        try:
            stderr = tempfile.TemporaryFile()
        except OSError as e:
            raise SpawnError(
                f"Could not capture errors from `{self.command}`: {e}"
            ) from e
        try:
            process = subprocess.Popen(
                [executable, *self.args, path],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr,
            )
        except OSError as e:
            stderr.close()
            raise SpawnError(
                f"Could not start `{self.command}` on '{path}': {e}"
            ) from e
        logging.debug(
            'Started `%s` with pid %d on %s', self.command, process.pid, path
        )
        return ProcessStream(
            process, name=name or path, cancel=cancel, stderr=stderr
        )
