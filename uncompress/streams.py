"""
uncompress.streams - decompressed stream wrappers

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import io
import logging

from .base import DecodeRuntimeError, DecodeCancelled, CloseError


# read size used to discard unread program output
_DRAIN_CHUNK = 65536


def get_bytesio(bytestring):
    """Workaround as our streams objects require a buffer."""
    return io.BufferedReader(io.BytesIO(bytestring))

def get_name(stream):
    """Get stream name, if available."""
    try:
        return stream.name
    except AttributeError:
        # not all streams have one (e.g. BytesIO)
        return ''


class StreamBase:
    """Base class for read-only decompressed streams."""

    # exceptions from the wrapped stream that indicate a decoding failure
    errors = (OSError,)

    def __init__(self, stream, name=''):
        self._stream = stream
        self.name = name or get_name(stream)
        self.mode = 'r'
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Ensure stream is closed."""
        self.close()

    def __repr__(self):
        """String representation."""
        return (
            f"<{type(self).__name__} name='{self.name}' mode='{self.mode}'"
            f"{' [closed]' if self.closed else ''}>"
        )

    def __iter__(self):
        return self

    def __next__(self):
        line = self.readline()
        if not line:
            raise StopIteration
        return line

    def readable(self):
        return True

    def seekable(self):
        return False

    def writable(self):
        return False

    def read(self, size=-1):
        """Read up to `size` decompressed bytes; all remaining if negative."""
        data = self._call(self._stream.read, size)
        if size is None or size < 0 or (size and not data):
            self._at_end()
        return data

    def read1(self, size=-1):
        data = self._call(self._stream.read1, size)
        if size and not data:
            self._at_end()
        return data

    def readinto(self, buffer):
        count = self._call(self._stream.readinto, buffer)
        if len(buffer) and not count:
            self._at_end()
        return count

    def readline(self, size=-1):
        line = self._call(self._stream.readline, size)
        if size and not line:
            self._at_end()
        return line

    def close(self):
        """Close the stream and release its resources."""
        raise NotImplementedError

    def _call(self, func, *args):
        """Call a read function on the wrapped stream, converting errors."""
        if self.closed:
            raise ValueError('I/O operation on closed stream.')
        try:
            return func(*args)
        except DecodeRuntimeError:
            raise
        except self.errors as e:
            raise DecodeRuntimeError(
                f"Error decompressing '{self.name}': {e}"
            ) from e

    def _at_end(self):
        """Reached end of stream."""


class DecodedStream(StreamBase):
    """Stream decompressed in-process from an underlying file."""

    def __init__(self, decoder, underlying, *, name='', errors=None):
        """
        decoder: binary file-like object producing decompressed data
        underlying: raw compressed file, owned and closed by this stream
        errors: exception classes the decoder raises on corrupt data
        """
        super().__init__(decoder, name=name or get_name(underlying))
        self._underlying = underlying
        if errors:
            self.errors = tuple(errors)

    def close(self):
        """Close the decoder, then the underlying file."""
        if self.closed:
            return
        self.closed = True
        logging.debug('Closing %r', self)
        try:
            try:
                self._stream.close()
            finally:
                self._underlying.close()
        except OSError as e:
            raise CloseError(f"Error closing '{self.name}': {e}") from e


class ProcessStream(StreamBase):
    """Standard output of an external decompression program."""

    def __init__(self, process, *, name='', cancel=None, stderr=None):
        """
        process: running subprocess.Popen with stdout on a pipe
        cancel: Cancellation that kills the process when triggered
        stderr: temporary file receiving the program's standard error
        """
        super().__init__(process.stdout, name=name)
        self.process = process
        self._cancel = cancel
        self._stderr = stderr
        self._eof = False
        self._killed = False
        if cancel is not None:
            cancel.on_cancel(self._kill)

    def __repr__(self):
        """String representation."""
        return (
            f"<{type(self).__name__} name='{self.name}' "
            f"pid={self.process.pid}{' [closed]' if self.closed else ''}>"
        )

    def read(self, size=-1):
        """Read up to `size` bytes, returning what the program has written so far."""
        if size is None or size <= 0:
            return super().read(size)
        data = self._call(self._stream.read1, size)
        if not data:
            self._at_end()
        return data

    def _at_end(self):
        """
        Pipe is exhausted; distinguish end of data from cancellation.
        A program that was signalled while already exiting, and exits with
        status 0, has delivered all its output and is not reported as cancelled.
        """
        self._eof = True
        if self._killed:
            # the signal has been sent, so this does not block for long
            if self.process.wait() == 0:
                self._killed = False
                return
            raise DecodeCancelled(f"Decompression of '{self.name}' cancelled")

    def _kill(self):
        """Forcibly terminate the program if it is still running."""
        if self.process.poll() is None:
            logging.debug('Killing %r', self)
            self._killed = True
            self.process.kill()

    def _drain(self):
        """Discard unread output so the program can't block on a full pipe."""
        drained = 0
        try:
            while True:
                data = self._stream.read(_DRAIN_CHUNK)
                if not data:
                    break
                drained += len(data)
        except OSError as e:
            raise CloseError(f"Error draining '{self.name}': {e}") from e
        if drained:
            logging.debug('Discarded %d unread bytes from %r', drained, self)

    def _read_stderr(self):
        """Collect the program's error output."""
        if self._stderr is None:
            return ''
        try:
            self._stderr.seek(0)
            return self._stderr.read().decode('utf-8', 'replace').strip()
        finally:
            self._stderr.close()

    def close(self):
        """
        Stop the program, drain its output and wait for it to exit.
        A non-zero exit status is raised as CloseError, unless the program
        was killed through cancellation.
        """
        if self.closed:
            return
        self.closed = True
        logging.debug('Closing %r', self)
        if self._cancel is not None:
            self._cancel.remove(self._kill)
            if not self._eof:
                # early close: don't wait for the program to finish its output
                self._kill()
        try:
            self._drain()
        finally:
            self._stream.close()
            returncode = self.process.wait()
            message = self._read_stderr()
        logging.debug('%r exited with status %d', self, returncode)
        if returncode and not self._killed:
            raise CloseError(
                f"`{self.process.args[0]}` exited with status {returncode} "
                f"on '{self.name}'" + (f': {message}' if message else '')
            )
