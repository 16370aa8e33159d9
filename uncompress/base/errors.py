"""
uncompress.base.errors - exception classes

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


class UncompressError(Exception):
    """Base class for errors raised while opening compressed files."""


class OpenError(UncompressError, OSError):
    """File could not be opened for reading."""


class DecodeInitError(UncompressError, ValueError):
    """Compressed stream has a malformed or unsupported header."""


class SpawnError(UncompressError, OSError):
    """External decompression program could not be started."""


class DecodeRuntimeError(UncompressError, OSError):
    """Error while reading decompressed data."""


class DecodeCancelled(DecodeRuntimeError):
    """Decompression was cancelled before the end of the stream."""


class CloseError(UncompressError, OSError):
    """Error while releasing a stream's resources."""
