"""
uncompress.opener - open files, decompressing as needed

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import io
import os
import logging

from .base import OpenError
from .registry import methods


def open(name, registry=None):
    """
    Open the named file for reading.
    If the file name has one of the suffixes in the registry, the resulting
    stream holds the result of decompressing the file contents, using the
    method registered for that suffix. Otherwise, the plain file is returned.

    name: path of the file to open
    registry: MethodRegistry to use (default: in-process `methods`)
    """
    return open_with_cancellation(None, name, registry)


def open_with_cancellation(cancel, name, registry=None):
    """
    Open the named file for reading, as `open()`.
    Decompression programs started for the file are killed when `cancel` is
    triggered. Cancellation does not affect in-process decoders.

    cancel: Cancellation or None
    name: path of the file to open
    registry: MethodRegistry to use (default: in-process `methods`)
    """
    if registry is None:
        registry = methods
    name = os.fspath(name)
    match = registry.match(name)
    if match is None:
        logging.debug("No decompression method for '%s'", name)
        return _open_raw(name)
    suffix, method = match
    stem = name[:-len(suffix)-1]
    logging.debug(
        "Decompressing '%s' with %s",
        name, getattr(method, 'format', None) or method
    )
    if getattr(method, 'external', False):
        # the program opens the file itself; check it's there to read
        _open_raw(name).close()
        return method(name, cancel, name=stem)
    instream = _open_raw(name)
    try:
        return method(instream, stem)
    except Exception:
        instream.close()
        raise


def _open_raw(name):
    """Open the file in binary read mode."""
    try:
        return io.open(name, 'rb')
    except OSError as e:
        raise OpenError(e.errno, e.strerror, e.filename) from e
