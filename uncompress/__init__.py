"""
uncompress - open files, decompressing them transparently

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import sys as _sys
assert _sys.version_info >= (3, 9)

from .constants import VERSION as __version__
from .base import (
    UncompressError, OpenError, DecodeInitError, SpawnError,
    DecodeRuntimeError, DecodeCancelled, CloseError,
)
from .registry import MethodRegistry, methods, programs
from .cancel import Cancellation
from .streams import StreamBase, DecodedStream, ProcessStream
from .process import Program
from .opener import open, open_with_cancellation

# ensure plugins get loaded
from . import decoders as _decoders
