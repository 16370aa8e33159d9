"""
uncompress.base - supporting classes

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

from .errors import (
    UncompressError, OpenError, DecodeInitError, SpawnError,
    DecodeRuntimeError, DecodeCancelled, CloseError,
)
from .imports import import_all
