"""
uncompress.decoders - built-in decompression methods

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

from uncompress.base import import_all
import_all(__name__)
