"""
uncompress.decoders.unixcompress - compress (.Z) encoding

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging

import ncompress

from ..base import DecodeInitError
from ..magic import Magic
from ..streams import DecodedStream, get_bytesio
from ..registry import methods
from .compressors import decode_gzip


_COMPRESS_MAGIC = Magic(b'\x1f\x9d')
# .Z files may hold gzip data, as zcat accepts both
_GZIP_MAGIC = Magic(b'\x1f\x8b')


@methods.registered(
    name='compress',
    suffixes=('Z',),
)
def decode_compress(instream, name=''):
    """Decode a compress (LZW) or gzip stream."""
    if _GZIP_MAGIC.fits(instream):
        logging.debug('Found gzip signature in %r', instream)
        return decode_gzip(instream, name)
    if not _COMPRESS_MAGIC.fits(instream):
        raise DecodeInitError(
            f"Not a valid compress stream '{name or instream.name}'"
        )
    # LZW is decoded as a block, so errors show up here and not on read
    try:
        data = ncompress.decompress(instream)
    except (ValueError, OSError, EOFError) as e:
        raise DecodeInitError(
            f"Not a valid compress stream '{name or instream.name}': {e}"
        ) from e
    return DecodedStream(get_bytesio(data), instream, name=name)
