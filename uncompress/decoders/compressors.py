"""
uncompress.decoders.compressors - single-file compression formats

(c) 2021--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
import gzip
import lzma
import bz2
import zlib

import pyzstd

from ..base import DecodeInitError
from ..streams import DecodedStream
from ..registry import methods


def _decode(format, open_func, instream, name, errors):
    """Wrap a raw stream in a decoder and check the header."""
    if not instream.peek(1):
        raise DecodeInitError(
            f"Not a valid {format} stream '{name or instream.name}': empty file"
        )
    decoder = open_func(instream)
    try:
        # force reading the header
        decoder.peek(1)
    except errors as e:
        decoder.close()
        raise DecodeInitError(
            f"Not a valid {format} stream "
            f"'{name or instream.name}': {e}"
        ) from e
    logging.debug('Decoding %s stream from %r', format, instream)
    return DecodedStream(decoder, instream, name=name, errors=errors)


###############################################################################
# gzip

_GZIP_ERRORS = (OSError, EOFError, zlib.error)

@methods.registered(
    name='gzip',
    suffixes=('gz', 'z'),
)
def decode_gzip(instream, name=''):
    """Decode a gzip-compressed stream."""
    return _decode(
        'gzip', lambda _f: gzip.open(_f, mode='rb'), instream, name, _GZIP_ERRORS
    )


###############################################################################
# lzma

_LZMA_ERRORS = (OSError, EOFError, lzma.LZMAError)

@methods.registered(
    name='xz',
    suffixes=('xz',),
)
def decode_xz(instream, name=''):
    """Decode an xz-compressed stream."""
    return _decode(
        'xz', lambda _f: lzma.open(_f, mode='rb', format=lzma.FORMAT_XZ),
        instream, name, _LZMA_ERRORS
    )


@methods.registered(
    name='lzma',
    suffixes=('lzma',),
)
def decode_lzma(instream, name=''):
    """Decode a legacy lzma-alone stream."""
    return _decode(
        'lzma', lambda _f: lzma.open(_f, mode='rb', format=lzma.FORMAT_ALONE),
        instream, name, _LZMA_ERRORS
    )


###############################################################################
# bzip2

@methods.registered(
    name='bzip2',
    suffixes=('bz2',),
)
def decode_bzip2(instream, name=''):
    """Decode a bzip2-compressed stream."""
    return _decode(
        'bzip2', lambda _f: bz2.open(_f, mode='rb'), instream, name, (OSError, EOFError)
    )


###############################################################################
# zstandard

@methods.registered(
    name='zstd',
    suffixes=('zst',),
)
def decode_zstd(instream, name=''):
    """Decode a zstandard-compressed stream."""
    return _decode(
        'zstd', lambda _f: pyzstd.ZstdFile(_f, mode='r'),
        instream, name, (OSError, EOFError, pyzstd.ZstdError)
    )
