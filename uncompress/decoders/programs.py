"""
uncompress.decoders.programs - decompression through command-line tools

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

from ..process import Program
from ..registry import programs


zcat = Program('zcat')
bzcat = Program('bzcat')
xzcat = Program('xzcat')
zstdcat = Program('zstdcat')


for _suffix, _program in (
        ('Z', zcat),
        ('z', zcat),
        ('gz', zcat),
        ('bz2', bzcat),
        ('xz', xzcat),
        ('lzma', xzcat),
        ('zst', zstdcat),
    ):
    programs.register(_suffix, _program)
