"""
uncompress.magic - file signature recognition

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


class Magic:
    """Match file contents against bytes mask."""

    def __init__(self, value, offset=0):
        """Initialise bytes mask from bytes at given offset."""
        if not isinstance(value, bytes):
            raise TypeError(
                f'Initialiser must be bytes, not {type(value).__name__}'
            )
        self._mask = ((offset, value),)

    def __len__(self):
        """Mask length."""
        return max(_item[0] + len(_item[1]) for _item in self._mask)

    def __repr__(self):
        return f'<{type(self).__name__} {self._mask!r}>'

    def matches(self, target):
        """Target bytes match the mask."""
        if len(target) < len(self):
            return False
        for offset, value in self._mask:
            if target[offset:offset+len(value)] != value:
                return False
        return True

    def fits(self, instream):
        """Binary stream matches the signature. Stream must support peek()."""
        return self.matches(instream.peek(len(self)))
