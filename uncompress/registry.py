"""
uncompress.registry - decompression methods by filename suffix

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import os
import logging
import threading


class MethodRegistry:
    """Retrieve decompression methods through filename suffixes."""

    def __init__(self, methods=None):
        """
        Set up registry.

        methods: mapping of suffix to method to start with
        """
        self._lock = threading.RLock()
        self._methods = {}
        for suffix, method in dict(methods or {}).items():
            self.register(suffix, method)

    def __repr__(self):
        """String representation."""
        return f'<{type(self).__name__} suffixes={self.get_suffixes()}>'

    def __contains__(self, suffix):
        with self._lock:
            return suffix in self._methods

    def __len__(self):
        with self._lock:
            return len(self._methods)

    def copy(self):
        """Independent registry with the same entries."""
        with self._lock:
            return type(self)(self._methods)

    def get_suffixes(self):
        """Get tuple of all registered suffixes."""
        with self._lock:
            return tuple(self._methods.keys())

    def register(self, suffix, method):
        """
        Register method for filenames ending in `.suffix`.
        An existing registration for the suffix is replaced.

        suffix: case-sensitive filename suffix, without the leading dot
        method: decompression method
        """
        if not isinstance(suffix, str):
            raise TypeError(
                f'Suffix must be str, not {type(suffix).__name__}'
            )
        if not suffix:
            raise ValueError('Suffix must not be empty')
        if not callable(method):
            raise TypeError(f'Decompression method {method!r} is not callable')
        with self._lock:
            if suffix in self._methods:
                logging.debug(
                    'Replacing method %r for suffix `%s`.',
                    self._methods[suffix], suffix
                )
            self._methods[suffix] = method

    def unregister(self, suffix):
        """Remove method for suffix, if any."""
        with self._lock:
            self._methods.pop(suffix, None)

    def registered(self, name='', suffixes=()):
        """
        Decorator to register a decompression method.

        name: name of the compression format
        suffixes: filename suffixes for this format
        """
        if not isinstance(suffixes, (list, tuple)):
            raise TypeError(
                'Registration parameter `suffixes` must be list or tuple'
            )

        def _decorator(method):
            method.format = name or getattr(method, 'format', '')
            method.suffixes = tuple(suffixes)
            method.external = getattr(method, 'external', False)
            if not method.format:
                raise ValueError('No registration name given')
            for suffix in suffixes:
                self.register(suffix, method)
            return method

        return _decorator

    def match(self, filename):
        """
        Find the registered suffix and method matching a filename.
        Returns (suffix, method) or None. The longest matching suffix wins.
        """
        filename = os.fspath(filename)
        if isinstance(filename, bytes):
            filename = os.fsdecode(filename)
        with self._lock:
            matches = [
                (_suffix, _method)
                for _suffix, _method in self._methods.items()
                if filename.endswith('.' + _suffix)
            ]
        if not matches:
            return None
        return max(matches, key=lambda _item: len(_item[0]))

    def lookup(self, filename):
        """Get the decompression method for a filename, or None."""
        match = self.match(filename)
        if match is None:
            return None
        return match[1]


# in-process decoders
methods = MethodRegistry()

# external decompression programs
programs = MethodRegistry()
