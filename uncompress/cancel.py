"""
uncompress.cancel - cancellation signal for process-backed streams

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
import threading


class Cancellation:
    """One-shot signal that can be triggered from any thread."""

    def __init__(self):
        self._lock = threading.Lock()
        self._callbacks = []
        self._cancelled = False
        self._timer = None

    def __repr__(self):
        """String representation."""
        return (
            f"<{type(self).__name__}"
            f"{' [cancelled]' if self._cancelled else ''}>"
        )

    @classmethod
    def after(cls, seconds):
        """Cancellation that triggers by itself after a delay."""
        cancellation = cls()
        cancellation._timer = threading.Timer(seconds, cancellation.cancel)
        cancellation._timer.daemon = True
        cancellation._timer.start()
        return cancellation

    @property
    def cancelled(self):
        """Cancellation has been triggered."""
        return self._cancelled

    def cancel(self):
        """Trigger cancellation; run the registered callbacks once."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None
        if timer:
            timer.cancel()
        logging.debug('Cancelling %d pending operation(s).', len(callbacks))
        for callback in callbacks:
            callback()

    def on_cancel(self, callback):
        """
        Call `callback` without arguments when cancelled.
        If already cancelled, call it right away.
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return callback
        callback()
        return callback

    def remove(self, callback):
        """Stop tracking a callback; no-op if not registered."""
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass
