from contextlib import contextmanager
import threading

from app.errors import DuplicateSubmission


class SubmitGuard:
    """Holds one in-flight write per (identity, form) key."""

    def __init__(self):
        self._lock = threading.Lock()
        self._in_flight = set()

    @contextmanager
    def hold(self, key):
        with self._lock:
            if key in self._in_flight:
                raise DuplicateSubmission()
            self._in_flight.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(key)

    def busy(self, key) -> bool:
        with self._lock:
            return key in self._in_flight


submit_guard = SubmitGuard()
