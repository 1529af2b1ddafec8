import threading
from contextlib import contextmanager

from bitfreeze.extensions import db


class KeyedLock:
    """
    One mutex per key, created on first use.

    Used to serialize read-modify-write cycles on the same account. hold()
    takes several keys in sorted order so two callers locking the same pair
    can never deadlock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, key) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, *keys):
        ordered = sorted({k for k in keys if k is not None})
        acquired = []
        try:
            for key in ordered:
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def __len__(self):
        with self._guard:
            return len(self._locks)


account_locks = KeyedLock()


@contextmanager
def locked_transaction(*keys):
    """
    Hold the account locks for keys and run the block as one database
    transaction: committed on success, rolled back on any error.
    """
    with account_locks.hold(*keys):
        try:
            yield
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
