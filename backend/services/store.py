"""In-memory key-value store with per-entry TTL and lazy expiry on read.

Nothing sweeps expired entries in the background: an entry is removed the
first time a ``get`` finds it stale. State lives only in process memory and is
lost on restart. Each uvicorn worker holds its own store, so run one worker.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

# Default time-to-live when no TTL option is given
DEFAULT_TTL = timedelta(minutes=2)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SetOptions:
    """Options for ``set``. ``ttl=None`` means the store's default TTL; a negative ttl never expires."""

    ttl: timedelta | None = None


@dataclass(frozen=True)
class Entry:
    value: str
    # Negative means the entry never expires
    ttl: timedelta
    # Only meaningful when ttl is non-negative
    created_at: datetime | None = None

    @property
    def perpetual(self) -> bool:
        return self.ttl < timedelta(0)

    def expired(self, now: datetime) -> bool:
        if self.perpetual:
            return False
        return now - self.created_at > self.ttl


class DatastoreProtocol(Protocol):
    def get(self, key: str) -> tuple[str, bool]: ...

    def set(self, key: str, value: str, options: SetOptions | None = None) -> None: ...


class Datastore:
    """Unsynchronized store. Wrap it in ConcurrentDatastore before sharing across threads."""

    def __init__(self, default_ttl: timedelta = DEFAULT_TTL, clock: Clock = utc_now):
        self._data: dict[str, Entry] = {}
        self._default_ttl = default_ttl
        self._clock = clock

    def get(self, key: str) -> tuple[str, bool]:
        """Return ``(value, True)`` for a live key, else ``("", False)``.

        An expired entry is deleted as a side effect.
        """
        entry = self.lookup(key)
        if entry is None:
            return "", False
        if entry.expired(self.now()):
            self._delete(key)
            return "", False
        return entry.value, True

    def set(self, key: str, value: str, options: SetOptions | None = None) -> None:
        """Insert or replace the entry for ``key``."""
        ttl = options.ttl if options is not None and options.ttl is not None else self._default_ttl
        created_at = self.now() if ttl >= timedelta(0) else None
        self._data[key] = Entry(value=value, ttl=ttl, created_at=created_at)

    def lookup(self, key: str) -> Entry | None:
        """Raw entry for ``key``, stale or not. Does not delete."""
        return self._data.get(key)

    def _delete(self, key: str) -> None:
        self._data.pop(key, None)

    def now(self) -> datetime:
        return self._clock()

    def __len__(self) -> int:
        return len(self._data)


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    A waiting writer blocks new readers so writers are not starved.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class ConcurrentDatastore:
    """Thread-safe wrapper around a Datastore.

    Lookups share the read lock. Both ``set`` and the delete of an expired
    entry found by ``get`` take the write lock.
    """

    def __init__(self, inner: Datastore | None = None):
        self._inner = inner if inner is not None else Datastore()
        self._lock = ReadWriteLock()

    def get(self, key: str) -> tuple[str, bool]:
        with self._lock.read_locked():
            entry = self._inner.lookup(key)
            if entry is None:
                return "", False
            if not entry.expired(self._inner.now()):
                return entry.value, True

        with self._lock.write_locked():
            # A set may have replaced the stale entry between the two locks
            return self._inner.get(key)

    def set(self, key: str, value: str, options: SetOptions | None = None) -> None:
        with self._lock.write_locked():
            self._inner.set(key, value, options)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._inner)
