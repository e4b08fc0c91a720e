"""Issues short random keys and binds them to values in the datastore."""

from collections.abc import Callable

from errors import KeyExhaustionError
from services import keygen
from services.store import DatastoreProtocol, SetOptions

MIN_KEY_SIZE = 4
MAX_KEY_SIZE = 8


class Gateway:
    """Front door to the datastore for the HTTP routes.

    ``random_string(n)`` returns ``n`` random key symbols; it is injected so
    tests can force collisions.
    """

    def __init__(
        self,
        store: DatastoreProtocol,
        random_string: Callable[[int], str] = keygen.random_string,
    ):
        self.store = store
        self._random_string = random_string

    def retrieve(self, key: str) -> tuple[str, bool]:
        return self.store.get(key)

    def issue_and_store(self, value: str, options: SetOptions | None = None) -> str:
        """Store ``value`` under a fresh key and return the key.

        Starts with 4-symbol keys and grows by one symbol after each collision.
        Gives up with KeyExhaustionError once the size passes 8. Errors from
        the random source propagate unchanged.

        The probe and the set are separate store calls, so two concurrent
        issuances can pick the same free key; the later set wins.
        """
        size = MIN_KEY_SIZE
        while size <= MAX_KEY_SIZE:
            key = self._random_string(size)
            _, taken = self.store.get(key)
            if not taken:
                self.store.set(key, value, options)
                return key
            size += 1
        raise KeyExhaustionError(MIN_KEY_SIZE, MAX_KEY_SIZE)
