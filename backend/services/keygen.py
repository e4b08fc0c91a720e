"""Short random keys drawn from the OS CSPRNG.

Keys use lowercase letters and digits only so they are easy to type by hand
into a remote session.
"""

import os
import secrets
import string

from errors import RandomSourceUnavailableError

ALPHABET = string.digits + string.ascii_lowercase


def assert_random_source_available() -> None:
    """Read one byte from the OS entropy source, raising if it cannot supply it."""
    try:
        os.urandom(1)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceUnavailableError(str(e)) from e


def random_string(n: int) -> str:
    """Return ``n`` symbols, each chosen uniformly and independently from ALPHABET.

    Raises RandomSourceUnavailableError if the system's secure random number
    generator fails, in which case the caller should not continue.
    """
    if n < 0:
        raise ValueError(f"key size must be non-negative, got {n}")
    try:
        return "".join(ALPHABET[secrets.randbelow(len(ALPHABET))] for _ in range(n))
    except (OSError, NotImplementedError) as e:
        raise RandomSourceUnavailableError(str(e)) from e
