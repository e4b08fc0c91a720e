from datetime import timedelta

import pytest

from errors import KeyExhaustionError, RandomSourceUnavailableError
from services.gateway import MAX_KEY_SIZE, MIN_KEY_SIZE, Gateway
from services.store import SetOptions


class RecordingGenerator:
    """Returns queued keys and records requested sizes."""

    def __init__(self, keys):
        self.keys = list(keys)
        self.sizes = []

    def __call__(self, n):
        self.sizes.append(n)
        return self.keys.pop(0)


def test_round_trip(gateway):
    key = gateway.issue_and_store("hello")
    assert len(key) == MIN_KEY_SIZE
    assert gateway.retrieve(key) == ("hello", True)


def test_retrieve_missing(gateway):
    assert gateway.retrieve("zzzz") == ("", False)


def test_zero_ttl_scenario(gateway, clock):
    key = gateway.issue_and_store("hello", SetOptions(ttl=timedelta(0)))
    assert len(key) == 4
    assert gateway.retrieve(key) == ("hello", True)
    clock.advance(milliseconds=1)
    assert gateway.retrieve(key) == ("", False)


def test_perpetual_scenario(gateway, clock):
    key = gateway.issue_and_store("world", SetOptions(ttl=timedelta(seconds=-1)))
    clock.advance(days=10_000)
    assert gateway.retrieve(key) == ("world", True)


def test_default_ttl_applies(gateway, clock):
    key = gateway.issue_and_store("hello")
    clock.advance(minutes=2)
    assert gateway.retrieve(key) == ("hello", True)
    clock.advance(seconds=1)
    assert gateway.retrieve(key) == ("", False)


def test_sequential_keys_are_distinct(gateway):
    keys = {gateway.issue_and_store(str(i)) for i in range(500)}
    assert len(keys) == 500


def test_collision_escalates_key_size(store):
    store.set("aaaa", "taken")
    gen = RecordingGenerator(["aaaa", "bbbbb"])
    gateway = Gateway(store, random_string=gen)

    assert gateway.issue_and_store("v") == "bbbbb"
    assert gen.sizes == [4, 5]
    assert store.get("aaaa") == ("taken", True)


def test_expired_key_is_reusable(store, clock):
    store.set("aaaa", "old", SetOptions(ttl=timedelta(seconds=1)))
    clock.advance(seconds=2)
    gateway = Gateway(store, random_string=RecordingGenerator(["aaaa"]))

    assert gateway.issue_and_store("new") == "aaaa"
    assert store.get("aaaa") == ("new", True)


def test_key_exhaustion_after_size_eight(store):
    store.set("dupe", "taken")
    sizes = []

    def always_dupe(n):
        sizes.append(n)
        return "dupe"

    gateway = Gateway(store, random_string=always_dupe)
    with pytest.raises(KeyExhaustionError):
        gateway.issue_and_store("v")
    assert sizes == list(range(MIN_KEY_SIZE, MAX_KEY_SIZE + 1))
    assert sizes == [4, 5, 6, 7, 8]


def test_random_source_failure_propagates(store):
    calls = []

    def broken(n):
        calls.append(n)
        raise RandomSourceUnavailableError("boom")

    gateway = Gateway(store, random_string=broken)
    with pytest.raises(RandomSourceUnavailableError):
        gateway.issue_and_store("v")
    assert calls == [4]
    assert len(store) == 0


def test_probe_then_set_race_is_last_write_wins(store):
    """Another issuer commits the same key between our probe and our set."""

    class RacingStore:
        def __init__(self, inner):
            self.inner = inner

        def get(self, key):
            result = self.inner.get(key)
            self.inner.set(key, "first")
            return result

        def set(self, key, value, options=None):
            self.inner.set(key, value, options)

    gateway = Gateway(RacingStore(store), random_string=lambda n: "abcd")
    assert gateway.issue_and_store("second") == "abcd"
    assert store.get("abcd") == ("second", True)
