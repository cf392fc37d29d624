"""Tests for the peer presence cache."""

import threading

from gw2_presence.adapters.cache import PeerPresenceCache
from gw2_presence.domain.models import PresenceRecord
from tests.fakes import FakeClock

RECORD = PresenceRecord(character_name="Eir Stegalkin", map_id=28)
OTHER_RECORD = PresenceRecord(character_name="Garm", map_id=28)


def test_upsert_then_get() -> None:
    """Given an upserted record, when getting it, then it is returned with its key and receipt time."""
    cache = PeerPresenceCache(clock=FakeClock(123.0))

    cache.upsert(1, 10, RECORD)
    entry = cache.get(1, 10)

    assert entry is not None
    assert entry.record == RECORD
    assert entry.session_id == 1
    assert entry.participant_id == 10
    assert entry.received_at == 123.0


def test_get_missing_returns_none() -> None:
    """Given an empty cache, when getting a record, then None is returned."""
    assert PeerPresenceCache().get(1, 10) is None


def test_upsert_overwrites_in_place() -> None:
    """Given an existing record, when upserting again, then only the newest record is kept."""
    cache = PeerPresenceCache()

    cache.upsert(1, 10, RECORD)
    cache.upsert(1, 10, OTHER_RECORD)

    entry = cache.get(1, 10)
    assert entry is not None
    assert entry.record == OTHER_RECORD
    assert len(cache) == 1


def test_upsert_stores_a_copy() -> None:
    """Given a stored record, when the caller mutates its record, then the cache is unchanged."""
    cache = PeerPresenceCache()
    record = PresenceRecord(character_name="Zojja")

    cache.upsert(1, 10, record)
    record.character_name = "Snaff"

    entry = cache.get(1, 10)
    assert entry is not None
    assert entry.record.character_name == "Zojja"


def test_same_participant_in_different_sessions_is_separate() -> None:
    """Given the same participant ID in two sessions, when upserting, then both are kept."""
    cache = PeerPresenceCache()

    cache.upsert(1, 10, RECORD)
    cache.upsert(2, 10, OTHER_RECORD)

    assert cache.get(1, 10).record == RECORD  # type: ignore[union-attr]
    assert cache.get(2, 10).record == OTHER_RECORD  # type: ignore[union-attr]


def test_remove_evicts_one_entry() -> None:
    """Given two participants, when removing one, then the other stays."""
    cache = PeerPresenceCache()
    cache.upsert(1, 10, RECORD)
    cache.upsert(1, 11, OTHER_RECORD)

    assert cache.remove(1, 10) is True

    assert cache.get(1, 10) is None
    assert cache.get(1, 11) is not None


def test_remove_missing_is_noop() -> None:
    """Given no record, when removing, then nothing happens."""
    cache = PeerPresenceCache()
    cache.upsert(1, 10, RECORD)

    assert cache.remove(1, 99) is False
    assert len(cache) == 1


def test_remove_all_is_isolated_per_session() -> None:
    """Given records in two sessions, when removing all of one, then the other is untouched."""
    cache = PeerPresenceCache()
    cache.upsert(1, 10, RECORD)
    cache.upsert(2, 20, OTHER_RECORD)
    cache.upsert(2, 21, OTHER_RECORD)

    assert cache.remove_all(2) == 2

    entry = cache.get(1, 10)
    assert entry is not None
    assert entry.record == RECORD
    assert cache.participants(2) == set()
    assert cache.participants(1) == {10}


def test_remove_all_of_unknown_session() -> None:
    """Given no records for a session, when removing all, then zero is returned."""
    assert PeerPresenceCache().remove_all(5) == 0


def test_concurrent_access_keeps_one_entry_per_key() -> None:
    """Given writers and readers on several threads, when they finish, then the cache is consistent."""
    cache = PeerPresenceCache()
    errors: list[Exception] = []

    def writer(session_id: int) -> None:
        try:
            for i in range(200):
                cache.upsert(session_id, i % 10, PresenceRecord(map_id=i))
                cache.get(session_id, i % 10)
                if i % 50 == 0:
                    cache.remove_all(session_id)
        except Exception as e:  # pragma: no cover - only on failure
            errors.append(e)

    threads = [threading.Thread(target=writer, args=(session_id,)) for session_id in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    for session_id in range(4):
        assert cache.participants(session_id) <= set(range(10))
    assert len(cache) <= 40
