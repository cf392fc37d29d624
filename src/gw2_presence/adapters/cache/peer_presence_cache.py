"""In-memory cache of peers' presence records."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from gw2_presence.domain.contracts.presence_cache import PresenceCacheProtocol
from gw2_presence.domain.models import RemotePresenceRecord

if TYPE_CHECKING:
    from gw2_presence.domain.models import PresenceRecord

logger = logging.getLogger(__name__)


class PeerPresenceCache(PresenceCacheProtocol):
    """Presence records keyed by (session ID, participant ID).

    Inbound commands and display rendering may come from different host
    threads, so every operation holds the same lock.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize the cache.

        Args:
            clock: Time source used to stamp received records.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._records: dict[tuple[int, int], RemotePresenceRecord] = {}

    def upsert(
        self, session_id: int, participant_id: int, record: PresenceRecord
    ) -> RemotePresenceRecord:
        """Insert or replace a participant's record.

        The record is copied, so later changes by the caller do not leak in.
        """
        entry = RemotePresenceRecord(
            session_id=session_id,
            participant_id=participant_id,
            record=record.snapshot(),
            received_at=self._clock(),
        )
        with self._lock:
            self._records[(session_id, participant_id)] = entry
        return entry

    def remove(self, session_id: int, participant_id: int) -> bool:
        """Remove a participant's record; no-op if absent."""
        with self._lock:
            return self._records.pop((session_id, participant_id), None) is not None

    def remove_all(self, session_id: int) -> int:
        """Remove every record received on a session.

        Returns:
            Number of records removed.
        """
        with self._lock:
            keys = [key for key in self._records if key[0] == session_id]
            for key in keys:
                del self._records[key]
        if keys:
            logger.debug(f"Evicted {len(keys)} presence record(s) of session {session_id}")
        return len(keys)

    def get(self, session_id: int, participant_id: int) -> RemotePresenceRecord | None:
        """Get a participant's record, or None if nothing was received."""
        with self._lock:
            return self._records.get((session_id, participant_id))

    def participants(self, session_id: int) -> set[int]:
        """Get the participants with a cached record in a session."""
        with self._lock:
            return {participant for session, participant in self._records if session == session_id}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
