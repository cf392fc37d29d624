"""Synchronization of presence records between peers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from gw2_presence.domain.errors import MalformedCommandError, PayloadTooLargeError
from gw2_presence.domain.models import CommandKind

if TYPE_CHECKING:
    from gw2_presence.domain.contracts import (
        DisplayRefresherProtocol,
        PeerTransportProtocol,
        PresenceCacheProtocol,
        PresenceCodecProtocol,
        PresenceSourceProtocol,
    )
    from gw2_presence.domain.models import PeerCommand, PresenceRecord

logger = logging.getLogger(__name__)


class PresenceSyncService:
    """Connects the local tracker, the peer cache and the host's transport.

    Outbound, it publishes the local record to every established session.
    Inbound, it dispatches peer commands and keeps the cache in line with
    session lifecycle events.
    """

    def __init__(
        self,
        codec: PresenceCodecProtocol,
        cache: PresenceCacheProtocol,
        transport: PeerTransportProtocol,
        display_refresher: DisplayRefresherProtocol,
        own_participant_id: Callable[[int], int],
        render: Callable[[PresenceRecord], str],
    ) -> None:
        """Initialize the service.

        Args:
            codec: Wire codec.
            cache: Cache of peers' records.
            transport: Host primitive for sending commands.
            display_refresher: Host primitive for redrawing a participant.
            own_participant_id: Returns the local participant ID in a session.
            render: Turns a record into display text.
        """
        self._codec = codec
        self._cache = cache
        self._transport = transport
        self._display_refresher = display_refresher
        self._own_participant_id = own_participant_id
        self._render = render
        self._source: PresenceSourceProtocol | None = None
        self._sessions: set[int] = set()
        self._displayed: tuple[int, int] | None = None

    def bind_source(self, source: PresenceSourceProtocol) -> None:
        """Attach the local presence source (the tracker)."""
        self._source = source

    @property
    def sessions(self) -> frozenset[int]:
        return frozenset(self._sessions)

    async def publish(self, record: PresenceRecord) -> None:
        """Send the local record to everyone in every established session."""
        for session_id in sorted(self._sessions):
            await self._send_record(session_id, record, None)

    async def _send_record(
        self, session_id: int, record: PresenceRecord, target_participant_id: int | None
    ) -> None:
        try:
            payload = self._codec.encode_update(self._own_participant_id(session_id), record)
            await self._transport.send_to_peers(session_id, payload, target_participant_id)
        except PayloadTooLargeError as e:
            logger.warning(f"Not sending presence to session {session_id}: {e}")
        except Exception as e:
            logger.warning(f"Failed to send presence to session {session_id}: {e}")

    async def handle_command(self, session_id: int, text: str) -> None:
        """Handle a command received from a peer.

        Malformed commands are logged and dropped without touching the cache.
        """
        logger.debug(f"Received command on session {session_id}: {text!r}")
        try:
            command = self._codec.parse_command(text)
            if command.kind == CommandKind.PRESENCE_UPDATE:
                participant_id, record = self._codec.decode_update(command)
                self._on_presence_update(session_id, participant_id, record)
            elif command.kind == CommandKind.PRESENCE_REQUEST:
                participant_id = self._codec.decode_request(command)
                await self._on_presence_request(session_id, participant_id)
            else:
                logger.debug(f"Ignoring unknown command on session {session_id}")
        except MalformedCommandError as e:
            logger.warning(f"Dropping malformed command on session {session_id}: {e}")

    def _on_presence_update(
        self, session_id: int, participant_id: int, record: PresenceRecord
    ) -> None:
        self._cache.upsert(session_id, participant_id, record)
        logger.debug(f"Updated presence of participant {participant_id} on session {session_id}")
        self._refresh_if_displayed(session_id, participant_id)

    async def _on_presence_request(self, session_id: int, participant_id: int) -> None:
        if self._source is None:
            logger.debug("No presence source bound, ignoring presence request")
            return
        await self._send_record(session_id, self._source.current_record(), participant_id)

    def _refresh_if_displayed(self, session_id: int, participant_id: int) -> None:
        if self._displayed == (session_id, participant_id):
            self._display_refresher.request_display_refresh(session_id, participant_id)

    def on_session_established(self, session_id: int) -> None:
        """Start publishing to a session and broadcast right away."""
        logger.info(f"Session {session_id} established")
        self._sessions.add(session_id)
        if self._source is not None:
            self._source.request_update()

    def on_session_disconnected(self, session_id: int) -> None:
        """Forget a session and everything received on it."""
        self._sessions.discard(session_id)
        removed = self._cache.remove_all(session_id)
        logger.info(
            f"Session {session_id} disconnected, removed {removed} cached presence record(s)"
        )
        if self._displayed is not None and self._displayed[0] == session_id:
            self._displayed = None

    def on_session_stopped(self, session_id: int) -> None:
        """The server of a session shut down."""
        self.on_session_disconnected(session_id)

    def on_participant_removed(self, session_id: int, participant_id: int) -> None:
        """A participant left or was kicked from a session."""
        if self._cache.remove(session_id, participant_id):
            logger.info(
                f"Participant {participant_id} removed from session {session_id}, "
                "dropped cached presence"
            )
            self._refresh_if_displayed(session_id, participant_id)

    async def describe_participant(self, session_id: int, participant_id: int) -> str:
        """Render the cached presence of a participant for display.

        The first time a participant is displayed, their current presence is
        requested so the display catches up with records sent before we joined.

        Returns:
            Display text, or an empty string if nothing is known.
        """
        is_new = self._displayed != (session_id, participant_id)
        self._displayed = (session_id, participant_id)

        entry = self._cache.get(session_id, participant_id)
        text = self._render(entry.record) if entry is not None else ""

        if is_new:
            payload = self._codec.encode_request(self._own_participant_id(session_id))
            try:
                await self._transport.send_to_peers(session_id, payload, participant_id)
            except Exception as e:
                logger.warning(f"Failed to request presence of participant {participant_id}: {e}")
        return text
