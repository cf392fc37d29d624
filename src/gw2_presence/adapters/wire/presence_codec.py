"""Text codec for presence commands exchanged between peers.

Commands are space separated tokens: ``<KIND> <param> ...``.

- ``PRESENCE_UPDATE <participant_id> <record_json>``
- ``PRESENCE_REQUEST <participant_id>``

The record is compact JSON using the short field aliases of PresenceRecord.
Spaces inside JSON strings are written as ``\\u0020`` so the payload is a
single token; any JSON parser reads it back unchanged.
"""

import logging

from pydantic import ValidationError

from gw2_presence.domain.contracts.presence_codec import PresenceCodecProtocol
from gw2_presence.domain.errors import MalformedCommandError, PayloadTooLargeError
from gw2_presence.domain.models import CommandKind, PeerCommand, PresenceRecord

logger = logging.getLogger(__name__)

# Plugin commands of the voice host are limited in size
DEFAULT_MAX_MESSAGE_LENGTH = 1024


def encode_record(record: PresenceRecord) -> str:
    """Serialize a record to a single-token JSON payload."""
    return record.model_dump_json(by_alias=True).replace(" ", "\\u0020")


def decode_record(payload: str) -> PresenceRecord:
    """Parse a record payload.

    Raises:
        MalformedCommandError: If the payload is not a valid record.
    """
    try:
        return PresenceRecord.model_validate_json(payload)
    except ValidationError as e:
        raise MalformedCommandError(
            f"Invalid presence payload ({e.error_count()} error(s)): {payload[:80]!r}"
        ) from e


def _parse_participant_id(value: str) -> int:
    try:
        participant_id = int(value)
    except ValueError as e:
        raise MalformedCommandError(f"Invalid participant ID: {value!r}") from e
    if participant_id < 0:
        raise MalformedCommandError(f"Invalid participant ID: {value!r}")
    return participant_id


class PresenceCodec(PresenceCodecProtocol):
    """Encodes and decodes presence commands."""

    def __init__(self, max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH) -> None:
        """Initialize the codec.

        Args:
            max_message_length: Largest encoded command in bytes (UTF-8).
        """
        self.max_message_length = max_message_length

    def _check_length(self, text: str) -> str:
        size = len(text.encode("utf-8"))
        if size > self.max_message_length:
            raise PayloadTooLargeError(
                f"Command is {size} bytes, limit is {self.max_message_length}"
            )
        return text

    def encode_update(self, participant_id: int, record: PresenceRecord) -> str:
        """Build a presence update command sent by ``participant_id``."""
        return self._check_length(
            f"{CommandKind.PRESENCE_UPDATE} {participant_id} {encode_record(record)}"
        )

    def encode_request(self, participant_id: int) -> str:
        """Build a presence request command sent by ``participant_id``."""
        return self._check_length(f"{CommandKind.PRESENCE_REQUEST} {participant_id}")

    def parse_command(self, text: str) -> PeerCommand:
        """Split a command into its kind and parameters.

        Unrecognized kinds are returned as CommandKind.UNKNOWN.

        Raises:
            MalformedCommandError: If the command is empty.
        """
        tokens = [token for token in text.split(" ") if token]
        if not tokens:
            raise MalformedCommandError("Empty command")

        try:
            kind = CommandKind(tokens[0])
        except ValueError:
            kind = CommandKind.UNKNOWN
        return PeerCommand(kind=kind, parameters=tuple(tokens[1:]))

    def decode_update(self, command: PeerCommand) -> tuple[int, PresenceRecord]:
        """Extract the sender and record of a presence update.

        Raises:
            MalformedCommandError: On a parameter count mismatch or a bad payload.
        """
        if len(command.parameters) != 2:
            raise MalformedCommandError(
                f"{command.kind} expects 2 parameters, got {len(command.parameters)}"
            )
        participant_id = _parse_participant_id(command.parameters[0])
        return participant_id, decode_record(command.parameters[1])

    def decode_request(self, command: PeerCommand) -> int:
        """Extract the requesting participant of a presence request.

        Raises:
            MalformedCommandError: On a parameter count mismatch or a bad ID.
        """
        if len(command.parameters) != 1:
            raise MalformedCommandError(
                f"{command.kind} expects 1 parameter, got {len(command.parameters)}"
            )
        return _parse_participant_id(command.parameters[0])
