"""Reader for the MumbleLink shared memory block published by Guild Wars 2.

Only the fields needed for presence are extracted: the update tick, the
avatar position, the application name and the identity JSON.
See https://wiki.guildwars2.com/wiki/API:MumbleLink for the layout.
"""

from __future__ import annotations

import json
import logging
import mmap
import struct
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass

from gw2_presence.domain.contracts.feed_reader import FeedReaderProtocol
from gw2_presence.domain.errors import FeedUnavailableError
from gw2_presence.domain.models import FeedSample, MumbleIdentity, Vector3D

logger = logging.getLogger(__name__)

GAME_NAME = "Guild Wars 2"

# uiVersion, uiTick, fAvatarPosition[3]
_HEADER = struct.Struct("<II3f")
_NAME_OFFSET = 44
_NAME_SIZE = 512  # wchar_t[256]
_IDENTITY_OFFSET = 592
_IDENTITY_SIZE = 512  # wchar_t[256]
LINK_SIZE = 5460


@dataclass(frozen=True)
class LinkedMemory:
    """The raw fields read from the shared memory block."""

    ui_version: int
    ui_tick: int
    avatar_position: Vector3D
    name: str
    identity: str


def _read_wide_string(data: bytes, offset: int, size: int) -> str:
    raw = data[offset : offset + size].decode("utf-16-le", errors="ignore")
    return raw.split("\x00", 1)[0]


def parse_linked_memory(data: bytes) -> LinkedMemory:
    """Extract the needed fields from a copy of the shared memory block.

    Raises:
        ValueError: If the buffer is shorter than the block.
    """
    if len(data) < LINK_SIZE:
        raise ValueError(f"MumbleLink buffer is {len(data)} bytes, expected {LINK_SIZE}")
    version, tick, x, y, z = _HEADER.unpack_from(data, 0)
    return LinkedMemory(
        ui_version=version,
        ui_tick=tick,
        avatar_position=Vector3D(x, y, z),
        name=_read_wide_string(data, _NAME_OFFSET, _NAME_SIZE),
        identity=_read_wide_string(data, _IDENTITY_OFFSET, _IDENTITY_SIZE),
    )


def parse_identity(identity_json: str) -> MumbleIdentity:
    """Parse the identity JSON; malformed or missing data yields an empty identity."""
    if not identity_json:
        return MumbleIdentity()
    try:
        data = json.loads(identity_json)
        return MumbleIdentity(
            name=str(data.get("name", "")),
            profession=int(data.get("profession", 0)),
            map_id=int(data.get("map_id", 0)),
            world_id=int(data.get("world_id", 0)),
            team_color_id=int(data.get("team_color_id", 0)),
            commander=bool(data.get("commander", False)),
        )
    except (ValueError, TypeError, AttributeError, OverflowError) as e:
        logger.debug(f"Ignoring malformed MumbleLink identity: {e}")
        return MumbleIdentity()


class MumbleLinkReader(FeedReaderProtocol):
    """Samples the MumbleLink block.

    The game only advances the tick while the player is in the world (not in
    character select or loading screens), so the link counts as active while
    the tick keeps changing.
    """

    def __init__(
        self,
        read_buffer: Callable[[], bytes],
        clock: Callable[[], float] = time.monotonic,
        stale_after_seconds: float = 1.0,
    ) -> None:
        """Initialize the reader.

        Args:
            read_buffer: Returns a copy of the shared memory block.
            clock: Monotonic time source in seconds.
            stale_after_seconds: How long an unchanged tick still counts as active.
        """
        self._read_buffer = read_buffer
        self._clock = clock
        self._stale_after_seconds = stale_after_seconds
        self._last_tick: int | None = None
        self._last_tick_change: float | None = None
        self._shared_memory: mmap.mmap | None = None

    @classmethod
    def open(cls, name: str = "MumbleLink", **kwargs: float) -> MumbleLinkReader:
        """Open (or create) the named shared memory block.

        Raises:
            FeedUnavailableError: If named shared memory is not supported or cannot be opened.
        """
        if sys.platform != "win32":
            raise FeedUnavailableError("MumbleLink shared memory is only available on Windows")
        try:
            shared_memory = mmap.mmap(-1, LINK_SIZE, tagname=name)  # type: ignore[call-arg]
        except OSError as e:
            raise FeedUnavailableError(f"Could not open MumbleLink shared memory: {e}") from e

        logger.info(f"Opened MumbleLink shared memory '{name}'")
        reader = cls(lambda: shared_memory[:LINK_SIZE], **kwargs)
        reader._shared_memory = shared_memory
        return reader

    def close(self) -> None:
        """Release the shared memory block if this reader opened it."""
        if self._shared_memory is not None:
            self._shared_memory.close()
            self._shared_memory = None

    def read(self) -> FeedSample:
        """Read one feed sample."""
        link = parse_linked_memory(self._read_buffer())
        now = self._clock()

        if self._last_tick is None:
            # A tick left behind by a previous game session is not activity
            self._last_tick = link.ui_tick
        elif link.ui_tick != self._last_tick:
            self._last_tick = link.ui_tick
            self._last_tick_change = now

        is_active = (
            link.ui_version != 0
            and self._last_tick_change is not None
            and now - self._last_tick_change < self._stale_after_seconds
        )
        return FeedSample(
            is_active=is_active,
            is_this_application=link.name == GAME_NAME,
            identity=parse_identity(link.identity),
            avatar_position=link.avatar_position,
        )
