"""Tests for the MumbleLink reader."""

import json
import struct
import sys

import pytest

from gw2_presence.adapters.mumble_link.mumble_link_reader import (
    GAME_NAME,
    LINK_SIZE,
    MumbleLinkReader,
    parse_identity,
    parse_linked_memory,
)
from gw2_presence.domain.errors import FeedUnavailableError
from gw2_presence.domain.models import MumbleIdentity, Vector3D
from tests.fakes import FakeClock

IDENTITY = {
    "name": "Braham Eirsson",
    "profession": 2,
    "spec": 18,
    "race": 2,
    "map_id": 28,
    "world_id": 2006,
    "team_color_id": 9,
    "commander": False,
    "fov": 0.873,
    "uisz": 1,
}


def build_link(
    tick: int = 1,
    version: int = 2,
    position: tuple[float, float, float] = (1.5, 2.0, -3.25),
    name: str = GAME_NAME,
    identity: str = json.dumps(IDENTITY),
) -> bytes:
    """Build a MumbleLink block the way the game writes it."""
    data = bytearray(LINK_SIZE)
    struct.pack_into("<II3f", data, 0, version, tick, *position)
    encoded_name = name.encode("utf-16-le")
    data[44 : 44 + len(encoded_name)] = encoded_name
    encoded_identity = identity.encode("utf-16-le")
    data[592 : 592 + len(encoded_identity)] = encoded_identity
    return bytes(data)


class FakeLink:
    """Shared memory stand-in whose content the test replaces."""

    def __init__(self, data: bytes) -> None:
        self.data = data

    def __call__(self) -> bytes:
        return self.data


class TestParseLinkedMemory:
    """Tests for parse_linked_memory."""

    def test_extracts_fields(self) -> None:
        link = parse_linked_memory(build_link(tick=42))

        assert link.ui_version == 2
        assert link.ui_tick == 42
        assert link.avatar_position == Vector3D(1.5, 2.0, -3.25)
        assert link.name == GAME_NAME
        assert json.loads(link.identity)["name"] == "Braham Eirsson"

    def test_short_buffer_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="expected 5460"):
            parse_linked_memory(b"\x00" * 100)


class TestParseIdentity:
    """Tests for parse_identity."""

    def test_parses_known_fields(self) -> None:
        identity = parse_identity(json.dumps(IDENTITY))

        assert identity == MumbleIdentity(
            name="Braham Eirsson",
            profession=2,
            map_id=28,
            world_id=2006,
            team_color_id=9,
            commander=False,
        )

    @pytest.mark.parametrize(
        "raw", ["", "{", "[]", '{"map_id": "nowhere"}', '{"name": "a", "profession": 1e999}']
    )
    def test_malformed_identity_is_empty(self, raw: str) -> None:
        assert parse_identity(raw) == MumbleIdentity()


class TestMumbleLinkReader:
    """Tests for MumbleLinkReader activity detection."""

    def test_first_tick_is_not_activity(self) -> None:
        """Given a tick left by an old session, when reading first, then the link is inactive."""
        reader = MumbleLinkReader(FakeLink(build_link(tick=5)), clock=FakeClock(0.0))

        sample = reader.read()

        assert sample.is_active is False
        assert sample.is_this_application is True
        assert sample.is_online is False

    def test_changing_tick_is_activity(self) -> None:
        """Given an advancing tick, when reading, then the sample is online."""
        link = FakeLink(build_link(tick=5))
        clock = FakeClock(0.0)
        reader = MumbleLinkReader(link, clock=clock)
        reader.read()

        link.data = build_link(tick=6)
        clock.advance(0.1)
        sample = reader.read()

        assert sample.is_online is True
        assert sample.identity.map_id == 28
        assert sample.avatar_position == Vector3D(1.5, 2.0, -3.25)

    def test_frozen_tick_goes_stale(self) -> None:
        """Given a tick that stops changing, when reading after a second, then it is inactive."""
        link = FakeLink(build_link(tick=5))
        clock = FakeClock(0.0)
        reader = MumbleLinkReader(link, clock=clock, stale_after_seconds=1.0)
        reader.read()
        link.data = build_link(tick=6)
        reader.read()

        clock.advance(0.5)
        assert reader.read().is_active is True
        clock.advance(0.5)
        assert reader.read().is_active is False

    def test_other_application_is_not_online(self) -> None:
        """Given another game writing the link, when reading, then the sample is not online."""
        link = FakeLink(build_link(tick=5, name="Some Other Game"))
        reader = MumbleLinkReader(link, clock=FakeClock(0.0))
        reader.read()
        link.data = build_link(tick=6, name="Some Other Game")

        sample = reader.read()

        assert sample.is_active is True
        assert sample.is_this_application is False
        assert sample.is_online is False

    def test_unset_version_is_inactive(self) -> None:
        link = FakeLink(build_link(tick=5, version=0))
        reader = MumbleLinkReader(link, clock=FakeClock(0.0))
        reader.read()
        link.data = build_link(tick=6, version=0)

        assert reader.read().is_active is False

    @pytest.mark.skipif(sys.platform == "win32", reason="named shared memory exists on Windows")
    def test_open_outside_windows_is_unavailable(self) -> None:
        with pytest.raises(FeedUnavailableError):
            MumbleLinkReader.open()
