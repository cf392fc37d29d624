"""Presence tracker: turns feed samples into a transmitted presence record."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from gw2_presence.application.geometry import SourceSpace, distance, to_continent_space
from gw2_presence.application.transmission_policy import TransmissionPolicy
from gw2_presence.domain.errors import GeometryError
from gw2_presence.domain.models import (
    MapInfo,
    MumbleIdentity,
    PresenceRecord,
    Vector2D,
    Vector3D,
)

if TYPE_CHECKING:
    from gw2_presence.application.point_of_interest_index import PointOfInterestIndex
    from gw2_presence.domain.contracts import (
        FeedReaderProtocol,
        MapDataSourceProtocol,
        PresencePublisherProtocol,
        WorldNameSourceProtocol,
    )
    from gw2_presence.domain.models import FeedSample

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class TrackerState:
    """Everything the poll loop remembers between ticks.

    Owned by a single tracker and only mutated from its poll task.
    """

    record: PresenceRecord = field(default_factory=PresenceRecord)
    linked: bool = False
    prev_is_online: bool = False
    prev_identity: MumbleIdentity | None = None
    prev_avatar_position: Vector3D | None = None
    current_map: MapInfo | None = None
    transmitted_position: Vector2D = field(default_factory=Vector2D)
    last_transmission: float | None = None
    offline_since: float | None = None
    identity_pending: bool = False
    update_requested: bool = False


class PresenceTracker:
    """Polls the feed and publishes the local player's presence.

    Linking and unlinking are debounced so that loading screens and short
    alt-tabs do not make the player flicker offline for peers.
    """

    def __init__(
        self,
        feed_reader: FeedReaderProtocol,
        map_source: MapDataSourceProtocol,
        world_source: WorldNameSourceProtocol,
        poi_index: PointOfInterestIndex,
        publisher: PresencePublisherProtocol,
        policy: TransmissionPolicy | None = None,
        poll_interval_seconds: float = 0.05,
        lookup_timeout_seconds: float = 5.0,
        shutdown_timeout_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the presence tracker.

        Args:
            feed_reader: Source of raw feed samples.
            map_source: Map information lookup.
            world_source: World name lookup.
            poi_index: Nearest waypoint search.
            publisher: Receiver of records that should be transmitted.
            policy: Debounce and transmission thresholds.
            poll_interval_seconds: Time between ticks.
            lookup_timeout_seconds: Upper bound for each external lookup.
            shutdown_timeout_seconds: How long stop() waits for the loop to exit.
            clock: Monotonic time source in seconds.
        """
        self._feed_reader = feed_reader
        self._map_source = map_source
        self._world_source = world_source
        self._poi_index = poi_index
        self._publisher = publisher
        self._policy = policy or TransmissionPolicy()
        self._poll_interval_seconds = poll_interval_seconds
        self._lookup_timeout_seconds = lookup_timeout_seconds
        self._shutdown_timeout_seconds = shutdown_timeout_seconds
        self._clock = clock
        self._state = TrackerState(offline_since=clock())
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None
        self.is_available = True

    @property
    def is_online(self) -> bool:
        """Whether the player is considered in game."""
        return self._state.linked

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def current_record(self) -> PresenceRecord:
        """Return a snapshot of the current local record."""
        return self._state.record.snapshot()

    def request_update(self) -> None:
        """Transmit the current record on the next tick, ignoring thresholds."""
        self._state.update_requested = True

    def start(self) -> bool:
        """Start the poll loop on the running event loop.

        Returns:
            False if the tracker could not be started.
        """
        if self.is_running:
            logger.warning("Presence tracker already running")
            return True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            logger.error(f"Presence tracker unavailable: {e}")
            self.is_available = False
            return False

        self._stop_event = asyncio.Event()
        self._task = loop.create_task(self._poll_loop(), name="presence-tracker")
        self.is_available = True
        logger.info("Started presence tracker task")
        return True

    async def stop(self) -> None:
        """Stop the poll loop and tell peers the player is gone."""
        task = self._task
        if task is None:
            return

        if self._stop_event is not None:
            self._stop_event.set()
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=self._shutdown_timeout_seconds)
            logger.info("Presence tracker task has exited")
        except TimeoutError:
            logger.warning("Presence tracker task did not exit in time, cancelling it")
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        except Exception as e:
            logger.error(f"Presence tracker task failed: {e}", exc_info=True)
        self._task = None

        self._unlink()
        await self._transmit(self._clock())
        logger.info("Stopped presence tracker")

    async def _poll_loop(self) -> None:
        """Main polling loop."""
        stop_event = self._stop_event
        assert stop_event is not None
        while not stop_event.is_set():
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Presence tracker tick failed: {e}", exc_info=True)

            # Interruptible sleep: stop() wakes us immediately
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=self._poll_interval_seconds)

    def _stopping(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    async def tick(self, now: float | None = None) -> bool:
        """Run one poll step.

        Args:
            now: Current monotonic time; read from the clock if omitted.

        Returns:
            True if the record was transmitted during this step.
        """
        if now is None:
            now = self._clock()
        state = self._state
        sample = self._feed_reader.read()
        is_online = sample.is_online
        dirty = False

        if is_online:
            if not state.linked and self._policy.should_link(now, state.offline_since):
                logger.info("Guild Wars 2 linked")
                state.linked = True
                # Entering the game is announced regardless of the thresholds
                dirty = True
            if state.linked:
                # Back in game: any pending unlink is cancelled
                state.offline_since = None
                dirty = await self._process_sample(sample, now) or dirty
        else:
            if state.prev_is_online:
                state.offline_since = now
            if state.linked and self._policy.should_unlink(now, state.offline_since):
                logger.info("Guild Wars 2 unlinked")
                self._unlink()
                dirty = True
        state.prev_is_online = is_online

        if self._stopping():
            return False

        if state.update_requested:
            state.update_requested = False
            dirty = True

        if dirty:
            await self._transmit(now)
        return dirty

    async def _process_sample(self, sample: FeedSample, now: float) -> bool:
        """Apply identity and position changes; return whether to transmit."""
        state = self._state
        dirty = False

        if sample.identity != state.prev_identity:
            logger.debug(f"New Guild Wars 2 identity: {sample.identity}")
            await self._apply_identity(sample.identity)
            state.identity_pending = True
            # The map may have changed, so the position must be re-projected
            state.prev_avatar_position = None

        if state.identity_pending and self._policy.identity_due(now, state.last_transmission):
            dirty = True

        if sample.avatar_position != state.prev_avatar_position:
            await self._apply_position(sample.avatar_position)
            displacement = distance(
                state.record.character_continent_position, state.transmitted_position
            )
            if self._policy.position_due(now, state.last_transmission, displacement):
                dirty = True

        state.prev_identity = sample.identity
        state.prev_avatar_position = sample.avatar_position
        return dirty

    async def _lookup(self, lookup: Awaitable[T], what: str) -> T | None:
        """Await an external lookup, bounded by the lookup timeout."""
        try:
            return await asyncio.wait_for(lookup, timeout=self._lookup_timeout_seconds)
        except TimeoutError:
            logger.warning(f"Lookup of {what} timed out")
        except Exception as e:
            logger.warning(f"Lookup of {what} failed: {e}")
        return None

    async def _apply_identity(self, identity: MumbleIdentity) -> None:
        state = self._state
        record = state.record
        record.character_name = identity.name
        record.profession = identity.profession
        record.map_id = identity.map_id
        record.world_id = identity.world_id
        record.team_color_id = identity.team_color_id
        record.commander = identity.commander

        map_info = await self._lookup(
            self._map_source.get_map(identity.map_id), f"map {identity.map_id}"
        )
        state.current_map = map_info
        if map_info is not None:
            record.map_name = map_info.map_name
            record.region_id = map_info.region_id
            record.region_name = map_info.region_name
            record.continent_id = map_info.continent_id
            record.continent_name = map_info.continent_name
        else:
            record.map_name = f"Map {identity.map_id}"
            record.region_id = 0
            record.region_name = "Unknown region"
            record.continent_id = 0
            record.continent_name = "Unknown continent"

        world_names = await self._lookup(self._world_source.get_world_names(), "world names")
        record.world_name = (world_names or {}).get(
            identity.world_id, f"World {identity.world_id}"
        )

    async def _apply_position(self, avatar_position: Vector3D) -> None:
        state = self._state
        record = state.record
        map_info = state.current_map
        if map_info is not None:
            try:
                record.character_continent_position = to_continent_space(
                    avatar_position.to_vector2d(),
                    SourceSpace.MUMBLE,
                    map_info.map_id,
                    map_info.map_rect,
                    map_info.continent_rect,
                )
            except GeometryError as e:
                logger.warning(f"Keeping previous continent position: {e}")

        waypoint = await self._poi_index.find_closest(
            record.character_continent_position, record.map_id
        )
        if waypoint is not None:
            record.waypoint_id = waypoint.poi_id
            record.waypoint_name = waypoint.display_name
            record.waypoint_continent_position = waypoint.coord
        else:
            record.waypoint_id = 0
            record.waypoint_name = ""
            record.waypoint_continent_position = Vector2D()

    def _unlink(self) -> None:
        state = self._state
        state.linked = False
        state.record.clear()
        state.prev_identity = None
        state.prev_avatar_position = None
        state.current_map = None
        state.identity_pending = False

    async def _transmit(self, now: float) -> None:
        state = self._state
        state.last_transmission = now
        state.transmitted_position = state.record.character_continent_position
        state.identity_pending = False
        snapshot = state.record.snapshot()
        logger.debug(f"Transmitting presence: {snapshot}")
        try:
            await asyncio.wait_for(
                self._publisher.publish(snapshot), timeout=self._lookup_timeout_seconds
            )
        except TimeoutError:
            logger.warning("Publishing presence timed out")
        except Exception as e:
            logger.warning(f"Failed to publish presence: {e}")
