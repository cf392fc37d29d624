"""Main entry point: run the presence tracker against the live game feed.

Outgoing commands are logged instead of being sent, which makes this useful
to check what peers would receive while playing.
"""

import asyncio
import contextlib
import logging
import sys

import aiohttp

from gw2_presence.adapters.cache import PeerPresenceCache
from gw2_presence.adapters.config import AppConfig
from gw2_presence.adapters.formatters import PresenceFormatter
from gw2_presence.adapters.gw2_api import Gw2ApiClient
from gw2_presence.adapters.mumble_link import MumbleLinkReader
from gw2_presence.adapters.transport import LoggingPeerTransport
from gw2_presence.adapters.wire import PresenceCodec
from gw2_presence.application.point_of_interest_index import PointOfInterestIndex
from gw2_presence.application.presence_sync_service import PresenceSyncService
from gw2_presence.application.presence_tracker import PresenceTracker
from gw2_presence.application.transmission_policy import TransmissionPolicy
from gw2_presence.domain.errors import FeedUnavailableError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

# The console runner pretends to be connected to a single session
LOCAL_SESSION_ID = 1
LOCAL_PARTICIPANT_ID = 1


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    logging.getLogger().setLevel(config.log_level)

    try:
        reader = MumbleLinkReader.open(config.mumble_link_name)
    except FeedUnavailableError as e:
        logger.error(f"Presence tracker unavailable: {e}")
        sys.exit(1)

    async with aiohttp.ClientSession() as session:
        api_client = Gw2ApiClient(
            session=session,
            base_url=config.gw2_api_base_url,
            language=config.gw2_api_language,
            timeout_seconds=config.gw2_api_timeout_seconds,
            min_delay_seconds=config.gw2_api_min_delay_seconds,
        )
        transport = LoggingPeerTransport()
        sync_service = PresenceSyncService(
            codec=PresenceCodec(config.max_message_length),
            cache=PeerPresenceCache(),
            transport=transport,
            display_refresher=transport,
            own_participant_id=lambda _session_id: LOCAL_PARTICIPANT_ID,
            render=PresenceFormatter(),
        )
        tracker = PresenceTracker(
            feed_reader=reader,
            map_source=api_client,
            world_source=api_client,
            poi_index=PointOfInterestIndex(
                api_client, timeout_seconds=config.lookup_timeout_seconds
            ),
            publisher=sync_service,
            policy=TransmissionPolicy(
                online_debounce_seconds=config.online_debounce_seconds,
                location_threshold_seconds=config.location_transmission_threshold_seconds,
                distance_threshold=config.distance_transmission_threshold,
            ),
            poll_interval_seconds=config.poll_interval_seconds,
            lookup_timeout_seconds=config.lookup_timeout_seconds,
            shutdown_timeout_seconds=config.shutdown_timeout_seconds,
        )
        sync_service.bind_source(tracker)

        if not tracker.start():
            reader.close()
            sys.exit(1)
        sync_service.on_session_established(LOCAL_SESSION_ID)

        try:
            await asyncio.Event().wait()
        finally:
            await tracker.stop()
            reader.close()


def cli_main() -> None:
    """Console script entry point."""
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())


if __name__ == "__main__":
    cli_main()
