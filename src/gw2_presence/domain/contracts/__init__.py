"""Domain contracts (protocols) for GW2 presence."""

from gw2_presence.domain.contracts.display_refresher import DisplayRefresherProtocol
from gw2_presence.domain.contracts.feed_reader import FeedReaderProtocol
from gw2_presence.domain.contracts.map_data_source import (
    MapDataSourceProtocol,
    PointOfInterestCatalogueProtocol,
    WorldNameSourceProtocol,
)
from gw2_presence.domain.contracts.peer_transport import PeerTransportProtocol
from gw2_presence.domain.contracts.presence_cache import PresenceCacheProtocol
from gw2_presence.domain.contracts.presence_codec import PresenceCodecProtocol
from gw2_presence.domain.contracts.presence_publisher import (
    PresencePublisherProtocol,
    PresenceSourceProtocol,
)

__all__ = [
    "DisplayRefresherProtocol",
    "FeedReaderProtocol",
    "MapDataSourceProtocol",
    "PeerTransportProtocol",
    "PointOfInterestCatalogueProtocol",
    "PresenceCacheProtocol",
    "PresenceCodecProtocol",
    "PresencePublisherProtocol",
    "PresenceSourceProtocol",
    "WorldNameSourceProtocol",
]
