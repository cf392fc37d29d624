"""Protocol for reading the shared-memory feed."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gw2_presence.domain.models.feed_sample import FeedSample


class FeedReaderProtocol(Protocol):
    """Protocol for sampling the game's shared-memory feed."""

    def read(self) -> "FeedSample":
        """Read one snapshot of the feed.

        Must never block. Returns default values when the game is not running.

        Returns:
            The current feed sample.
        """
        ...
